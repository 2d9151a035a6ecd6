"""Tier 1: grab the most valuable capture, no look-ahead."""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING

from gambit.core.move_generator import MoveGenerator
from gambit.core.position import captured_piece
from gambit.engine.evaluation import MATERIAL_VALUES
from gambit.engine.search import (
    COMPUTER_PROMOTIONS,
    CancelCheck,
    IEngine,
    SearchLimits,
    SearchResult,
)

if TYPE_CHECKING:
    from gambit.core.move import Move
    from gambit.core.position import Position

_LOGGER = logging.getLogger(__name__)


class GreedyEngine(IEngine):
    """Scores each legal move by the material it captures.

    Ties for the best score are broken uniformly at random.
    """

    __slots__ = ("_rng",)

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def search(
        self,
        position: Position,
        limits: SearchLimits,
        is_cancelled: CancelCheck | None = None,
    ) -> SearchResult:
        del limits, is_cancelled
        moves = MoveGenerator(position).generate_legal_moves(COMPUTER_PROMOTIONS)
        if not moves:
            return SearchResult(None, 0, 0, 0)

        scored = [(self.score_move(position, m), m) for m in moves]
        best_score = max(score for score, _ in scored)
        best_moves: list[Move] = [m for score, m in scored if score == best_score]
        choice = self._rng.choice(best_moves)
        _LOGGER.debug(
            "greedy: %d moves, %d tied at %d, picked %s",
            len(moves),
            len(best_moves),
            best_score,
            choice,
        )
        return SearchResult(choice, best_score, 1, len(moves))

    @staticmethod
    def score_move(position: Position, move: Move) -> int:
        target = captured_piece(position.board, move)
        if target is None:
            return 0
        return MATERIAL_VALUES[target.piece_type]
