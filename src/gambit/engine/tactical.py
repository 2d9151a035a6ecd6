"""Tier 2: prefer safe captures, then safe moves, then anything."""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING

from gambit.core.move_generator import MoveGenerator, is_square_attacked
from gambit.core.position import captured_piece
from gambit.engine.evaluation import tactical_score
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


class TacticalEngine(IEngine):
    """Capture-first engine with a one-ply safety check.

    1. Captures are scored on the resulting position and tried best first;
       the first one whose capturing piece cannot be taken back wins.
    2. Otherwise a random move whose destination is not attacked.
    3. Otherwise any random legal move.
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

        mover = position.turn
        captures = [m for m in moves if captured_piece(position.board, m) is not None]
        if captures:
            scored: list[tuple[int, Move]] = []
            for move in captures:
                child = position.apply_move(move)
                scored.append((tactical_score(child.board, mover), move))
            scored.sort(key=lambda item: item[0], reverse=True)
            for score, move in scored:
                if not self._is_exposed(position, move):
                    _LOGGER.debug("tactical: safe capture %s (%d)", move, score)
                    return SearchResult(move, score, 1, len(moves))

        safe = [m for m in moves if not self._is_exposed(position, m)]
        if safe:
            choice = self._rng.choice(safe)
            _LOGGER.debug("tactical: %d safe moves, picked %s", len(safe), choice)
        else:
            choice = self._rng.choice(moves)
            _LOGGER.debug("tactical: no safe move, picked %s", choice)
        return SearchResult(choice, 0, 1, len(moves))

    @staticmethod
    def _is_exposed(position: Position, move: Move) -> bool:
        """Whether the moved piece stands attacked once *move* is played."""
        child = position.apply_move(move)
        return is_square_attacked(child.board, move.to_sq, position.turn.opposite)
