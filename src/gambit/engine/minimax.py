"""Tier 3: full-width minimax with optional alpha-beta pruning."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from gambit.core.enums import Color
from gambit.core.move_generator import MoveGenerator, is_king_in_check, is_square_attacked
from gambit.core.position import captured_piece
from gambit.engine.evaluation import MATE_SCORE, PIECE_VALUES, evaluate
from gambit.engine.search import (
    COMPUTER_PROMOTIONS,
    MAX_SEARCH_DEPTH,
    CancelCheck,
    IEngine,
    SearchLimits,
    SearchResult,
    StopCondition,
)

if TYPE_CHECKING:
    from gambit.core.move import Move
    from gambit.core.position import Position

_LOGGER = logging.getLogger(__name__)
_INF = math.inf


class MinimaxEngine(IEngine):
    """White maximises, black minimises; scores are white-positive.

    Every child is searched on a fresh position from
    :meth:`~gambit.core.position.Position.apply_move`, so branches never
    share a board.  Pruning changes the node count, never the root score.
    Root ties go to the move generated first.
    """

    __slots__ = ("_nodes", "_use_alpha_beta", "_should_stop")

    def __init__(self) -> None:
        self._nodes = 0
        self._use_alpha_beta = True
        self._should_stop: StopCondition | None = None

    def search(
        self,
        position: Position,
        limits: SearchLimits,
        is_cancelled: CancelCheck | None = None,
    ) -> SearchResult:
        if not 1 <= limits.max_depth <= MAX_SEARCH_DEPTH:
            raise ValueError(f"Search depth must be between 1 and {MAX_SEARCH_DEPTH}")

        self._nodes = 0
        self._use_alpha_beta = limits.use_alpha_beta
        should_stop = self._should_stop = StopCondition(limits, is_cancelled)

        gen = MoveGenerator(position)
        root_moves = gen.generate_legal_moves(COMPUTER_PROMOTIONS)
        if not root_moves:
            score = 0
            if gen.is_in_check(position.turn):
                score = -MATE_SCORE if position.turn == Color.WHITE else MATE_SCORE
            return SearchResult(None, score, 0, 0)

        candidates = [m for m in root_moves if not self._hangs_piece(position, m)]
        if not candidates:
            candidates = root_moves

        maximizing = position.turn == Color.WHITE
        best_move: Move | None = None
        best_score = -_INF if maximizing else _INF
        alpha, beta = -_INF, _INF

        for move in candidates:
            if should_stop():
                break
            score = self._minimax(
                position.apply_move(move),
                limits.max_depth - 1,
                alpha,
                beta,
                not maximizing,
            )
            if maximizing:
                if score > best_score:
                    best_score, best_move = score, move
                if self._use_alpha_beta:
                    alpha = max(alpha, best_score)
            else:
                if score < best_score:
                    best_score, best_move = score, move
                if self._use_alpha_beta:
                    beta = min(beta, best_score)

        if best_move is None:
            best_move = candidates[0]
            best_score = evaluate(position.apply_move(best_move).board)

        _LOGGER.debug(
            "minimax: depth=%d alpha_beta=%s nodes=%d score=%s move=%s cancelled=%s",
            limits.max_depth,
            self._use_alpha_beta,
            self._nodes,
            best_score,
            best_move,
            should_stop.triggered,
        )
        return SearchResult(
            best_move,
            best_score,
            limits.max_depth,
            self._nodes,
            cancelled=should_stop.triggered,
        )

    def _minimax(
        self,
        position: Position,
        depth: int,
        alpha: float,
        beta: float,
        maximizing: bool,
    ) -> float:
        self._nodes += 1
        assert self._should_stop is not None
        if depth == 0 or self._should_stop():
            return evaluate(position.board)

        moves = MoveGenerator(position).generate_legal_moves(COMPUTER_PROMOTIONS)
        if not moves:
            if is_king_in_check(position.board, position.turn):
                return -MATE_SCORE if maximizing else MATE_SCORE
            return 0

        if maximizing:
            best = -_INF
            for move in moves:
                value = self._minimax(
                    position.apply_move(move), depth - 1, alpha, beta, False
                )
                best = max(best, value)
                if self._use_alpha_beta:
                    alpha = max(alpha, value)
                    if alpha >= beta:
                        break
            return best

        best = _INF
        for move in moves:
            value = self._minimax(position.apply_move(move), depth - 1, alpha, beta, True)
            best = min(best, value)
            if self._use_alpha_beta:
                beta = min(beta, value)
                if alpha >= beta:
                    break
        return best

    @staticmethod
    def _hangs_piece(position: Position, move: Move) -> bool:
        """Moving piece lands attacked without winning at least equal material."""
        child = position.apply_move(move)
        if not is_square_attacked(child.board, move.to_sq, position.turn.opposite):
            return False
        mover = position.board[move.from_sq]
        target = captured_piece(position.board, move)
        if mover is None or target is None:
            return True
        return PIECE_VALUES[target.piece_type] < PIECE_VALUES[mover.piece_type]

    @property
    def nodes(self) -> int:
        return self._nodes
