"""Undo snapshots and the committed move history."""

from __future__ import annotations

from dataclasses import dataclass

from gambit.core.board import Board
from gambit.core.enums import CastlingRights, Color
from gambit.core.move import Move
from gambit.core.position import Position


@dataclass(frozen=True, slots=True)
class BoardSnapshot:
    """State captured immediately *before* a move is applied."""

    board: Board
    turn: Color
    castling: CastlingRights
    is_check: bool
    last_move: Move | None

    @classmethod
    def capture(cls, position: Position, is_check: bool) -> BoardSnapshot:
        return cls(
            board=position.board.copy(),
            turn=position.turn,
            castling=position.castling,
            is_check=is_check,
            last_move=position.last_move,
        )

    def to_position(self, move_history: list[Move]) -> Position:
        return Position(
            board=self.board.copy(),
            turn=self.turn,
            castling=self.castling,
            last_move=self.last_move,
            move_history=move_history,
        )


@dataclass(frozen=True, slots=True)
class MoveWithSnapshot:
    """One committed move: the move, its SAN text and the pre-move snapshot."""

    move: Move
    description: str
    snapshot: BoardSnapshot
