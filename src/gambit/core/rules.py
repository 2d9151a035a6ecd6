"""High-level chess rules: legality entry point, checkmate, stalemate, draws."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from gambit.core.enums import Color, GameEndReason, GameResult, PieceType
from gambit.core.move_generator import (
    MoveGenerator,
    is_king_in_check,
    is_square_attacked,
)

if TYPE_CHECKING:
    from gambit.core.board import Board
    from gambit.core.move import Move
    from gambit.core.position import Position
    from gambit.core.snapshot import MoveWithSnapshot
    from gambit.core.types import Coordinate

_MINOR_PIECES = (PieceType.BISHOP, PieceType.KNIGHT)
_FIFTY_MOVE_HALFMOVES = 100
_REPETITION_LIMIT = 3


class Rules:
    """Static rule-checker that operates on a :class:`Position`."""

    # Draws are automatic: insufficient material, threefold repetition and the
    # fifty-move rule all end the game without a claim.

    @staticmethod
    def is_legal_move(position: Position, move: Move) -> bool:
        """Single source of truth for move legality.  Never raises."""
        return MoveGenerator(position).is_legal(move)

    @staticmethod
    def is_square_under_attack(board: Board, sq: Coordinate, by_color: Color) -> bool:
        return is_square_attacked(board, sq, by_color)

    @staticmethod
    def is_king_in_check(board: Board, color: Color) -> bool:
        return is_king_in_check(board, color)

    @staticmethod
    def is_in_check(position: Position) -> bool:
        return is_king_in_check(position.board, position.turn)

    @staticmethod
    def has_legal_moves(position: Position) -> bool:
        return MoveGenerator(position).has_legal_move()

    @staticmethod
    def is_checkmate(position: Position) -> bool:
        if not Rules.is_in_check(position):
            return False
        return not Rules.has_legal_moves(position)

    @staticmethod
    def is_stalemate(position: Position) -> bool:
        if Rules.is_in_check(position):
            return False
        return not Rules.has_legal_moves(position)

    @staticmethod
    def is_insufficient_material(board: Board) -> bool:
        """K vs K, K+B vs K, K+N vs K."""
        material: dict[Color, list[PieceType]] = {Color.WHITE: [], Color.BLACK: []}
        for _, piece in board.occupied():
            if piece.piece_type != PieceType.KING:
                material[piece.color].append(piece.piece_type)

        white, black = material[Color.WHITE], material[Color.BLACK]
        if not white and not black:
            return True
        if not black and len(white) == 1:
            return white[0] in _MINOR_PIECES
        if not white and len(black) == 1:
            return black[0] in _MINOR_PIECES
        return False

    @staticmethod
    def halfmove_clock(history: Sequence[MoveWithSnapshot]) -> int:
        """Half-moves since the last pawn move or capture, scanning backwards."""
        count = 0
        for entry in reversed(history):
            board = entry.snapshot.board
            mover = board[entry.move.from_sq]
            is_pawn_move = mover is not None and mover.piece_type == PieceType.PAWN
            if is_pawn_move or board[entry.move.to_sq] is not None:
                break
            count += 1
        return count

    @staticmethod
    def is_fifty_move_rule(history: Sequence[MoveWithSnapshot]) -> bool:
        return Rules.halfmove_clock(history) >= _FIFTY_MOVE_HALFMOVES

    @staticmethod
    def repetition_count(position: Position, history: Sequence[MoveWithSnapshot]) -> int:
        """How often the current piece layout occurred, including now.

        The key is the piece layout only; side to move, castling and en
        passant rights are not part of it.
        """
        key = position.board.layout_key()
        earlier = sum(1 for e in history if e.snapshot.board.layout_key() == key)
        return earlier + 1

    @staticmethod
    def is_threefold_repetition(
        position: Position, history: Sequence[MoveWithSnapshot]
    ) -> bool:
        return Rules.repetition_count(position, history) >= _REPETITION_LIMIT

    @staticmethod
    def game_status(
        position: Position,
        history: Sequence[MoveWithSnapshot] = (),
    ) -> tuple[GameResult, GameEndReason]:
        """Determine the current result and why the game ended (if it did)."""
        if not Rules.has_legal_moves(position):
            if Rules.is_in_check(position):
                winner = (
                    GameResult.BLACK_WINS
                    if position.turn == Color.WHITE
                    else GameResult.WHITE_WINS
                )
                return winner, GameEndReason.CHECKMATE
            return GameResult.DRAW, GameEndReason.STALEMATE

        if Rules.is_insufficient_material(position.board):
            return GameResult.DRAW, GameEndReason.INSUFFICIENT_MATERIAL
        if Rules.is_threefold_repetition(position, history):
            return GameResult.DRAW, GameEndReason.THREEFOLD_REPETITION
        if Rules.is_fifty_move_rule(history):
            return GameResult.DRAW, GameEndReason.FIFTY_MOVE_RULE

        return GameResult.IN_PROGRESS, GameEndReason.NONE

    @staticmethod
    def game_result(
        position: Position,
        history: Sequence[MoveWithSnapshot] = (),
    ) -> GameResult:
        return Rules.game_status(position, history)[0]
