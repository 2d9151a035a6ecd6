"""Position: complete game state (board + metadata) and move application."""

from __future__ import annotations

from gambit.core.board import Board
from gambit.core.enums import CastlingRights, Color, PieceType
from gambit.core.move import Move
from gambit.core.piece import Piece
from gambit.core.types import Coordinate


def promotion_row(color: Color) -> int:
    """Row a pawn of *color* promotes on."""
    return 0 if color == Color.WHITE else 7


def pawn_direction(color: Color) -> int:
    """Row delta of a single pawn step for *color*."""
    return -1 if color == Color.WHITE else 1


def pawn_home_row(color: Color) -> int:
    return 6 if color == Color.WHITE else 1


def back_row(color: Color) -> int:
    return 7 if color == Color.WHITE else 0


def is_castling_move(piece: Piece, move: Move) -> bool:
    return (
        piece.piece_type == PieceType.KING
        and move.d_row == 0
        and abs(move.d_col) == 2
    )


def is_en_passant_move(board: Board, piece: Piece, move: Move) -> bool:
    return (
        piece.piece_type == PieceType.PAWN
        and move.d_col != 0
        and board[move.to_sq] is None
    )


def is_double_pawn_push(board: Board, move: Move) -> bool:
    """Whether *move* (already played on *board*) was a two-square pawn advance."""
    piece = board[move.to_sq]
    return (
        piece is not None
        and piece.piece_type == PieceType.PAWN
        and move.d_col == 0
        and abs(move.d_row) == 2
    )


def place_move(board: Board, move: Move) -> Piece | None:
    """Play *move* on *board* in place and return the captured piece.

    Handles en passant removal, the castling rook slide and promotion
    (a pawn reaching the last rank without a promotion choice becomes a
    queen).  No legality checks happen here.
    """
    piece = board[move.from_sq]
    if piece is None:
        raise ValueError(f"No piece on {move.from_sq}")

    captured = board[move.to_sq]
    if is_en_passant_move(board, piece, move):
        capture_sq = Coordinate(move.from_sq.row, move.to_sq.col)
        captured = board[capture_sq]
        board[capture_sq] = None

    board[move.from_sq] = None

    placed = piece
    if (
        piece.piece_type == PieceType.PAWN
        and move.to_sq.row == promotion_row(piece.color)
    ):
        placed = Piece(piece.color, move.promotion or PieceType.QUEEN)
    board[move.to_sq] = placed

    if is_castling_move(piece, move):
        row = move.from_sq.row
        if move.d_col > 0:
            rook_from, rook_to = Coordinate(row, 7), Coordinate(row, 5)
        else:
            rook_from, rook_to = Coordinate(row, 0), Coordinate(row, 3)
        board[rook_to] = board[rook_from]
        board[rook_from] = None

    return captured


class Position:
    """Full game position: board + side to move + castling + last move.

    Treated as immutable by convention: :meth:`apply_move` returns a fresh
    position and never touches ``self``.  ``last_move`` is the only source of
    en passant eligibility, so it always changes together with the board.
    """

    __slots__ = ("board", "turn", "castling", "last_move", "move_history")

    def __init__(
        self,
        board: Board | None = None,
        turn: Color = Color.WHITE,
        castling: CastlingRights = CastlingRights.ALL,
        last_move: Move | None = None,
        move_history: list[Move] | None = None,
    ) -> None:
        self.board = board if board is not None else Board.initial()
        self.turn = turn
        self.castling = castling
        self.last_move = last_move
        self.move_history: list[Move] = list(move_history or [])

    @classmethod
    def initial(cls) -> Position:
        return cls()

    # ── Move application ─────────────────────────────────────────────────

    def apply_move(self, move: Move) -> Position:
        """Return the position after *move*; the caller vouches for legality."""
        piece = self.board[move.from_sq]
        if piece is None:
            raise ValueError(f"No piece on {move.from_sq}")

        board = self.board.copy()
        place_move(board, move)
        return Position(
            board=board,
            turn=self.turn.opposite,
            castling=self._castling_after(move, piece),
            last_move=move,
            move_history=[*self.move_history, move],
        )

    # ── Castling bookkeeping ─────────────────────────────────────────────

    _ROOK_CORNERS: dict[Coordinate, CastlingRights] = {
        Coordinate(7, 0): CastlingRights.WHITE_QUEENSIDE,
        Coordinate(7, 7): CastlingRights.WHITE_KINGSIDE,
        Coordinate(0, 0): CastlingRights.BLACK_QUEENSIDE,
        Coordinate(0, 7): CastlingRights.BLACK_KINGSIDE,
    }

    def _castling_after(self, move: Move, piece: Piece) -> CastlingRights:
        castling = self.castling
        if piece.piece_type == PieceType.KING:
            castling &= ~CastlingRights.both(piece.color)

        # Rook leaving its corner, or being captured there.
        for sq in (move.from_sq, move.to_sq):
            right = self._ROOK_CORNERS.get(sq)
            if right is not None:
                castling &= ~right
        return castling

    # ── Utilities ────────────────────────────────────────────────────────

    def copy(self) -> Position:
        return Position(
            board=self.board.copy(),
            turn=self.turn,
            castling=self.castling,
            last_move=self.last_move,
            move_history=self.move_history.copy(),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return (
            self.board == other.board
            and self.turn == other.turn
            and self.castling == other.castling
            and self.last_move == other.last_move
        )

    def __repr__(self) -> str:
        return (
            f"Position(turn={self.turn}, castling={self.castling!r}, "
            f"last_move={self.last_move})\n{self.board!r}"
        )


def captured_piece(board: Board, move: Move) -> Piece | None:
    """Piece *move* would capture on *board*, including en passant victims."""
    piece = board[move.from_sq]
    if piece is not None and is_en_passant_move(board, piece, move):
        return board[Coordinate(move.from_sq.row, move.to_sq.col)]
    return board[move.to_sq]
