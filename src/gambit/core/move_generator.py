"""Move legality, legal move enumeration and attack detection.

Legality is split in two layers:

* :meth:`MoveGenerator.is_pseudo_legal` checks the raw shape of a move
  (bounds, ownership, piece movement, path, castling conditions) without
  asking whether the mover's king ends up in check.
* :meth:`MoveGenerator.is_legal` adds the self-check filter on top.

Attack detection only uses piece geometry and never goes through castling,
so castling safety can ask "is this square attacked?" without recursing.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from gambit.core.board import Board
from gambit.core.enums import PROMOTION_TYPES, CastlingRights, Color, PieceType
from gambit.core.move import Move
from gambit.core.piece import Piece
from gambit.core.position import (
    back_row,
    is_castling_move,
    pawn_direction,
    pawn_home_row,
    place_move,
    promotion_row,
)
from gambit.core.types import Coordinate, all_squares

if TYPE_CHECKING:
    from gambit.core.position import Position

_ALL_SQUARES: tuple[Coordinate, ...] = tuple(all_squares())


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def _path_clear(board: Board, from_sq: Coordinate, to_sq: Coordinate) -> bool:
    """Every square strictly between the endpoints of a straight line is empty."""
    step_row = _sign(to_sq.row - from_sq.row)
    step_col = _sign(to_sq.col - from_sq.col)
    row = from_sq.row + step_row
    col = from_sq.col + step_col
    while (row, col) != (to_sq.row, to_sq.col):
        if board[Coordinate(row, col)] is not None:
            return False
        row += step_row
        col += step_col
    return True


def _slides(
    board: Board,
    from_sq: Coordinate,
    to_sq: Coordinate,
    *,
    diagonal: bool,
    orthogonal: bool,
) -> bool:
    d_row = abs(to_sq.row - from_sq.row)
    d_col = abs(to_sq.col - from_sq.col)
    if d_row == 0 and d_col == 0:
        return False
    is_diagonal = d_row == d_col
    is_orthogonal = d_row == 0 or d_col == 0
    if not ((diagonal and is_diagonal) or (orthogonal and is_orthogonal)):
        return False
    return _path_clear(board, from_sq, to_sq)


def _knight_jump(from_sq: Coordinate, to_sq: Coordinate) -> bool:
    return {abs(to_sq.row - from_sq.row), abs(to_sq.col - from_sq.col)} == {1, 2}


def _king_step(from_sq: Coordinate, to_sq: Coordinate) -> bool:
    d_row = abs(to_sq.row - from_sq.row)
    d_col = abs(to_sq.col - from_sq.col)
    return max(d_row, d_col) == 1


def attacks(board: Board, from_sq: Coordinate, piece: Piece, target: Coordinate) -> bool:
    """Whether *piece* standing on *from_sq* attacks *target*.

    Pawns attack their two forward diagonals whether or not anything stands
    there; castling never attacks.
    """
    match piece.piece_type:
        case PieceType.PAWN:
            return (
                target.row - from_sq.row == pawn_direction(piece.color)
                and abs(target.col - from_sq.col) == 1
            )
        case PieceType.KNIGHT:
            return _knight_jump(from_sq, target)
        case PieceType.BISHOP:
            return _slides(board, from_sq, target, diagonal=True, orthogonal=False)
        case PieceType.ROOK:
            return _slides(board, from_sq, target, diagonal=False, orthogonal=True)
        case PieceType.QUEEN:
            return _slides(board, from_sq, target, diagonal=True, orthogonal=True)
        case PieceType.KING:
            return _king_step(from_sq, target)
    return False


def is_square_attacked(board: Board, sq: Coordinate, by_color: Color) -> bool:
    """Is *sq* attacked by any piece of *by_color*?"""
    for from_sq, piece in board.occupied():
        if piece.color != by_color or from_sq == sq:
            continue
        if attacks(board, from_sq, piece, sq):
            return True
    return False


def is_king_in_check(board: Board, color: Color) -> bool:
    """Is *color*'s king attacked?  A board without that king is never in check."""
    king_sq = board.find_king(color)
    if king_sq is None:
        return False
    return is_square_attacked(board, king_sq, color.opposite)


class MoveGenerator:
    """Validates and enumerates moves for a given :class:`Position`.

    Enumeration tries every destination square for every piece of the side
    to move; there is no incremental move generation.  The position is
    never mutated.
    """

    __slots__ = ("_pos", "_board")

    def __init__(self, position: Position) -> None:
        self._pos = position
        self._board = position.board

    # -- Legality -----------------------------------------------------------

    def is_legal(self, move: Move) -> bool:
        """Full legality: shape, path, castling, promotion and self-check."""
        return self.is_pseudo_legal(move) and not self.leaves_king_in_check(move)

    def is_pseudo_legal(self, move: Move) -> bool:
        """Shape-only legality (the mover's king may be left in check)."""
        from_sq, to_sq = move.from_sq, move.to_sq
        if not (from_sq.in_bounds() and to_sq.in_bounds()):
            return False

        board = self._board
        piece = board[from_sq]
        if piece is None or piece.color != self._pos.turn:
            return False
        if from_sq == to_sq:
            return False

        target = board[to_sq]
        if target is not None and target.color == piece.color:
            return False

        if not self._promotion_ok(piece, move):
            return False

        match piece.piece_type:
            case PieceType.PAWN:
                return self._pawn_ok(piece, move)
            case PieceType.KNIGHT:
                return _knight_jump(from_sq, to_sq)
            case PieceType.BISHOP:
                return _slides(board, from_sq, to_sq, diagonal=True, orthogonal=False)
            case PieceType.ROOK:
                return _slides(board, from_sq, to_sq, diagonal=False, orthogonal=True)
            case PieceType.QUEEN:
                return _slides(board, from_sq, to_sq, diagonal=True, orthogonal=True)
            case PieceType.KING:
                if is_castling_move(piece, move):
                    return self._castling_ok(piece, move)
                return _king_step(from_sq, to_sq)
        return False

    def leaves_king_in_check(self, move: Move) -> bool:
        """Simulate *move* on a scratch board and test the mover's king."""
        board = self._board.copy()
        mover = self._pos.turn
        place_move(board, move)
        return is_king_in_check(board, mover)

    # -- Enumeration --------------------------------------------------------

    def iter_legal_moves(
        self,
        promotions: tuple[PieceType, ...] = PROMOTION_TYPES,
    ) -> Iterator[Move]:
        """Legal moves in generation order: origin row-major, then target row-major."""
        for from_sq, piece in self._board.pieces(self._pos.turn):
            yield from self._legal_from(from_sq, piece, promotions)

    def generate_legal_moves(
        self,
        promotions: tuple[PieceType, ...] = PROMOTION_TYPES,
    ) -> list[Move]:
        """All strictly legal moves for the side to move."""
        return list(self.iter_legal_moves(promotions))

    def legal_moves_from(
        self,
        from_sq: Coordinate,
        promotions: tuple[PieceType, ...] = PROMOTION_TYPES,
    ) -> list[Move]:
        """Legal moves of the piece on *from_sq* (empty if it is not ours)."""
        piece = self._board[from_sq]
        if piece is None or piece.color != self._pos.turn:
            return []
        return list(self._legal_from(from_sq, piece, promotions))

    def has_legal_move(self) -> bool:
        return next(self.iter_legal_moves((PieceType.QUEEN,)), None) is not None

    # -- Attack detection (public) -----------------------------------------

    def is_in_check(self, color: Color) -> bool:
        return is_king_in_check(self._board, color)

    def is_square_attacked(self, sq: Coordinate, by_color: Color) -> bool:
        return is_square_attacked(self._board, sq, by_color)

    # -- Private helpers ----------------------------------------------------

    def _legal_from(
        self,
        from_sq: Coordinate,
        piece: Piece,
        promotions: tuple[PieceType, ...],
    ) -> Iterator[Move]:
        promoting_row = promotion_row(piece.color)
        for to_sq in _ALL_SQUARES:
            if piece.piece_type == PieceType.PAWN and to_sq.row == promoting_row:
                for promotion in promotions:
                    move = Move(from_sq, to_sq, promotion)
                    if self.is_legal(move):
                        yield move
                continue
            move = Move(from_sq, to_sq)
            if self.is_legal(move):
                yield move

    @staticmethod
    def _promotion_ok(piece: Piece, move: Move) -> bool:
        reaches_last_row = (
            piece.piece_type == PieceType.PAWN
            and move.to_sq.row == promotion_row(piece.color)
        )
        if reaches_last_row:
            return move.promotion in PROMOTION_TYPES
        return move.promotion is None

    def _pawn_ok(self, piece: Piece, move: Move) -> bool:
        board = self._board
        direction = pawn_direction(piece.color)
        d_row, d_col = move.d_row, move.d_col

        if d_col == 0:
            if d_row == direction:
                return board[move.to_sq] is None
            if d_row == 2 * direction and move.from_sq.row == pawn_home_row(piece.color):
                between = move.from_sq.offset(direction, 0)
                return board[between] is None and board[move.to_sq] is None
            return False

        if abs(d_col) != 1 or d_row != direction:
            return False

        target = board[move.to_sq]
        if target is not None:
            return target.color != piece.color
        return self._en_passant_ok(piece, move)

    def _en_passant_ok(self, piece: Piece, move: Move) -> bool:
        last = self._pos.last_move
        if last is None:
            return False
        if last.d_col != 0 or abs(last.d_row) != 2:
            return False
        if last.to_sq.row != move.from_sq.row or last.to_sq.col != move.to_sq.col:
            return False
        victim = self._board[last.to_sq]
        return (
            victim is not None
            and victim.piece_type == PieceType.PAWN
            and victim.color != piece.color
        )

    def _castling_ok(self, king: Piece, move: Move) -> bool:
        color = king.color
        row = back_row(color)
        if move.from_sq != Coordinate(row, 4) or move.to_sq.row != row:
            return False

        kingside = move.d_col > 0
        right = (
            CastlingRights.kingside(color)
            if kingside
            else CastlingRights.queenside(color)
        )
        if not self._pos.castling & right:
            return False

        board = self._board
        rook_col = 7 if kingside else 0
        if board[Coordinate(row, rook_col)] != Piece(color, PieceType.ROOK):
            return False

        between = range(5, 7) if kingside else range(1, 4)
        if any(board[Coordinate(row, col)] is not None for col in between):
            return False

        # Start, transit and destination squares must all be safe.
        step = 1 if kingside else -1
        opponent = color.opposite
        return not any(
            is_square_attacked(board, Coordinate(row, 4 + step * i), opponent)
            for i in range(3)
        )
