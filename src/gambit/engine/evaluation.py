"""Static evaluation: piece values, piece-square tables, attack penalties."""

from __future__ import annotations

from gambit.core.board import Board
from gambit.core.enums import Color, PieceType
from gambit.core.move_generator import is_king_in_check, is_square_attacked
from gambit.core.piece import Piece
from gambit.core.types import Coordinate

# Plain material count used by the greedy tier.
MATERIAL_VALUES: dict[PieceType, int] = {
    PieceType.PAWN: 1,
    PieceType.KNIGHT: 3,
    PieceType.BISHOP: 3,
    PieceType.ROOK: 5,
    PieceType.QUEEN: 9,
    PieceType.KING: 0,
}

# Centipawn values used by the tactical and minimax tiers.
PIECE_VALUES: dict[PieceType, int] = {
    PieceType.PAWN: 100,
    PieceType.KNIGHT: 320,
    PieceType.BISHOP: 330,
    PieceType.ROOK: 500,
    PieceType.QUEEN: 900,
    PieceType.KING: 20000,
}

MATE_SCORE = 20000

GIVES_CHECK_BONUS = 100
IN_CHECK_PENALTY = 150

# Tables are written from white's point of view, row 0 = rank 8.
PIECE_SQUARE_TABLES: dict[PieceType, tuple[tuple[int, ...], ...]] = {
    PieceType.PAWN: (
        (0, 0, 0, 0, 0, 0, 0, 0),
        (50, 50, 50, 50, 50, 50, 50, 50),
        (10, 10, 20, 30, 30, 20, 10, 10),
        (5, 5, 10, 25, 25, 10, 5, 5),
        (0, 0, 0, 20, 20, 0, 0, 0),
        (5, -5, -10, 0, 0, -10, -5, 5),
        (5, 10, 10, -20, -20, 10, 10, 5),
        (0, 0, 0, 0, 0, 0, 0, 0),
    ),
    PieceType.KNIGHT: (
        (-50, -40, -30, -30, -30, -30, -40, -50),
        (-40, -20, 0, 0, 0, 0, -20, -40),
        (-30, 0, 10, 15, 15, 10, 0, -30),
        (-30, 5, 15, 20, 20, 15, 5, -30),
        (-30, 0, 15, 20, 20, 15, 0, -30),
        (-30, 5, 10, 15, 15, 10, 5, -30),
        (-40, -20, 0, 5, 5, 0, -20, -40),
        (-50, -40, -30, -30, -30, -30, -40, -50),
    ),
    PieceType.BISHOP: (
        (-20, -10, -10, -10, -10, -10, -10, -20),
        (-10, 0, 0, 0, 0, 0, 0, -10),
        (-10, 0, 5, 10, 10, 5, 0, -10),
        (-10, 5, 5, 10, 10, 5, 5, -10),
        (-10, 0, 10, 10, 10, 10, 0, -10),
        (-10, 10, 10, 10, 10, 10, 10, -10),
        (-10, 5, 0, 0, 0, 0, 5, -10),
        (-20, -10, -10, -10, -10, -10, -10, -20),
    ),
    PieceType.ROOK: (
        (0, 0, 0, 0, 0, 0, 0, 0),
        (5, 10, 10, 10, 10, 10, 10, 5),
        (-5, 0, 0, 0, 0, 0, 0, -5),
        (-5, 0, 0, 0, 0, 0, 0, -5),
        (-5, 0, 0, 0, 0, 0, 0, -5),
        (-5, 0, 0, 0, 0, 0, 0, -5),
        (-5, 0, 0, 0, 0, 0, 0, -5),
        (0, 0, 0, 5, 5, 0, 0, 0),
    ),
    PieceType.QUEEN: (
        (-20, -10, -10, -5, -5, -10, -10, -20),
        (-10, 0, 0, 0, 0, 0, 0, -10),
        (-10, 0, 5, 5, 5, 5, 0, -10),
        (-5, 0, 5, 5, 5, 5, 0, -5),
        (0, 0, 5, 5, 5, 5, 0, -5),
        (-10, 5, 5, 5, 5, 5, 0, -10),
        (-10, 0, 5, 0, 0, 0, 0, -10),
        (-20, -10, -10, -5, -5, -10, -10, -20),
    ),
    PieceType.KING: (
        (-30, -40, -40, -50, -50, -40, -40, -30),
        (-30, -40, -40, -50, -50, -40, -40, -30),
        (-30, -40, -40, -50, -50, -40, -40, -30),
        (-30, -40, -40, -50, -50, -40, -40, -30),
        (-20, -30, -30, -40, -40, -30, -30, -20),
        (-10, -20, -20, -20, -20, -20, -20, -10),
        (20, 20, 0, 0, 0, 0, 20, 20),
        (20, 30, 10, 0, 0, 10, 30, 20),
    ),
}


def piece_square_value(piece: Piece, sq: Coordinate) -> int:
    """Table bonus for *piece* on *sq*; black reads the table mirrored by rank."""
    row = sq.row if piece.color == Color.WHITE else 7 - sq.row
    return PIECE_SQUARE_TABLES[piece.piece_type][row][sq.col]


def _sign(color: Color) -> int:
    return 1 if color == Color.WHITE else -1


def evaluate(board: Board) -> int:
    """White-positive static score.

    Material plus piece-square bonus per piece, and every attacked piece
    costs its own side half its value.
    """
    score = 0
    for sq, piece in board.occupied():
        value = PIECE_VALUES[piece.piece_type]
        sign = _sign(piece.color)
        score += (value + piece_square_value(piece, sq)) * sign
        if is_square_attacked(board, sq, piece.color.opposite):
            score -= (value // 2) * sign
    return score


def tactical_score(board: Board, mover: Color) -> int:
    """Score *board* from *mover*'s side after one of its moves.

    Material balance, minus half the value of each own piece left under
    attack, plus a bonus for giving check (and a penalty for being in it).
    """
    score = 0
    for sq, piece in board.occupied():
        value = PIECE_VALUES[piece.piece_type]
        if piece.color == mover:
            score += value
            if is_square_attacked(board, sq, mover.opposite):
                score -= value // 2
        else:
            score -= value

    if is_king_in_check(board, mover.opposite):
        score += GIVES_CHECK_BONUS
    if is_king_in_check(board, mover):
        score -= IN_CHECK_PENALTY
    return score
