"""Core domain layer: pure chess logic with zero external dependencies.

Quick start::

    from gambit.core import Position, MoveGenerator

    pos = Position.initial()
    gen = MoveGenerator(pos)
    for move in gen.generate_legal_moves():
        print(move)
"""

from gambit.core.board import Board
from gambit.core.enums import (
    PROMOTION_TYPES,
    CastlingRights,
    Color,
    GameEndReason,
    GameResult,
    PieceType,
)
from gambit.core.move import Move
from gambit.core.move_generator import (
    MoveGenerator,
    is_king_in_check,
    is_square_attacked,
)
from gambit.core.notation import move_to_san, parse_san, position_to_fen
from gambit.core.notation.fen import STARTING_FEN
from gambit.core.piece import Piece
from gambit.core.position import Position
from gambit.core.rules import Rules
from gambit.core.snapshot import BoardSnapshot, MoveWithSnapshot
from gambit.core.types import Coordinate, parse_square, square_name

__all__ = [
    # Enums / flags
    "CastlingRights",
    "Color",
    "GameEndReason",
    "GameResult",
    "PieceType",
    "PROMOTION_TYPES",
    # Types / helpers
    "Coordinate",
    "parse_square",
    "square_name",
    # Domain objects
    "Board",
    "BoardSnapshot",
    "Move",
    "MoveGenerator",
    "MoveWithSnapshot",
    "Piece",
    "Position",
    "Rules",
    "is_king_in_check",
    "is_square_attacked",
    # Notation
    "STARTING_FEN",
    "move_to_san",
    "parse_san",
    "position_to_fen",
]
