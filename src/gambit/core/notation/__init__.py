"""Notation package: SAN writing/reading and FEN generation."""

from gambit.core.notation.fen import en_passant_square, position_to_fen
from gambit.core.notation.san import move_to_san, parse_san

__all__ = [
    "en_passant_square",
    "position_to_fen",
    "move_to_san",
    "parse_san",
]
