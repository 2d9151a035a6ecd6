"""Coordinate type and square helpers.

Board layout (row-major, black at the top):
    row 0 = rank 8 (black's back rank), row 7 = rank 1 (white's back rank)
    col 0 = file a, col 7 = file h

So ``a8`` is ``(0, 0)``, ``h1`` is ``(7, 7)`` and ``e2`` is ``(6, 4)``.
"""

from __future__ import annotations

from typing import NamedTuple

_FILES = "abcdefgh"


class Coordinate(NamedTuple):
    """A (row, col) pair addressing one square of the grid."""

    row: int
    col: int

    def in_bounds(self) -> bool:
        return 0 <= self.row < 8 and 0 <= self.col < 8

    def offset(self, d_row: int, d_col: int) -> Coordinate:
        return Coordinate(self.row + d_row, self.col + d_col)

    @property
    def name(self) -> str:
        return square_name(self)

    def __str__(self) -> str:
        return square_name(self)


def file_letter(col: int) -> str:
    """File letter for a column index, e.g. 4 → 'e'."""
    return _FILES[col]


def rank_digit(row: int) -> str:
    """Rank digit for a row index, e.g. 6 → '2'."""
    return str(8 - row)


def square_name(sq: Coordinate) -> str:
    """Human-readable name, e.g. (6, 4) → 'e2'."""
    return file_letter(sq.col) + rank_digit(sq.row)


def parse_square(name: str) -> Coordinate:
    """Parse square name, e.g. 'e4' → Coordinate(4, 4)."""
    if len(name) != 2 or name[0] not in _FILES or name[1] not in "12345678":
        raise ValueError(f"Invalid square name: {name!r}")
    return Coordinate(8 - int(name[1]), _FILES.index(name[0]))


def all_squares() -> list[Coordinate]:
    """Every square in row-major order (a8, b8, ..., h1)."""
    return [Coordinate(row, col) for row in range(8) for col in range(8)]


# ── Named square constants ──────────────────────────────────────────────────

A8, B8, C8, D8, E8, F8, G8, H8 = (Coordinate(0, c) for c in range(8))
A7, B7, C7, D7, E7, F7, G7, H7 = (Coordinate(1, c) for c in range(8))
A6, B6, C6, D6, E6, F6, G6, H6 = (Coordinate(2, c) for c in range(8))
A5, B5, C5, D5, E5, F5, G5, H5 = (Coordinate(3, c) for c in range(8))
A4, B4, C4, D4, E4, F4, G4, H4 = (Coordinate(4, c) for c in range(8))
A3, B3, C3, D3, E3, F3, G3, H3 = (Coordinate(5, c) for c in range(8))
A2, B2, C2, D2, E2, F2, G2, H2 = (Coordinate(6, c) for c in range(8))
A1, B1, C1, D1, E1, F1, G1, H1 = (Coordinate(7, c) for c in range(8))
