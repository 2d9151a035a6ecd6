"""Move request object.

A :class:`Move` carries no legality information of its own: it only becomes
legal or illegal relative to a :class:`~gambit.core.position.Position`.
"""

from __future__ import annotations

from dataclasses import dataclass

from gambit.core.enums import PieceType
from gambit.core.types import Coordinate, square_name

_PROMO_CHARS: dict[PieceType, str] = {
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
}


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable value object representing a single move request."""

    from_sq: Coordinate
    to_sq: Coordinate
    promotion: PieceType | None = None

    @property
    def d_row(self) -> int:
        return self.to_sq.row - self.from_sq.row

    @property
    def d_col(self) -> int:
        return self.to_sq.col - self.from_sq.col

    # ── Display ──────────────────────────────────────────────────────────

    def __str__(self) -> str:
        base = f"{square_name(self.from_sq)}{square_name(self.to_sq)}"
        if self.promotion is not None:
            base += _PROMO_CHARS.get(self.promotion, "")
        return base
