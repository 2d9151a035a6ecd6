"""Piece value object and its text renderings."""

from __future__ import annotations

from dataclasses import dataclass

from gambit.core.enums import Color, PieceType

# White letter per type; black uses the lowercase form.
_LETTERS: dict[PieceType, str] = {
    PieceType.PAWN: "P",
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}

# Offsets into the U+2654 block: white king first, black pieces 6 further on.
_GLYPH_ORDER = (
    PieceType.KING,
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.PAWN,
)
_GLYPH_BASE = 0x2654

_BY_LETTER: dict[str, tuple[Color, PieceType]] = {}
for _ptype, _letter in _LETTERS.items():
    _BY_LETTER[_letter] = (Color.WHITE, _ptype)
    _BY_LETTER[_letter.lower()] = (Color.BLACK, _ptype)


@dataclass(frozen=True, slots=True)
class Piece:
    """A coloured piece; equal pieces compare and hash equal."""

    color: Color
    piece_type: PieceType

    def __str__(self) -> str:
        """Placement letter: uppercase for white, lowercase for black."""
        letter = _LETTERS[self.piece_type]
        return letter if self.color == Color.WHITE else letter.lower()

    @classmethod
    def from_char(cls, char: str) -> Piece:
        try:
            color, ptype = _BY_LETTER[char]
        except KeyError:
            raise ValueError(f"Invalid piece character: {char!r}") from None
        return cls(color, ptype)

    @property
    def symbol(self) -> str:
        """Unicode chess glyph, e.g. ♞ for a black knight."""
        offset = _GLYPH_ORDER.index(self.piece_type) + 6 * self.color.value
        return chr(_GLYPH_BASE + offset)
