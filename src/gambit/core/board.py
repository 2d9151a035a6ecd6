"""Board - piece placement on an 8x8 grid."""

from __future__ import annotations

from collections.abc import Iterator

from gambit.core.enums import Color, PieceType
from gambit.core.piece import Piece
from gambit.core.types import Coordinate

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


class Board:
    """8x8 grid of squares indexed ``[row][col]``.

    Row 0 is black's back rank and row 7 is white's for the whole game;
    flipping the board for display is a presentation concern only.
    Engine code treats boards as immutable and works on :meth:`copy`.
    """

    __slots__ = ("_grid",)

    def __init__(self) -> None:
        self._grid: list[list[Piece | None]] = [[None] * 8 for _ in range(8)]

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Coordinate) -> Piece | None:
        return self._grid[sq[0]][sq[1]]

    def __setitem__(self, sq: Coordinate, piece: Piece | None) -> None:
        self._grid[sq[0]][sq[1]] = piece

    def is_empty(self, sq: Coordinate) -> bool:
        return self._grid[sq[0]][sq[1]] is None

    # -- Query helpers ------------------------------------------------------

    def occupied(self) -> Iterator[tuple[Coordinate, Piece]]:
        """All ``(square, piece)`` pairs in row-major order."""
        for row, cells in enumerate(self._grid):
            for col, piece in enumerate(cells):
                if piece is not None:
                    yield Coordinate(row, col), piece

    def pieces(self, color: Color) -> list[tuple[Coordinate, Piece]]:
        """Squares and pieces belonging to *color*, row-major."""
        return [(sq, p) for sq, p in self.occupied() if p.color == color]

    def find_king(self, color: Color) -> Coordinate | None:
        """Square of *color*'s king, or ``None`` when it is missing."""
        for sq, piece in self.occupied():
            if piece.color == color and piece.piece_type == PieceType.KING:
                return sq
        return None

    def layout_key(self) -> str:
        """Piece placement serialised row by row (used for repetition)."""
        return "/".join(
            "".join(str(p) if p is not None else "." for p in cells)
            for cells in self._grid
        )

    def rows(self) -> list[list[Piece | None]]:
        """Row lists copy of the grid."""
        return [cells.copy() for cells in self._grid]

    # -- Mutation / copying -------------------------------------------------

    def copy(self) -> Board:
        b = Board()
        b._grid = [cells.copy() for cells in self._grid]
        return b

    def clear(self) -> None:
        self._grid = [[None] * 8 for _ in range(8)]

    # -- Factory ------------------------------------------------------------

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position."""
        b = cls()
        for col, pt in enumerate(_BACK_RANK):
            b._grid[0][col] = Piece(Color.BLACK, pt)
            b._grid[1][col] = Piece(Color.BLACK, PieceType.PAWN)
            b._grid[6][col] = Piece(Color.WHITE, PieceType.PAWN)
            b._grid[7][col] = Piece(Color.WHITE, pt)
        return b

    @classmethod
    def from_rows(cls, rows: list[list[Piece | None]]) -> Board:
        if len(rows) != 8 or any(len(cells) != 8 for cells in rows):
            raise ValueError("Board must be 8x8")
        b = cls()
        b._grid = [list(cells) for cells in rows]
        return b

    @classmethod
    def from_placement(cls, placement: str) -> Board:
        """Build a board from the piece-placement field of a FEN string.

        Only the placement field is read; turn, castling and clocks live on
        :class:`~gambit.core.position.Position`.
        """
        ranks = placement.split()[0].split("/")
        if len(ranks) != 8:
            raise ValueError(f"Placement must contain 8 ranks: {placement!r}")
        b = cls()
        for row, rank_text in enumerate(ranks):
            col = 0
            for ch in rank_text:
                if ch.isdigit():
                    col += int(ch)
                else:
                    if col >= 8:
                        raise ValueError(f"Rank too wide: {rank_text!r}")
                    b._grid[row][col] = Piece.from_char(ch)
                    col += 1
            if col != 8:
                raise ValueError(f"Rank width must be 8: {rank_text!r}")
        return b

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._grid == other._grid

    def __repr__(self) -> str:
        rows: list[str] = []
        for row, cells in enumerate(self._grid):
            text = " ".join(str(p) if p else "." for p in cells)
            rows.append(f"{8 - row} {text}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)
