"""FEN generation.

Export only: positions are never rebuilt from FEN text.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from gambit.core.enums import CastlingRights, Color
from gambit.core.position import is_double_pawn_push
from gambit.core.rules import Rules
from gambit.core.types import Coordinate, square_name

if TYPE_CHECKING:
    from gambit.core.position import Position
    from gambit.core.snapshot import MoveWithSnapshot

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_CASTLING_LETTERS: tuple[tuple[CastlingRights, str], ...] = (
    (CastlingRights.WHITE_KINGSIDE, "K"),
    (CastlingRights.WHITE_QUEENSIDE, "Q"),
    (CastlingRights.BLACK_KINGSIDE, "k"),
    (CastlingRights.BLACK_QUEENSIDE, "q"),
)


def en_passant_square(position: Position) -> Coordinate | None:
    """Square skipped by the last move if it was a two-square pawn advance."""
    last = position.last_move
    if last is None or not is_double_pawn_push(position.board, last):
        return None
    return Coordinate((last.from_sq.row + last.to_sq.row) // 2, last.to_sq.col)


def position_to_fen(
    pos: Position,
    history: Sequence[MoveWithSnapshot] = (),
) -> str:
    """Serialise a :class:`Position` to FEN.

    The halfmove clock comes from scanning *history* backwards, so it can
    never exceed the number of recorded moves.
    """
    # 1. Board
    rows: list[str] = []
    for cells in pos.board.rows():
        empty = 0
        row = ""
        for piece in cells:
            if piece is None:
                empty += 1
            else:
                if empty:
                    row += str(empty)
                    empty = 0
                row += str(piece)
        if empty:
            row += str(empty)
        rows.append(row)
    board_str = "/".join(rows)

    # 2. Side
    side_str = "w" if pos.turn == Color.WHITE else "b"

    # 3. Castling
    castling_str = "".join(ch for right, ch in _CASTLING_LETTERS if pos.castling & right)
    if not castling_str:
        castling_str = "-"

    # 4. En passant
    ep = en_passant_square(pos)
    ep_str = square_name(ep) if ep is not None else "-"

    # 5–6. Clocks
    halfmove = Rules.halfmove_clock(history)
    fullmove = len(pos.move_history) // 2 + 1

    return f"{board_str} {side_str} {castling_str} {ep_str} {halfmove} {fullmove}"
