"""SAN (Standard Algebraic Notation) conversion and best-effort parsing."""

from __future__ import annotations

import re

from gambit.core.enums import PieceType
from gambit.core.move import Move
from gambit.core.move_generator import MoveGenerator
from gambit.core.position import Position, is_castling_move, is_en_passant_move
from gambit.core.rules import Rules
from gambit.core.types import Coordinate, file_letter, rank_digit, square_name
from gambit.errors import NotationError

_SAN_PIECE: dict[PieceType, str] = {
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}
_SAN_PIECE_REV: dict[str, PieceType] = {v: k for k, v in _SAN_PIECE.items()}

_SAN_RE = re.compile(
    r"^(?P<piece>[NBRQK])?(?P<file>[a-h])?(?P<rank>[1-8])?x?"
    r"(?P<dest>[a-h][1-8])(?:=?(?P<promo>[NBRQ]))?$"
)


def move_to_san(
    position: Position,
    move: Move,
    *,
    is_check: bool | None = None,
    is_checkmate: bool | None = None,
) -> str:
    """Convert a legal *move* to SAN given the *position* before the move.

    ``is_check`` / ``is_checkmate`` describe the resulting position; when
    omitted they are derived by playing the move on a copy.
    """
    board = position.board
    piece = board[move.from_sq]
    if piece is None:
        raise ValueError(f"No piece on {move.from_sq}")

    if is_castling_move(piece, move):
        san = "O-O" if move.d_col > 0 else "O-O-O"
    else:
        san = ""
        is_capture = board[move.to_sq] is not None or is_en_passant_move(
            board, piece, move
        )

        if piece.piece_type == PieceType.PAWN:
            if is_capture:
                san += file_letter(move.from_sq.col)
        else:
            san += _SAN_PIECE[piece.piece_type]
            san += _disambiguation(position, move)

        if is_capture:
            san += "x"

        san += square_name(move.to_sq)

        if move.promotion is not None:
            san += "=" + _SAN_PIECE[move.promotion]

    if is_check is None or is_checkmate is None:
        after = position.apply_move(move)
        is_check = Rules.is_in_check(after)
        is_checkmate = is_check and not Rules.has_legal_moves(after)

    if is_checkmate:
        san += "#"
    elif is_check:
        san += "+"
    return san


def _disambiguation(position: Position, move: Move) -> str:
    board = position.board
    piece = board[move.from_sq]
    gen = MoveGenerator(position)
    rivals: list[Coordinate] = [
        sq
        for sq, other in board.pieces(position.turn)
        if sq != move.from_sq
        and other == piece
        and gen.is_legal(Move(sq, move.to_sq))
    ]
    if not rivals:
        return ""

    same_col = any(sq.col == move.from_sq.col for sq in rivals)
    same_row = any(sq.row == move.from_sq.row for sq in rivals)
    if not same_col:
        return file_letter(move.from_sq.col)
    if not same_row:
        return rank_digit(move.from_sq.row)
    return square_name(move.from_sq)


def parse_san(position: Position, san: str) -> Move:
    """Resolve a SAN string against the legal moves of *position*.

    Best effort only: raises :class:`~gambit.errors.NotationError` when the
    text matches no legal move or more than one.
    """
    legal = MoveGenerator(position).generate_legal_moves()
    clean = san.strip().rstrip("+#!?")

    if clean in ("O-O", "0-0", "O-O-O", "0-0-0"):
        kingside = clean in ("O-O", "0-0")
        for m in legal:
            piece = position.board[m.from_sq]
            if piece is not None and is_castling_move(piece, m):
                if (m.d_col > 0) == kingside:
                    return m
        raise NotationError(f"Illegal move: {san}")

    match = _SAN_RE.match(clean)
    if match is None:
        raise NotationError(f"Unreadable move: {san}")

    piece_type = _SAN_PIECE_REV.get(match["piece"] or "", PieceType.PAWN)
    dest = match["dest"]
    to_sq = Coordinate(8 - int(dest[1]), ord(dest[0]) - ord("a"))
    from_col = ord(match["file"]) - ord("a") if match["file"] else None
    from_row = 8 - int(match["rank"]) if match["rank"] else None
    promotion = _SAN_PIECE_REV.get(match["promo"] or "")

    candidates: list[Move] = []
    for m in legal:
        p = position.board[m.from_sq]
        if p is None or p.piece_type != piece_type:
            continue
        if m.to_sq != to_sq:
            continue
        if m.promotion is not None and m.promotion != (promotion or PieceType.QUEEN):
            continue
        if from_col is not None and m.from_sq.col != from_col:
            continue
        if from_row is not None and m.from_sq.row != from_row:
            continue
        candidates.append(m)

    if len(candidates) == 1:
        return candidates[0]
    if not candidates:
        raise NotationError(f"Illegal move: {san}")
    raise NotationError(f"Ambiguous move: {san} → {[str(m) for m in candidates]}")
