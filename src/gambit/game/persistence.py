"""Saved games: JSON document schema and a file-backed key-value store.

Document layout (camelCase keys, as written by earlier releases)::

    {board, turn, castlingRights, isCheck, lastMove,
     moveHistory: [{move, description, snapshot}]}

Named saves live in a list of ``{name, date, state}`` under ``savedGames``;
the auto-save slot lives under ``chessGameState``.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any, Literal

from pydantic import BaseModel, Field, ValidationError, field_validator

from gambit.core.board import Board
from gambit.core.enums import CastlingRights, Color, PieceType
from gambit.core.move import Move
from gambit.core.piece import Piece
from gambit.core.position import Position
from gambit.core.snapshot import BoardSnapshot, MoveWithSnapshot
from gambit.core.types import Coordinate
from gambit.errors import MalformedPersistedState

if TYPE_CHECKING:
    from gambit.game.session import GameSession

_LOGGER = logging.getLogger(__name__)

CURRENT_GAME_KEY = "chessGameState"
SAVED_GAMES_KEY = "savedGames"

# ── Document schema ──────────────────────────────────────────────────────────

Index = Annotated[int, Field(ge=0, le=7)]
ColorName = Literal["white", "black"]
PieceName = Literal["pawn", "knight", "bishop", "rook", "queen", "king"]
PromotionName = Literal["queen", "rook", "bishop", "knight"]


class CoordinateDoc(BaseModel):
    row: Index
    col: Index

    model_config = {"extra": "forbid"}


class PieceDoc(BaseModel):
    type: PieceName
    color: ColorName

    model_config = {"extra": "forbid"}


class MoveDoc(BaseModel):
    from_: CoordinateDoc = Field(alias="from")
    to: CoordinateDoc
    promotion: PromotionName | None = None

    model_config = {"extra": "forbid", "populate_by_name": True}


class SideRightsDoc(BaseModel):
    kingSide: bool
    queenSide: bool

    model_config = {"extra": "forbid"}


class CastlingRightsDoc(BaseModel):
    white: SideRightsDoc
    black: SideRightsDoc

    model_config = {"extra": "forbid"}


BoardDoc = list[list[PieceDoc | None]]


def _check_board(rows: BoardDoc) -> BoardDoc:
    if len(rows) != 8 or any(len(cells) != 8 for cells in rows):
        raise ValueError("board must be 8x8")
    for color in ("white", "black"):
        kings = sum(
            1
            for cells in rows
            for cell in cells
            if cell is not None and cell.type == "king" and cell.color == color
        )
        if kings != 1:
            raise ValueError(f"board must hold exactly one {color} king, found {kings}")
    return rows


class SnapshotDoc(BaseModel):
    board: BoardDoc
    turn: ColorName
    castlingRights: CastlingRightsDoc
    isCheck: bool
    lastMove: MoveDoc | None = None

    model_config = {"extra": "forbid"}

    @field_validator("board")
    @classmethod
    def check_board(cls, rows: BoardDoc) -> BoardDoc:
        return _check_board(rows)


class HistoryEntryDoc(BaseModel):
    move: MoveDoc
    description: str
    snapshot: SnapshotDoc

    model_config = {"extra": "forbid"}


class GameStateDoc(SnapshotDoc):
    moveHistory: list[HistoryEntryDoc] = Field(default_factory=list)


class SavedGameDoc(BaseModel):
    name: str = Field(min_length=1)
    date: str
    state: GameStateDoc

    model_config = {"extra": "forbid"}


# ── Domain ↔ document conversion ─────────────────────────────────────────────


def _coord_doc(sq: Coordinate) -> dict[str, int]:
    return {"row": sq.row, "col": sq.col}


def _move_doc(move: Move | None) -> dict[str, Any] | None:
    if move is None:
        return None
    doc: dict[str, Any] = {"from": _coord_doc(move.from_sq), "to": _coord_doc(move.to_sq)}
    if move.promotion is not None:
        doc["promotion"] = str(move.promotion)
    return doc


def _board_doc(board: Board) -> list[list[dict[str, str] | None]]:
    return [
        [
            None if p is None else {"type": str(p.piece_type), "color": str(p.color)}
            for p in cells
        ]
        for cells in board.rows()
    ]


def _castling_doc(rights: CastlingRights) -> dict[str, dict[str, bool]]:
    return {
        str(color): {
            "kingSide": bool(rights & CastlingRights.kingside(color)),
            "queenSide": bool(rights & CastlingRights.queenside(color)),
        }
        for color in Color
    }


def _snapshot_fields(
    board: Board,
    turn: Color,
    castling: CastlingRights,
    is_check: bool,
    last_move: Move | None,
) -> dict[str, Any]:
    return {
        "board": _board_doc(board),
        "turn": str(turn),
        "castlingRights": _castling_doc(castling),
        "isCheck": is_check,
        "lastMove": _move_doc(last_move),
    }


def game_to_document(
    position: Position,
    history: list[MoveWithSnapshot] | tuple[MoveWithSnapshot, ...],
    is_check: bool,
) -> dict[str, Any]:
    doc = _snapshot_fields(
        position.board, position.turn, position.castling, is_check, position.last_move
    )
    doc["moveHistory"] = [
        {
            "move": _move_doc(entry.move),
            "description": entry.description,
            "snapshot": _snapshot_fields(
                entry.snapshot.board,
                entry.snapshot.turn,
                entry.snapshot.castling,
                entry.snapshot.is_check,
                entry.snapshot.last_move,
            ),
        }
        for entry in history
    ]
    return doc


def session_to_document(session: GameSession) -> dict[str, Any]:
    return game_to_document(session.position, session.history, session.is_check)


_COLORS = {str(c): c for c in Color}
_PIECE_TYPES = {str(pt): pt for pt in PieceType}


def _to_coord(doc: CoordinateDoc) -> Coordinate:
    return Coordinate(doc.row, doc.col)


def _to_move(doc: MoveDoc | None) -> Move | None:
    if doc is None:
        return None
    promotion = _PIECE_TYPES[doc.promotion] if doc.promotion else None
    return Move(_to_coord(doc.from_), _to_coord(doc.to), promotion)


def _to_board(rows: BoardDoc) -> Board:
    return Board.from_rows(
        [
            [
                None if cell is None else Piece(_COLORS[cell.color], _PIECE_TYPES[cell.type])
                for cell in cells
            ]
            for cells in rows
        ]
    )


def _to_castling(doc: CastlingRightsDoc) -> CastlingRights:
    rights = CastlingRights.NONE
    for color, side in ((Color.WHITE, doc.white), (Color.BLACK, doc.black)):
        if side.kingSide:
            rights |= CastlingRights.kingside(color)
        if side.queenSide:
            rights |= CastlingRights.queenside(color)
    return rights


def _to_snapshot(doc: SnapshotDoc) -> BoardSnapshot:
    return BoardSnapshot(
        board=_to_board(doc.board),
        turn=_COLORS[doc.turn],
        castling=_to_castling(doc.castlingRights),
        is_check=doc.isCheck,
        last_move=_to_move(doc.lastMove),
    )


@dataclass(frozen=True, slots=True)
class LoadedGame:
    """A validated, fully built game ready to be installed into a session."""

    position: Position
    history: tuple[MoveWithSnapshot, ...]
    is_check: bool

    def apply_to(self, session: GameSession) -> None:
        session.restore(self.position, self.history, is_check=self.is_check)


def document_to_game(data: Any) -> LoadedGame:
    """Validate *data* and build domain objects from it.

    Raises:
        MalformedPersistedState: if the document has the wrong shape.
    """
    try:
        doc = GameStateDoc.model_validate(data)
    except ValidationError as exc:
        raise MalformedPersistedState(f"Invalid game state: {exc}") from exc

    history = tuple(
        MoveWithSnapshot(
            move=_to_move(entry.move),  # type: ignore[arg-type]
            description=entry.description,
            snapshot=_to_snapshot(entry.snapshot),
        )
        for entry in doc.moveHistory
    )
    position = Position(
        board=_to_board(doc.board),
        turn=_COLORS[doc.turn],
        castling=_to_castling(doc.castlingRights),
        last_move=_to_move(doc.lastMove),
        move_history=[entry.move for entry in history],
    )
    return LoadedGame(position, history, doc.isCheck)


# ── Store ────────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class SaveInfo:
    name: str
    date: str


class GameStore:
    """JSON file acting as a small key-value store.

    Loading never touches a live session: documents are validated into
    :class:`LoadedGame` first and only then applied by the caller.
    """

    __slots__ = ("_path",)

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    # ── Auto-save slot ───────────────────────────────────────────────────

    def save_current(self, session: GameSession) -> None:
        data = self._read()
        data[CURRENT_GAME_KEY] = session_to_document(session)
        self._write(data)
        _LOGGER.debug("Saved current game to %s", self._path)

    def load_current(self) -> LoadedGame | None:
        """The auto-saved game, or ``None`` when there is none."""
        raw = self._read().get(CURRENT_GAME_KEY)
        if raw is None:
            return None
        try:
            return document_to_game(raw)
        except MalformedPersistedState as exc:
            _LOGGER.warning("Could not load current game: %s", exc)
            raise

    def clear_current(self) -> None:
        data = self._read()
        if data.pop(CURRENT_GAME_KEY, None) is not None:
            self._write(data)

    # ── Named saves ──────────────────────────────────────────────────────

    def list_saves(self) -> list[SaveInfo]:
        return [SaveInfo(s.name, s.date) for s in self._saved_games()]

    def save_named(self, name: str, session: GameSession) -> SaveInfo:
        """Save under *name*, overwriting an existing save of the same name."""
        name = name.strip()
        if not name:
            raise ValueError("Save name must not be empty")
        info = SaveInfo(name, datetime.now(timezone.utc).isoformat())
        entry = {"name": info.name, "date": info.date, "state": session_to_document(session)}

        data = self._read()
        saves = [s for s in self._raw_saves(data) if s.get("name") != name]
        saves.append(entry)
        data[SAVED_GAMES_KEY] = saves
        self._write(data)
        _LOGGER.debug("Saved game %r to %s", name, self._path)
        return info

    def load_named(self, name: str) -> LoadedGame:
        for raw in self._raw_saves(self._read()):
            if raw.get("name") == name:
                try:
                    return document_to_game(raw.get("state"))
                except MalformedPersistedState as exc:
                    _LOGGER.warning("Could not load saved game %r: %s", name, exc)
                    raise
        raise KeyError(name)

    def delete_named(self, name: str) -> bool:
        data = self._read()
        saves = self._raw_saves(data)
        kept = [s for s in saves if s.get("name") != name]
        if len(kept) == len(saves):
            return False
        data[SAVED_GAMES_KEY] = kept
        self._write(data)
        return True

    # ── Internal helpers ─────────────────────────────────────────────────

    def _saved_games(self) -> list[SavedGameDoc]:
        saves: list[SavedGameDoc] = []
        for raw in self._raw_saves(self._read()):
            try:
                saves.append(SavedGameDoc.model_validate(raw))
            except ValidationError as exc:
                _LOGGER.warning("Skipping malformed saved game: %s", exc)
        return saves

    @staticmethod
    def _raw_saves(data: dict[str, Any]) -> list[dict[str, Any]]:
        saves = data.get(SAVED_GAMES_KEY, [])
        if not isinstance(saves, list):
            raise MalformedPersistedState(f"{SAVED_GAMES_KEY} must be a list")
        return [s for s in saves if isinstance(s, dict)]

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            _LOGGER.warning("Could not read %s: %s", self._path, exc)
            raise MalformedPersistedState(f"Unreadable store {self._path}: {exc}") from exc
        if not isinstance(data, dict):
            raise MalformedPersistedState(f"Store {self._path} must hold a JSON object")
        return data

    def _write(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
        tmp.replace(self._path)
