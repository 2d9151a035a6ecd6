"""GameSession: one live game, its history and its players.

Coordinates: Players, Position, move history, undo/redo stacks.
Emits events via simple callbacks so a UI / tests can subscribe.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace

from gambit.core.enums import Color, GameEndReason, GameResult, PieceType
from gambit.core.move import Move
from gambit.core.move_generator import MoveGenerator
from gambit.core.notation import move_to_san, parse_san
from gambit.core.position import Position, promotion_row
from gambit.core.rules import Rules
from gambit.core.snapshot import BoardSnapshot, MoveWithSnapshot
from gambit.core.types import Coordinate
from gambit.errors import NotationError
from gambit.game.interfaces import GamePhase, IGameSession, IPlayer
from gambit.game.player import ComputerPlayer, HumanPlayer

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

MoveCallback = Callable[[Move, str, "GameSession"], None]  # move, san, session
GameOverCallback = Callable[[GameResult, GameEndReason], None]
PhaseCallback = Callable[[GamePhase], None]
PositionCallback = Callable[["GameSession"], None]

PromotionChooser = Callable[[Color], "PieceType | None"]


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)
    on_phase_changed: list[PhaseCallback] = field(default_factory=list)
    # Undo, redo, reset and load replace the position without a new move.
    on_position_changed: list[PositionCallback] = field(default_factory=list)


def _queen_always(_color: Color) -> PieceType | None:
    return PieceType.QUEEN


# ── Session ──────────────────────────────────────────────────────────────────


class GameSession(IGameSession):
    """Owns the live game: validates moves, keeps history, drives computers.

    ``position`` and its ``last_move`` are always replaced together with the
    history entry, so en passant eligibility never lags behind the board.

    Thread-safety: methods are designed to be called from a single thread
    (the main/UI thread).  Computer results computed on a worker thread come
    back through ``attempt_move`` on the main thread.
    """

    __slots__ = (
        "_position",
        "_history",
        "_redo",
        "_is_check",
        "_result",
        "_reason",
        "_phase",
        "_players",
        "_selected",
        "_highlighted",
        "promotion_chooser",
        "events",
    )

    def __init__(
        self,
        white: IPlayer | None = None,
        black: IPlayer | None = None,
        *,
        promotion_chooser: PromotionChooser | None = None,
    ) -> None:
        self._position = Position.initial()
        self._history: list[MoveWithSnapshot] = []
        self._redo: list[MoveWithSnapshot] = []
        self._is_check = False
        self._result = GameResult.IN_PROGRESS
        self._reason = GameEndReason.NONE
        self._phase = GamePhase.NOT_STARTED
        self._players: dict[Color, IPlayer] = {
            Color.WHITE: white or HumanPlayer(Color.WHITE),
            Color.BLACK: black or HumanPlayer(Color.BLACK),
        }
        self._selected: Coordinate | None = None
        self._highlighted: list[Coordinate] = []
        self.promotion_chooser: PromotionChooser = promotion_chooser or _queen_always
        self.events = GameEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def position(self) -> Position:
        return self._position

    @property
    def turn(self) -> Color:
        return self._position.turn

    @property
    def is_check(self) -> bool:
        return self._is_check

    @property
    def result(self) -> GameResult:
        return self._result

    @property
    def end_reason(self) -> GameEndReason:
        return self._reason

    @property
    def is_game_over(self) -> bool:
        return self._result != GameResult.IN_PROGRESS

    @property
    def phase(self) -> GamePhase:
        return self._phase

    @property
    def history(self) -> tuple[MoveWithSnapshot, ...]:
        return tuple(self._history)

    @property
    def can_undo(self) -> bool:
        return bool(self._history)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    @property
    def selected(self) -> Coordinate | None:
        return self._selected

    @property
    def highlighted(self) -> list[Coordinate]:
        return list(self._highlighted)

    @property
    def current_player(self) -> IPlayer:
        return self._players[self._position.turn]

    def player(self, color: Color) -> IPlayer:
        return self._players[color]

    # ── Lifecycle ────────────────────────────────────────────────────────

    def set_players(self, white: IPlayer, black: IPlayer) -> None:
        """Swap participants; the current computer search (if any) is dropped."""
        self.current_player.cancel()
        self._players = {Color.WHITE: white, Color.BLACK: black}
        self._clear_selection()
        if self._phase != GamePhase.NOT_STARTED:
            self._prompt_current_player()

    def start(self) -> None:
        """Begin play: prompts whoever is to move."""
        self._prompt_current_player()

    def reset(self) -> None:
        self.current_player.cancel()
        self._install(Position.initial(), [], is_check=False)
        self._redo.clear()
        _LOGGER.debug("Session reset")
        self._emit_position_changed()
        self._prompt_current_player()

    def restore(
        self,
        position: Position,
        history: Sequence[MoveWithSnapshot],
        *,
        is_check: bool | None = None,
    ) -> None:
        """Replace the whole game, e.g. after loading a saved state.

        Callers validate their input first; this only swaps references.
        """
        self.current_player.cancel()
        if is_check is None:
            is_check = Rules.is_in_check(position)
        self._install(position, list(history), is_check=is_check)
        self._redo.clear()
        self._emit_position_changed()
        if self.is_game_over:
            self._emit_game_over()
        else:
            self._prompt_current_player()

    # ── Board interaction ────────────────────────────────────────────────

    def legal_destinations(self, sq: Coordinate) -> list[Coordinate]:
        moves = MoveGenerator(self._position).legal_moves_from(sq, (PieceType.QUEEN,))
        return [m.to_sq for m in moves]

    def select_square(self, sq: Coordinate) -> list[Coordinate]:
        """Click handling: select, reselect, commit or clear.

        Returns the destinations highlighted after the click.
        """
        if self.is_game_over or not self.current_player.is_human:
            self._clear_selection()
            return []

        if self._selected is not None and sq in self._highlighted:
            from_sq = self._selected
            self._clear_selection()
            move = self._build_human_move(from_sq, sq)
            if move is not None:
                self.attempt_move(move)
            return []

        piece = self._position.board[sq]
        if piece is not None and piece.color == self._position.turn:
            self._selected = sq
            self._highlighted = self.legal_destinations(sq)
            return list(self._highlighted)

        self._clear_selection()
        return []

    def attempt_move(self, move: Move) -> bool:
        """Validate and commit *move*.  Illegal moves leave everything untouched."""
        if self.is_game_over:
            _LOGGER.debug("Move %s rejected: game is over", move)
            return False
        if not Rules.is_legal_move(self._position, move):
            _LOGGER.debug("Move %s rejected: illegal", move)
            return False

        self._redo.clear()
        self._commit(move)
        self._after_commit()
        return True

    def undo(self) -> bool:
        """Step back one ply, or to the last human turn against a computer."""
        if not self._history:
            return False

        self.current_player.cancel()
        self._step_back()
        while (
            self._history
            and not self.current_player.is_human
            and self._has_human_player()
        ):
            self._step_back()

        self._clear_selection()
        _LOGGER.debug("Undo: %d moves left, %d to redo", len(self._history), len(self._redo))
        self._emit_position_changed()
        self._set_phase(GamePhase.AWAITING_MOVE)
        return True

    def redo(self) -> bool:
        """Replay undone moves, mirroring how :meth:`undo` stepped back."""
        if not self._redo:
            return False

        self.current_player.cancel()
        self._step_forward()
        while (
            self._redo
            and not self.is_game_over
            and not self.current_player.is_human
            and self._has_human_player()
        ):
            self._step_forward()

        self._clear_selection()
        _LOGGER.debug("Redo: %d moves played, %d to redo", len(self._history), len(self._redo))
        self._emit_position_changed()
        if self.is_game_over:
            self._emit_game_over()
        elif self._redo:
            self._set_phase(GamePhase.AWAITING_MOVE)
        else:
            self._prompt_current_player()
        return True

    # ── Computer play ────────────────────────────────────────────────────

    def play_computer_move(self) -> Move | None:
        """Let the computer side to move choose and play synchronously."""
        player = self.current_player
        if self.is_game_over or not isinstance(player, ComputerPlayer):
            return None
        move = player.choose_move(self._position)
        if move is None or not self.attempt_move(move):
            return None
        return move

    def suggestion_to_move(self, san: str) -> Move | None:
        """Resolve a suggested SAN string in the current position."""
        try:
            return parse_san(self._position, san)
        except NotationError as exc:
            _LOGGER.debug("Suggestion %r not playable: %s", san, exc)
            return None

    # ── Display helpers ──────────────────────────────────────────────────

    def move_list(self) -> list[tuple[int, str, str | None]]:
        """SAN descriptions grouped as ``(number, white, black)`` rows."""
        rows: list[tuple[int, str, str | None]] = []
        descriptions = [entry.description for entry in self._history]
        for i in range(0, len(descriptions), 2):
            black = descriptions[i + 1] if i + 1 < len(descriptions) else None
            rows.append((i // 2 + 1, descriptions[i], black))
        return rows

    # ── Internal helpers ─────────────────────────────────────────────────

    def _build_human_move(self, from_sq: Coordinate, to_sq: Coordinate) -> Move | None:
        piece = self._position.board[from_sq]
        if (
            piece is not None
            and piece.piece_type == PieceType.PAWN
            and to_sq.row == promotion_row(piece.color)
        ):
            choice = self.promotion_chooser(piece.color)
            if choice is None:
                _LOGGER.debug("Promotion cancelled")
                return None
            return Move(from_sq, to_sq, choice)
        return Move(from_sq, to_sq)

    def _commit(self, move: Move) -> MoveWithSnapshot:
        """Play a move already known to be legal."""
        before = self._position
        snapshot = BoardSnapshot.capture(before, self._is_check)
        after = before.apply_move(move)

        # Status first: the SAN suffix depends on check / mate.
        provisional = MoveWithSnapshot(move, "", snapshot)
        history = [*self._history, provisional]
        is_check = Rules.is_in_check(after)
        result, reason = Rules.game_status(after, history)
        san = move_to_san(
            before,
            move,
            is_check=is_check,
            is_checkmate=reason == GameEndReason.CHECKMATE,
        )
        entry = replace(provisional, description=san)
        history[-1] = entry

        self._position = after
        self._history = history
        self._is_check = is_check
        self._result = result
        self._reason = reason
        self._clear_selection()
        _LOGGER.debug("Move %d: %s", len(history), san)
        return entry

    def _after_commit(self) -> None:
        entry = self._history[-1]
        for cb in self.events.on_move:
            cb(entry.move, entry.description, self)
        if self.is_game_over:
            self._emit_game_over()
            return
        self._prompt_current_player()

    def _step_back(self) -> None:
        entry = self._history.pop()
        self._redo.append(entry)
        position = entry.snapshot.to_position([e.move for e in self._history])
        self._install(position, self._history, is_check=entry.snapshot.is_check)

    def _step_forward(self) -> None:
        entry = self._redo.pop()
        self._commit(entry.move)
        for cb in self.events.on_move:
            cb(entry.move, self._history[-1].description, self)

    def _install(
        self,
        position: Position,
        history: list[MoveWithSnapshot],
        *,
        is_check: bool,
    ) -> None:
        result, reason = Rules.game_status(position, history)
        self._position = position
        self._history = history
        self._is_check = is_check
        self._result = result
        self._reason = reason
        self._clear_selection()

    def _has_human_player(self) -> bool:
        return any(p.is_human for p in self._players.values())

    def _clear_selection(self) -> None:
        self._selected = None
        self._highlighted = []

    def _prompt_current_player(self) -> None:
        """Ask the current player to move."""
        if self.is_game_over:
            self._set_phase(GamePhase.GAME_OVER)
            return
        cp = self.current_player
        if cp.is_human:
            self._set_phase(GamePhase.AWAITING_MOVE)
        else:
            self._set_phase(GamePhase.THINKING)
            cp.request_move(self._position.copy())

    def _emit_game_over(self) -> None:
        _LOGGER.info("Game over: %s (%s)", self._result.name, self._reason.name)
        self._set_phase(GamePhase.GAME_OVER)
        for cb in self.events.on_game_over:
            cb(self._result, self._reason)

    def _emit_position_changed(self) -> None:
        for cb in self.events.on_position_changed:
            cb(self)

    def _set_phase(self, phase: GamePhase) -> None:
        self._phase = phase
        for cb in self.events.on_phase_changed:
            cb(phase)
