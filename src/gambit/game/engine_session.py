"""Computer-move orchestration for the main (UI) thread.

Searches run on an :class:`~gambit.engine.qt_bridge.EngineWorker` living in
a dedicated ``QThread``.  A single-shot timer delays each request by the
configured "thinking time" so the board can repaint first.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from PyQt6.QtCore import QObject, QThread, QTimer, pyqtSignal

from gambit.core.enums import Color
from gambit.core.move import Move
from gambit.core.notation import position_to_fen
from gambit.engine.factory import limits_from_settings
from gambit.engine.minimax import MinimaxEngine
from gambit.engine.qt_bridge import EngineWorker
from gambit.engine.search import Difficulty
from gambit.game.interfaces import GamePhase
from gambit.game.player import ComputerPlayer

if TYPE_CHECKING:
    from gambit.core.position import Position
    from gambit.engine.search import IEngine, SearchLimits
    from gambit.game.session import GameSession
    from gambit.settings import ComputerSettings

_LOGGER = logging.getLogger(__name__)


class _EngineCommandBus(QObject):
    """Signal bridge for issuing worker commands with queued delivery."""

    request_move = pyqtSignal(object, int)
    cancel_requested = pyqtSignal()
    set_engine_requested = pyqtSignal(object)
    set_limits_requested = pyqtSignal(object)


class EngineSession:
    """Owns worker-thread search lifecycle and move handoff to the session."""

    _MAX_FAILURE_RETRIES = 1

    __slots__ = (
        "__weakref__",
        "_session",
        "_settings",
        "_on_error",
        "_command_bus",
        "_dispatch_timer",
        "_engine_thread",
        "_engine_worker",
        "_engine_request_id",
        "_pending_engine_request",
        "_pending_engine_position",
        "_pending_engine_fen",
        "_pending_engine",
        "_pending_limits",
        "_remaining_failure_retries",
        "_is_shutting_down",
        "_is_started",
    )

    def __init__(
        self,
        *,
        session: GameSession,
        settings: ComputerSettings,
        on_error: Callable[[str], None] | None = None,
        parent: QObject | None = None,
    ) -> None:
        self._session = session
        self._settings = settings.clamped()
        self._on_error = on_error

        self._command_bus = _EngineCommandBus(parent)
        self._dispatch_timer = QTimer(parent)
        self._dispatch_timer.setSingleShot(True)
        self._dispatch_timer.timeout.connect(self._emit_pending_request)

        self._engine_thread = QThread(parent)
        self._engine_worker = EngineWorker(MinimaxEngine())
        self._engine_request_id = 0
        self._pending_engine_request: int | None = None
        self._pending_engine_position: Position | None = None
        self._pending_engine_fen: str | None = None
        self._pending_engine: IEngine | None = None
        self._pending_limits: SearchLimits | None = None
        self._remaining_failure_retries = 0
        self._is_shutting_down = False
        self._is_started = False

    @property
    def settings(self) -> ComputerSettings:
        return self._settings

    def setup(self) -> None:
        """Start engine worker in a dedicated thread and connect callbacks."""
        if self._is_started:
            return
        self._is_shutting_down = False
        self._engine_worker.moveToThread(self._engine_thread)
        self._command_bus.request_move.connect(self._engine_worker.request_move)
        self._command_bus.cancel_requested.connect(self._engine_worker.cancel)
        self._command_bus.set_engine_requested.connect(self._engine_worker.set_engine)
        self._command_bus.set_limits_requested.connect(self._engine_worker.set_limits)
        self._engine_worker.best_move_ready.connect(self._on_engine_best_move)
        self._engine_worker.search_cancelled.connect(self._on_engine_cancelled)
        self._engine_worker.search_no_move.connect(self._on_engine_no_move)
        self._engine_worker.search_error.connect(self._on_engine_error)
        self._engine_thread.start()
        self._is_started = True

    def shutdown(self) -> None:
        """Stop active search and shut down the worker thread."""
        if not self._is_started:
            return
        self._is_shutting_down = True
        self.cancel_search()
        self._dispatch_timer.stop()
        self._engine_thread.quit()
        self._engine_thread.wait(2000)
        self._clear_pending_request()
        self._is_started = False

    def apply_settings(self, settings: ComputerSettings) -> None:
        """Update depth, delay and pruning for computer players created here."""
        self._settings = settings.clamped()
        limits = limits_from_settings(self._settings)
        for color in Color:
            player = self._session.player(color)
            if isinstance(player, ComputerPlayer):
                player.limits = limits

    def create_computer_player(
        self, color: Color, difficulty: Difficulty = Difficulty.MEDIUM
    ) -> ComputerPlayer:
        """Create a computer player whose searches run on the worker thread."""
        return ComputerPlayer(
            color,
            difficulty,
            limits=limits_from_settings(self._settings),
            on_request_move=self.request_move,
            on_cancel=self.cancel_search,
        )

    def request_move(self, position: Position) -> None:
        """Queue a best-move search for *position*."""
        if not self._is_started or self._is_shutting_down:
            return
        self._queue_request(position.copy(), reset_retry_budget=True)

    def cancel_search(self) -> None:
        """Cancel any pending/active engine request."""
        self._dispatch_timer.stop()
        self._clear_pending_request()
        if self._is_started:
            self._command_bus.cancel_requested.emit()

    # ── Worker callbacks ─────────────────────────────────────────────────

    def _on_engine_best_move(
        self,
        request_id: int,
        move_obj: object,
        _score: float,
        _depth: int,
        _nodes: int,
    ) -> None:
        if self._is_shutting_down:
            return
        if request_id != self._pending_engine_request:
            return
        if not isinstance(move_obj, Move):
            return
        if self._session.phase != GamePhase.THINKING:
            return
        # The game moved on (undo, reset, load) while the worker was busy.
        if self._pending_engine_fen != position_to_fen(self._session.position):
            return

        self._clear_pending_request()
        self._remaining_failure_retries = 0
        if not self._session.attempt_move(move_obj):
            _LOGGER.warning("Engine proposed an illegal move: %s", move_obj)

    def _on_engine_no_move(
        self,
        request_id: int,
        _score: float,
        _depth: int,
        _nodes: int,
    ) -> None:
        self._handle_engine_failure(request_id, "Engine produced no move")

    def _on_engine_error(self, request_id: int, message: str) -> None:
        self._handle_engine_failure(request_id, message)

    def _on_engine_cancelled(self, request_id: int) -> None:
        if self._is_shutting_down:
            return
        if request_id != self._pending_engine_request:
            return
        self._clear_pending_request()
        self._remaining_failure_retries = 0

    # ── Internal helpers ─────────────────────────────────────────────────

    def _queue_request(self, position: Position, *, reset_retry_budget: bool) -> None:
        self.cancel_search()
        if self._is_shutting_down:
            return

        player = self._session.player(position.turn)
        if not isinstance(player, ComputerPlayer):
            return

        self._engine_request_id += 1
        self._pending_engine_request = self._engine_request_id
        self._pending_engine_position = position
        self._pending_engine_fen = position_to_fen(position)
        self._pending_engine = player.engine
        self._pending_limits = player.limits
        if reset_retry_budget:
            self._remaining_failure_retries = self._MAX_FAILURE_RETRIES
        self._dispatch_timer.start(self._settings.move_delay_ms)

    def _emit_pending_request(self) -> None:
        if self._is_shutting_down:
            return

        request_id = self._pending_engine_request
        position = self._pending_engine_position
        if request_id is None or position is None:
            return
        # Queued signals are delivered in order, so the worker is configured
        # before it sees the request.
        self._command_bus.set_engine_requested.emit(self._pending_engine)
        self._command_bus.set_limits_requested.emit(self._pending_limits)
        self._command_bus.request_move.emit(position, request_id)

    def _clear_pending_request(self) -> None:
        self._pending_engine_request = None
        self._pending_engine_position = None
        self._pending_engine_fen = None
        self._pending_engine = None
        self._pending_limits = None

    def _handle_engine_failure(self, request_id: int, message: str) -> None:
        if self._is_shutting_down:
            return
        if request_id != self._pending_engine_request:
            return

        if self._session.phase != GamePhase.THINKING:
            self._clear_pending_request()
            return

        if self._remaining_failure_retries > 0:
            self._remaining_failure_retries -= 1
            self._queue_request(self._session.position.copy(), reset_retry_budget=False)
            return

        self._clear_pending_request()
        _LOGGER.warning("Engine failed: %s", message)
        if self._on_error is not None:
            self._on_error(message)
