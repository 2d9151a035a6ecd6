"""Qt bridge to run engine search in a worker thread."""

from __future__ import annotations

import logging
import threading

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from gambit.core.position import Position
from gambit.engine.search import IEngine, SearchLimits

_LOGGER = logging.getLogger(__name__)


class EngineWorker(QObject):
    """Thread-affine worker that computes engine moves on demand."""

    best_move_ready = pyqtSignal(int, object, float, int, int)
    search_cancelled = pyqtSignal(int)
    search_no_move = pyqtSignal(int, float, int, int)
    search_error = pyqtSignal(int, str)

    __slots__ = ("_cancel_event", "_engine", "_limits")

    def __init__(self, engine: IEngine, limits: SearchLimits | None = None) -> None:
        super().__init__()
        self._engine = engine
        self._limits = limits or SearchLimits()
        self._cancel_event = threading.Event()

    @pyqtSlot(object, int)
    def request_move(self, position_obj: object, request_id: int) -> None:
        """Search for the best move in *position_obj* and emit result."""
        if not isinstance(position_obj, Position):
            self.search_error.emit(request_id, "Engine received invalid position")
            return

        self._cancel_event.clear()
        try:
            result = self._engine.search(
                position_obj,
                self._limits,
                is_cancelled=self._cancel_event.is_set,
            )
        except Exception as exc:
            _LOGGER.exception("Engine search failed (request %d)", request_id)
            self.search_error.emit(request_id, str(exc))
            return

        if self._cancel_event.is_set():
            self.search_cancelled.emit(request_id)
            return

        if result.best_move is None:
            self.search_no_move.emit(
                request_id, float(result.score), result.depth, result.nodes
            )
            return

        self.best_move_ready.emit(
            request_id,
            result.best_move,
            float(result.score),
            result.depth,
            result.nodes,
        )

    @pyqtSlot()
    def cancel(self) -> None:
        """Request cancellation of the current search."""
        self._cancel_event.set()

    @pyqtSlot(object)
    def set_engine(self, engine_obj: object) -> None:
        """Swap the engine tier (takes effect on the next search)."""
        self._engine = engine_obj  # type: ignore[assignment]

    @pyqtSlot(object)
    def set_limits(self, limits_obj: object) -> None:
        """Update search limits (takes effect on the next search)."""
        if isinstance(limits_obj, SearchLimits):
            self._limits = limits_obj
