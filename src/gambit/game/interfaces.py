"""Abstract interfaces for the game layer.

The session depends on these ABCs, not on concrete player classes, so a
computer side can be driven synchronously or through a Qt worker thread.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum, auto
from typing import TYPE_CHECKING

from gambit.core.enums import Color

if TYPE_CHECKING:
    from gambit.core.move import Move
    from gambit.core.position import Position
    from gambit.core.types import Coordinate


# ── Game phase FSM states ────────────────────────────────────────────────────


class GamePhase(IntEnum):
    """Finite-state-machine states for a chess game."""

    NOT_STARTED = auto()
    AWAITING_MOVE = auto()
    THINKING = auto()  # computer is choosing a move
    GAME_OVER = auto()


# ── Abstract interfaces ─────────────────────────────────────────────────────


class IPlayer(ABC):
    """Interface for a game participant (human or computer)."""

    @property
    @abstractmethod
    def color(self) -> Color: ...

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    @abstractmethod
    def is_human(self) -> bool: ...

    @abstractmethod
    def request_move(self, position: Position) -> None:
        """Begin the move-selection process.

        For humans this is a no-op (they interact via ``select_square``).
        For computers this may kick off a background search.
        """

    @abstractmethod
    def cancel(self) -> None:
        """Cancel an ongoing move computation (no-op for humans)."""


class IGameSession(ABC):
    """Interface for the game orchestrator exposed to presentation code."""

    @abstractmethod
    def reset(self) -> None:
        """Start over from the initial position."""

    @abstractmethod
    def select_square(self, sq: Coordinate) -> list[Coordinate]:
        """Handle a click on *sq*; returns the squares to highlight."""

    @abstractmethod
    def attempt_move(self, move: Move) -> bool:
        """Submit a move. Returns True if legal and applied."""

    @abstractmethod
    def undo(self) -> bool:
        """Step back in history. Returns True on success."""

    @abstractmethod
    def redo(self) -> bool:
        """Replay an undone move. Returns True on success."""
