"""Shared engine search models and protocol."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from time import perf_counter
from typing import TYPE_CHECKING, Protocol

from gambit.core.enums import PieceType

if TYPE_CHECKING:
    from gambit.core.move import Move
    from gambit.core.position import Position

CancelCheck = Callable[[], bool]

MAX_SEARCH_DEPTH = 6

# Computer players never search under-promotions.
COMPUTER_PROMOTIONS: tuple[PieceType, ...] = (PieceType.QUEEN,)


class Difficulty(str, Enum):
    """Computer strength tiers."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(slots=True, frozen=True)
class SearchLimits:
    """Search constraints for a single move computation."""

    max_depth: int = 2
    use_alpha_beta: bool = True
    time_limit_ms: int | None = None


@dataclass(slots=True, frozen=True)
class SearchResult:
    """Result produced by an engine search.

    ``score`` is white-positive for the minimax tier and mover-relative for
    the capture tiers.
    """

    best_move: Move | None
    score: float
    depth: int
    nodes: int
    cancelled: bool = False


class IEngine(Protocol):
    """Protocol for move-selection engines used by the game layer."""

    def search(
        self,
        position: Position,
        limits: SearchLimits,
        is_cancelled: CancelCheck | None = None,
    ) -> SearchResult: ...


def never_cancelled() -> bool:
    return False


class StopCondition:
    """Combines a cancel callback with an optional wall-clock deadline."""

    __slots__ = ("_cancel_check", "_deadline", "triggered")

    def __init__(self, limits: SearchLimits, is_cancelled: CancelCheck | None) -> None:
        self._cancel_check: CancelCheck = is_cancelled or never_cancelled
        self._deadline: float | None = None
        if limits.time_limit_ms is not None:
            ms = max(limits.time_limit_ms, 1)
            self._deadline = perf_counter() + (ms / 1000.0)
        self.triggered = False

    def __call__(self) -> bool:
        if self.triggered:
            return True
        if self._cancel_check() or (
            self._deadline is not None and perf_counter() >= self._deadline
        ):
            self.triggered = True
        return self.triggered
