"""Concrete player implementations."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from gambit.core.enums import Color
from gambit.engine.factory import create_engine
from gambit.engine.search import CancelCheck, Difficulty, IEngine, SearchLimits
from gambit.game.interfaces import IPlayer

if TYPE_CHECKING:
    from gambit.core.move import Move
    from gambit.core.position import Position


class HumanPlayer(IPlayer):
    """A human participant, moves come from the board UI.

    ``request_move`` is a no-op because humans select moves interactively.
    """

    __slots__ = ("_color", "_name")

    def __init__(self, color: Color, name: str = "") -> None:
        self._color = color
        self._name = name or f"Player ({color})"

    @property
    def color(self) -> Color:
        return self._color

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_human(self) -> bool:
        return True

    def request_move(self, position: Position) -> None:
        pass  # Human moves arrive via GameSession.select_square()

    def cancel(self) -> None:
        pass


class ComputerPlayer(IPlayer):
    """A computer participant backed by one engine tier.

    The move can be computed two ways:

    * synchronously with :meth:`choose_move`, which is what
      ``GameSession.play_computer_move`` does;
    * asynchronously, by giving an ``on_request_move`` callable that hands
      the position to a worker thread (see ``EngineSession``).

    Args:
        color: Side the computer plays.
        difficulty: Engine tier.
        limits: Search limits; only the minimax tier looks at them.
        engine: Explicit engine, overrides *difficulty* (handy in tests).
        on_request_move: ``(Position) -> None`` called when the session
            asks the computer to start thinking.
        on_cancel: ``() -> None`` called to abort a running search.
    """

    __slots__ = (
        "_color",
        "_name",
        "_difficulty",
        "_engine",
        "_limits",
        "_on_request_move",
        "_on_cancel",
    )

    def __init__(
        self,
        color: Color,
        difficulty: Difficulty = Difficulty.MEDIUM,
        *,
        limits: SearchLimits | None = None,
        engine: IEngine | None = None,
        name: str = "",
        on_request_move: Callable[[Position], None] | None = None,
        on_cancel: Callable[[], None] | None = None,
    ) -> None:
        self._color = color
        self._difficulty = Difficulty(difficulty)
        self._name = name or f"Computer ({self._difficulty.value})"
        self._engine = engine or create_engine(self._difficulty)
        self._limits = limits or SearchLimits()
        self._on_request_move = on_request_move
        self._on_cancel = on_cancel

    @property
    def color(self) -> Color:
        return self._color

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_human(self) -> bool:
        return False

    @property
    def difficulty(self) -> Difficulty:
        return self._difficulty

    @property
    def engine(self) -> IEngine:
        return self._engine

    @property
    def limits(self) -> SearchLimits:
        return self._limits

    @limits.setter
    def limits(self, value: SearchLimits) -> None:
        self._limits = value

    def choose_move(
        self, position: Position, is_cancelled: CancelCheck | None = None
    ) -> Move | None:
        """Run the engine on the calling thread."""
        return self._engine.search(position, self._limits, is_cancelled).best_move

    def request_move(self, position: Position) -> None:
        if self._on_request_move is not None:
            self._on_request_move(position)

    def cancel(self) -> None:
        if self._on_cancel is not None:
            self._on_cancel()
