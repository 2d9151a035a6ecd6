"""Tests for player implementations."""

from __future__ import annotations

from gambit.core.enums import Color
from gambit.core.position import Position
from gambit.core.rules import Rules
from gambit.engine import GreedyEngine, MinimaxEngine, SearchLimits, TacticalEngine
from gambit.engine.search import Difficulty
from gambit.game.player import ComputerPlayer, HumanPlayer


class TestHumanPlayer:
    def test_identity(self) -> None:
        player = HumanPlayer(Color.WHITE, "Alice")
        assert player.color == Color.WHITE
        assert player.name == "Alice"
        assert player.is_human is True

    def test_request_move_is_noop(self) -> None:
        player = HumanPlayer(Color.BLACK)
        player.request_move(Position.initial())
        player.cancel()


class TestComputerPlayer:
    def test_difficulty_selects_engine_tier(self) -> None:
        assert isinstance(ComputerPlayer(Color.BLACK, Difficulty.EASY).engine, GreedyEngine)
        assert isinstance(
            ComputerPlayer(Color.BLACK, Difficulty.MEDIUM).engine, TacticalEngine
        )
        assert isinstance(ComputerPlayer(Color.BLACK, Difficulty.HARD).engine, MinimaxEngine)

    def test_difficulty_accepts_string_value(self) -> None:
        player = ComputerPlayer(Color.WHITE, "hard")
        assert player.difficulty == Difficulty.HARD
        assert player.is_human is False

    def test_choose_move_returns_legal_move(self) -> None:
        position = Position.initial()
        player = ComputerPlayer(
            Color.WHITE, Difficulty.HARD, limits=SearchLimits(max_depth=1)
        )
        move = player.choose_move(position)
        assert move is not None
        assert Rules.is_legal_move(position, move)

    def test_callbacks_are_forwarded(self) -> None:
        requested: list[Position] = []
        cancelled: list[bool] = []
        player = ComputerPlayer(
            Color.BLACK,
            on_request_move=requested.append,
            on_cancel=lambda: cancelled.append(True),
        )
        position = Position.initial()

        player.request_move(position)
        player.cancel()

        assert requested == [position]
        assert cancelled == [True]

    def test_limits_setter(self) -> None:
        player = ComputerPlayer(Color.BLACK)
        player.limits = SearchLimits(max_depth=4, use_alpha_beta=False)
        assert player.limits.max_depth == 4
