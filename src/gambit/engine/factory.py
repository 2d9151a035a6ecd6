"""Engine construction by difficulty."""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from gambit.engine.greedy import GreedyEngine
from gambit.engine.minimax import MinimaxEngine
from gambit.engine.search import Difficulty, IEngine, SearchLimits
from gambit.engine.tactical import TacticalEngine

if TYPE_CHECKING:
    from gambit.settings import ComputerSettings


def create_engine(difficulty: Difficulty, rng: random.Random | None = None) -> IEngine:
    """Return the engine tier matching *difficulty*."""
    match Difficulty(difficulty):
        case Difficulty.EASY:
            return GreedyEngine(rng)
        case Difficulty.MEDIUM:
            return TacticalEngine(rng)
        case Difficulty.HARD:
            return MinimaxEngine()
    raise ValueError(f"Unknown difficulty: {difficulty!r}")


def limits_from_settings(settings: ComputerSettings) -> SearchLimits:
    clamped = settings.clamped()
    return SearchLimits(
        max_depth=clamped.max_depth,
        use_alpha_beta=clamped.use_alpha_beta,
    )
