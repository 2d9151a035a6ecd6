"""Move-selection engines."""

from gambit.engine.evaluation import MATE_SCORE, evaluate
from gambit.engine.factory import create_engine, limits_from_settings
from gambit.engine.greedy import GreedyEngine
from gambit.engine.minimax import MinimaxEngine
from gambit.engine.search import (
    COMPUTER_PROMOTIONS,
    MAX_SEARCH_DEPTH,
    CancelCheck,
    Difficulty,
    IEngine,
    SearchLimits,
    SearchResult,
)
from gambit.engine.tactical import TacticalEngine

__all__ = [
    "COMPUTER_PROMOTIONS",
    "MATE_SCORE",
    "MAX_SEARCH_DEPTH",
    "CancelCheck",
    "Difficulty",
    "GreedyEngine",
    "IEngine",
    "MinimaxEngine",
    "SearchLimits",
    "SearchResult",
    "TacticalEngine",
    "create_engine",
    "evaluate",
    "limits_from_settings",
]
