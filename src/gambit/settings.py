"""Application configuration."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from gambit.engine.search import MAX_SEARCH_DEPTH, Difficulty

# Depth range offered to players; engines accept 1..MAX_SEARCH_DEPTH directly.
MIN_COMPUTER_DEPTH = 2

DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"
DEFAULT_STORAGE_PATH = Path.home() / ".gambit" / "storage.json"


@dataclass
class ComputerSettings:
    """Knobs for computer-controlled sides."""

    max_depth: int = 2
    move_delay_ms: int = 800  # "thinking time" before the search starts
    use_alpha_beta: bool = True

    def clamped(self) -> ComputerSettings:
        depth = min(max(int(self.max_depth), MIN_COMPUTER_DEPTH), MAX_SEARCH_DEPTH)
        return replace(
            self,
            max_depth=depth,
            move_delay_ms=max(int(self.move_delay_ms), 0),
        )


@dataclass
class AppSettings:
    """All user-configurable settings."""

    difficulty: Difficulty = Difficulty.MEDIUM
    computer: ComputerSettings = field(default_factory=ComputerSettings)

    # Suggestions
    gemini_api_key: str = ""
    gemini_model: str = DEFAULT_GEMINI_MODEL

    # Persistence
    storage_path: Path = DEFAULT_STORAGE_PATH

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> AppSettings:
        """Build settings from a loose mapping, e.g. a parsed JSON file.

        Unknown keys are ignored; known ones are coerced to their types.
        """
        settings = cls()
        if "difficulty" in data:
            settings.difficulty = Difficulty(str(data["difficulty"]).lower())
        computer = data.get("computer")
        if isinstance(computer, Mapping):
            settings.computer = ComputerSettings(
                max_depth=int(computer.get("max_depth", settings.computer.max_depth)),
                move_delay_ms=int(
                    computer.get("move_delay_ms", settings.computer.move_delay_ms)
                ),
                use_alpha_beta=bool(
                    computer.get("use_alpha_beta", settings.computer.use_alpha_beta)
                ),
            ).clamped()
        if "gemini_api_key" in data:
            settings.gemini_api_key = str(data["gemini_api_key"])
        if "gemini_model" in data:
            settings.gemini_model = str(data["gemini_model"])
        if "storage_path" in data:
            settings.storage_path = Path(data["storage_path"]).expanduser()
        return settings
