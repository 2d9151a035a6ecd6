"""External move-suggestion collaborators."""

from gambit.suggest.gemini import GeminiClient, Suggestion, extract_suggestion

__all__ = ["GeminiClient", "Suggestion", "extract_suggestion"]
