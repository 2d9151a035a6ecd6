"""Move suggestions from the Gemini ``generateContent`` HTTP API."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any

import requests

from gambit.errors import SuggestionUnavailable
from gambit.settings import DEFAULT_GEMINI_MODEL

_LOGGER = logging.getLogger(__name__)

API_ROOT = "https://generativelanguage.googleapis.com/v1beta/models"
DEFAULT_TIMEOUT_S = 15.0

_PROMPT = (
    "Based on the following FEN string, what is the best move for the current "
    'player? Please provide your answer in JSON format with two fields: "move" '
    '(in algebraic notation, e.g., "e4", "Nf3") and "explain" (a brief '
    "explanation of why it's a good move).\n\nFEN: {fen}"
)

_FENCED_JSON_RE = re.compile(r"```(?:json)?\s*\n(.*?)\n?```", re.DOTALL)


@dataclass(frozen=True, slots=True)
class Suggestion:
    move: str  # SAN, resolve with GameSession.suggestion_to_move()
    explain: str


def extract_suggestion(text: str) -> Suggestion:
    """Parse the model's answer, either bare JSON or a fenced ```json block."""
    match = _FENCED_JSON_RE.search(text)
    payload = match.group(1) if match else text
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise SuggestionUnavailable(f"Answer is not JSON: {exc}") from exc
    if not isinstance(data, dict) or not isinstance(data.get("move"), str):
        raise SuggestionUnavailable("Answer has no 'move' field")
    move = data["move"].strip()
    if not move:
        raise SuggestionUnavailable("Answer has an empty 'move' field")
    return Suggestion(move=move, explain=str(data.get("explain", "")))


class GeminiClient:
    """Thin client: one POST per suggestion, no retries."""

    __slots__ = ("_api_key", "_model", "_timeout")

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_GEMINI_MODEL,
        *,
        timeout: float = DEFAULT_TIMEOUT_S,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._timeout = timeout

    @property
    def model(self) -> str:
        return self._model

    def suggest(self, fen: str) -> Suggestion | None:
        """Best move for the side to move in *fen*, or ``None`` on any failure."""
        try:
            return extract_suggestion(self._request_text(fen))
        except SuggestionUnavailable as exc:
            _LOGGER.warning("No suggestion from %s: %s", self._model, exc)
            return None

    def _request_text(self, fen: str) -> str:
        if not self._api_key:
            raise SuggestionUnavailable("No API key configured")

        body = {"contents": [{"parts": [{"text": _PROMPT.format(fen=fen)}]}]}
        try:
            response = requests.post(
                f"{API_ROOT}/{self._model}:generateContent",
                params={"key": self._api_key},
                json=body,
                timeout=self._timeout,
            )
            response.raise_for_status()
            data: Any = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise SuggestionUnavailable(str(exc)) from exc

        try:
            return str(data["candidates"][0]["content"]["parts"][0]["text"])
        except (KeyError, IndexError, TypeError) as exc:
            raise SuggestionUnavailable(f"Unexpected response shape: {exc!r}") from exc
