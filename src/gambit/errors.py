"""Exception taxonomy.

Illegal moves are not exceptions: legality checks return ``bool``.
"""

from __future__ import annotations


class GambitError(Exception):
    """Base class for all errors raised by the package."""


class MalformedPersistedState(GambitError, ValueError):
    """Persisted game data could not be parsed or has the wrong shape."""


class NotationError(GambitError, ValueError):
    """A SAN string matched no legal move, or more than one."""


class SuggestionUnavailable(GambitError):
    """The move-suggestion service failed or returned garbage."""
