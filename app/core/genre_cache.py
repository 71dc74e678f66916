"""
Time-limited cache for the genre list.

The genre list backs the typeahead in the UI and is read far more often than it
changes. One GenreListCache instance lives on app.state and is handed to routes
through the get_genre_cache dependency, so tests can swap in an instance with a
controllable clock.
"""

import time
from collections.abc import Callable
from typing import Any

from fastapi import Request


class GenreListCache:
    """Holds one genre list until the TTL elapses or it is invalidated."""

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._value: list[dict[str, Any]] | None = None
        self._expires_at = 0.0

    def get(self) -> list[dict[str, Any]] | None:
        """Return the cached list, or None when empty or expired."""
        if self._value is None or self._clock() >= self._expires_at:
            return None
        return self._value

    def set(self, value: list[dict[str, Any]]) -> None:
        self._value = value
        self._expires_at = self._clock() + self.ttl_seconds

    def invalidate(self) -> None:
        """Drop the cached list; the next read goes to the database."""
        self._value = None
        self._expires_at = 0.0


def get_genre_cache(request: Request) -> GenreListCache:
    """FastAPI dependency returning the application's genre cache."""
    return request.app.state.genre_cache  # type: ignore[no-any-return]
