"""Time-limited snapshot of discovered tools."""

from __future__ import annotations

import logging
import time
from typing import Callable

from mcpbridge.tools.types import Tool

logger = logging.getLogger(__name__)

DEFAULT_TTL = 5 * 60.0


class ToolCache:
    """
    Single-slot cache of the last non-empty discovery result.

    Entries are immutable snapshots, so concurrent writers need no locking:
    the last write wins.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        self.ttl = ttl
        self._clock = clock
        self._tools: tuple[Tool, ...] = ()
        self._last_updated: float | None = None

    @property
    def tools(self) -> tuple[Tool, ...]:
        """Cached snapshot regardless of freshness."""
        return self._tools

    @property
    def last_updated(self) -> float | None:
        """Clock reading of the last store, or None if empty."""
        return self._last_updated

    @property
    def age(self) -> float | None:
        """Seconds since the last store."""
        if self._last_updated is None:
            return None
        return self._clock() - self._last_updated

    def is_fresh(self) -> bool:
        """True when the snapshot is non-empty and younger than the TTL."""
        age = self.age
        return bool(self._tools) and age is not None and age < self.ttl

    def get(self) -> list[Tool] | None:
        """Return the snapshot if fresh, else None."""
        if not self.is_fresh():
            return None
        return list(self._tools)

    def store(self, tools: list[Tool]) -> None:
        """Replace the snapshot and stamp it with the current time."""
        self._tools = tuple(tools)
        self._last_updated = self._clock()
        logger.debug(f"Cached {len(self._tools)} tools")

    def clear(self) -> None:
        """Drop the snapshot."""
        self._tools = ()
        self._last_updated = None

    def __len__(self) -> int:
        return len(self._tools)
