"""
Request rate limiting.

``RateLimiter`` is the interface the HTTP middleware talks to. The bundled
``SlidingWindowRateLimiter`` keeps its counters in process memory, so it only
protects a single-instance deployment; a multi-instance deployment needs an
implementation backed by a shared cache.
"""

from __future__ import annotations

import logging
import math
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    remaining: int
    retry_after: int  # seconds; 0 when allowed


class RateLimiter(Protocol):
    def hit(self, key: str) -> RateLimitDecision:
        """Record one request for ``key`` and say whether it may proceed."""
        ...

    def reset(self, key: str | None = None) -> None:
        """Forget ``key`` (or everything)."""
        ...


class SlidingWindowRateLimiter:
    """At most ``max_requests`` per ``window_seconds`` per key."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._last_sweep = clock()

    def hit(self, key: str) -> RateLimitDecision:
        now = self._clock()
        window_start = now - self.window_seconds
        self._sweep(now, window_start)
        hits = self._hits.setdefault(key, deque())

        while hits and hits[0] <= window_start:
            hits.popleft()

        if len(hits) >= self.max_requests:
            retry_after = max(1, math.ceil(hits[0] + self.window_seconds - now))
            logger.warning(f"Rate limit exceeded for {key}")
            return RateLimitDecision(allowed=False, remaining=0, retry_after=retry_after)

        hits.append(now)
        return RateLimitDecision(
            allowed=True, remaining=self.max_requests - len(hits), retry_after=0
        )

    def _sweep(self, now: float, window_start: float) -> None:
        """Drop keys with no hits inside the window, at most once per window."""
        if now - self._last_sweep < self.window_seconds:
            return
        self._last_sweep = now
        stale = [key for key, hits in self._hits.items() if not hits or hits[-1] <= window_start]
        for key in stale:
            del self._hits[key]

    def reset(self, key: str | None = None) -> None:
        if key is None:
            self._hits.clear()
        else:
            self._hits.pop(key, None)
