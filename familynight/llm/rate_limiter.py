"""Sliding-window request limiter for the generation path.

Advisory and per process: it resets when the process restarts and is not
shared between workers.
"""

from __future__ import annotations

import time
from collections import deque
from typing import Callable


class RateLimiter:
    """Allow at most ``max_requests`` calls in any ``window_seconds`` span."""

    def __init__(
        self,
        max_requests: int = 10,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._requests: deque[float] = deque()

    def _expire(self, now: float) -> None:
        while self._requests and now - self._requests[0] >= self.window_seconds:
            self._requests.popleft()

    def allow(self) -> bool:
        """Consume a slot if one is free. Returns *False* when over quota."""
        now = self._clock()
        self._expire(now)
        if len(self._requests) >= self.max_requests:
            return False
        self._requests.append(now)
        return True

    def seconds_until_next(self) -> float:
        """Seconds until :meth:`allow` would succeed again (0 if it would now)."""
        now = self._clock()
        self._expire(now)
        if len(self._requests) < self.max_requests:
            return 0.0
        return max(0.0, self.window_seconds - (now - self._requests[0]))

    def reset(self) -> None:
        self._requests.clear()
