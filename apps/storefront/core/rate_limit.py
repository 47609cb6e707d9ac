"""Fixed-window, in-memory rate limiting keyed by client IP.

State lives in the process; a multi-worker deployment would need a shared
store instead.
"""

from __future__ import annotations

import math
import time
from threading import Lock
from typing import Callable, Dict, Tuple

from .. import config
from .errors import RateLimited

MSG_TOO_MANY_REQUESTS = "Previše zahtjeva. Molimo pokušajte ponovo kasnije."


class RateLimiter:
    def __init__(
        self,
        max_requests: int = config.RATE_LIMIT_MAX_REQUESTS,
        window_seconds: float = config.RATE_LIMIT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        # key -> (count, reset_at)
        self._buckets: Dict[str, Tuple[int, float]] = {}
        self._lock = Lock()

    def hit(self, key: str) -> None:
        """Count one request for ``key``; raise :class:`RateLimited` when over."""
        now = self._clock()
        with self._lock:
            for stale in [k for k, (_, reset_at) in self._buckets.items() if reset_at <= now]:
                del self._buckets[stale]

            count, reset_at = self._buckets.get(key, (0, now + self.window_seconds))
            if count >= self.max_requests:
                raise RateLimited(MSG_TOO_MANY_REQUESTS, retry_after=math.ceil(reset_at - now))
            self._buckets[key] = (count + 1, reset_at)

    def reset(self) -> None:
        with self._lock:
            self._buckets.clear()


auth_rate_limiter = RateLimiter()
