from __future__ import annotations

import time
from typing import Callable, Dict, Hashable

from .. import config


class InFlightRegistry:
    """Tracks keys whose mutation has not settled yet.

    ``acquire`` fails while a key is held. Holders release on completion; the
    cooldown only frees keys whose holder never came back.
    """

    def __init__(
        self,
        cooldown: float = config.STORE_GUARD_COOLDOWN_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.cooldown = cooldown
        self._clock = clock
        self._pending: Dict[Hashable, float] = {}

    def _expire(self) -> None:
        now = self._clock()
        stale = [key for key, started in self._pending.items() if now - started >= self.cooldown]
        for key in stale:
            del self._pending[key]

    def acquire(self, key: Hashable) -> bool:
        self._expire()
        if key in self._pending:
            return False
        self._pending[key] = self._clock()
        return True

    def release(self, key: Hashable) -> None:
        self._pending.pop(key, None)

    def is_pending(self, key: Hashable) -> bool:
        self._expire()
        return key in self._pending
