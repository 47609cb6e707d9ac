"""Per-key broadcast channels.

A store publishes on the channel for its storage key after persisting a
change; the other stores subscribed to that key re-read storage. Delivery is
deferred to the next event-loop tick when an asyncio loop is running, so a
publisher never re-enters a subscriber in the middle of its own update.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

Listener = Callable[[object], None]


def next_tick(callback: Callable[[], None]) -> None:
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        callback()
        return
    loop.call_soon(callback)


class Channel:
    def __init__(self, name: str, scheduler: Callable[[Callable[[], None]], None] = next_tick):
        self.name = name
        self._scheduler = scheduler
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, sender: object = None, on_delivered: Optional[Callable[[], None]] = None) -> None:
        """Schedule delivery to every listener; ``on_delivered`` runs afterwards."""

        def deliver() -> None:
            try:
                for listener in list(self._listeners):
                    try:
                        listener(sender)
                    except Exception:
                        logger.exception("Listener on channel %s failed", self.name)
            finally:
                if on_delivered is not None:
                    on_delivered()

        self._scheduler(deliver)

    def __len__(self) -> int:
        return len(self._listeners)
