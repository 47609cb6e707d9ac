"""Shared plumbing for stores persisted in client-local storage.

A store loads its key synchronously on construction, keeps the decoded value
in memory, writes the whole value back after every mutation and then
broadcasts on the key's channel so sibling stores re-read storage.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Any, Callable, Hashable, List, Optional

from .guards import InFlightRegistry
from .storage import KeyValueStorage

logger = logging.getLogger(__name__)


class StoreState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"


class PersistentStore:
    storage_key: str = ""

    def __init__(
        self,
        storage: KeyValueStorage,
        key: Optional[str] = None,
        guard: Optional[InFlightRegistry] = None,
    ):
        self.storage = storage
        self.key = key or self.storage_key
        self.state = StoreState.UNINITIALIZED
        self._guard = guard or InFlightRegistry()
        self._listeners: List[Callable[["PersistentStore"], None]] = []
        self._channel = storage.channel(self.key)
        self._unsubscribe_channel = self._channel.subscribe(self._on_broadcast)
        self.reload()

    # -- subclass hooks -------------------------------------------------

    def _empty(self) -> Any:
        raise NotImplementedError

    def _decode(self, data: Any) -> Any:
        """Turn parsed JSON into the in-memory value; raise ValueError if malformed."""
        raise NotImplementedError

    def _encode(self) -> Any:
        raise NotImplementedError

    def _apply(self, value: Any) -> None:
        raise NotImplementedError

    # -- lifecycle ------------------------------------------------------

    def reload(self) -> None:
        self.state = StoreState.LOADING
        value = self._empty()
        raw = None
        try:
            raw = self.storage.get(self.key)
        except OSError as exc:
            logger.debug("Could not read %s: %s", self.key, exc)
        if raw:
            try:
                value = self._decode(json.loads(raw))
            except (ValueError, TypeError) as exc:
                logger.debug("Discarding malformed %s data: %s", self.key, exc)
                value = self._empty()
        self._apply(value)
        self.state = StoreState.READY

    def close(self) -> None:
        self._unsubscribe_channel()
        self._listeners.clear()

    def subscribe(self, listener: Callable[["PersistentStore"], None]) -> Callable[[], None]:
        """Call ``listener`` after every change, local or picked up from a sibling."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -- mutation plumbing ----------------------------------------------

    def _begin(self, guard_key: Hashable) -> bool:
        return self._guard.acquire(guard_key)

    def _abort(self, guard_key: Hashable) -> None:
        self._guard.release(guard_key)

    def _commit(self, guard_key: Optional[Hashable] = None) -> None:
        self._persist()
        self._notify()
        release = None
        if guard_key is not None:
            release = lambda: self._guard.release(guard_key)  # noqa: E731
        self._channel.publish(self, on_delivered=release)

    def _persist(self) -> None:
        data = self._encode()
        try:
            if data:
                self.storage.set(self.key, json.dumps(data, ensure_ascii=False))
            else:
                self.storage.remove(self.key)
        except OSError as exc:
            # Memory stays authoritative for this session.
            logger.warning("Could not persist %s: %s", self.key, exc)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def _on_broadcast(self, sender: object) -> None:
        if sender is self:
            return
        self.reload()
        self._notify()
