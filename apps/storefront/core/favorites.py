from __future__ import annotations

from typing import Any, List, Optional

from .. import config
from .guards import InFlightRegistry
from .storage import KeyValueStorage
from .stores import PersistentStore


class FavoritesStore(PersistentStore):
    """Ordered set of favorite product ids."""

    storage_key = config.STORAGE_KEYS["favorites"]

    def __init__(
        self,
        storage: KeyValueStorage,
        key: Optional[str] = None,
        guard: Optional[InFlightRegistry] = None,
    ):
        self._ids: List[int] = []
        super().__init__(storage, key=key, guard=guard)

    def _empty(self) -> List[int]:
        return []

    def _decode(self, data: Any) -> List[int]:
        if not isinstance(data, list):
            raise ValueError("favorites must be a list")
        ids: List[int] = []
        for value in data:
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"invalid product id {value!r}")
            if value not in ids:
                ids.append(value)
        return ids

    def _encode(self) -> List[int]:
        return list(self._ids)

    def _apply(self, value: List[int]) -> None:
        self._ids = value

    @property
    def ids(self) -> List[int]:
        return list(self._ids)

    def contains(self, product_id: int) -> bool:
        return product_id in self._ids

    __contains__ = contains

    def count(self) -> int:
        return len(self._ids)

    def add(self, product_id: int) -> bool:
        if not self._begin(product_id):
            return False
        if product_id in self._ids:
            self._abort(product_id)
            return True
        self._ids = [*self._ids, product_id]
        self._commit(product_id)
        return True

    def remove(self, product_id: int) -> bool:
        if not self._begin(product_id):
            return False
        self._ids = [pid for pid in self._ids if pid != product_id]
        self._commit(product_id)
        return True

    def toggle(self, product_id: int) -> bool:
        if not self._begin(product_id):
            return False
        if product_id in self._ids:
            self._ids = [pid for pid in self._ids if pid != product_id]
        else:
            self._ids = [*self._ids, product_id]
        self._commit(product_id)
        return True

    def clear(self) -> None:
        self._ids = []
        self._commit()
