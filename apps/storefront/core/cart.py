from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import Field

from .. import config
from .dataset import CamelModel, Product
from .guards import InFlightRegistry
from .storage import KeyValueStorage
from .stores import PersistentStore


class CartLineItem(CamelModel):
    product_id: int
    quantity: int = Field(ge=1)
    weight: str

    @property
    def identity(self) -> Tuple[int, str]:
        return self.product_id, self.weight


class CartStore(PersistentStore):
    """Cart line items keyed by (product id, weight).

    Mutations return ``False`` when they were dropped because the same line
    item is still being written.
    """

    storage_key = config.STORAGE_KEYS["cart"]

    def __init__(
        self,
        storage: KeyValueStorage,
        products: Optional[Iterable[Product]] = None,
        key: Optional[str] = None,
        guard: Optional[InFlightRegistry] = None,
    ):
        self._items: List[CartLineItem] = []
        self._catalog: Optional[Dict[int, Product]] = (
            {product.id: product for product in products} if products is not None else None
        )
        super().__init__(storage, key=key, guard=guard)

    def _empty(self) -> List[CartLineItem]:
        return []

    def _decode(self, data: Any) -> List[CartLineItem]:
        if not isinstance(data, list):
            raise ValueError("cart must be a list")
        # Rows repeating a (productId, weight) pair collapse into one line item.
        merged: Dict[Tuple[int, str], CartLineItem] = {}
        for raw in data:
            item = CartLineItem.model_validate(raw)
            existing = merged.get(item.identity)
            if existing is None:
                merged[item.identity] = item
            else:
                existing.quantity += item.quantity
        return list(merged.values())

    def _encode(self) -> List[dict]:
        return [item.model_dump(by_alias=True) for item in self._items]

    def _apply(self, value: List[CartLineItem]) -> None:
        self._items = value

    def _resolve_weight(self, product_id: int, weight: str) -> str:
        if self._catalog is None:
            if not weight:
                raise ValueError(f"A weight is required for product {product_id}")
            return weight
        product = self._catalog.get(product_id)
        if product is None:
            raise LookupError(f"Unknown product {product_id}")
        weight = weight or product.weight
        if weight != product.weight and weight not in product.available_weights:
            raise ValueError(f"Product {product_id} is not sold as {weight}")
        return weight

    @property
    def items(self) -> List[CartLineItem]:
        return [item.model_copy() for item in self._items]

    def find(self, product_id: int, weight: str) -> Optional[CartLineItem]:
        for item in self._items:
            if item.identity == (product_id, weight):
                return item.model_copy()
        return None

    def count(self) -> int:
        return sum(item.quantity for item in self._items)

    def add(self, product_id: int, quantity: int = 1, weight: str = "") -> bool:
        if quantity < 1:
            raise ValueError("quantity must be at least 1")
        weight = self._resolve_weight(product_id, weight)
        key = (product_id, weight)
        if not self._begin(key):
            return False
        items = [item.model_copy() for item in self._items]
        for item in items:
            if item.identity == key:
                item.quantity += quantity
                break
        else:
            items.append(CartLineItem(product_id=product_id, quantity=quantity, weight=weight))
        self._items = items
        self._commit(key)
        return True

    def remove(self, product_id: int, weight: str) -> bool:
        key = (product_id, weight)
        if not self._begin(key):
            return False
        self._items = [item for item in self._items if item.identity != key]
        self._commit(key)
        return True

    def set_quantity(self, product_id: int, weight: str, quantity: int) -> bool:
        if quantity <= 0:
            return self.remove(product_id, weight)
        key = (product_id, weight)
        if not self._begin(key):
            return False
        self._items = [
            item.model_copy(update={"quantity": quantity}) if item.identity == key else item
            for item in self._items
        ]
        self._commit(key)
        return True

    def clear(self) -> None:
        self._items = []
        self._commit()
