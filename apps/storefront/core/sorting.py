"""Catalog ordering.

All keys except ``default`` fall back to the product id so the result is fully
determined by the input set, which also makes sorting idempotent.
"""

from __future__ import annotations

import unicodedata
from typing import Callable, Dict, Iterable, List, Literal, Tuple

from .dataset import Product

SortKey = Literal[
    "default",
    "price-asc",
    "price-desc",
    "rating-desc",
    "reviews-desc",
    "name-asc",
    "seller-asc",
    "location-asc",
]

# Letters NFKD does not decompose.
_EXTRA_FOLDS = str.maketrans({"đ": "d", "Đ": "D", "ł": "l", "Ł": "L", "ø": "o", "Ø": "O"})


def collation_key(text: str) -> Tuple[str, str]:
    """Diacritic-insensitive key so that "Čajniče" sorts next to "Cazin"."""
    folded = unicodedata.normalize("NFKD", text.translate(_EXTRA_FOLDS))
    stripped = "".join(ch for ch in folded if not unicodedata.combining(ch))
    return stripped.casefold(), text


_SORT_KEYS: Dict[str, Callable[[Product], tuple]] = {
    "price-asc": lambda p: (p.price, p.id),
    "price-desc": lambda p: (-p.price, p.id),
    "rating-desc": lambda p: (-p.rating, p.id),
    "reviews-desc": lambda p: (-p.reviews, p.id),
    "name-asc": lambda p: (collation_key(p.name), p.id),
    "seller-asc": lambda p: (collation_key(p.seller.name), p.id),
    "location-asc": lambda p: (collation_key(p.seller.location), p.id),
}

SORT_OPTIONS: List[str] = ["default", *_SORT_KEYS]


def sort_products(products: Iterable[Product], sort_by: str = "default") -> List[Product]:
    ordered = list(products)
    if sort_by == "default":
        return ordered
    key = _SORT_KEYS.get(sort_by)
    if key is None:
        raise ValueError(f"Unknown sort key: {sort_by!r}")
    return sorted(ordered, key=key)
