from __future__ import annotations

from typing import Iterable, List

from .. import config
from .dataset import Product


def _haystack(product: Product) -> List[str]:
    return [
        product.name.lower(),
        product.description.lower(),
        product.seller.name.lower(),
        product.seller.location.lower(),
    ]


def _match(product: Product, needle: str) -> bool:
    return any(needle in field for field in _haystack(product))


def search_products(products: Iterable[Product], query: str) -> List[Product]:
    """Substring search over name, description, seller name and location."""
    if not query or not query.strip():
        return list(products)
    needle = query.lower()
    return [product for product in products if _match(product, needle)]


def autocomplete(
    products: Iterable[Product],
    query: str,
    limit: int = config.AUTOCOMPLETE_LIMIT,
) -> List[Product]:
    """First ``limit`` matches in source order; short queries suggest nothing."""
    needle = (query or "").strip().lower()
    if len(needle) < config.AUTOCOMPLETE_MIN_CHARS:
        return []
    suggestions: List[Product] = []
    for product in products:
        if _match(product, needle):
            suggestions.append(product)
            if len(suggestions) == limit:
                break
    return suggestions
