"""Multi-predicate product filtering.

Dimensions combine with AND; the values selected inside one dimension combine
with OR. Every predicate is skipped when its dimension is unset, so an empty
``FilterState`` returns the catalog unchanged.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from pydantic import BaseModel, Field

from .dataset import Product
from .pricing import is_featured_offer


class FilterState(BaseModel):
    categories: List[str] = Field(default_factory=list)
    additives: List[str] = Field(default_factory=list)
    seasons: List[str] = Field(default_factory=list)
    weights: List[str] = Field(default_factory=list)
    min_price: Optional[float] = Field(default=None, ge=0)
    max_price: Optional[float] = Field(default=None, ge=0)
    min_rating: Optional[float] = Field(default=None, ge=0.0, le=5.0)
    locations: List[str] = Field(default_factory=list)
    badges: List[str] = Field(default_factory=list)
    # True: featured offers only, False: everything else, None: ignored.
    on_discount: Optional[bool] = None
    in_stock: Optional[bool] = None

    def is_empty(self) -> bool:
        return self == FilterState()


def _matches(product: Product, filters: FilterState) -> bool:
    if filters.categories and product.category_slug not in filters.categories:
        return False
    if filters.additives and not set(filters.additives) & set(product.additives):
        return False
    if filters.seasons and product.season_slug not in filters.seasons:
        return False
    if filters.weights and not set(filters.weights) & set(product.available_weights):
        return False
    if filters.min_price is not None and product.price < filters.min_price:
        return False
    if filters.max_price is not None and product.price > filters.max_price:
        return False
    if filters.min_rating is not None and product.rating < filters.min_rating:
        return False
    if filters.locations and product.seller.location not in filters.locations:
        return False
    if filters.badges and (not product.badge or product.badge not in filters.badges):
        return False
    if filters.on_discount is not None and is_featured_offer(product) != filters.on_discount:
        return False
    if filters.in_stock is not None and product.in_stock != filters.in_stock:
        return False
    return True


def filter_products(products: Iterable[Product], filters: Optional[FilterState] = None) -> List[Product]:
    if filters is None or filters.is_empty():
        return list(products)
    return [product for product in products if _matches(product, filters)]
