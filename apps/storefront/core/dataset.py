"""Utility helpers for loading the honey catalog into memory.

The catalog is a static JSON document produced outside the application. It is
read once, cached, and only ever queried.
"""

from __future__ import annotations

import json
import re
from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from .. import config

# Prices are decimals internally and plain numbers on the wire.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

BADGE_LABELS = {
    "najprodavanije": "Najprodavanije",
    "novo-u-ponudi": "Novo u ponudi",
}

_SLUG_FOLDS = str.maketrans({"ć": "c", "č": "c", "š": "s", "đ": "d", "ž": "z"})


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Seller(CamelModel):
    id: int
    name: str
    location: str
    avatar: Optional[str] = None


class Product(CamelModel):
    id: int
    slug: str
    name: str
    description: str = ""
    long_description: str = ""
    price: Money
    currency: str = config.CURRENCY
    weight: str
    available_weights: List[str] = Field(default_factory=list)
    image: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    category: str = ""
    category_slug: str = ""
    additives: List[str] = Field(default_factory=list)
    season: str = ""
    season_slug: str = ""
    rating: float = Field(default=0.0, ge=0.0, le=5.0)
    reviews: int = Field(default=0, ge=0)
    stock: int = Field(default=0, ge=0)
    in_stock: bool = False
    badge: Optional[str] = None
    badge_text: Optional[str] = None
    on_featured_offer: bool = False
    seller: Seller


class Category(CamelModel):
    id: int
    name: str
    slug: str
    description: str = ""
    image: Optional[str] = None


class Additive(CamelModel):
    id: int
    name: str
    slug: str
    description: str = ""
    image: Optional[str] = None


class Season(CamelModel):
    id: int
    name: str
    slug: str
    description: str = ""
    period: str = ""


class Taxonomy(CamelModel):
    categories: List[Category] = Field(default_factory=list)
    additives: List[Additive] = Field(default_factory=list)
    seasons: List[Season] = Field(default_factory=list)


class Beekeeper(CamelModel):
    id: int
    name: str
    slug: str
    location: str
    avatar: Optional[str] = None
    product_count: int = 0


@lru_cache(maxsize=4)
def load_catalog(path: Optional[Path] = None) -> List[Product]:
    data = json.loads((path or config.PRODUCTS_PATH).read_text(encoding="utf-8"))
    items = data["products"] if isinstance(data, dict) else data
    return [Product.model_validate(item) for item in items]


@lru_cache(maxsize=4)
def load_taxonomy(path: Optional[Path] = None) -> Taxonomy:
    data = json.loads((path or config.CATEGORIES_PATH).read_text(encoding="utf-8"))
    return Taxonomy.model_validate(data)


def _source(products: Optional[Iterable[Product]]) -> List[Product]:
    return load_catalog() if products is None else list(products)


def get_all_products(products: Optional[Iterable[Product]] = None) -> List[Product]:
    return _source(products)


def get_product_by_slug(slug: str, products: Optional[Iterable[Product]] = None) -> Optional[Product]:
    return next((p for p in _source(products) if p.slug == slug), None)


def get_product_by_id(product_id: int, products: Optional[Iterable[Product]] = None) -> Optional[Product]:
    return next((p for p in _source(products) if p.id == product_id), None)


def get_products_by_category(category_slug: str, products: Optional[Iterable[Product]] = None) -> List[Product]:
    return [p for p in _source(products) if p.category_slug == category_slug]


def get_products_by_additive(additive_slug: str, products: Optional[Iterable[Product]] = None) -> List[Product]:
    return [p for p in _source(products) if additive_slug in p.additives]


def get_products_by_season(season_slug: str, products: Optional[Iterable[Product]] = None) -> List[Product]:
    return [p for p in _source(products) if p.season_slug == season_slug]


def get_products_by_weight(weight: str, products: Optional[Iterable[Product]] = None) -> List[Product]:
    return [p for p in _source(products) if weight in p.available_weights]


def get_products_by_seller(seller_id: int, products: Optional[Iterable[Product]] = None) -> List[Product]:
    return [p for p in _source(products) if p.seller.id == seller_id]


def get_products_by_seller_name(name: str, products: Optional[Iterable[Product]] = None) -> List[Product]:
    # The same beekeeper can appear under several seller ids; the name is the stable key.
    return [p for p in _source(products) if p.seller.name == name]


def get_all_locations(products: Optional[Iterable[Product]] = None) -> List[str]:
    return sorted({p.seller.location for p in _source(products)})


def get_all_badges(products: Optional[Iterable[Product]] = None) -> List[dict]:
    badges = {p.badge for p in _source(products) if p.badge}
    options = [{"value": badge, "label": BADGE_LABELS.get(badge, badge)} for badge in badges]
    return sorted(options, key=lambda option: option["label"])


def create_seller_slug(name: str) -> str:
    return re.sub(r"\s+", "-", name.lower()).translate(_SLUG_FOLDS)


def get_all_beekeepers(products: Optional[Iterable[Product]] = None) -> List[Beekeeper]:
    """Derive the beekeeper directory from product sellers, unique by name."""
    beekeepers = {}
    for product in _source(products):
        seller = product.seller
        entry = beekeepers.get(seller.name)
        if entry is None:
            beekeepers[seller.name] = Beekeeper(
                id=seller.id,
                name=seller.name,
                slug=create_seller_slug(seller.name),
                location=seller.location,
                avatar=seller.avatar,
                product_count=1,
            )
        else:
            entry.product_count += 1
    return sorted(beekeepers.values(), key=lambda b: b.name)


def get_beekeeper_by_slug(slug: str, products: Optional[Iterable[Product]] = None) -> Optional[Beekeeper]:
    return next((b for b in get_all_beekeepers(products) if b.slug == slug), None)


def catalog_problems(products: Iterable[Product]) -> List[str]:
    """Cross-record checks: unique ids and slugs, sellable weights, one location per seller."""
    from .pricing import parse_weight

    problems: List[str] = []
    seen_ids, seen_slugs = set(), set()
    seller_locations = {}
    for product in products:
        label = f"product {product.id} ({product.slug})"
        if product.id in seen_ids:
            problems.append(f"{label}: duplicate id")
        if product.slug in seen_slugs:
            problems.append(f"{label}: duplicate slug")
        seen_ids.add(product.id)
        seen_slugs.add(product.slug)

        if product.available_weights and product.weight not in product.available_weights:
            problems.append(f"{label}: weight {product.weight} missing from availableWeights")
        for weight in {product.weight, *product.available_weights}:
            try:
                parse_weight(weight)
            except ValueError:
                problems.append(f"{label}: unreadable weight {weight!r}")
        if product.in_stock and product.stock == 0:
            problems.append(f"{label}: marked in stock with zero stock")

        location = seller_locations.setdefault(product.seller.name, product.seller.location)
        if location != product.seller.location:
            problems.append(f"{label}: seller {product.seller.name} listed in {location} and {product.seller.location}")
    return problems
