"""Weight-based pricing, the featured-offer discount and cart quotes."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Mapping, Union

from .. import config
from .dataset import Product

Number = Union[Decimal, int, float]

_WEIGHT_PATTERN = re.compile(r"^\s*(\d+(?:[.,]\d+)?)\s*(kg|g)\s*$", re.IGNORECASE)
_WHOLE_UNIT = Decimal("1")


def _round_price(value: Decimal) -> Decimal:
    # The storefront displays whole KM amounts, halves round up.
    return value.quantize(_WHOLE_UNIT, rounding=ROUND_HALF_UP)


def parse_weight(weight: str) -> Decimal:
    """Return the weight in grams for strings such as ``"450g"`` or ``"1kg"``."""
    match = _WEIGHT_PATTERN.match(weight or "")
    if not match:
        raise ValueError(f"Unrecognised weight: {weight!r}")
    amount = Decimal(match.group(1).replace(",", "."))
    if match.group(2).lower() == "kg":
        amount *= 1000
    if amount <= 0:
        raise ValueError(f"Weight must be positive: {weight!r}")
    return amount


def price_for_weight(product: Product, weight: str) -> Decimal:
    """Price of ``product`` packed as ``weight``.

    ``product.price`` is denominated for ``product.weight``; any other weight
    is priced by linear scaling, rounded to whole currency units.
    """
    if not weight or weight == product.weight:
        return product.price
    base = parse_weight(product.weight)
    target = parse_weight(weight)
    return _round_price(product.price / base * target)


def is_featured_offer(product: Product) -> bool:
    return product.on_featured_offer and product.in_stock


def discounted_price(base_price: Number, is_featured: bool) -> Decimal:
    base = Decimal(str(base_price))
    if not is_featured:
        return base
    return _round_price(base * (1 - Decimal(str(config.FEATURED_DISCOUNT_RATE))))


def delivery_cost(items_total: Number) -> Decimal:
    total = Decimal(str(items_total))
    if total <= 0 or total > config.FREE_DELIVERY_THRESHOLD:
        return Decimal(0)
    return Decimal(config.DELIVERY_COST)


@dataclass
class QuoteLine:
    product: Product
    weight: str
    quantity: int
    base_price: Decimal
    unit_price: Decimal
    featured: bool

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass
class CartQuote:
    lines: List[QuoteLine] = field(default_factory=list)

    @property
    def items_total(self) -> Decimal:
        return sum((line.line_total for line in self.lines), Decimal(0))

    @property
    def delivery_cost(self) -> Decimal:
        return delivery_cost(self.items_total)

    @property
    def total(self) -> Decimal:
        return self.items_total + self.delivery_cost


def quote_cart(lines: Iterable[Mapping], catalog: Iterable[Product]) -> CartQuote:
    """Price cart line items (``productId``/``quantity``/``weight`` mappings).

    Raises ``LookupError`` for unknown products and ``ValueError`` for a weight
    the product is not sold in or a non-positive quantity.
    """
    by_id = {product.id: product for product in catalog}
    quote = CartQuote()
    for line in lines:
        product_id = line["productId"]
        product = by_id.get(product_id)
        if product is None:
            raise LookupError(f"Unknown product {product_id}")
        weight = line.get("weight") or product.weight
        if weight != product.weight and weight not in product.available_weights:
            raise ValueError(f"Product {product_id} is not sold as {weight}")
        quantity = int(line.get("quantity", 1))
        if quantity < 1:
            raise ValueError("Quantity must be at least 1")
        base = price_for_weight(product, weight)
        featured = is_featured_offer(product)
        quote.lines.append(
            QuoteLine(
                product=product,
                weight=weight,
                quantity=quantity,
                base_price=base,
                unit_price=discounted_price(base, featured),
                featured=featured,
            )
        )
    return quote
