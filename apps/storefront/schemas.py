"""Pydantic schemas for the storefront HTTP API.

Field names are camelCase on the wire, matching the catalog JSON and the
browser client.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from .core.auth import User
from .core.dataset import Beekeeper, CamelModel, Money, Product


class ProductCard(CamelModel):
    id: int
    slug: str
    name: str
    description: str = ""
    image: Optional[str] = None
    price: Money
    discounted_price: Money
    currency: str
    weight: str
    category: str = ""
    rating: float = 0.0
    reviews: int = 0
    in_stock: bool = False
    badge: Optional[str] = None
    badge_text: Optional[str] = None
    featured_offer: bool = False
    seller_name: str
    seller_location: str


class ProductPage(CamelModel):
    items: List[ProductCard] = Field(default_factory=list)
    page: int
    page_size: int
    total: int
    total_pages: int
    page_numbers: List[Optional[int]] = Field(default_factory=list)


class WeightPrice(CamelModel):
    weight: str
    price: Money
    discounted_price: Money


class ProductDetail(CamelModel):
    product: Product
    featured_offer: bool
    discounted_price: Money
    prices: List[WeightPrice] = Field(default_factory=list)


class Suggestion(CamelModel):
    id: int
    slug: str
    name: str
    seller_name: str
    price: Money


class BadgeOption(CamelModel):
    value: str
    label: str


class BeekeeperDetail(CamelModel):
    beekeeper: Beekeeper
    products: List[ProductCard] = Field(default_factory=list)


class QuoteItemIn(CamelModel):
    product_id: int
    quantity: int = Field(default=1, ge=1)
    weight: Optional[str] = None


class QuoteRequest(CamelModel):
    items: List[QuoteItemIn] = Field(default_factory=list)


class QuoteLineOut(CamelModel):
    product_id: int
    name: str
    weight: str
    quantity: int
    base_price: Money
    unit_price: Money
    line_total: Money
    featured_offer: bool


class QuoteResponse(CamelModel):
    lines: List[QuoteLineOut] = Field(default_factory=list)
    items_total: Money
    delivery_cost: Money
    total: Money
    currency: str


# Auth bodies keep every field optional so missing values are reported with
# the storefront's own messages rather than a generic 422.
class RegisterRequest(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    phone: Optional[str] = None


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class AuthResponse(CamelModel):
    success: bool = True
    user: User
    token: str


class UserResponse(CamelModel):
    success: bool = True
    user: User
