"""Catalog endpoints over the in-memory honey dataset.

The listing endpoint runs the fixed pipeline filter -> search -> sort ->
paginate, and falls back to the first page when the requested one is past the
end of the result set.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query

from .. import config
from ..core.dataset import (
    Additive,
    Beekeeper,
    Category,
    Product,
    Season,
    get_all_badges,
    get_all_beekeepers,
    get_all_locations,
    get_beekeeper_by_slug,
    get_product_by_slug,
    get_products_by_seller_name,
    load_catalog,
    load_taxonomy,
)
from ..core.errors import NotFound, ValidationFailed
from ..core.filtering import FilterState, filter_products
from ..core.pagination import page_numbers, paginate
from ..core.pricing import discounted_price, is_featured_offer, price_for_weight, quote_cart
from ..core.search import autocomplete, search_products
from ..core.sorting import SortKey, sort_products
from ..schemas import (
    BadgeOption,
    BeekeeperDetail,
    ProductCard,
    ProductDetail,
    ProductPage,
    QuoteLineOut,
    QuoteRequest,
    QuoteResponse,
    Suggestion,
    WeightPrice,
)

router = APIRouter()


def _product_to_card(product: Product) -> ProductCard:
    featured = is_featured_offer(product)
    return ProductCard(
        id=product.id,
        slug=product.slug,
        name=product.name,
        description=product.description,
        image=product.image,
        price=product.price,
        discounted_price=discounted_price(product.price, featured),
        currency=product.currency,
        weight=product.weight,
        category=product.category,
        rating=product.rating,
        reviews=product.reviews,
        in_stock=product.in_stock,
        badge=product.badge,
        badge_text=product.badge_text,
        featured_offer=featured,
        seller_name=product.seller.name,
        seller_location=product.seller.location,
    )


@router.get("/products", response_model=ProductPage)
def list_products(
    category: List[str] = Query(default=[]),
    additive: List[str] = Query(default=[]),
    season: List[str] = Query(default=[]),
    weight: List[str] = Query(default=[]),
    location: List[str] = Query(default=[]),
    badge: List[str] = Query(default=[]),
    min_price: Optional[float] = Query(default=None, ge=0),
    max_price: Optional[float] = Query(default=None, ge=0),
    min_rating: Optional[float] = Query(default=None, ge=0, le=5),
    on_discount: Optional[bool] = None,
    in_stock: Optional[bool] = None,
    q: Optional[str] = None,
    sort: SortKey = "default",
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=config.PRODUCTS_PER_PAGE, ge=1, le=config.MAX_PAGE_SIZE),
) -> ProductPage:
    filters = FilterState(
        categories=category,
        additives=additive,
        seasons=season,
        weights=weight,
        min_price=min_price,
        max_price=max_price,
        min_rating=min_rating,
        locations=location,
        badges=badge,
        on_discount=on_discount,
        in_stock=in_stock,
    )
    products = filter_products(load_catalog(), filters)
    products = search_products(products, q or "")
    products = sort_products(products, sort)

    result = paginate(products, page, page_size)
    if page > result.total_pages:
        result = paginate(products, 1, page_size)

    return ProductPage(
        items=[_product_to_card(product) for product in result.items],
        page=result.page,
        page_size=result.page_size,
        total=result.total,
        total_pages=result.total_pages,
        page_numbers=page_numbers(result.page, result.total_pages),
    )


@router.get("/products/{slug}", response_model=ProductDetail)
def product_detail(slug: str) -> ProductDetail:
    product = get_product_by_slug(slug)
    if product is None:
        raise NotFound("Proizvod nije pronađen")
    featured = is_featured_offer(product)
    weights = product.available_weights or [product.weight]
    prices = []
    for weight in weights:
        price = price_for_weight(product, weight)
        prices.append(
            WeightPrice(weight=weight, price=price, discounted_price=discounted_price(price, featured))
        )
    return ProductDetail(
        product=product,
        featured_offer=featured,
        discounted_price=discounted_price(product.price, featured),
        prices=prices,
    )


@router.get("/suggest", response_model=List[Suggestion])
def suggest(q: str = "") -> List[Suggestion]:
    return [
        Suggestion(
            id=product.id,
            slug=product.slug,
            name=product.name,
            seller_name=product.seller.name,
            price=product.price,
        )
        for product in autocomplete(load_catalog(), q)
    ]


@router.get("/categories", response_model=List[Category])
def categories() -> List[Category]:
    return load_taxonomy().categories


@router.get("/additives", response_model=List[Additive])
def additives() -> List[Additive]:
    return load_taxonomy().additives


@router.get("/seasons", response_model=List[Season])
def seasons() -> List[Season]:
    return load_taxonomy().seasons


@router.get("/locations", response_model=List[str])
def locations() -> List[str]:
    return get_all_locations()


@router.get("/badges", response_model=List[BadgeOption])
def badges() -> List[BadgeOption]:
    return [BadgeOption(**option) for option in get_all_badges()]


@router.get("/beekeepers", response_model=List[Beekeeper])
def beekeepers() -> List[Beekeeper]:
    return get_all_beekeepers()


@router.get("/beekeepers/{slug}", response_model=BeekeeperDetail)
def beekeeper_detail(slug: str) -> BeekeeperDetail:
    beekeeper = get_beekeeper_by_slug(slug)
    if beekeeper is None:
        raise NotFound("Pčelar nije pronađen")
    products = get_products_by_seller_name(beekeeper.name)
    return BeekeeperDetail(beekeeper=beekeeper, products=[_product_to_card(p) for p in products])


@router.post("/cart/quote", response_model=QuoteResponse)
def cart_quote(request: QuoteRequest) -> QuoteResponse:
    lines = [item.model_dump(by_alias=True) for item in request.items]
    try:
        quote = quote_cart(lines, load_catalog())
    except (LookupError, ValueError) as exc:
        raise ValidationFailed(str(exc)) from exc
    return QuoteResponse(
        lines=[
            QuoteLineOut(
                product_id=line.product.id,
                name=line.product.name,
                weight=line.weight,
                quantity=line.quantity,
                base_price=line.base_price,
                unit_price=line.unit_price,
                line_total=line.line_total,
                featured_offer=line.featured,
            )
            for line in quote.lines
        ],
        items_total=quote.items_total,
        delivery_cost=quote.delivery_cost,
        total=quote.total,
        currency=config.CURRENCY,
    )
