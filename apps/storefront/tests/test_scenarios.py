"""Walk-throughs that combine the catalog, the cart and search."""

from apps.storefront.core.cart import CartStore
from apps.storefront.core.dataset import load_catalog
from apps.storefront.core.filtering import FilterState, filter_products
from apps.storefront.core.pagination import paginate
from apps.storefront.core.search import autocomplete
from apps.storefront.core.sorting import sort_products
from apps.storefront.core.storage import MemoryStorage


def test_cheapest_shelf_sorted_by_price(product_factory):
    prices = [10, 25, 14, 12, 21, 15, 18, 11, 23, 13]
    catalog = [product_factory(i + 1, price=price) for i, price in enumerate(prices)]

    filtered = filter_products(catalog, FilterState(max_price=15))
    page = paginate(sort_products(filtered, "price-desc"), 1, 3)

    assert [p.price for p in page.items] == [15, 14, 13]
    assert page.total == 6
    assert page.total_pages == 2


def test_same_product_in_two_weights():
    cart = CartStore(MemoryStorage(), products=load_catalog())
    cart.add(7, 1, "450g")
    assert cart.count() == 1
    cart.add(7, 1, "850g")
    assert cart.count() == 2
    assert len(cart.items) == 2


def test_autocomplete_for_bagremov_med():
    catalog = load_catalog()
    names = [p.name for p in autocomplete(catalog, "ba")]
    assert "Bagremov med" in names
    assert len(names) <= 5
    assert autocomplete(catalog, "b") == []
