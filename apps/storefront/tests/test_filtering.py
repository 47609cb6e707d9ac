import pytest
from pydantic import ValidationError

from apps.storefront.core.filtering import FilterState, filter_products


def _ids(products):
    return [p.id for p in products]


def test_empty_filter_returns_everything_in_order(products):
    assert _ids(filter_products(products)) == [1, 2, 3, 4, 5, 6]
    assert _ids(filter_products(products, FilterState())) == [1, 2, 3, 4, 5, 6]
    assert FilterState().is_empty()


def test_values_within_one_dimension_match_any(products):
    filters = FilterState(categories=["bagremov-med", "sumski-med"])
    assert _ids(filter_products(products, filters)) == [1, 3]

    assert _ids(filter_products(products, FilterState(additives=["polen"]))) == [2, 5]
    assert _ids(filter_products(products, FilterState(additives=["propolis", "orasi"]))) == [5]
    assert _ids(filter_products(products, FilterState(locations=["Tuzla", "Zenica"]))) == [1, 5]


def test_dimensions_combine_with_and(products):
    filters = FilterState(categories=["livadski-med"], max_price=12)
    assert _ids(filter_products(products, filters)) == [6]


def test_price_bounds_are_inclusive(products):
    filters = FilterState(min_price=12, max_price=18)
    assert _ids(filter_products(products, filters)) == [1, 2, 5]


def test_min_rating(products):
    assert _ids(filter_products(products, FilterState(min_rating=4.5))) == [1, 2]


def test_weight_filter_uses_available_weights(products):
    assert _ids(filter_products(products, FilterState(weights=["250g"]))) == [1, 2, 4, 5]
    assert _ids(filter_products(products, FilterState(weights=["850g"]))) == [1, 2, 3, 4, 5]


def test_badge_filter_skips_products_without_badge(products):
    assert _ids(filter_products(products, FilterState(badges=["najprodavanije"]))) == [1]
    assert _ids(filter_products(products, FilterState(badges=["najprodavanije", "novo-u-ponudi"]))) == [1, 3]


def test_discount_filter_is_tri_state(products):
    # Product 4 carries the featured flag but is out of stock.
    assert _ids(filter_products(products, FilterState(on_discount=True))) == [3]
    assert _ids(filter_products(products, FilterState(on_discount=False))) == [1, 2, 4, 5, 6]


def test_in_stock_filter(products):
    assert _ids(filter_products(products, FilterState(in_stock=True))) == [1, 2, 3, 5, 6]
    assert _ids(filter_products(products, FilterState(in_stock=False))) == [4]


def test_result_is_subset_satisfying_every_predicate(products):
    filters = FilterState(
        seasons=["ljetni"],
        min_price=11,
        max_price=21,
        min_rating=4.0,
        in_stock=True,
    )
    result = filter_products(products, filters)
    assert result
    for product in result:
        assert product in products
        assert product.season_slug == "ljetni"
        assert 11 <= product.price <= 21
        assert product.rating >= 4.0
        assert product.in_stock


def test_filter_state_rejects_out_of_range_values():
    with pytest.raises(ValidationError):
        FilterState(min_price=-1)
    with pytest.raises(ValidationError):
        FilterState(min_rating=6)
