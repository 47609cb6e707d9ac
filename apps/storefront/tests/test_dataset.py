from apps.storefront.core.dataset import (
    catalog_problems,
    create_seller_slug,
    get_all_badges,
    get_all_beekeepers,
    get_all_locations,
    get_beekeeper_by_slug,
    get_product_by_id,
    get_product_by_slug,
    get_products_by_additive,
    get_products_by_category,
    get_products_by_season,
    get_products_by_seller,
    get_products_by_weight,
    load_catalog,
    load_taxonomy,
)


def _ids(products):
    return [p.id for p in products]


def test_shipped_catalog_is_consistent():
    catalog = load_catalog()
    assert len(catalog) == 12
    assert catalog_problems(catalog) == []
    taxonomy = load_taxonomy()
    category_slugs = {c.slug for c in taxonomy.categories}
    additive_slugs = {a.slug for a in taxonomy.additives}
    season_slugs = {s.slug for s in taxonomy.seasons}
    for product in catalog:
        assert product.category_slug in category_slugs
        assert set(product.additives) <= additive_slugs
        assert product.season_slug in season_slugs


def test_lookups(products):
    assert get_product_by_slug("med-3", products).name == "Šumski med"
    assert get_product_by_slug("missing", products) is None
    assert get_product_by_id(5, products).slug == "med-5"
    assert get_product_by_id(99, products) is None
    assert _ids(get_products_by_category("livadski-med", products)) == [2, 6]
    assert _ids(get_products_by_additive("polen", products)) == [2, 5]
    assert _ids(get_products_by_season("jesenji", products)) == [3]
    assert _ids(get_products_by_weight("250g", products)) == [1, 2, 4, 5]
    assert _ids(get_products_by_seller(4, products)) == [4]


def test_locations_and_badges(products):
    assert get_all_locations(products) == ["Bihać", "Cazin", "Sarajevo", "Tuzla", "Zenica", "Čajniče"]
    assert get_all_badges(products) == [
        {"value": "najprodavanije", "label": "Najprodavanije"},
        {"value": "novo-u-ponudi", "label": "Novo u ponudi"},
    ]


def test_seller_slug_folds_bosnian_letters():
    assert create_seller_slug("Dženan Kovačević") == "dzenan-kovacevic"
    assert create_seller_slug("Đorđe  Šarić") == "dorde-saric"


def test_beekeepers_are_unique_by_name(product_factory):
    products = [
        product_factory(1, seller_name="Alen Mešić"),
        product_factory(2, seller_name="Zlatan Hodžić"),
        product_factory(3, seller_name="Alen Mešić"),
    ]
    beekeepers = get_all_beekeepers(products)
    assert [(b.name, b.product_count) for b in beekeepers] == [("Alen Mešić", 2), ("Zlatan Hodžić", 1)]
    assert get_beekeeper_by_slug("zlatan-hodzic", products).product_count == 1
    assert get_beekeeper_by_slug("nobody", products) is None


def test_catalog_problems_reports_inconsistencies(product_factory):
    products = [
        product_factory(1, weight="1000g", available_weights=["450g"]),
        product_factory(1, slug="med-1", seller_name="Alen", location="Tuzla"),
        product_factory(3, seller_name="Alen", location="Mostar", available_weights=["450g", "pola kile"]),
        product_factory(4, in_stock=True, stock=0),
    ]
    problems = catalog_problems(products)
    assert "product 1 (med-1): weight 1000g missing from availableWeights" in problems
    assert "product 1 (med-1): duplicate id" in problems
    assert "product 1 (med-1): duplicate slug" in problems
    assert "product 3 (med-3): unreadable weight 'pola kile'" in problems
    assert "product 3 (med-3): seller Alen listed in Tuzla and Mostar" in problems
    assert "product 4 (med-4): marked in stock with zero stock" in problems
