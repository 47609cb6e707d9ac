from apps.storefront.core.search import autocomplete, search_products


def _ids(products):
    return [p.id for p in products]


def test_blank_query_returns_input(products):
    assert _ids(search_products(products, "")) == [1, 2, 3, 4, 5, 6]
    assert _ids(search_products(products, "   ")) == [1, 2, 3, 4, 5, 6]


def test_search_is_case_insensitive_substring(products):
    assert _ids(search_products(products, "BAGREM")) == [1]
    assert _ids(search_products(products, "med")) == [1, 2, 3, 4, 5, 6]


def test_search_covers_seller_name_and_location(products):
    assert _ids(search_products(products, "tuzla")) == [1]
    assert _ids(search_products(products, "Pčelar 3")) == [3]
    assert _ids(search_products(products, "čajniče")) == [3]


def test_search_without_matches(products):
    assert search_products(products, "kadulja") == []


def test_autocomplete_needs_two_characters(products):
    assert _ids(autocomplete(products, "ba")) == [1]
    assert autocomplete(products, "b") == []
    assert autocomplete(products, "  b ") == []
    assert _ids(autocomplete(products, " ba ")) == [1]


def test_autocomplete_limits_in_source_order(products):
    assert _ids(autocomplete(products, "med")) == [1, 2, 3, 4, 5]
    assert _ids(autocomplete(products, "med", limit=2)) == [1, 2]
