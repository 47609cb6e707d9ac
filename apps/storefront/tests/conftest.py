from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from apps.storefront.core.auth import AuthService, UserStore
from apps.storefront.core.dataset import Product, Seller
from apps.storefront.core.rate_limit import auth_rate_limiter
from apps.storefront.main import app
from apps.storefront.routers.auth import get_user_store


def make_product(product_id, name=None, price=15, **overrides):
    seller = overrides.pop("seller", None) or Seller(
        id=product_id,
        name=overrides.pop("seller_name", f"Pčelar {product_id}"),
        location=overrides.pop("location", "Tuzla"),
    )
    fields = dict(
        id=product_id,
        slug=f"med-{product_id}",
        name=name or f"Med {product_id}",
        description="Domaći med",
        price=Decimal(str(price)),
        weight="450g",
        available_weights=["250g", "450g", "850g"],
        category_slug="livadski-med",
        season_slug="ljetni",
        rating=4.0,
        reviews=10,
        stock=5,
        in_stock=True,
        seller=seller,
    )
    fields.update(overrides)
    return Product(**fields)


@pytest.fixture
def products():
    return [
        make_product(1, "Bagremov med", 18, category_slug="bagremov-med", location="Tuzla",
                     badge="najprodavanije", rating=4.8, reviews=120),
        make_product(2, "Livadski med", 15, additives=["polen"], location="Sarajevo", rating=4.5, reviews=80),
        make_product(3, "Šumski med", 22, category_slug="sumski-med", season_slug="jesenji",
                     location="Čajniče", badge="novo-u-ponudi", on_featured_offer=True,
                     available_weights=["450g", "850g"]),
        make_product(4, "Kestenov med", 20, category_slug="kestenov-med", location="Bihać",
                     in_stock=False, stock=0, on_featured_offer=True, rating=4.2),
        make_product(5, "Lipov med", 12, category_slug="lipov-med", location="Zenica",
                     additives=["propolis", "polen"], rating=3.9, reviews=40),
        make_product(6, "Cvjetni med", 10, location="Cazin", season_slug="proljetni",
                     available_weights=["450g"], rating=4.0, reviews=5),
    ]


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    auth_rate_limiter.reset()
    yield
    auth_rate_limiter.reset()


@pytest.fixture
def user_store(tmp_path):
    return UserStore(tmp_path / "users.json")


@pytest.fixture
def auth_service(user_store):
    return AuthService(user_store, secret_key="test-secret")


@pytest.fixture
def client(user_store):
    app.dependency_overrides[get_user_store] = lambda: user_store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_user_store, None)


@pytest.fixture
def product_factory():
    return make_product
