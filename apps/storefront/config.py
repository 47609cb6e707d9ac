"""Centralized configuration for the storefront API."""

from __future__ import annotations

import os
from pathlib import Path

_PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Data files
DATA_DIR = Path(os.environ.get("STOREFRONT_DATA_DIR", str(_PROJECT_ROOT / "data")))
PRODUCTS_PATH = DATA_DIR / "products.json"
CATEGORIES_PATH = DATA_DIR / "categories.json"
USERS_FILE = Path(os.environ.get("STOREFRONT_USERS_FILE", str(DATA_DIR / "users.json")))

# Auth tokens
SECRET_KEY = os.environ.get("SECRET_KEY") or os.environ.get("JWT_SECRET", "dev-secret-key-change-me")
JWT_ALGORITHM = os.environ.get("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.environ.get("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7)))

# Auth endpoint rate limiting (fixed window per client IP)
RATE_LIMIT_WINDOW_SECONDS = int(os.environ.get("RATE_LIMIT_WINDOW_SECONDS", str(15 * 60)))
RATE_LIMIT_MAX_REQUESTS = int(os.environ.get("RATE_LIMIT_MAX_REQUESTS", "5"))

# Catalog listing: 3 rows x 3 columns on desktop
PRODUCTS_PER_PAGE = int(os.environ.get("PRODUCTS_PER_PAGE", "9"))
MAX_PAGE_SIZE = int(os.environ.get("MAX_PAGE_SIZE", "100"))
AUTOCOMPLETE_MIN_CHARS = 2
AUTOCOMPLETE_LIMIT = 5

# Pricing
CURRENCY = "KM"
FEATURED_DISCOUNT_RATE = 0.15
FREE_DELIVERY_THRESHOLD = 50
DELIVERY_COST = 5

# Client stores
STORE_GUARD_COOLDOWN_SECONDS = float(os.environ.get("STORE_GUARD_COOLDOWN_SECONDS", "0.3"))
STORAGE_KEYS = {
    "cart": "kosnica_cart",
    "favorites": "kosnica_favorites",
    "auth_token": "kosnica_auth_token",
    "user": "kosnica_user",
}

# HTTP
CORS_ALLOW_ORIGINS = os.environ.get(
    "CORS_ALLOW_ORIGINS",
    "http://localhost:3000,http://127.0.0.1:3000",
)
LOG_LEVEL = os.environ.get("STOREFRONT_LOG_LEVEL", "INFO").upper()
