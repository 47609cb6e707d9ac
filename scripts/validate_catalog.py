"""Sanity-check the catalog JSON before shipping it with the API.

Loads the file through the same models the API uses and reports structural
problems the models cannot express on their own.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from pydantic import ValidationError

from apps.storefront import config
from apps.storefront.core.dataset import catalog_problems, load_catalog


def main() -> None:
    parser = argparse.ArgumentParser(description="Validate the honey catalog")
    parser.add_argument("catalog", type=Path, nargs="?", default=config.PRODUCTS_PATH, help="Path to products.json")
    args = parser.parse_args()

    try:
        products = load_catalog(args.catalog)
    except ValidationError as exc:
        raise SystemExit(f"Catalog does not match the product schema:\n{exc}")

    problems = catalog_problems(products)
    for problem in problems:
        print(f"- {problem}")
    if problems:
        raise SystemExit(f"{len(problems)} problem(s) in {args.catalog}")
    print(f"Loaded {len(products)} products. Catalog looks good.")


if __name__ == "__main__":
    main()
