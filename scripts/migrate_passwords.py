"""Hash any plaintext passwords left in the users file.

Older deployments stored some credentials in clear text. Those rows cannot log
in until this has been run once; running it again changes nothing.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from apps.storefront import config
from apps.storefront.core.auth import UserStore, migrate_plaintext_passwords


def main() -> None:
    parser = argparse.ArgumentParser(description="Hash plaintext passwords in the users file")
    parser.add_argument(
        "users_file",
        type=Path,
        nargs="?",
        default=config.USERS_FILE,
        help="Path to users.json (defaults to USERS_FILE)",
    )
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO)

    if not args.users_file.exists():
        raise SystemExit(f"No users file at {args.users_file}")
    migrated = migrate_plaintext_passwords(UserStore(args.users_file))
    print(f"Migrated {migrated} password(s) in {args.users_file}")


if __name__ == "__main__":
    main()
