#!/usr/bin/env python3
"""
Mark a user as Chirpy Red without going through the payment webhook.

Usage:
  python scripts/upgrade_user.py --email someone@example.com [--path database.json]
  python scripts/upgrade_user.py --id 3
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Make the chirpy package importable when run directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from chirpy.core.config import get_settings  # noqa: E402
from chirpy.repositories.errors import NotFoundError  # noqa: E402
from chirpy.repositories.json_storage import JSONStore  # noqa: E402


def main() -> None:
    ap = argparse.ArgumentParser(description="Upgrade a Chirpy user")
    who = ap.add_mutually_exclusive_group(required=True)
    who.add_argument("--email", help="Email of the user to upgrade (exact match)")
    who.add_argument("--id", type=int, help="Id of the user to upgrade")
    ap.add_argument("--path", help="Data file (default: DATABASE_PATH or database.json)")
    args = ap.parse_args()

    store = JSONStore(args.path or get_settings().database_path)
    try:
        user_id = args.id if args.id is not None else store.get_user_by_email(args.email).id
        user = store.upgrade_user(user_id)
    except NotFoundError:
        raise SystemExit(f"User '{args.email or args.id}' not found")

    print("OK: user upgraded")
    print(f"  Id: {user.id}")
    print(f"  Email: {user.email}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
