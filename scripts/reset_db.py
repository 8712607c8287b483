#!/usr/bin/env python3
"""
Replace the Chirpy data file with an empty document (users, chirps and refresh
tokens are all discarded).

Usage:
  python scripts/reset_db.py [--path database.json] [--yes]
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
from chirpy.repositories.json_storage import JSONStore  # noqa: E402


def main() -> None:
    ap = argparse.ArgumentParser(description="Reset the Chirpy data file")
    ap.add_argument("--path", help="Data file (default: DATABASE_PATH or database.json)")
    ap.add_argument("--yes", action="store_true", help="Do not ask for confirmation")
    args = ap.parse_args()

    path = Path(args.path or get_settings().database_path)
    if not args.yes:
        answer = input(f"Delete all data in {path}? [y/N] ").strip().lower()
        if answer not in {"y", "yes"}:
            raise SystemExit("Aborted")

    if path.exists():
        path.unlink()
    store = JSONStore(path)

    print("OK: database reset")
    print(f"  Path: {store.path}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
