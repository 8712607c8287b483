"""One-off conversion: data file written by the Go service -> current layout.

The Go service wrote refresh tokens under "RefreshTokens" with "Token",
"ExpiresAt" and "Id" keys. Chirps and users already use the current field names.

Usage:
  python scripts/import_legacy_db.py database.json [--dest converted.json]
"""
from __future__ import annotations

import argparse
import copy
import json
import shutil
import sys
from pathlib import Path

# Make the chirpy package importable when run directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from chirpy.repositories.json_storage import LEGACY_TOKENS_KEY, db_defaults, decode_document  # noqa: E402


def _load_json(path: Path) -> dict:
    if not path.exists():
        raise SystemExit(f"File not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise SystemExit(f"{path} does not contain a JSON object")
    return data


def convert(data: dict) -> dict:
    """Return a copy of ``data`` in the current layout."""
    out = db_defaults(copy.deepcopy(data))
    legacy = out.pop(LEGACY_TOKENS_KEY, None) or {}
    if not isinstance(out["refresh_tokens"], dict) or not isinstance(legacy, dict):
        raise SystemExit("Refresh tokens must be JSON objects")
    for token, meta in legacy.items():
        meta = meta or {}
        out["refresh_tokens"][token] = {
            "token": meta.get("Token") or token,
            "expires_at": meta.get("ExpiresAt"),
            "user_id": meta.get("Id"),
        }
    # round-trip through the decoder so invalid input fails before anything is written
    return decode_document(out).to_dict()


def migrate(src: Path, dest: Path) -> dict:
    converted = convert(_load_json(src))
    if dest == src:
        shutil.copy2(src, src.with_suffix(src.suffix + ".bak"))
    dest.write_text(json.dumps(converted, ensure_ascii=False, indent=2), encoding="utf-8")
    return converted


def main() -> None:
    ap = argparse.ArgumentParser(description="Convert a legacy Chirpy data file")
    ap.add_argument("src", help="Data file written by the Go service")
    ap.add_argument("--dest", help="Output file (default: convert in place, keeping a .bak copy)")
    args = ap.parse_args()

    src = Path(args.src)
    dest = Path(args.dest) if args.dest else src
    converted = migrate(src, dest)
    print(
        f"Converted {len(converted['users'])} users, {len(converted['chirps'])} chirps "
        f"and {len(converted['refresh_tokens'])} refresh tokens into {dest}."
    )


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
