from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
if str(ROOT / "scripts") not in sys.path:
    sys.path.insert(0, str(ROOT / "scripts"))

import import_legacy_db  # noqa: E402
from chirpy.repositories.errors import SerializationError  # noqa: E402
from chirpy.repositories.json_storage import JSONStore  # noqa: E402

LEGACY = {
    "chirps": {"1": {"id": 1, "body": "hi", "author_id": 1}},
    "users": {"1": {"id": 1, "email": "a@example.com", "password": "$2a$04$abc", "is_chirpy_red": False}},
    "RefreshTokens": {
        "deadbeef": {"Token": "deadbeef", "ExpiresAt": "2099-01-01T00:00:00.123456789Z", "Id": 1},
    },
}


def test_migrate_in_place_keeps_backup(tmp_path):
    src = tmp_path / "database.json"
    src.write_text(json.dumps(LEGACY), encoding="utf-8")

    import_legacy_db.migrate(src, src)

    assert json.loads((tmp_path / "database.json.bak").read_text(encoding="utf-8")) == LEGACY
    data = json.loads(src.read_text(encoding="utf-8"))
    assert "RefreshTokens" not in data
    assert data["refresh_tokens"]["deadbeef"]["user_id"] == 1
    assert JSONStore(src).validate_refresh_token("deadbeef") == 1


def test_migrate_to_other_file(tmp_path):
    src = tmp_path / "old.json"
    dest = tmp_path / "new.json"
    src.write_text(json.dumps(LEGACY), encoding="utf-8")
    import_legacy_db.migrate(src, dest)
    assert json.loads(src.read_text(encoding="utf-8")) == LEGACY
    assert JSONStore(dest).get_chirp_by_id(1).body == "hi"


def test_invalid_legacy_token_is_rejected():
    bad = dict(LEGACY, RefreshTokens={"x": {"Token": "x", "ExpiresAt": "yesterday", "Id": 1}})
    with pytest.raises(SerializationError):
        import_legacy_db.convert(bad)


def test_cli_reports_bad_input_without_traceback(tmp_path):
    src = tmp_path / "database.json"
    src.write_text(
        json.dumps(dict(LEGACY, RefreshTokens={"x": {"Token": "x", "ExpiresAt": "yesterday", "Id": 1}})),
        encoding="utf-8",
    )
    result = subprocess.run(
        [sys.executable, str(ROOT / "scripts" / "import_legacy_db.py"), str(src)],
        capture_output=True,
        text=True,
    )
    assert result.returncode == 1
    assert result.stderr.startswith("Error:")
    assert "Traceback" not in result.stderr
    assert not (tmp_path / "database.json.bak").exists()
