"""Tests for the JSON-file record store."""

import json
import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATA_DIR", str(ROOT / "data"))

from app.core.errors import StorageError
from app.db.store import RecordStore, build_stores


def test_read_seeds_missing_directory_and_file(tmp_path):
    directory = tmp_path / "nested" / "db"
    store = RecordStore(directory, "sessions", {})

    assert store.read() == {}
    assert store.path == directory / "sessions.json"
    assert json.loads(store.path.read_text(encoding="utf-8")) == {}


def test_write_replaces_whole_collection(tmp_path):
    store = RecordStore(tmp_path, "timers", [])
    store.write([{"id": "a"}, {"id": "b"}])
    store.write([{"id": "c"}])

    assert store.read() == [{"id": "c"}]
    # Pretty-printed like the original data files
    assert store.path.read_text(encoding="utf-8").startswith("[\n  {")
    # No temp files left behind
    assert [p.name for p in tmp_path.iterdir()] == ["timers.json"]


def test_existing_file_is_not_reseeded(tmp_path):
    (tmp_path / "users.json").write_text('[{"id": "u1"}]', encoding="utf-8")
    store = RecordStore(tmp_path, "users", [])

    assert store.read() == [{"id": "u1"}]


def test_malformed_file_raises_storage_error(tmp_path):
    (tmp_path / "users.json").write_text("{not json", encoding="utf-8")
    store = RecordStore(tmp_path, "users", [])

    with pytest.raises(StorageError):
        store.read()


def test_unserialisable_value_raises_storage_error(tmp_path):
    store = RecordStore(tmp_path, "users", [])

    with pytest.raises(StorageError):
        store.write([object()])
    # The previous contents survive a failed write
    assert store.read() == []


def test_build_stores_seeds_expected_shapes(tmp_path):
    stores = build_stores(tmp_path)

    assert stores["users"].read() == []
    assert stores["timers"].read() == []
    assert stores["sessions"].read() == {}
