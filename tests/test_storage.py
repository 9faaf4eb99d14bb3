# tests/test_storage.py

from __future__ import annotations

import logging
from pathlib import Path
from unittest.mock import Mock, patch

from sqlalchemy.exc import OperationalError

from taskboard.database import build_engine, create_tables
from taskboard.models import StoreEntry
from taskboard.storage import KeyValueStore


def _broken_sessions() -> Mock:
    return Mock(side_effect=OperationalError("SELECT 1", {}, Exception("disk I/O error")))


def test_put_get_remove(store: KeyValueStore) -> None:
    assert store.get("missing") is None

    store.put("users", [{"id": "u1", "username": "bob"}])
    assert store.get("users") == [{"id": "u1", "username": "bob"}]

    store.put("users", [])
    assert store.get("users") == []

    store.remove("users")
    assert store.get("users") is None

    # removing an absent key is fine
    store.remove("users")


def test_clear_drops_every_key(store: KeyValueStore) -> None:
    store.put("a", 1)
    store.put("b", {"x": True})

    store.clear()

    assert store.get("a") is None
    assert store.get("b") is None


def test_unserializable_value_is_not_saved(store: KeyValueStore, caplog) -> None:
    store.put("k", "old")

    with caplog.at_level(logging.WARNING, logger="taskboard.storage"):
        store.put("k", {1, 2, 3})

    assert store.get("k") == "old"
    assert "Could not serialize value for key=k" in caplog.text


def test_malformed_json_reads_as_absent(store: KeyValueStore, caplog) -> None:
    store._write("currentUser", "{not json")

    with caplog.at_level(logging.WARNING, logger="taskboard.storage"):
        assert store.get("currentUser") is None

    assert "Malformed JSON under key=currentUser" in caplog.text


def test_database_faults_never_raise(store: KeyValueStore, caplog) -> None:
    store.put("k", "value")

    with patch.object(store, "_sessions", _broken_sessions()), caplog.at_level(logging.WARNING):
        store.put("k", "other")
        assert store.get("k") is None
        store.remove("k")
        store.clear()

    assert store.get("k") == "value"
    assert "Could not save key=k" in caplog.text
    assert "Could not read key=k" in caplog.text


def test_entries_carry_aware_timestamps(tmp_path: Path) -> None:
    assert StoreEntry(key="k", value="1").updated_at.tzinfo is not None

    engine = build_engine(f"sqlite:///{tmp_path / 'store.db'}")
    create_tables(engine)
    store = KeyValueStore(engine)
    store.put("users", [{"id": "u1"}])
    store.put("users", [{"id": "u1"}, {"id": "u2"}])

    assert KeyValueStore(engine).get("users") == [{"id": "u1"}, {"id": "u2"}]
