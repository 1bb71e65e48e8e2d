"""Tests for the Store implementations."""

import pytest

from defter.database.base import StoreError
from defter.database.factories import create_json_store, create_sqlite_store, resolve_database_path
from defter.database.json_store import JSONFileStore


@pytest.fixture(params=["sqlite", "json"])
def store(request, tmp_path):
    if request.param == "sqlite":
        store = create_sqlite_store(str(tmp_path / "defter.db"))
    else:
        store = create_json_store(str(tmp_path / "data"))
    store.connect()
    yield store
    store.disconnect()


def test_get_missing_returns_default(store):
    assert store.get("transactions") is None
    assert store.get("transactions", []) == []


def test_set_and_get(store):
    store.set("db-_a-products", [{"name": "Gübre", "price": 5.5}])
    store.set("current-database-id", "_a")

    assert store.get("db-_a-products") == [{"name": "Gübre", "price": 5.5}]
    assert store.get("current-database-id") == "_a"


def test_overwrite_and_tombstone(store):
    store.set("customers", [{"name": "Ahmet"}])
    store.set("customers", [{"name": "Ayşe"}])
    assert store.get("customers") == [{"name": "Ayşe"}]

    store.set("customers", None)
    assert store.get("customers", []) == []
    assert "customers" not in store.keys()


def test_keys(store):
    store.set("b", [1])
    store.set("a", [2])
    assert store.keys() == ["a", "b"]


def test_values_persist_across_instances(tmp_path):
    first = create_sqlite_store(str(tmp_path / "defter.db"))
    first.set("database-metadata", [{"id": "_a", "name": "Ana Defter"}])
    first.disconnect()

    second = create_sqlite_store(str(tmp_path / "defter.db"))
    assert second.get("database-metadata") == [{"id": "_a", "name": "Ana Defter"}]
    second.disconnect()


def test_json_store_uses_one_file_per_key(tmp_path):
    store = create_json_store(str(tmp_path))
    store.set("db-_a-transactions", [])

    assert (tmp_path / "db-_a-transactions.json").exists()


def test_json_store_corrupt_file_raises(tmp_path):
    (tmp_path / "products.json").write_text("{not json", encoding="utf-8")
    store = JSONFileStore(tmp_path)

    with pytest.raises(StoreError):
        store.get("products")


def test_sqlite_store_rejects_unserializable_value(tmp_path):
    store = create_sqlite_store(str(tmp_path / "defter.db"))
    with pytest.raises(StoreError):
        store.set("products", [object()])
    # The session is usable after the failed write
    store.set("products", [])
    assert store.get("products") == []
    store.disconnect()


def test_resolve_database_path_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("DEFTER_DB_PATH", str(tmp_path / "env.db"))
    assert resolve_database_path() == tmp_path / "env.db"
    assert resolve_database_path(str(tmp_path / "explicit.db")) == tmp_path / "explicit.db"


def test_default_path_under_defter_home(monkeypatch, tmp_path):
    monkeypatch.delenv("DEFTER_DB_PATH", raising=False)
    monkeypatch.setenv("DEFTER_HOME", str(tmp_path))
    assert resolve_database_path() == tmp_path / "defter.db"
