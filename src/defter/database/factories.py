"""Store factory functions."""

import os
from pathlib import Path
from typing import Optional

from defter.config import get_app_paths
from defter.database.json_store import JSONFileStore
from defter.database.sqlalchemy_store import SQLAlchemyStore


def resolve_database_path(database_path: Optional[str] = None) -> Path:
    """Resolve the store location.

    Args:
        database_path: Explicit path. If None, checks the DEFTER_DB_PATH
            environment variable, then defaults to <app home>/defter.db
    """
    if database_path is None:
        database_path = os.environ.get("DEFTER_DB_PATH")

    if database_path is None:
        return get_app_paths().db_path

    return Path(database_path)


def create_sqlite_store(database_path: Optional[str] = None) -> SQLAlchemyStore:
    """Create a SQLite-backed store.

    Returns:
        SQLAlchemyStore instance configured for SQLite
    """
    path = resolve_database_path(database_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    return SQLAlchemyStore(f"sqlite:///{path}")


def create_json_store(directory: Optional[str] = None) -> JSONFileStore:
    """Create a store of per-key JSON files in ``directory``.

    Defaults to the ``data`` directory under the app home.
    """
    if directory is None:
        directory = str(get_app_paths().base_dir / "data")
    store = JSONFileStore(directory)
    store.connect()
    return store
