"""Database layer for defter application."""

from defter.database.base import Store, StoreError
from defter.database.factories import create_json_store, create_sqlite_store

__all__ = ["Store", "StoreError", "create_json_store", "create_sqlite_store"]
