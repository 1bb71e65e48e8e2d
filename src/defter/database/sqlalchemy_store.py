"""SQLAlchemy-backed key-value store."""

from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from defter.database.base import Store, StoreError
from defter.database.models import StoreEntry, create_session_factory


class SQLAlchemyStore(Store):
    """SQLAlchemy-based implementation of the Store interface."""

    def __init__(self, database_url: str):
        """Initialize SQLAlchemy store.

        Args:
            database_url: SQLAlchemy database URL (e.g., 'sqlite:///path/to.db')
        """
        self.database_url = database_url
        self.session_factory = create_session_factory(database_url)
        self._session: Optional[Session] = None

    def _get_session(self) -> Session:
        """Get current session, creating one if needed."""
        if self._session is None:
            self._session = self.session_factory()
        return self._session

    def connect(self) -> None:
        """Connect to the database."""
        # Connection is lazy, so this is a no-op
        pass

    def disconnect(self) -> None:
        """Disconnect from the database."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under ``key``, or ``default``."""
        session = self._get_session()
        try:
            entry = session.get(StoreEntry, key)
        except SQLAlchemyError as e:
            session.rollback()
            raise StoreError(f"Could not read '{key}': {e}") from e
        if entry is None or entry.value is None:
            return default
        return entry.value

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``."""
        session = self._get_session()
        try:
            entry = session.get(StoreEntry, key)
            if entry is None:
                session.add(StoreEntry(key=key, value=value))
            else:
                entry.value = value
            session.commit()
        except (SQLAlchemyError, TypeError, ValueError) as e:
            session.rollback()
            raise StoreError(f"Could not write '{key}': {e}") from e

    def keys(self) -> list[str]:
        """List every key holding a value."""
        session = self._get_session()
        entries = session.query(StoreEntry).order_by(StoreEntry.key).all()
        return [entry.key for entry in entries if entry.value is not None]
