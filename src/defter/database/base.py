"""Abstract key-value store interface."""

from abc import ABC, abstractmethod
from typing import Any


class StoreError(Exception):
    """Raised when the underlying storage cannot be read or written."""


class Store(ABC):
    """Durable mapping of string keys to JSON-serializable values.

    The store knows nothing about ledgers; key namespacing is the
    repository's concern.
    """

    @abstractmethod
    def connect(self) -> None:
        """Open the underlying storage."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Release the underlying storage."""
        pass

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under ``key``, or ``default`` if absent.

        Raises:
            StoreError: If the storage cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``, replacing any previous value.

        Storing None leaves a tombstone that reads back as the default.

        Raises:
            StoreError: If the storage cannot be written
        """
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """List every key holding a value."""
        pass
