"""Directory of JSON files, one per key.

This is the layout the desktop edition of the ledger keeps in its user data
directory (``customers.json``, ``db-<id>-transactions.json``, ...).
"""

import json
from pathlib import Path
from typing import Any

from defter.database.base import Store, StoreError


class JSONFileStore(Store):
    """Store implementation writing ``<key>.json`` files."""

    def __init__(self, directory: "str | Path"):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def connect(self) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreError(f"Could not create {self.directory}: {e}") from e

    def disconnect(self) -> None:
        pass

    def get(self, key: str, default: Any = None) -> Any:
        path = self._path(key)
        if not path.exists():
            return default
        try:
            value = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise StoreError(f"Could not read '{key}': {e}") from e
        return default if value is None else value

    def set(self, key: str, value: Any) -> None:
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            tmp_path.write_text(
                json.dumps(value, ensure_ascii=False, indent=2), encoding="utf-8"
            )
            tmp_path.replace(path)
        except (OSError, TypeError, ValueError) as e:
            raise StoreError(f"Could not write '{key}': {e}") from e

    def keys(self) -> list[str]:
        if not self.directory.exists():
            return []
        result = []
        for path in sorted(self.directory.glob("*.json")):
            if self.get(path.stem) is not None:
                result.append(path.stem)
        return result
