from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os


@dataclass(frozen=True)
class AppPaths:
    base_dir: Path
    db_path: Path


def get_app_paths(app_name: str = "defter") -> AppPaths:
    """Resolve the data directory from DEFTER_HOME, else ~/.defter."""
    home = os.environ.get("DEFTER_HOME")
    base = Path(home) if home else Path.home() / f".{app_name.lower()}"
    return AppPaths(base_dir=base, db_path=base / "defter.db")


def logs_dir_for(db_path: Path) -> Path:
    """Logs are kept beside the store they describe."""
    return db_path.parent / "logs"
