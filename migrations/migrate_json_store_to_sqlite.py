#!/usr/bin/env python3
"""Migration script to copy a JSON-file data directory into the SQLite store.

The desktop edition of the ledger keeps one ``<key>.json`` file per store
key (``database-metadata.json``, ``db-<id>-transactions.json``, and for the
oldest installs plain ``transactions.json``/``customers.json``/
``products.json``). This script copies every key as-is; record migration
and adoption of single-ledger data happen when the ledger is next opened.

Keys that already hold a value in the SQLite store are left alone unless
--overwrite is given.

Usage:
    python migrations/migrate_json_store_to_sqlite.py DATA_DIR [--db-path PATH] [--overwrite]
"""

import sys
from pathlib import Path

# Add src to path so we can import defter modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from defter.database.base import StoreError
from defter.database.factories import create_sqlite_store
from defter.database.json_store import JSONFileStore


def migrate_store(
    data_dir: str, database_path: str | None = None, overwrite: bool = False
) -> tuple[int, int]:
    """Copy every key of ``data_dir`` into the SQLite store.

    Args:
        data_dir: Directory holding ``<key>.json`` files
        database_path: Path to database file. If None, uses default location.
        overwrite: Replace keys that already exist in the SQLite store

    Returns:
        Tuple of (copied, skipped) key counts

    Raises:
        StoreError: If a key cannot be read or written
    """
    source_dir = Path(data_dir)
    if not source_dir.is_dir():
        raise StoreError(f"Data directory not found: {data_dir}")

    source = JSONFileStore(source_dir)
    target = create_sqlite_store(database_path)
    target.connect()

    copied = skipped = 0
    try:
        keys = source.keys()
        if not keys:
            print(f"No keys found in {source_dir}")
            return 0, 0

        print(f"Copying {len(keys)} key(s) from {source_dir}...")
        for key in keys:
            if not overwrite and target.get(key) is not None:
                print(f"  Skipped (exists): {key}")
                skipped += 1
                continue
            target.set(key, source.get(key))
            print(f"  Copied: {key}")
            copied += 1

        print("Migration completed successfully!")
        return copied, skipped
    finally:
        target.disconnect()


def main():
    """Main entry point for migration script."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Copy a JSON-file data directory into the SQLite store"
    )
    parser.add_argument("data_dir", help="Directory holding <key>.json files")
    parser.add_argument(
        "--db-path",
        type=str,
        help="Path to database file (overrides DEFTER_DB_PATH environment variable)",
    )
    parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Replace keys that already exist in the SQLite store",
    )
    args = parser.parse_args()

    try:
        copied, skipped = migrate_store(
            args.data_dir, database_path=args.db_path, overwrite=args.overwrite
        )
        print(f"Copied {copied} key(s), skipped {skipped}")
        return 0
    except StoreError as e:
        print(f"\nMigration failed: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
