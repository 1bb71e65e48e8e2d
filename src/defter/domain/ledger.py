"""Ledger repository: named ledgers, the current ledger, bundles."""

import logging
from dataclasses import replace
from datetime import datetime, UTC
from typing import Any, Callable, Optional

from defter.database import mappers
from defter.database.base import Store, StoreError
from defter.domain.aggregator import LedgerAggregator
from defter.domain.entities import LedgerData, LedgerMetadata
from defter.domain.errors import (
    ConflictError,
    FormatError,
    NotFoundError,
    PersistenceError,
    ValidationError,
    duplicate_name,
    ledger_not_found,
    persist_failed,
)
from defter.utils.ids import generate_id
from defter.utils.names import name_key

log = logging.getLogger("defter.ledger")

METADATA_KEY = "database-metadata"
CURRENT_KEY = "current-database-id"
RECORD_SETS = ("transactions", "customers", "products")
BUNDLE_VERSION = "1.0"
DEFAULT_LEDGER_NAME = "Ana Defter"

ProgressCallback = Callable[[int, int], None]


def ledger_key(ledger_id: str, record_set: str) -> str:
    """Store key of one record set of one ledger."""
    return f"db-{ledger_id}-{record_set}"


def _now() -> datetime:
    return datetime.now(UTC)


class LedgerRepository:
    """Owns the ledger list, the current ledger id and its loaded records.

    ``data`` is the only in-memory copy of the current ledger. Services
    change it and then call the matching ``save_*`` method, which writes the
    record set under the current ledger's namespaced key.
    """

    def __init__(self, store: Store, aggregator: Optional[LedgerAggregator] = None):
        """Initialize the repository.

        Args:
            store: Key-value store holding every ledger
            aggregator: Aggregator used on load and after mutations
        """
        self.store = store
        self.aggregator = aggregator or LedgerAggregator()
        self._metadata: Optional[list[LedgerMetadata]] = None
        self.current_id: Optional[str] = None
        self._data: Optional[LedgerData] = None

    # Store access

    def _read_records(self, key: str) -> list[dict[str, Any]]:
        try:
            return mappers.records(self.store.get(key, []))
        except StoreError as e:
            # A record set that cannot be read is treated as empty
            log.warning("store_read_failed key=%s error=%s", key, e)
            return []

    def _write(self, key: str, value: Any, label: str) -> None:
        try:
            self.store.set(key, value)
        except StoreError as e:
            log.error("store_write_failed key=%s error=%s", key, e)
            raise PersistenceError(persist_failed(label, e)) from e

    def _load_metadata(self) -> list[LedgerMetadata]:
        if self._metadata is None:
            try:
                raw = self.store.get(METADATA_KEY, [])
            except StoreError as e:
                raise PersistenceError(f"Failed to load ledger list: {e}") from e
            self._metadata = [
                mappers.metadata_to_domain(r) for r in mappers.records(raw) if r.get("id")
            ]
        return self._metadata

    def _save_metadata(self) -> None:
        self._write(
            METADATA_KEY,
            [mappers.metadata_to_record(m) for m in self._load_metadata()],
            "ledger list",
        )

    def _write_record_sets(
        self,
        ledger_id: str,
        transactions: list[dict[str, Any]],
        customers: list[dict[str, Any]],
        products: list[dict[str, Any]],
    ) -> None:
        self._write(ledger_key(ledger_id, "transactions"), transactions, "transactions")
        self._write(ledger_key(ledger_id, "customers"), customers, "customers")
        self._write(ledger_key(ledger_id, "products"), products, "products")

    def _find(self, ledger_id: str) -> Optional[LedgerMetadata]:
        for metadata in self._load_metadata():
            if metadata.id == ledger_id:
                return metadata
        return None

    def _check_name(self, name: str, exclude_id: Optional[str] = None) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Ledger name is required")
        for metadata in self._load_metadata():
            if metadata.id != exclude_id and name_key(metadata.name) == name_key(name):
                raise ConflictError(duplicate_name("Ledger", name))
        return name

    def _touch(self, ledger_id: str) -> None:
        self._metadata = [
            replace(m, last_modified=_now()) if m.id == ledger_id else m
            for m in self._load_metadata()
        ]

    # Current ledger

    @property
    def data(self) -> LedgerData:
        """Records of the current ledger, opening the repository if needed."""
        if self._data is None:
            self.open()
        return self._data

    @property
    def current(self) -> LedgerMetadata:
        """Metadata of the current ledger."""
        data = self.data
        metadata = self._find(data.ledger_id)
        if metadata is None:
            raise NotFoundError(ledger_not_found(data.ledger_id))
        return metadata

    def open(self) -> LedgerData:
        """Load the ledger that was current last time, or the first one."""
        ledgers = self.list_ledgers()
        saved_id = self._saved_current_id()
        target = saved_id if self._find(saved_id or "") else ledgers[0].id
        return self.switch_ledger(target)

    def _saved_current_id(self) -> Optional[str]:
        try:
            saved_id = self.store.get(CURRENT_KEY)
        except StoreError as e:
            log.warning("store_read_failed key=%s error=%s", CURRENT_KEY, e)
            return None
        return str(saved_id) if saved_id else None

    def save_transactions(self) -> None:
        data = self.data
        self._write(
            ledger_key(data.ledger_id, "transactions"),
            [mappers.transaction_to_record(t) for t in data.transactions],
            "transactions",
        )

    def save_customers(self) -> None:
        data = self.data
        self._write(
            ledger_key(data.ledger_id, "customers"),
            [mappers.customer_to_record(c) for c in data.customers],
            "customers",
        )

    def save_products(self) -> None:
        data = self.data
        self._write(
            ledger_key(data.ledger_id, "products"),
            [mappers.product_to_record(p) for p in data.products],
            "products",
        )

    def refresh_aggregates(self, persist: bool = True) -> None:
        """Recompute customer totals of the current ledger and save them."""
        data = self.data
        data.customers = self.aggregator.recompute(data.transactions, data.customers)
        if persist:
            self.save_customers()

    # Ledger operations

    def list_ledgers(self) -> list[LedgerMetadata]:
        """List all ledgers, creating the default ledger when there is none."""
        ledgers = self._load_metadata()
        if not ledgers:
            self._create_default_ledger()
        return list(self._load_metadata())

    def has_ledger(self, ledger_id: str) -> bool:
        """Whether a ledger with this id exists, without creating the default one."""
        return self._find(ledger_id or "") is not None

    def _create_default_ledger(self) -> LedgerMetadata:
        """Create the default ledger, adopting single-ledger data if present."""
        now = _now()
        metadata = LedgerMetadata(
            id=generate_id(), name=DEFAULT_LEDGER_NAME, created_date=now, last_modified=now
        )
        legacy = {name: self._read_records(name) for name in RECORD_SETS}
        self._write_record_sets(
            metadata.id, legacy["transactions"], legacy["customers"], legacy["products"]
        )
        self._load_metadata().append(metadata)
        self._save_metadata()
        if any(legacy.values()):
            # Adopted once; a later default ledger starts empty
            for record_set in RECORD_SETS:
                self._write(record_set, None, record_set)
            log.info(
                "legacy_ledger_adopted id=%s transactions=%s customers=%s products=%s",
                metadata.id,
                len(legacy["transactions"]),
                len(legacy["customers"]),
                len(legacy["products"]),
            )
        log.info("ledger_created id=%s name=%s default=1", metadata.id, metadata.name)
        return metadata

    def create_ledger(self, name: str) -> LedgerMetadata:
        """Create an empty ledger and make it current.

        Raises:
            ValidationError: If the name is blank
            ConflictError: If another ledger has the same name
        """
        name = self._check_name(name)
        now = _now()
        metadata = LedgerMetadata(
            id=generate_id(), name=name, created_date=now, last_modified=now
        )
        self._write_record_sets(metadata.id, [], [], [])
        self._load_metadata().append(metadata)
        self._save_metadata()
        log.info("ledger_created id=%s name=%s", metadata.id, name)
        self.switch_ledger(metadata.id)
        return metadata

    def rename_ledger(self, ledger_id: str, name: str) -> LedgerMetadata:
        """Rename a ledger.

        Raises:
            NotFoundError: If the ledger doesn't exist
            ValidationError: If the name is blank
            ConflictError: If another ledger has the same name
        """
        if self._find(ledger_id) is None:
            raise NotFoundError(ledger_not_found(ledger_id))
        name = self._check_name(name, exclude_id=ledger_id)
        self._metadata = [
            replace(m, name=name, last_modified=_now()) if m.id == ledger_id else m
            for m in self._load_metadata()
        ]
        self._save_metadata()
        log.info("ledger_renamed id=%s name=%s", ledger_id, name)
        return self._find(ledger_id)

    def delete_ledger(self, ledger_id: str) -> None:
        """Delete a ledger and its records.

        If it was current, here or in the stored current id, the first
        remaining ledger becomes current, or a fresh default ledger when none
        remain.

        Raises:
            NotFoundError: If the ledger doesn't exist
        """
        if self._find(ledger_id) is None:
            raise NotFoundError(ledger_not_found(ledger_id))
        saved_id = self._saved_current_id()

        for record_set in RECORD_SETS:
            self._write(ledger_key(ledger_id, record_set), None, record_set)
        self._metadata = [m for m in self._load_metadata() if m.id != ledger_id]
        self._save_metadata()
        log.info("ledger_deleted id=%s", ledger_id)

        if self.current_id is not None and self.current_id != ledger_id:
            if saved_id == ledger_id:
                self._write(CURRENT_KEY, self.current_id, "current ledger")
        elif ledger_id in (self.current_id, saved_id) or not self._load_metadata():
            # The stored current id must never point at a deleted ledger
            self.current_id = None
            self._data = None
            remaining = self.list_ledgers()
            self.switch_ledger(remaining[0].id)

    def switch_ledger(self, ledger_id: str) -> LedgerData:
        """Make a ledger current and load its records.

        The outgoing ledger is fully written, with a fresh ``lastModified``,
        before the incoming ledger is read.

        Raises:
            NotFoundError: If the ledger doesn't exist
        """
        if self._find(ledger_id) is None:
            raise NotFoundError(ledger_not_found(ledger_id))

        if self._data is not None and self.current_id is not None:
            self.save_transactions()
            self.save_customers()
            self.save_products()
            self._touch(self.current_id)
            self._save_metadata()

        data = LedgerData(
            ledger_id=ledger_id,
            transactions=[
                mappers.transaction_to_domain(r)
                for r in self._read_records(ledger_key(ledger_id, "transactions"))
            ],
            customers=[
                mappers.customer_to_domain(r)
                for r in self._read_records(ledger_key(ledger_id, "customers"))
            ],
            products=[
                mappers.product_to_domain(r)
                for r in self._read_records(ledger_key(ledger_id, "products"))
            ],
        )
        self._data = data
        self.current_id = ledger_id
        self._write(CURRENT_KEY, ledger_id, "current ledger")
        # Products are written back in the current schema
        self.save_products()
        self.refresh_aggregates(persist=True)
        log.info(
            "ledger_switched id=%s transactions=%s customers=%s products=%s",
            ledger_id,
            len(data.transactions),
            len(data.customers),
            len(data.products),
        )
        return data

    # Bundles

    def export_all(self) -> dict[str, Any]:
        """Every ledger with its records, as one JSON-serializable bundle."""
        databases = []
        for metadata in self.list_ledgers():
            entry: dict[str, Any] = {"metadata": mappers.metadata_to_record(metadata)}
            for record_set in RECORD_SETS:
                entry[record_set] = self._read_records(ledger_key(metadata.id, record_set))
            databases.append(entry)
        log.info("bundle_exported ledgers=%s", len(databases))
        return {
            "version": BUNDLE_VERSION,
            "exportDate": mappers.format_timestamp(_now()),
            "databases": databases,
        }

    def _validate_bundle(self, bundle: Any) -> list[dict[str, Any]]:
        if not isinstance(bundle, dict) or not isinstance(bundle.get("databases"), list):
            raise FormatError("Import file does not contain a ledger list")
        entries = bundle["databases"]
        for index, entry in enumerate(entries, start=1):
            if not isinstance(entry, dict):
                raise FormatError(f"Ledger entry {index} is not an object")
            metadata = entry.get("metadata")
            if not isinstance(metadata, dict) or not metadata.get("id"):
                raise FormatError(f"Ledger entry {index} has no metadata id")
            for record_set in RECORD_SETS:
                if entry.get(record_set) is not None and not isinstance(
                    entry.get(record_set), list
                ):
                    raise FormatError(f"Ledger entry {index} has invalid {record_set}")
        return entries

    def _unique_import_name(self, name: str, ledger_id: str) -> str:
        name = name.strip() or DEFAULT_LEDGER_NAME
        taken = {name_key(m.name) for m in self._load_metadata() if m.id != ledger_id}
        candidate, suffix = name, 2
        while name_key(candidate) in taken:
            candidate = f"{name} ({suffix})"
            suffix += 1
        return candidate

    def import_all(
        self, bundle: Any, progress: Optional[ProgressCallback] = None
    ) -> int:
        """Import every ledger of a bundle and switch to the first of them.

        Ledgers whose id already exists keep their local metadata; their
        record sets are overwritten by the bundle. The whole bundle is
        validated before the first write, and each ledger's three record
        sets are written together before moving to the next.

        Returns:
            Number of ledgers imported

        Raises:
            FormatError: If the bundle has no ledger list or a malformed entry
        """
        entries = self._validate_bundle(bundle)
        total = len(entries)
        first_id: Optional[str] = None

        for done, entry in enumerate(entries, start=1):
            metadata = mappers.metadata_to_domain(entry["metadata"])
            self._write_record_sets(
                metadata.id,
                mappers.records(entry.get("transactions")),
                mappers.records(entry.get("customers")),
                mappers.records(entry.get("products")),
            )
            if self._find(metadata.id) is None:
                metadata = replace(
                    metadata, name=self._unique_import_name(metadata.name, metadata.id)
                )
                self._load_metadata().append(metadata)
            if first_id is None:
                first_id = metadata.id
            if progress is not None:
                progress(done, total)

        self._save_metadata()
        log.info("bundle_imported ledgers=%s", total)

        imported_ids = {mappers.metadata_to_domain(e["metadata"]).id for e in entries}
        if self.current_id in imported_ids:
            # The in-memory copy is stale now; drop it without writing it back
            self._data = None
            self.current_id = None
        if first_id is not None:
            self.switch_ledger(first_id)
        return total
