"""Mapper functions to convert between stored JSON records and domain entities.

Stored records come from several generations of the application: products
with a single ``price`` and no ``stock``, customers without cached totals,
transactions whose ``type`` is free text from an old CSV import. Every record
is migrated to the current schema here, once, when a ledger is loaded; the
rest of the code only ever sees current entities.
"""

import logging
from datetime import date, datetime, UTC
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from defter.domain import entities as domain
from defter.utils.date_parser import parse_date
from defter.utils.ids import generate_id

log = logging.getLogger("defter.schema")

# Version 1: single ``price``; version 2: ``buyingPrice``/``sellingPrice``.
PRODUCT_SCHEMA_VERSION = 2

ZERO = Decimal("0")


def to_decimal(value: Any, default: Decimal = ZERO) -> Decimal:
    """Coerce a stored number to Decimal, using ``default`` when invalid."""
    if value is None or isinstance(value, bool):
        return default
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return default
    return result if result.is_finite() else default


def to_number(value: Decimal) -> "int | float":
    """Convert a Decimal to the JSON number the records hold."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def _text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return str(value)


def _record_date(value: Any, record_id: str) -> Optional[date]:
    if not value:
        return None
    try:
        return parse_date(str(value))
    except ValueError:
        log.warning("unreadable_date record=%s value=%r", record_id, value)
        return None


def _timestamp(value: Any) -> datetime:
    if isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            parsed = None
        if parsed is not None:
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
    return datetime.now(UTC)


def format_timestamp(value: datetime) -> str:
    """ISO-8601 text with millisecond precision and a ``Z`` suffix."""
    text = value.astimezone(UTC).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def transaction_to_domain(record: dict[str, Any]) -> domain.Transaction:
    """Convert a stored transaction record to a domain Transaction."""
    record_id = _text(record.get("id")) or generate_id()
    raw_type = _text(record.get("type")).strip()
    try:
        txn_type: "domain.TransactionType | str" = domain.TransactionType.parse(raw_type)
    except ValueError:
        # Unknown types are kept verbatim; they count towards no aggregate
        txn_type = raw_type
    quantity = to_decimal(record.get("quantity"))
    price = to_decimal(record.get("price"))
    return domain.Transaction(
        id=record_id,
        date=_record_date(record.get("date"), record_id),
        customer=_text(record.get("customer")),
        type=txn_type,
        product_type=_text(record.get("productType")),
        product_name=_text(record.get("productName")),
        quantity=quantity,
        unit=_text(record.get("unit")),
        price=price,
        total=to_decimal(record.get("total"), default=quantity * price),
    )


def transaction_to_record(txn: domain.Transaction) -> dict[str, Any]:
    """Convert a domain Transaction to its stored record."""
    txn_type = txn.type.value if isinstance(txn.type, domain.TransactionType) else txn.type
    return {
        "id": txn.id,
        "date": txn.date.isoformat() if txn.date else "",
        "customer": txn.customer,
        "type": txn_type,
        "productType": txn.product_type,
        "productName": txn.product_name,
        "quantity": to_number(txn.quantity),
        "unit": txn.unit,
        "price": to_number(txn.price),
        "total": to_number(txn.total),
    }


def customer_to_domain(record: dict[str, Any]) -> domain.Customer:
    """Convert a stored customer record, zeroing missing cached totals."""
    return domain.Customer(
        id=_text(record.get("id")) or generate_id(),
        name=_text(record.get("name")),
        phone=_text(record.get("phone")),
        tc=_text(record.get("tc")),
        dob=_text(record.get("dob")),
        city=_text(record.get("city")),
        district=_text(record.get("district")),
        street=_text(record.get("street")),
        veresiye=to_decimal(record.get("veresiye")),
        satis=to_decimal(record.get("satis")),
    )


def customer_to_record(customer: domain.Customer) -> dict[str, Any]:
    """Convert a domain Customer to its stored record."""
    return {
        "id": customer.id,
        "name": customer.name,
        "phone": customer.phone,
        "tc": customer.tc,
        "dob": customer.dob,
        "city": customer.city,
        "district": customer.district,
        "street": customer.street,
        "veresiye": to_number(customer.veresiye),
        "satis": to_number(customer.satis),
    }


def migrate_product_record(record: dict[str, Any]) -> dict[str, Any]:
    """Bring a stored product record up to the current schema version."""
    migrated = dict(record)
    version = migrated.get("schemaVersion")
    if not isinstance(version, int):
        version = 2 if "sellingPrice" in migrated or "buyingPrice" in migrated else 1

    if version < 2:
        migrated["sellingPrice"] = migrated.get("price", 0)
        migrated.setdefault("buyingPrice", 0)
    elif "sellingPrice" not in migrated:
        migrated["sellingPrice"] = migrated.get("price", 0)

    if not isinstance(migrated.get("stock"), (int, float)) or isinstance(
        migrated.get("stock"), bool
    ):
        migrated["stock"] = to_number(to_decimal(migrated.get("stock")))

    migrated["schemaVersion"] = PRODUCT_SCHEMA_VERSION
    return migrated


def product_to_domain(record: dict[str, Any]) -> domain.Product:
    """Convert a stored product record of any schema version."""
    migrated = migrate_product_record(record)
    return domain.Product(
        id=_text(migrated.get("id")) or generate_id(),
        name=_text(migrated.get("name")),
        type=_text(migrated.get("type")),
        unit=_text(migrated.get("unit")),
        selling_price=to_decimal(migrated.get("sellingPrice")),
        buying_price=to_decimal(migrated.get("buyingPrice")),
        stock=to_decimal(migrated.get("stock")),
    )


def product_to_record(product: domain.Product) -> dict[str, Any]:
    """Convert a domain Product to its stored record.

    ``price`` mirrors the selling price so single-price readers keep working.
    """
    return {
        "id": product.id,
        "name": product.name,
        "type": product.type,
        "unit": product.unit,
        "price": to_number(product.selling_price),
        "sellingPrice": to_number(product.selling_price),
        "buyingPrice": to_number(product.buying_price),
        "stock": to_number(product.stock),
        "schemaVersion": PRODUCT_SCHEMA_VERSION,
    }


def metadata_to_domain(record: dict[str, Any]) -> domain.LedgerMetadata:
    """Convert a stored ledger metadata record."""
    return domain.LedgerMetadata(
        id=_text(record.get("id")),
        name=_text(record.get("name")),
        created_date=_timestamp(record.get("createdDate")),
        last_modified=_timestamp(record.get("lastModified")),
    )


def metadata_to_record(metadata: domain.LedgerMetadata) -> dict[str, Any]:
    """Convert ledger metadata to its stored record."""
    return {
        "id": metadata.id,
        "name": metadata.name,
        "createdDate": format_timestamp(metadata.created_date),
        "lastModified": format_timestamp(metadata.last_modified),
    }


def records(value: Any) -> list[dict[str, Any]]:
    """Return the dict records of a stored list, ignoring anything else."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]
