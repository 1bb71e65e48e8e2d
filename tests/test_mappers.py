"""Tests for database mappers."""

from datetime import UTC, date, datetime
from decimal import Decimal

from defter.database import mappers
from defter.domain.entities import Customer, Product, Transaction, TransactionType


def test_price_only_product_is_migrated():
    product = mappers.product_to_domain({"id": "_p", "name": "Gübre", "type": "GÜBRE", "price": 5})

    assert product.selling_price == Decimal("5")
    assert product.buying_price == Decimal("0")
    assert product.stock == Decimal("0")


def test_migrated_product_written_in_current_schema():
    migrated = mappers.migrate_product_record({"id": "_p", "name": "Gübre", "price": "7.5", "stock": "abc"})

    assert migrated["sellingPrice"] == "7.5"
    assert migrated["buyingPrice"] == 0
    assert migrated["stock"] == 0
    assert migrated["schemaVersion"] == mappers.PRODUCT_SCHEMA_VERSION


def test_current_product_record_kept():
    record = {
        "id": "_p", "name": "İlaç", "type": "İLAÇ", "unit": "ŞİŞE",
        "sellingPrice": 12.5, "buyingPrice": 10, "stock": 4, "schemaVersion": 2,
    }
    product = mappers.product_to_domain(record)

    assert product.selling_price == Decimal("12.5")
    assert product.buying_price == Decimal("10")
    assert mappers.product_to_record(product) == {**record, "price": 12.5}


def test_transaction_record_round_trip():
    txn = Transaction(
        id="_t", date=date(2024, 3, 1), customer="Ahmet", type=TransactionType.CREDIT,
        product_type="GÜBRE", product_name="Gübre", quantity=Decimal("2"), unit="ÇUVAL",
        price=Decimal("5.5"), total=Decimal("11"),
    )
    record = mappers.transaction_to_record(txn)

    assert record["type"] == "VERESİYE"
    assert record["date"] == "2024-03-01"
    assert record["productName"] == "Gübre"
    assert record["price"] == 5.5
    assert record["total"] == 11
    assert mappers.transaction_to_domain(record) == txn


def test_unknown_transaction_type_kept_verbatim():
    txn = mappers.transaction_to_domain({"id": "_t", "type": "HEDİYE", "quantity": 1, "price": 3})
    assert txn.type == "HEDİYE"
    assert mappers.transaction_to_record(txn)["type"] == "HEDİYE"


def test_missing_total_defaults_to_quantity_times_price():
    txn = mappers.transaction_to_domain({"id": "_t", "type": "SATIŞ", "quantity": 3, "price": "2.5"})
    assert txn.total == Decimal("7.5")


def test_unreadable_date_becomes_none():
    txn = mappers.transaction_to_domain({"id": "_t", "type": "SATIŞ", "date": "yesterdayish"})
    assert txn.date is None
    assert mappers.transaction_to_record(txn)["date"] == ""


def test_customer_without_cached_totals():
    customer = mappers.customer_to_domain({"id": "_c", "name": "Ahmet", "phone": "0555", "veresiye": "n/a"})

    assert customer == Customer(id="_c", name="Ahmet", phone="0555")


def test_metadata_timestamps():
    record = {
        "id": "_l", "name": "Ana Defter",
        "createdDate": "2024-03-01T10:00:00.000Z", "lastModified": "2024-03-02T08:30:15.250Z",
    }
    metadata = mappers.metadata_to_domain(record)

    assert metadata.created_date == datetime(2024, 3, 1, 10, 0, tzinfo=UTC)
    assert mappers.metadata_to_record(metadata) == record


def test_to_number():
    assert mappers.to_number(Decimal("50.00")) == 50
    assert isinstance(mappers.to_number(Decimal("50.00")), int)
    assert mappers.to_number(Decimal("12.5")) == 12.5


def test_records_ignores_non_dicts():
    assert mappers.records([{"a": 1}, "x", None, 3]) == [{"a": 1}]
    assert mappers.records({"a": 1}) == []
