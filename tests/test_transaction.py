"""Tests for TransactionService."""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from defter.domain.entities import TransactionType
from defter.domain.errors import (
    InsufficientStockError,
    NotFoundError,
    PersistenceError,
    ProductNotFoundError,
    ValidationError,
)
from defter.domain.transaction import PAYMENT_PRODUCT_NAME


def test_sale_decrements_stock_and_updates_totals(transaction_service, repository, sample_products):
    """A sale of 10 Gübre at 5 costs 50 and leaves 10 in stock."""
    txn = transaction_service.record_transaction(
        customer="Ahmet Yılmaz", product_name="Gübre", quantity="10", price="5"
    )

    assert txn.total == Decimal("50")
    assert txn.type == TransactionType.SALE
    assert repository.data.find_product("Gübre").stock == Decimal("10")
    customer = repository.data.find_customer("Ahmet Yılmaz")
    assert customer.satis == Decimal("50")
    assert customer.veresiye == Decimal("0")


def test_sale_uses_catalog_defaults(transaction_service, sample_products):
    """Blank price, product type and unit come from the catalog."""
    txn = transaction_service.record_transaction(
        customer="Ahmet", product_name="gübre", quantity=2
    )

    assert txn.price == Decimal("5")
    assert txn.total == Decimal("10")
    assert txn.product_name == "Gübre"
    assert txn.product_type == "GÜBRE"
    assert txn.unit == "ÇUVAL"
    assert txn.date == date.today()


def test_zero_price_uses_catalog_price(transaction_service, sample_products):
    """A zero price is treated like a blank one."""
    txn = transaction_service.record_transaction(
        customer="Ahmet", product_name="İlaç", quantity=2, price="0"
    )

    assert txn.price == Decimal("12.50")
    assert txn.total == Decimal("25.00")


def test_insufficient_stock_changes_nothing(transaction_service, repository, sample_products):
    """Selling 30 with 10 in stock fails and leaves every record set as it was."""
    transaction_service.record_transaction(
        customer="Ahmet", product_name="Gübre", quantity=10, price=5
    )
    before = (
        list(repository.data.transactions),
        list(repository.data.products),
        list(repository.data.customers),
    )

    with pytest.raises(InsufficientStockError, match="Not enough stock"):
        transaction_service.record_transaction(
            customer="Ahmet", product_name="Gübre", quantity=30, price=5
        )

    after = (
        list(repository.data.transactions),
        list(repository.data.products),
        list(repository.data.customers),
    )
    assert after == before


def test_credit_sale_counts_as_veresiye(transaction_service, repository, sample_products):
    transaction_service.record_transaction(
        customer="Ahmet", product_name="Gübre", quantity=4, type=TransactionType.CREDIT
    )

    customer = repository.data.find_customer("Ahmet")
    assert customer.veresiye == Decimal("20")
    assert customer.satis == Decimal("0")


def test_type_accepts_literal_and_english_name(transaction_service, sample_products):
    by_literal = transaction_service.record_transaction(
        customer="Ahmet", product_name="Gübre", quantity=1, type="VERESİYE"
    )
    by_name = transaction_service.record_transaction(
        customer="Ahmet", product_name="Gübre", quantity=1, type="both"
    )

    assert by_literal.type == TransactionType.CREDIT
    assert by_name.type == TransactionType.BOTH


def test_return_adds_stock_without_stock_check(transaction_service, repository, sample_products):
    """A return puts goods back even when the quantity exceeds current stock."""
    txn = transaction_service.record_transaction(
        customer="Ahmet", product_name="İlaç", quantity=8, type=TransactionType.RETURN
    )

    assert txn.type == TransactionType.RETURN
    assert repository.data.find_product("İlaç").stock == Decimal("13")
    customer = repository.data.find_customer("Ahmet")
    assert customer.satis == Decimal("0")
    assert customer.veresiye == Decimal("0")


def test_unknown_product_rejected(transaction_service, repository, sample_products):
    with pytest.raises(ProductNotFoundError, match="Tohum"):
        transaction_service.record_transaction(
            customer="Ahmet", product_name="Tohum", quantity=1, price=3
        )
    assert repository.data.transactions == []


@pytest.mark.parametrize(
    "kwargs",
    [
        {"customer": "", "product_name": "Gübre", "quantity": 1},
        {"customer": "Ahmet", "product_name": "", "quantity": 1, "price": 5},
        {"customer": "Ahmet", "product_name": "Gübre", "quantity": 0},
        {"customer": "Ahmet", "product_name": "Gübre", "quantity": "abc"},
        {"customer": "Ahmet", "product_name": "Gübre", "quantity": -2},
        {"customer": "Ahmet", "product_name": "Gübre", "quantity": 1, "price": "-5"},
        {"customer": "Ahmet", "product_name": "Gübre", "quantity": 1, "date": "not a date"},
        {"customer": "Ahmet", "product_name": "Gübre", "quantity": 1, "type": "HEDİYE"},
    ],
)
def test_invalid_input_rejected(transaction_service, repository, sample_products, kwargs):
    with pytest.raises(ValidationError):
        transaction_service.record_transaction(**kwargs)
    assert repository.data.transactions == []
    assert repository.data.find_product("Gübre").stock == Decimal("20")


def test_payment_rejected_as_transaction(transaction_service, sample_products):
    with pytest.raises(ValidationError, match="record_payment"):
        transaction_service.record_transaction(
            customer="Ahmet", product_name="Gübre", quantity=1, type=TransactionType.PAYMENT
        )


def test_record_payment(transaction_service, repository):
    """A payment has quantity 1, price = total = amount and placeholder fields."""
    txn = transaction_service.record_payment("Ahmet", "250", date="2024-03-01")

    assert txn.type == TransactionType.PAYMENT
    assert txn.product_name == PAYMENT_PRODUCT_NAME
    assert txn.quantity == Decimal("1")
    assert txn.price == txn.total == Decimal("250")
    assert txn.date == date(2024, 3, 1)
    assert repository.data.find_customer("Ahmet").satis == Decimal("250")


def test_payment_does_not_touch_stock(transaction_service, repository, sample_products):
    transaction_service.record_payment("Ahmet", 100)
    assert repository.data.find_product("Gübre").stock == Decimal("20")
    assert repository.data.find_product("İlaç").stock == Decimal("5")


@pytest.mark.parametrize("amount", ["0", "-10", "", None, "xyz"])
def test_payment_requires_positive_amount(transaction_service, repository, amount):
    with pytest.raises(ValidationError):
        transaction_service.record_payment("Ahmet", amount)
    assert repository.data.transactions == []


def test_delete_transaction_refreshes_totals_keeps_stock(transaction_service, repository, sample_products):
    """Deleting a sale lowers the customer's total but does not restore stock."""
    txn = transaction_service.record_transaction(
        customer="Ahmet", product_name="Gübre", quantity=10, price=5
    )
    transaction_service.delete_transaction(txn.id)

    assert repository.data.transactions == []
    assert repository.data.find_customer("Ahmet").satis == Decimal("0")
    assert repository.data.find_product("Gübre").stock == Decimal("10")


def test_delete_missing_transaction(transaction_service):
    with pytest.raises(NotFoundError):
        transaction_service.delete_transaction("_missing00")


def test_list_transactions_filters(transaction_service, sample_products):
    transaction_service.record_transaction(
        customer="Ahmet Yılmaz", product_name="Gübre", quantity=1,
        date=date.today() - timedelta(days=10),
    )
    transaction_service.record_transaction(
        customer="Ayşe Kaya", product_name="İlaç", quantity=1, type=TransactionType.CREDIT
    )
    transaction_service.record_payment("Ahmet Yılmaz", 10)

    assert len(transaction_service.list_transactions()) == 3
    assert len(transaction_service.list_transactions(customer="ahmet")) == 2
    assert len(transaction_service.list_transactions(type="VERESİYE")) == 1
    assert len(transaction_service.list_transactions(product_type="İLAÇ")) == 1
    recent = transaction_service.list_transactions(start_date=date.today() - timedelta(days=1))
    assert len(recent) == 2


def test_list_transactions_unknown_type(transaction_service):
    with pytest.raises(ValidationError):
        transaction_service.list_transactions(type="HEDİYE")


def test_failed_transaction_write_leaves_state_unchanged(
    transaction_service, repository, sample_products, monkeypatch
):
    """If the transaction list cannot be written, stock is not touched."""

    def fail():
        raise PersistenceError("Failed to save transactions: disk full")

    monkeypatch.setattr(repository, "save_transactions", fail)

    with pytest.raises(PersistenceError):
        transaction_service.record_transaction(
            customer="Ahmet", product_name="Gübre", quantity=10, price=5
        )
    assert repository.data.transactions == []
    assert repository.data.find_product("Gübre").stock == Decimal("20")


def test_failed_stock_write_keeps_transaction(
    transaction_service, repository, sample_products, monkeypatch
):
    """A failure after the transaction is saved leaves it recorded with stale stock."""

    def fail():
        raise PersistenceError("Failed to save products: disk full")

    monkeypatch.setattr(repository, "save_products", fail)

    with pytest.raises(PersistenceError):
        transaction_service.record_transaction(
            customer="Ahmet", product_name="Gübre", quantity=10, price=5
        )
    assert len(repository.data.transactions) == 1
    assert repository.data.find_product("Gübre").stock == Decimal("20")


def test_sale_uses_existing_customer_spelling(transaction_service, customer_service, sample_products):
    """A sale typed as 'ahmet' is booked on the existing customer 'Ahmet'."""
    customer_service.add_customer("Ahmet")

    txn = transaction_service.record_transaction(customer="ahmet", product_name="Gübre", quantity="2")

    assert txn.customer == "Ahmet"
    customers = customer_service.list_customers()
    assert [c.name for c in customers] == ["Ahmet"]
    assert customers[0].satis == Decimal("10")


def test_payment_uses_existing_customer_spelling(transaction_service, customer_service):
    customer_service.add_customer("Ahmet")

    txn = transaction_service.record_payment("AHMET", 40)

    assert txn.customer == "Ahmet"
    assert [c.name for c in customer_service.list_customers()] == ["Ahmet"]


def test_rename_reaches_transactions_typed_in_other_case(
    transaction_service, customer_service, sample_products
):
    ahmet = customer_service.add_customer("Ahmet")
    transaction_service.record_transaction(customer="ahmet", product_name="Gübre", quantity=1)
    transaction_service.record_payment("AHMET", 5)

    customer_service.edit_customer(ahmet.id, "Ahmet Usta")

    assert {t.customer for t in transaction_service.list_transactions()} == {"Ahmet Usta"}
