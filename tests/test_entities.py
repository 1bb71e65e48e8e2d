"""Tests for domain entities."""

from dataclasses import FrozenInstanceError
from decimal import Decimal

import pytest

from defter.domain.entities import (
    SALES_TYPES,
    Customer,
    CustomerBalance,
    LedgerData,
    Product,
    TransactionType,
)


class TestTransactionType:
    """Tests for TransactionType."""

    def test_values_are_persisted_literals(self):
        assert [t.value for t in TransactionType] == ["SATIŞ", "VERESİYE", "İKİSİDE", "ÖDEME", "İADE"]

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("SATIŞ", TransactionType.SALE),
            ("credit", TransactionType.CREDIT),
            ("İkiside", TransactionType.BOTH),
            (" ÖDEME ", TransactionType.PAYMENT),
            (TransactionType.RETURN, TransactionType.RETURN),
        ],
    )
    def test_parse(self, value, expected):
        assert TransactionType.parse(value) == expected

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="Unknown transaction type"):
            TransactionType.parse("HEDİYE")

    def test_return_and_credit_are_not_sales(self):
        assert TransactionType.RETURN not in SALES_TYPES
        assert TransactionType.CREDIT not in SALES_TYPES


class TestCustomer:
    """Tests for Customer entity."""

    def test_address_skips_blank_parts(self):
        customer = Customer(id="_c", name="Ahmet", city="Konya", street="Cami Sk.")
        assert customer.address == "Konya Cami Sk."

    def test_customer_immutability(self):
        customer = Customer(id="_c", name="Ahmet")
        with pytest.raises(FrozenInstanceError):
            customer.name = "Mehmet"


def test_customer_balance():
    balance = CustomerBalance(name="Ahmet", veresiye=Decimal("100"), satis=Decimal("130"))
    assert balance.net_debt == Decimal("-30")
    assert balance.turnover == Decimal("230")
    assert balance.settled


def test_ledger_data_lookup_ignores_case():
    data = LedgerData(
        ledger_id="_l",
        customers=[Customer(id="_c", name="İsmail")],
        products=[Product(id="_p", name="Gübre", type="GÜBRE", unit="", selling_price=Decimal("5"))],
    )
    assert data.find_customer("ismail").id == "_c"
    assert data.find_product("GÜBRE").id == "_p"
    assert data.find_product("Tohum") is None
