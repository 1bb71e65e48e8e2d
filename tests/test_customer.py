"""Tests for CustomerService."""

from decimal import Decimal

import pytest

from defter.domain.entities import TransactionType
from defter.domain.errors import ConflictError, DependencyError, NotFoundError, ValidationError


def test_add_customer(customer_service, repository):
    customer = customer_service.add_customer("  Ayşe Kaya ", phone="0555", city="Konya")

    assert customer.name == "Ayşe Kaya"
    assert customer.id.startswith("_")
    assert customer.veresiye == customer.satis == Decimal("0")
    assert repository.data.find_customer("ayşe kaya") == customer


def test_add_customer_requires_name(customer_service):
    with pytest.raises(ValidationError):
        customer_service.add_customer("   ")


def test_customer_names_unique_ignoring_case(customer_service, sample_customer):
    with pytest.raises(ConflictError, match="already exists"):
        customer_service.add_customer("ahmet yılmaz")


def test_turkish_dotted_capital_matches_lowercase(customer_service):
    """'İ' and 'i' compare equal, so 'İSMAİL' collides with 'ismail'."""
    customer_service.add_customer("ismail")
    with pytest.raises(ConflictError):
        customer_service.add_customer("İSMAİL")


def test_edit_details_keeps_name(customer_service, sample_customer):
    updated = customer_service.edit_customer(
        sample_customer.id, sample_customer.name, phone="0532", street="Atatürk Cd."
    )

    assert updated.phone == "0532"
    assert updated.street == "Atatürk Cd."
    assert updated.city == "Konya"
    assert updated.address == "Konya Ereğli Atatürk Cd."


def test_rename_cascades_to_transactions(
    customer_service, transaction_service, repository, sample_customer, sample_products
):
    """After a rename no transaction refers to the old name and totals follow."""
    transaction_service.record_transaction(
        customer="Ahmet Yılmaz", product_name="Gübre", quantity=2, type=TransactionType.CREDIT
    )
    transaction_service.record_payment("Ahmet Yılmaz", 4)

    updated = customer_service.edit_customer(sample_customer.id, "Ahmet Yılmaz (Köy)")

    names = {t.customer for t in repository.data.transactions}
    assert names == {"Ahmet Yılmaz (Köy)"}
    assert updated.veresiye == Decimal("10")
    assert updated.satis == Decimal("4")
    assert [c.name for c in repository.data.customers] == ["Ahmet Yılmaz (Köy)"]


def test_rename_to_taken_name_rejected(customer_service, sample_customer):
    customer_service.add_customer("Ayşe Kaya")
    with pytest.raises(ConflictError):
        customer_service.edit_customer(sample_customer.id, "AYŞE KAYA")


def test_rename_changing_only_case_allowed(customer_service, sample_customer):
    updated = customer_service.edit_customer(sample_customer.id, "AHMET YILMAZ")
    assert updated.name == "AHMET YILMAZ"


def test_edit_unknown_field_rejected(customer_service, sample_customer):
    with pytest.raises(ValidationError, match="Unknown customer fields"):
        customer_service.edit_customer(sample_customer.id, "Ahmet", email="a@b.c")


def test_edit_missing_customer(customer_service):
    with pytest.raises(NotFoundError):
        customer_service.edit_customer("_missing00", "Kimse")


def test_delete_customer_without_transactions(customer_service, repository, sample_customer):
    assert customer_service.delete_customer(sample_customer.id) == 0
    assert repository.data.customers == []


def test_delete_customer_with_transactions_needs_cascade(
    customer_service, transaction_service, repository, sample_customer
):
    transaction_service.record_payment("Ahmet Yılmaz", 100)

    with pytest.raises(DependencyError, match="1 transaction"):
        customer_service.delete_customer(sample_customer.id)
    assert len(repository.data.transactions) == 1

    assert customer_service.delete_customer(sample_customer.id, cascade=True) == 1
    assert repository.data.transactions == []
    assert repository.data.find_customer("Ahmet Yılmaz") is None


def test_list_customers_sorted(customer_service):
    customer_service.add_customer("Zeynep", phone="3", city="Ankara")
    customer_service.add_customer("ali", phone="1", city="İzmir")
    customer_service.add_customer("Mehmet", phone="2", city="Bursa")

    assert [c.name for c in customer_service.list_customers()] == ["ali", "Mehmet", "Zeynep"]
    by_phone = customer_service.list_customers(sort_by="phone", descending=True)
    assert [c.phone for c in by_phone] == ["3", "2", "1"]
    by_address = customer_service.list_customers(sort_by="address")
    assert [c.city for c in by_address] == ["Ankara", "Bursa", "İzmir"]


def test_list_customers_bad_sort_field(customer_service):
    with pytest.raises(ValidationError):
        customer_service.list_customers(sort_by="veresiye")
