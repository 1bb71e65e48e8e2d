"""Customer domain service."""

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Optional

from defter.domain.entities import Customer
from defter.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    PersistenceError,
    ValidationError,
    customer_delete_blocked,
    customer_not_found,
    duplicate_name,
)
from defter.domain.ledger import LedgerRepository
from defter.utils.ids import generate_id
from defter.utils.names import name_key

log = logging.getLogger("defter.customers")

SORT_FIELDS = ("name", "tc", "dob", "phone", "address")

# Fields an edit may change besides the name.
DETAIL_FIELDS = ("phone", "tc", "dob", "city", "district", "street")


class CustomerService:
    """Service for managing customers of the current ledger."""

    def __init__(self, repository: LedgerRepository):
        """Initialize customer service.

        Args:
            repository: Ledger repository holding the current ledger
        """
        self.repository = repository

    def _check_name(self, name: str, exclude_id: Optional[str] = None) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Customer name is required")
        for customer in self.repository.data.customers:
            if customer.id != exclude_id and name_key(customer.name) == name_key(name):
                raise ConflictError(duplicate_name("Customer", name))
        return name

    def _save(self, previous: list[Customer]) -> None:
        data = self.repository.data
        try:
            self.repository.save_customers()
        except PersistenceError:
            data.customers = previous
            raise

    def add_customer(
        self,
        name: str,
        phone: str = "",
        tc: str = "",
        dob: str = "",
        city: str = "",
        district: str = "",
        street: str = "",
    ) -> Customer:
        """Add a customer.

        Returns:
            The new customer, with zero totals

        Raises:
            ValidationError: If name is blank
            ConflictError: If a customer with the same name exists
        """
        name = self._check_name(name)
        customer = Customer(
            id=generate_id(),
            name=name,
            phone=(phone or "").strip(),
            tc=(tc or "").strip(),
            dob=(dob or "").strip(),
            city=(city or "").strip(),
            district=(district or "").strip(),
            street=(street or "").strip(),
            veresiye=Decimal("0"),
            satis=Decimal("0"),
        )
        data = self.repository.data
        previous = list(data.customers)
        data.customers.append(customer)
        self._save(previous)
        log.info("customer_added id=%s name=%s", customer.id, name)
        return customer

    def get_customer(self, customer_id: str) -> Optional[Customer]:
        """Get customer by ID."""
        for customer in self.repository.data.customers:
            if customer.id == customer_id:
                return customer
        return None

    def require_customer(self, customer_id: str) -> Customer:
        """Get customer by ID or raise NotFoundError."""
        customer = self.get_customer(customer_id)
        if customer is None:
            raise NotFoundError(customer_not_found(customer_id))
        return customer

    def edit_customer(self, customer_id: str, name: str, **details: str) -> Customer:
        """Edit a customer.

        A new name is written into every transaction of the customer before
        anything is saved, then customer totals are recomputed under the new
        name.

        Args:
            customer_id: Customer ID
            name: New (or unchanged) name
            **details: Any of phone, tc, dob, city, district, street

        Raises:
            NotFoundError: If customer doesn't exist
            ValidationError: If name is blank or a detail field is unknown
            ConflictError: If another customer already has the name
            PersistenceError: If the store rejects a write
        """
        unknown = set(details) - set(DETAIL_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown customer fields: {', '.join(sorted(unknown))}")

        customer = self.require_customer(customer_id)
        name = self._check_name(name, exclude_id=customer_id)
        updated = replace(
            customer,
            name=name,
            **{field: (value or "").strip() for field, value in details.items() if value is not None},
        )

        data = self.repository.data
        renamed = updated.name != customer.name
        previous_transactions = list(data.transactions)
        previous_customers = list(data.customers)
        data.customers[data.customers.index(customer)] = updated

        if renamed:
            data.transactions = [
                replace(t, customer=name) if t.customer == customer.name else t
                for t in data.transactions
            ]
            try:
                self.repository.save_transactions()
            except PersistenceError:
                data.transactions = previous_transactions
                data.customers = previous_customers
                raise
            self.repository.refresh_aggregates(persist=True)
            log.info(
                "customer_renamed id=%s old=%s new=%s", customer_id, customer.name, name
            )
        else:
            self._save(previous_customers)
            log.info("customer_updated id=%s", customer_id)
        return self.require_customer(customer_id)

    def delete_customer(self, customer_id: str, cascade: bool = False) -> int:
        """Delete a customer.

        Args:
            customer_id: Customer ID
            cascade: Must be True when the customer has transactions; they
                are deleted as well

        Returns:
            Number of transactions deleted with the customer

        Raises:
            NotFoundError: If customer doesn't exist
            DependencyError: If the customer has transactions and cascade is False
            PersistenceError: If the store rejects a write
        """
        customer = self.require_customer(customer_id)
        data = self.repository.data
        owned = [t for t in data.transactions if t.customer == customer.name]
        if owned and not cascade:
            raise DependencyError(customer_delete_blocked(customer.name, len(owned)))

        if owned:
            previous_transactions = list(data.transactions)
            data.transactions = [t for t in data.transactions if t.customer != customer.name]
            try:
                self.repository.save_transactions()
            except PersistenceError:
                data.transactions = previous_transactions
                raise

        previous_customers = list(data.customers)
        data.customers = [c for c in data.customers if c.id != customer_id]
        self._save(previous_customers)
        self.repository.refresh_aggregates(persist=True)
        log.info(
            "customer_deleted id=%s name=%s transactions=%s",
            customer_id,
            customer.name,
            len(owned),
        )
        return len(owned)

    def list_customers(self, sort_by: str = "name", descending: bool = False) -> list[Customer]:
        """List customers sorted by a field.

        Args:
            sort_by: One of name, tc, dob, phone, address
            descending: Reverse the order

        Raises:
            ValidationError: If sort_by is not a sortable field
        """
        if sort_by not in SORT_FIELDS:
            raise ValidationError(
                f"Cannot sort by '{sort_by}'; choose one of {', '.join(SORT_FIELDS)}"
            )
        return sorted(
            self.repository.data.customers,
            key=lambda c: name_key(getattr(c, sort_by) or ""),
            reverse=descending,
        )
