"""Transaction domain service."""

import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Optional, Union

from defter.domain.entities import Transaction, TransactionType
from defter.domain.errors import (
    InsufficientStockError,
    NotFoundError,
    PersistenceError,
    ProductNotFoundError,
    ValidationError,
    insufficient_stock,
    product_not_found,
    transaction_not_found,
)
from defter.domain.ledger import LedgerRepository
from defter.utils.amount_parser import parse_optional_amount
from defter.utils.date_parser import parse_date
from defter.utils.ids import generate_id
from defter.utils.names import name_key

log = logging.getLogger("defter.transactions")

PAYMENT_PRODUCT_NAME = "Payment"
PAYMENT_PLACEHOLDER = "-"

ZERO = Decimal("0")

Amount = Union[str, int, float, Decimal, None]


def _parse_number(value, field: str) -> Decimal:
    try:
        return parse_optional_amount(value)
    except ValueError as e:
        raise ValidationError(f"Invalid {field}: {e}") from e


def _parse_txn_date(value: "str | date | None") -> date:
    try:
        return parse_date(value)
    except ValueError as e:
        raise ValidationError(f"Invalid date: {e}") from e


class TransactionService:
    """Service for recording and removing transactions of the current ledger."""

    def __init__(self, repository: LedgerRepository):
        """Initialize transaction service.

        Args:
            repository: Ledger repository holding the current ledger
        """
        self.repository = repository

    def record_transaction(
        self,
        customer: str,
        product_name: str,
        quantity: Amount,
        price: Amount = None,
        type: "TransactionType | str" = TransactionType.SALE,
        date: "str | date | None" = None,
        product_type: Optional[str] = None,
        unit: Optional[str] = None,
    ) -> Transaction:
        """Record a sale, credit sale or return against the product's stock.

        A blank or zero price is taken from the catalog. A RETURN puts the
        quantity back into stock; every other type needs enough stock and
        takes the quantity out.

        The transaction list is written before the product, so a failure in
        between leaves the transaction recorded with stale stock rather than
        stock consumed by a transaction that was never saved.

        Args:
            customer: Customer name
            product_name: Catalog product name, matched case-insensitively
            quantity: Quantity sold or returned
            price: Unit price; blank or zero uses the catalog selling price
            type: Transaction type (enum, literal or English name)
            date: Transaction date; blank means today
            product_type: Product type; defaults to the catalog type
            unit: Unit; defaults to the catalog unit

        Returns:
            The recorded transaction

        Raises:
            ValidationError: If a required field is missing or not positive
            ProductNotFoundError: If the product is not in the catalog
            InsufficientStockError: If a sale asks for more than is in stock
            PersistenceError: If the store rejects a write
        """
        data = self.repository.data
        try:
            txn_type = TransactionType.parse(type)
        except ValueError as e:
            raise ValidationError(str(e)) from e
        if txn_type == TransactionType.PAYMENT:
            raise ValidationError("Use record_payment for payments")

        customer = (customer or "").strip()
        product_name = (product_name or "").strip()
        txn_date = _parse_txn_date(date)
        txn_quantity = _parse_number(quantity, "quantity")
        txn_price = _parse_number(price, "price")

        product = data.find_product(product_name) if product_name else None
        if txn_price == ZERO and product is not None:
            txn_price = product.selling_price

        if not customer or not product_name or txn_quantity == ZERO or txn_price == ZERO:
            raise ValidationError(
                "Date, customer, product name, quantity and price are required"
            )
        if txn_quantity < ZERO:
            raise ValidationError("Quantity must be > 0")
        if txn_price < ZERO:
            raise ValidationError("Price must be > 0")
        if product is None:
            raise ProductNotFoundError(product_not_found(product_name))
        customer = self._known_spelling(customer)

        if txn_type == TransactionType.RETURN:
            new_stock = product.stock + txn_quantity
        else:
            if product.stock < txn_quantity:
                raise InsufficientStockError(
                    insufficient_stock(product.name, product.stock, txn_quantity)
                )
            new_stock = product.stock - txn_quantity

        txn = Transaction(
            id=generate_id(),
            date=txn_date,
            customer=customer,
            type=txn_type,
            product_type=product_type if product_type else product.type,
            product_name=product.name,
            quantity=txn_quantity,
            unit=unit if unit else product.unit,
            price=txn_price,
            total=txn_quantity * txn_price,
        )

        self._append(txn)

        index = data.products.index(product)
        data.products[index] = replace(product, stock=new_stock)
        try:
            self.repository.save_products()
        except PersistenceError:
            data.products[index] = product
            log.error(
                "stock_stale txn_id=%s product=%s expected_stock=%s",
                txn.id,
                product.name,
                new_stock,
            )
            raise

        self.repository.refresh_aggregates(persist=True)
        log.info(
            "transaction_recorded txn_id=%s type=%s customer=%s product=%s qty=%s total=%s stock=%s",
            txn.id,
            txn_type.name,
            customer,
            product.name,
            txn_quantity,
            txn.total,
            new_stock,
        )
        return txn

    def record_payment(
        self, customer: str, amount: Amount, date: "str | date | None" = None
    ) -> Transaction:
        """Record a payment received from a customer.

        Raises:
            ValidationError: If customer is blank or amount is not positive
            PersistenceError: If the store rejects a write
        """
        customer = (customer or "").strip()
        payment_date = _parse_txn_date(date)
        payment = _parse_number(amount, "amount")
        if not customer or payment <= ZERO:
            raise ValidationError("Customer and a positive amount are required")
        customer = self._known_spelling(customer)

        txn = Transaction(
            id=generate_id(),
            date=payment_date,
            customer=customer,
            type=TransactionType.PAYMENT,
            product_type=PAYMENT_PLACEHOLDER,
            product_name=PAYMENT_PRODUCT_NAME,
            quantity=Decimal("1"),
            unit=PAYMENT_PLACEHOLDER,
            price=payment,
            total=payment,
        )
        self._append(txn)
        self.repository.refresh_aggregates(persist=True)
        log.info("payment_recorded txn_id=%s customer=%s amount=%s", txn.id, customer, payment)
        return txn

    def _known_spelling(self, customer: str) -> str:
        """Name of the existing customer matching ignoring case, else as given."""
        existing = self.repository.data.find_customer(customer)
        return existing.name if existing is not None else customer

    def _append(self, txn: Transaction) -> None:
        """Append and save, taking the transaction back out if the save fails."""
        data = self.repository.data
        data.transactions.append(txn)
        try:
            self.repository.save_transactions()
        except PersistenceError:
            data.transactions.remove(txn)
            raise

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get transaction by ID."""
        for txn in self.repository.data.transactions:
            if txn.id == transaction_id:
                return txn
        return None

    def delete_transaction(self, transaction_id: str) -> Transaction:
        """Delete a transaction and refresh customer totals.

        Stock taken by the transaction is not put back.

        Raises:
            NotFoundError: If transaction doesn't exist
            PersistenceError: If the store rejects a write
        """
        data = self.repository.data
        txn = self.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        index = data.transactions.index(txn)
        del data.transactions[index]
        try:
            self.repository.save_transactions()
        except PersistenceError:
            data.transactions.insert(index, txn)
            raise
        self.repository.refresh_aggregates(persist=True)
        log.info("transaction_deleted txn_id=%s customer=%s", txn.id, txn.customer)
        return txn

    def list_transactions(
        self,
        customer: Optional[str] = None,
        type: "TransactionType | str | None" = None,
        product_type: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Transaction]:
        """List transactions with optional filters.

        Args:
            customer: Case-insensitive substring of the customer name
            type: Exact transaction type
            product_type: Exact product type
            start_date: Optional start date filter (inclusive)
            end_date: Optional end date filter (inclusive)

        Raises:
            ValidationError: If type names no transaction type
        """
        wanted_type = None
        if type:
            try:
                wanted_type = TransactionType.parse(type)
            except ValueError as e:
                raise ValidationError(str(e)) from e
        customer_key = name_key(customer) if customer else ""

        result = []
        for txn in self.repository.data.transactions:
            if customer_key and customer_key not in name_key(txn.customer):
                continue
            if wanted_type is not None and txn.type != wanted_type:
                continue
            if product_type and txn.product_type != product_type:
                continue
            if start_date is not None and (txn.date is None or txn.date < start_date):
                continue
            if end_date is not None and (txn.date is None or txn.date > end_date):
                continue
            result.append(txn)
        return result
