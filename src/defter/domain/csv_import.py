"""CSV import domain service."""

import csv
import io
import logging
from dataclasses import replace
from decimal import Decimal
from typing import Optional

from defter.domain.aggregator import UNNAMED_CUSTOMER
from defter.domain.entities import Customer, ImportResult, Product, Transaction, TransactionType
from defter.domain.errors import FormatError, PersistenceError
from defter.domain.ledger import LedgerRepository
from defter.utils.amount_parser import parse_optional_amount
from defter.utils.date_parser import parse_date
from defter.utils.ids import generate_id
from defter.utils.names import name_key

log = logging.getLogger("defter.import")

UNKNOWN_PRODUCT = "Bilinmeyen Ürün"
DEFAULT_UNIT = "TANE"
DEFAULT_PRODUCT_TYPE = "DİĞER"

# Transaction column -> field
TRANSACTION_COLUMNS = {
    "TARİH": "date",
    "ADI SOYADI": "customer",
    "VERESİYE/SATIŞ": "type",
    "MALIN CİNSİ": "product_type",
    "ÇEŞİT": "product_name",
    "MİKTAR": "quantity",
    "ADET": "unit",
    "FİYAT": "price",
    "TOPLAM": "total",
}

# Product name column -> product type, first match wins
PRODUCT_NAME_COLUMNS = (
    ("ÜRÜN ADI", "DİĞER"),
    ("İLAÇ ADI", "İLAÇ"),
    ("GÜBRE ADI", "GÜBRE"),
)
PRODUCT_PRICE_COLUMN = "FİYAT"

ZERO = Decimal("0")
ONE = Decimal("1")


def _read_rows(text: str, known_columns: set[str], label: str) -> list[tuple[int, dict[str, str]]]:
    """Read a header-keyed blob into ``(row_number, {column_key: value})`` rows.

    Column names are compared with ``name_key`` so ``Tarih`` and ``TARİH``
    address the same column.

    Raises:
        FormatError: If the blob cannot be parsed or has no recognised column
    """
    if not text or not text.strip():
        return []
    text = text.lstrip("\ufeff")

    try:
        delimiter = csv.Sniffer().sniff(text[:1024], delimiters=",;\t").delimiter
    except csv.Error:
        delimiter = ","

    try:
        reader = csv.DictReader(io.StringIO(text), delimiter=delimiter)
        columns = reader.fieldnames
        if not columns:
            raise FormatError(f"{label} CSV has no header row")
        keys = {column: name_key(column) for column in columns if column}
        if not set(keys.values()) & known_columns:
            raise FormatError(
                f"{label} CSV has no recognised column (found: {', '.join(c for c in columns if c)})"
            )

        rows = []
        for row_num, row in enumerate(reader, start=2):
            values = {
                keys[column]: (value or "").strip()
                for column, value in row.items()
                if column in keys and isinstance(value, str)
            }
            if not any(values.values()):
                continue
            rows.append((row_num, values))
        return rows
    except csv.Error as e:
        raise FormatError(f"Could not parse {label} CSV: {e}") from e


class CSVImportService:
    """Service for importing delimited text exported from paper-ledger spreadsheets."""

    def __init__(self, repository: LedgerRepository):
        """Initialize CSV import service.

        Args:
            repository: Ledger repository holding the current ledger
        """
        self.repository = repository

    def _parse_products(self, text: str) -> list[Product]:
        name_columns = [(name_key(column), kind) for column, kind in PRODUCT_NAME_COLUMNS]
        price_column = name_key(PRODUCT_PRICE_COLUMN)
        rows = _read_rows(text, {key for key, _ in name_columns}, "Products")

        products: list[Product] = []
        seen: set[str] = set()
        for _row_num, row in rows:
            name, kind = UNKNOWN_PRODUCT, DEFAULT_PRODUCT_TYPE
            for column, column_kind in name_columns:
                if row.get(column):
                    name, kind = row[column], column_kind
                    break
            try:
                price = parse_optional_amount(row.get(price_column))
            except ValueError:
                price = ZERO
            if price <= ZERO or name == UNKNOWN_PRODUCT or name_key(name) in seen:
                continue
            seen.add(name_key(name))
            products.append(
                Product(
                    id=generate_id(),
                    name=name,
                    type=kind,
                    unit="",
                    selling_price=price,
                    buying_price=ZERO,
                    stock=ZERO,
                )
            )
        return products

    def _parse_transactions(
        self, text: str, catalog: dict[str, Product], errors: list[str]
    ) -> list[Transaction]:
        columns = {name_key(column): field for column, field in TRANSACTION_COLUMNS.items()}
        rows = _read_rows(text, set(columns), "Transactions")

        transactions = []
        for row_num, row in rows:
            values = {field: row.get(key, "") for key, field in columns.items()}
            try:
                txn_date = parse_date(values["date"])
                txn_type = (
                    TransactionType.parse(values["type"]) if values["type"] else TransactionType.SALE
                )
                quantity = parse_optional_amount(values["quantity"], ONE)
                price = parse_optional_amount(values["price"])
                total = parse_optional_amount(values["total"])
            except ValueError as e:
                errors.append(f"Row {row_num}: {e}")
                continue
            if quantity == ZERO:
                quantity = ONE

            product_name = values["product_name"] or UNKNOWN_PRODUCT
            if price == ZERO and total == ZERO:
                product = catalog.get(name_key(product_name))
                if product is not None:
                    price = product.selling_price
                    total = quantity * price
            elif price == ZERO:
                price = total / quantity
            elif total == ZERO:
                total = quantity * price

            transactions.append(
                Transaction(
                    id=generate_id(),
                    date=txn_date,
                    customer=values["customer"] or UNNAMED_CUSTOMER,
                    type=txn_type,
                    product_type=values["product_type"] or DEFAULT_PRODUCT_TYPE,
                    product_name=product_name,
                    quantity=quantity,
                    unit=values["unit"] or DEFAULT_UNIT,
                    price=price,
                    total=total,
                )
            )
        return transactions

    def import_csv(
        self, transactions_text: str, products_text: Optional[str] = None
    ) -> ImportResult:
        """Merge delimited text into the current ledger.

        Existing transactions, products and customers are kept. An imported
        product whose name is already in the catalog is skipped, and a
        customer name matching an existing customer (ignoring case) is
        recorded under the existing spelling.

        Args:
            transactions_text: Transactions blob, first row is the header
            products_text: Optional products blob, first row is the header

        Returns:
            ImportResult with the number of records added and row errors

        Raises:
            FormatError: If a blob cannot be parsed; nothing is written
            PersistenceError: If the store rejects a write
        """
        errors: list[str] = []
        data = self.repository.data

        imported_products = self._parse_products(products_text or "")
        catalog = {name_key(p.name): p for p in data.products}
        new_products = [p for p in imported_products if name_key(p.name) not in catalog]
        for product in imported_products:
            catalog.setdefault(name_key(product.name), product)

        imported = self._parse_transactions(transactions_text or "", catalog, errors)
        if not imported and not new_products and not errors:
            raise FormatError("Nothing to import")

        spelling = {name_key(c.name): c.name for c in data.customers}
        transactions = []
        new_customers: list[Customer] = []
        for txn in imported:
            key = name_key(txn.customer)
            if key in spelling:
                if spelling[key] != txn.customer:
                    txn = replace(txn, customer=spelling[key])
            elif txn.customer != UNNAMED_CUSTOMER:
                spelling[key] = txn.customer
                new_customers.append(Customer(id=generate_id(), name=txn.customer, phone=""))
            transactions.append(txn)

        previous = (list(data.transactions), list(data.products), list(data.customers))
        data.transactions.extend(transactions)
        data.products.extend(new_products)
        data.customers.extend(new_customers)
        try:
            self.repository.save_transactions()
            self.repository.save_products()
            self.repository.refresh_aggregates(persist=True)
        except PersistenceError:
            data.transactions, data.products, data.customers = previous
            log.error(
                "import_failed ledger=%s transactions=%s products=%s",
                data.ledger_id,
                len(transactions),
                len(new_products),
            )
            raise

        for message in errors:
            log.warning("import_row_skipped ledger=%s %s", data.ledger_id, message)
        log.info(
            "csv_imported ledger=%s transactions=%s products=%s customers=%s skipped=%s",
            data.ledger_id,
            len(transactions),
            len(new_products),
            len(new_customers),
            len(errors),
        )
        return ImportResult(
            transactions=len(transactions),
            products=len(new_products),
            customers=len(new_customers),
            errors=tuple(errors),
        )
