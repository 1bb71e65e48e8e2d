"""CSV export domain service."""

import csv
import io
import logging
from datetime import date
from pathlib import Path
from typing import Optional

from defter.database import mappers
from defter.domain.entities import TransactionType
from defter.domain.errors import ValidationError
from defter.domain.ledger import LedgerRepository

log = logging.getLogger("defter.export")

TRANSACTION_HEADER = [
    "Date", "Customer", "Type", "ProductType", "ProductName",
    "Quantity", "Unit", "Price", "Total",
]
CUSTOMER_HEADER = [
    "Name", "TC_ID", "DOB", "Phone", "City", "District", "Street",
    "TotalDebt", "TotalPaid",
]
PRODUCT_HEADER = ["Name", "Type", "Unit", "BuyingPrice", "SellingPrice", "Stock"]

EXPORTABLE = ("transactions", "customers", "products")


def default_filename(record_set: str, today: Optional[date] = None) -> str:
    """File name carrying the export date, e.g. ``transactions_2024-05-01.csv``."""
    return f"{record_set}_{(today or date.today()).isoformat()}.csv"


class CSVExportService:
    """Service for writing the current ledger's record sets as CSV."""

    def __init__(self, repository: LedgerRepository):
        """Initialize CSV export service.

        Args:
            repository: Ledger repository holding the current ledger
        """
        self.repository = repository

    def _rows(self, record_set: str) -> tuple[list[str], list[list]]:
        data = self.repository.data
        if record_set == "transactions":
            return TRANSACTION_HEADER, [
                [
                    t.date.isoformat() if t.date else "",
                    t.customer,
                    t.type.value if isinstance(t.type, TransactionType) else t.type,
                    t.product_type,
                    t.product_name,
                    mappers.to_number(t.quantity),
                    t.unit,
                    mappers.to_number(t.price),
                    mappers.to_number(t.total),
                ]
                for t in data.transactions
            ]
        if record_set == "customers":
            return CUSTOMER_HEADER, [
                [
                    c.name, c.tc, c.dob, c.phone, c.city, c.district, c.street,
                    mappers.to_number(c.veresiye), mappers.to_number(c.satis),
                ]
                for c in data.customers
            ]
        if record_set == "products":
            return PRODUCT_HEADER, [
                [
                    p.name, p.type, p.unit,
                    mappers.to_number(p.buying_price), mappers.to_number(p.selling_price), mappers.to_number(p.stock),
                ]
                for p in data.products
            ]
        raise ValidationError(
            f"Cannot export '{record_set}'; choose one of {', '.join(EXPORTABLE)}"
        )

    def render(self, record_set: str) -> str:
        """Render a record set as CSV text.

        Raises:
            ValidationError: If the record set is unknown or empty
        """
        header, rows = self._rows(record_set)
        if not rows:
            raise ValidationError(f"No {record_set} to export")
        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(header)
        writer.writerows(rows)
        return buffer.getvalue()

    def export(
        self, record_set: str, directory: "str | Path", filename: Optional[str] = None
    ) -> Path:
        """Write a record set to ``directory`` and return the file path.

        Raises:
            ValidationError: If the record set is unknown or empty
        """
        text = self.render(record_set)
        path = Path(directory) / (filename or default_filename(record_set))
        path.parent.mkdir(parents=True, exist_ok=True)
        # BOM so spreadsheet programs detect UTF-8 for the Turkish letters
        path.write_text(text, encoding="utf-8-sig", newline="")
        log.info(
            "csv_exported ledger=%s set=%s path=%s",
            self.repository.data.ledger_id,
            record_set,
            path,
        )
        return path
