"""Domain layer for defter application."""

from defter.domain.ledger import LedgerRepository
from defter.domain.aggregator import LedgerAggregator
from defter.domain.transaction import TransactionService
from defter.domain.customer import CustomerService
from defter.domain.product import ProductService
from defter.domain.csv_import import CSVImportService
from defter.domain.csv_export import CSVExportService
from defter.domain.summary import SummaryService

__all__ = [
    "LedgerRepository",
    "LedgerAggregator",
    "TransactionService",
    "CustomerService",
    "ProductService",
    "CSVImportService",
    "CSVExportService",
    "SummaryService",
]
