"""Shared pytest fixtures for defter tests."""

from pathlib import Path

import pytest

from defter.database.factories import create_sqlite_store
from defter.domain.csv_export import CSVExportService
from defter.domain.csv_import import CSVImportService
from defter.domain.customer import CustomerService
from defter.domain.ledger import LedgerRepository
from defter.domain.product import ProductService
from defter.domain.summary import SummaryService
from defter.domain.transaction import TransactionService


@pytest.fixture
def temp_store(tmp_path):
    """Create a temporary SQLite store for testing."""
    db_path = tmp_path / "defter.db"
    store = create_sqlite_store(str(db_path))
    # Store the path for tests that need it
    store.database_path = str(db_path)
    store.connect()

    yield store

    store.disconnect()


@pytest.fixture
def repository(temp_store):
    """Create a LedgerRepository on the temporary store."""
    return LedgerRepository(temp_store)


@pytest.fixture
def transaction_service(repository):
    """Create a TransactionService with a temporary store."""
    return TransactionService(repository)


@pytest.fixture
def customer_service(repository):
    """Create a CustomerService with a temporary store."""
    return CustomerService(repository)


@pytest.fixture
def product_service(repository):
    """Create a ProductService with a temporary store."""
    return ProductService(repository)


@pytest.fixture
def csv_import_service(repository):
    """Create a CSVImportService with a temporary store."""
    return CSVImportService(repository)


@pytest.fixture
def csv_export_service(repository):
    """Create a CSVExportService with a temporary store."""
    return CSVExportService(repository)


@pytest.fixture
def summary_service(repository):
    """Create a SummaryService with a temporary store."""
    return SummaryService(repository)


@pytest.fixture
def sample_products(product_service):
    """Create a small catalog with stock: Gübre (20) and İlaç (5)."""
    gubre = product_service.add_product(
        "Gübre", "5", buying_price="3", type="GÜBRE", unit="ÇUVAL"
    )
    product_service.add_stock(gubre.id, 20)
    ilac = product_service.add_product(
        "İlaç", "12,50", buying_price="10", type="İLAÇ", unit="ŞİŞE"
    )
    product_service.add_stock(ilac.id, 5)
    return {
        "gubre": product_service.get_product(gubre.id),
        "ilac": product_service.get_product(ilac.id),
    }


@pytest.fixture
def sample_customer(customer_service):
    """Create a sample customer."""
    return customer_service.add_customer(
        "Ahmet Yılmaz", phone="05551234567", city="Konya", district="Ereğli"
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
