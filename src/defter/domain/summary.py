"""Dashboard and balance domain service."""

from defter.domain.aggregator import LedgerAggregator
from defter.domain.entities import CustomerBalance, DashboardTotals
from defter.domain.ledger import LedgerRepository


class SummaryService:
    """Service for building the dashboard of the current ledger."""

    def __init__(self, repository: LedgerRepository):
        """Initialize summary service.

        Args:
            repository: Ledger repository holding the current ledger
        """
        self.repository = repository

    @property
    def aggregator(self) -> LedgerAggregator:
        return self.repository.aggregator

    def dashboard(self) -> DashboardTotals:
        """Shop-wide totals computed from the transactions."""
        data = self.repository.data
        return self.aggregator.dashboard_totals(
            data.transactions, data.customers, data.products
        )

    def balances(self, only_open: bool = False) -> list[CustomerBalance]:
        """Balance rows per customer, largest net debt first.

        Args:
            only_open: Leave out customers whose balance is settled
        """
        data = self.repository.data
        rows = self.aggregator.customer_balances(data.transactions, data.customers)
        if only_open:
            rows = [row for row in rows if not row.settled]
        return sorted(rows, key=lambda row: row.net_debt, reverse=True)
