"""Derived ledger state: customer totals, dashboard totals, balances."""

from collections import defaultdict
from dataclasses import replace
from decimal import Decimal
from typing import Iterable, Sequence

from defter.domain.entities import (
    Customer,
    CustomerBalance,
    DashboardTotals,
    Product,
    SALES_TYPES,
    Transaction,
    TransactionType,
)
from defter.utils.ids import generate_id
from defter.utils.names import name_key

# Aggregate key for transactions recorded without a customer name.
UNNAMED_CUSTOMER = "İSİMSİZ"

ZERO = Decimal("0")


class LedgerAggregator:
    """Recomputes every derived figure from the transaction set.

    Nothing here is incremental: each call starts from an empty map, so a
    stale cache can never leak into the result and calling twice gives the
    same figures.
    """

    def customer_totals(
        self, transactions: Iterable[Transaction]
    ) -> dict[str, dict[str, Decimal]]:
        """Sum credit and paid totals per customer name.

        Returns:
            Mapping of customer name to ``{"veresiye": ..., "satis": ...}``
            in first-seen order
        """
        totals: dict[str, dict[str, Decimal]] = defaultdict(
            lambda: {"veresiye": ZERO, "satis": ZERO}
        )
        for txn in transactions:
            name = txn.customer or UNNAMED_CUSTOMER
            entry = totals[name]
            if txn.type == TransactionType.CREDIT:
                entry["veresiye"] += txn.total
            elif txn.type in SALES_TYPES:
                entry["satis"] += txn.total
            # RETURN and unrecognised types count towards neither total
        return dict(totals)

    def recompute(
        self, transactions: Sequence[Transaction], customers: Sequence[Customer]
    ) -> list[Customer]:
        """Return the customer set with fresh ``veresiye``/``satis`` values.

        Customers are matched to transactions by exact name. A name that
        appears only in transactions gets a new customer record; customers
        without transactions keep their record with totals reset to zero.
        """
        totals = self.customer_totals(transactions)

        result: list[Customer] = []
        seen: set[str] = set()
        for customer in customers:
            entry = totals.get(customer.name)
            if entry is not None:
                result.append(
                    replace(customer, veresiye=entry["veresiye"], satis=entry["satis"])
                )
            else:
                result.append(replace(customer, veresiye=ZERO, satis=ZERO))
            seen.add(customer.name)

        for name, entry in totals.items():
            if name in seen:
                continue
            result.append(
                Customer(
                    id=generate_id(),
                    name=name,
                    phone="",
                    veresiye=entry["veresiye"],
                    satis=entry["satis"],
                )
            )
            seen.add(name)
        return result

    def cost_of_goods(
        self, transactions: Iterable[Transaction], products: Sequence[Product]
    ) -> Decimal:
        """Buying cost of everything that left the shop.

        Payments and returns carry no goods; a transaction whose product is
        no longer in the catalog costs nothing.
        """
        buying_prices = {name_key(p.name): p.buying_price for p in products}
        total = ZERO
        for txn in transactions:
            if txn.type in (TransactionType.PAYMENT, TransactionType.RETURN):
                continue
            buying_price = buying_prices.get(name_key(txn.product_name), ZERO)
            total += txn.quantity * buying_price
        return total

    def dashboard_totals(
        self,
        transactions: Sequence[Transaction],
        customers: Sequence[Customer],
        products: Sequence[Product],
    ) -> DashboardTotals:
        """Shop-wide totals, always computed from the transactions."""
        totals = self.customer_totals(transactions)
        return DashboardTotals(
            total_transactions=len(transactions),
            total_customers=len(customers),
            total_credit=sum((t["veresiye"] for t in totals.values()), ZERO),
            total_sales=sum((t["satis"] for t in totals.values()), ZERO),
            cost_of_goods=self.cost_of_goods(transactions, products),
        )

    def customer_balances(
        self, transactions: Sequence[Transaction], customers: Sequence[Customer]
    ) -> list[CustomerBalance]:
        """One balance row per customer, including customers with no activity."""
        totals = self.customer_totals(transactions)
        names = [c.name for c in customers]
        known = set(names)
        names.extend(name for name in totals if name not in known)
        balances = []
        for name in names:
            entry = totals.get(name, {"veresiye": ZERO, "satis": ZERO})
            balances.append(
                CustomerBalance(name=name, veresiye=entry["veresiye"], satis=entry["satis"])
            )
        return balances
