"""Domain model entities for defter.

These are pure data classes representing business concepts, independent of
the JSON records the store holds. Records are converted by
``defter.database.mappers`` so that older record shapes are migrated once,
at load time, instead of being checked on every read.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from defter.utils.names import name_key


class TransactionType(Enum):
    """Kind of economic event. Values are the persisted literals."""

    SALE = "SATIŞ"
    CREDIT = "VERESİYE"
    BOTH = "İKİSİDE"
    PAYMENT = "ÖDEME"
    RETURN = "İADE"

    @classmethod
    def parse(cls, value: "str | TransactionType") -> "TransactionType":
        """Resolve a persisted literal or an English member name.

        Raises:
            ValueError: If the value names no transaction type
        """
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for member in cls:
            if text == member.value or text.upper() == member.name:
                return member
        folded = name_key(text)
        for member in cls:
            if folded == name_key(member.value):
                return member
        raise ValueError(f"Unknown transaction type '{value}'")


# Types that add to a customer's paid total.
SALES_TYPES = frozenset(
    {TransactionType.SALE, TransactionType.BOTH, TransactionType.PAYMENT}
)


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity."""

    id: str
    date: Optional[date]
    customer: str
    type: "TransactionType | str"
    product_type: str
    product_name: str
    quantity: Decimal
    unit: str
    price: Decimal
    total: Decimal


@dataclass(frozen=True)
class Customer:
    """Customer domain entity.

    ``veresiye`` and ``satis`` are a cache of the aggregator's output.
    """

    id: str
    name: str
    phone: str = ""
    tc: str = ""
    dob: str = ""
    city: str = ""
    district: str = ""
    street: str = ""
    veresiye: Decimal = Decimal("0")
    satis: Decimal = Decimal("0")

    @property
    def address(self) -> str:
        return " ".join(p for p in (self.city, self.district, self.street) if p)


@dataclass(frozen=True)
class Product:
    """Product catalog entity."""

    id: str
    name: str
    type: str
    unit: str
    selling_price: Decimal
    buying_price: Decimal = Decimal("0")
    stock: Decimal = Decimal("0")


@dataclass(frozen=True)
class LedgerMetadata:
    """Metadata of one named ledger ("database")."""

    id: str
    name: str
    created_date: datetime
    last_modified: datetime


@dataclass
class LedgerData:
    """Record sets of the currently open ledger.

    The repository owns exactly one instance; services mutate it through the
    repository rather than through module-level state.
    """

    ledger_id: str
    transactions: list[Transaction] = field(default_factory=list)
    customers: list[Customer] = field(default_factory=list)
    products: list[Product] = field(default_factory=list)

    def find_customer(self, name: str) -> Optional[Customer]:
        """Find a customer by case-insensitive name."""
        key = name_key(name)
        for customer in self.customers:
            if name_key(customer.name) == key:
                return customer
        return None

    def find_product(self, name: str) -> Optional[Product]:
        """Find a product by case-insensitive name."""
        key = name_key(name)
        for product in self.products:
            if name_key(product.name) == key:
                return product
        return None


@dataclass(frozen=True)
class DashboardTotals:
    """Shop-wide totals shown on the dashboard."""

    total_transactions: int
    total_customers: int
    total_credit: Decimal
    total_sales: Decimal
    cost_of_goods: Decimal

    @property
    def net_balance(self) -> Decimal:
        return self.total_sales - self.total_credit

    @property
    def profit(self) -> Decimal:
        return self.total_sales - self.cost_of_goods


@dataclass(frozen=True)
class CustomerBalance:
    """Per-customer row of the balance table."""

    name: str
    veresiye: Decimal
    satis: Decimal

    @property
    def turnover(self) -> Decimal:
        return self.veresiye + self.satis

    @property
    def net_debt(self) -> Decimal:
        return self.veresiye - self.satis

    @property
    def settled(self) -> bool:
        return self.net_debt <= 0


@dataclass(frozen=True)
class ImportResult:
    """Outcome of a delimited-text import."""

    transactions: int
    products: int
    customers: int
    errors: tuple[str, ...] = ()
