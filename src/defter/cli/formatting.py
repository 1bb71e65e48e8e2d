"""Plain-text rendering shared by the commands."""

from decimal import Decimal

from defter.domain.entities import TransactionType


def money(value: Decimal) -> str:
    """Render an amount with two decimals and a thousands separator."""
    return f"{value:,.2f}"


def quantity(value: Decimal) -> str:
    """Render a quantity without a trailing ``.0`` for whole numbers."""
    if value == value.to_integral_value():
        return f"{value.to_integral_value():,}"
    return f"{value.normalize():f}"


def type_label(value: "TransactionType | str") -> str:
    return value.value if isinstance(value, TransactionType) else str(value)
