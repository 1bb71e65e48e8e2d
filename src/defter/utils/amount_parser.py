"""Amount and quantity parsing utilities."""

from decimal import Decimal, InvalidOperation
import re
from typing import Optional


def parse_amount(amount_str: "str | int | float | Decimal") -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "123,45" (decimal comma)
    - "1.234,56" and "1,234.56" (thousands separators)
    - "₺123,45", "123,45 TL"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string, or an already numeric value

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if isinstance(amount_str, bool):
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if isinstance(amount_str, Decimal):
        return amount_str
    if isinstance(amount_str, (int, float)):
        return Decimal(str(amount_str))

    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols and the TL suffix
    amount_str = re.sub(r"[₺$€£]|\bTL\b", "", amount_str, flags=re.IGNORECASE)
    amount_str = amount_str.replace(" ", "")

    # The separator that comes last is the decimal separator
    if "," in amount_str and "." in amount_str:
        if amount_str.rfind(",") > amount_str.rfind("."):
            amount_str = amount_str.replace(".", "").replace(",", ".")
        else:
            amount_str = amount_str.replace(",", "")
    elif "," in amount_str:
        amount_str = amount_str.replace(",", ".")

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}'") from e
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return -amount if is_negative else amount


def parse_optional_amount(
    amount_str: Optional[str], default: Decimal = Decimal("0")
) -> Decimal:
    """Parse an amount, returning ``default`` for blank input.

    Raises:
        ValueError: If a non-blank value cannot be parsed
    """
    if amount_str is None:
        return default
    if isinstance(amount_str, str) and not amount_str.strip():
        return default
    return parse_amount(amount_str)
