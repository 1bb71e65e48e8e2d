"""Date parsing utilities."""

from datetime import date, datetime, timedelta

from dateutil import parser as date_parser


def parse_date(date_str: "str | date | None") -> date:
    """Parse a date string into a date object.

    Supports:
    - ISO dates: "2024-01-15"
    - Day-first dates as typed in the shop: "15.01.2024", "15/01/2024"
    - Relative words: "today", "yesterday", "bugün", "dün"
    - Blank input, which means today

    Args:
        date_str: Date string, a date, or None

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    if isinstance(date_str, datetime):
        return date_str.date()
    if isinstance(date_str, date):
        return date_str

    text = (date_str or "").strip().lower()
    today = date.today()
    if not text:
        return today

    relative_dates = {
        "today": today,
        "bugün": today,
        "yesterday": today - timedelta(days=1),
        "dün": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
        "yarın": today + timedelta(days=1),
    }
    if text in relative_dates:
        return relative_dates[text]

    try:
        # ISO input must not be read day-first
        if len(text) >= 8 and text[4] == "-" and text[:4].isdigit():
            return date_parser.isoparse(text).date()
        return date_parser.parse(text, dayfirst=True).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}") from e


def format_date_display(value: "date | str | None") -> str:
    """Format a date the way the shop reads it (DD.MM.YYYY), '-' when empty."""
    if not value:
        return "-"
    if isinstance(value, str):
        try:
            value = parse_date(value)
        except ValueError:
            return value
    return value.strftime("%d.%m.%Y")
