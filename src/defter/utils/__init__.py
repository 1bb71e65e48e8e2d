"""Utility functions for defter."""

from defter.utils.date_parser import parse_date
from defter.utils.amount_parser import parse_amount
from defter.utils.ids import generate_id
from defter.utils.names import name_key

__all__ = ["parse_date", "parse_amount", "generate_id", "name_key"]
