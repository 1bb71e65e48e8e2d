"""CLI helpers for resolving names or IDs to records."""

from __future__ import annotations

from typing import Iterable, TypeVar

import click

from defter.utils.names import name_key

T = TypeVar("T")


def resolve_record(records: Iterable[T], value: str, kind: str) -> T:
    """Find a record by exact ID, else by case-insensitive name.

    Raises:
        ValueError: If nothing matches
    """
    records = list(records)
    for record in records:
        if record.id == value:
            return record
    for record in records:
        if name_key(record.name) == name_key(value):
            return record
    raise ValueError(f"{kind} '{value}' not found")


def resolve_or_exit(ctx: click.Context, records: Iterable[T], value: str, kind: str) -> T:
    """Resolve a record, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_record(records, value, kind)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
