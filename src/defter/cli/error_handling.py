"""CLI error handling helpers."""

import logging

import click

from defter.domain.errors import DomainError, PersistenceError

log = logging.getLogger("defter.cli")


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Log a domain error, render it on stderr and exit with failure.

    Store failures are logged at ERROR so they reach ``errors.log``; rejected
    input is only a warning.
    """
    command = ctx.command_path or "defter"
    if isinstance(error, PersistenceError):
        log.error("command_failed command=%s error=%s", command, error)
    else:
        log.warning(
            "command_rejected command=%s kind=%s error=%s",
            command,
            type(error).__name__,
            error,
        )
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
