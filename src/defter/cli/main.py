"""Main CLI entry point."""

import click

from defter.config import logs_dir_for
from defter.database.factories import (
    create_json_store,
    create_sqlite_store,
    resolve_database_path,
)
from defter.domain.ledger import LedgerRepository
from defter.logging_config import setup_logging

# Import and register all commands at module level
from defter.cli.commands import (
    customer,
    export_cmd,
    import_cmd,
    ledger,
    product,
    sale,
    summary,
    transaction,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to the store (overrides DEFTER_DB_PATH environment variable)",
    envvar="DEFTER_DB_PATH",
)
@click.option(
    "--store",
    "store_kind",
    type=click.Choice(["sqlite", "json"]),
    default="sqlite",
    show_default=True,
    help="Store backend; 'json' reads a directory of <key>.json files",
)
@click.pass_context
def cli(ctx, db_path: str | None, store_kind: str):
    """Defter - sales, credit and stock book for small shops.

    Keeps several independent ledgers, each with its own transactions,
    customers and product catalog.
    """
    ctx.ensure_object(dict)

    # Open the store only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        if store_kind == "json":
            store = create_json_store(db_path)
            location = store.directory / "store"
        else:
            location = resolve_database_path(db_path)
            store = create_sqlite_store(str(location))
            store.connect()
        setup_logging(logs_dir_for(location))
        ctx.obj["store"] = store
        ctx.obj["repository"] = LedgerRepository(store)
        ctx.call_on_close(store.disconnect)


# Register all commands
ledger.register_commands(cli)
sale.register_commands(cli)
transaction.register_commands(cli)
customer.register_commands(cli)
product.register_commands(cli)
import_cmd.register_commands(cli)
export_cmd.register_commands(cli)
summary.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
