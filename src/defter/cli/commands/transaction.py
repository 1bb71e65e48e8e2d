"""Transaction management commands."""

import click

from defter.cli.error_handling import handle_domain_error
from defter.cli.formatting import money, quantity, type_label
from defter.domain.transaction import TransactionService
from defter.utils.date_parser import format_date_display, parse_date


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("list")
@click.option("--customer", help="Part of the customer name")
@click.option("--type", "txn_type", help="Transaction type (SATIŞ, VERESİYE, ... or sale, credit, ...)")
@click.option("--product-type", help="Product type")
@click.option("--start-date", help="Start date (inclusive)")
@click.option("--end-date", help="End date (inclusive)")
@click.pass_context
def list_transactions(
    ctx,
    customer: str | None,
    txn_type: str | None,
    product_type: str | None,
    start_date: str | None,
    end_date: str | None,
):
    """List transactions of the current ledger."""
    service = TransactionService(ctx.obj["repository"])

    start = end = None
    try:
        if start_date:
            start = parse_date(start_date)
        if end_date:
            end = parse_date(end_date)
    except ValueError as e:
        click.echo(f"Error: Invalid date: {e}", err=True)
        ctx.exit(1)

    try:
        transactions = service.list_transactions(
            customer=customer,
            type=txn_type,
            product_type=product_type,
            start_date=start,
            end_date=end,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(
        f"\n{'ID':10s}  {'Date':10s}  {'Customer':20s}  {'Type':9s}  "
        f"{'Product':20s}  {'Qty':>8s}  {'Price':>10s}  {'Total':>12s}"
    )
    click.echo("-" * 112)
    for txn in transactions:
        click.echo(
            f"{txn.id:10s}  {format_date_display(txn.date):10s}  {txn.customer[:20]:20s}  "
            f"{type_label(txn.type):9s}  {txn.product_name[:20]:20s}  "
            f"{quantity(txn.quantity):>8s}  {money(txn.price):>10s}  {money(txn.total):>12s}"
        )
    click.echo(f"\n{len(transactions)} transaction(s)")


@transaction_group.command("delete")
@click.argument("transaction_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: str, yes: bool):
    """Delete a transaction.

    Stock taken by the transaction is not put back; use
    'product add-stock' to correct it.
    """
    service = TransactionService(ctx.obj["repository"])
    txn = service.get_transaction(transaction_id)
    if txn is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(
        f"Delete {type_label(txn.type)} of {money(txn.total)} for '{txn.customer}'?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_transaction(transaction_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted transaction {transaction_id}")


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
