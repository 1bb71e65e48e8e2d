"""Dashboard command."""

import click

from defter.cli.error_handling import handle_domain_error
from defter.cli.formatting import money
from defter.domain.summary import SummaryService


@click.command("summary")
@click.option("--open-only", is_flag=True, help="Only list customers who still owe money")
@click.pass_context
def summary(ctx, open_only: bool):
    """Show shop totals and the customer balance table."""
    repository = ctx.obj["repository"]
    service = SummaryService(repository)
    try:
        totals = service.dashboard()
        balances = service.balances(only_open=open_only)
        ledger_name = repository.current.name
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nLedger: {ledger_name}")
    click.echo("=" * 48)
    click.echo(f"{'Transactions':24s}{totals.total_transactions:>24d}")
    click.echo(f"{'Customers':24s}{totals.total_customers:>24d}")
    click.echo(f"{'Total veresiye':24s}{money(totals.total_credit):>24s}")
    click.echo(f"{'Total satış':24s}{money(totals.total_sales):>24s}")
    click.echo(f"{'Net balance':24s}{money(totals.net_balance):>24s}")
    click.echo(f"{'Cost of goods':24s}{money(totals.cost_of_goods):>24s}")
    click.echo(f"{'Profit':24s}{money(totals.profit):>24s}")

    if not balances:
        click.echo("\nNo customer balances.")
        return

    click.echo(f"\n{'Customer':24s}  {'Veresiye':>12s}  {'Satış':>12s}  {'Net debt':>12s}")
    click.echo("-" * 66)
    for row in balances:
        click.echo(
            f"{row.name[:24]:24s}  {money(row.veresiye):>12s}  "
            f"{money(row.satis):>12s}  {money(row.net_debt):>12s}"
        )


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
