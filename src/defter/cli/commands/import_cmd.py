"""CSV import command."""

from pathlib import Path

import click

from defter.cli.error_handling import handle_domain_error
from defter.domain.csv_import import CSVImportService


def _read_text(ctx, path: str | None) -> str:
    if path is None:
        return ""
    try:
        return Path(path).read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        click.echo(f"Error: Could not read {path}: {e}", err=True)
        ctx.exit(1)


@click.command("import")
@click.argument("transactions_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--products",
    "products_file",
    type=click.Path(exists=True, dir_okay=False),
    help="CSV file with the product list (ÜRÜN ADI / İLAÇ ADI / GÜBRE ADI, FİYAT)",
)
@click.pass_context
def import_csv(ctx, transactions_file: str, products_file: str | None):
    """Merge a spreadsheet export into the current ledger.

    TRANSACTIONS_FILE uses the paper-ledger headers TARİH, ADI SOYADI,
    VERESİYE/SATIŞ, MALIN CİNSİ, ÇEŞİT, MİKTAR, ADET, FİYAT, TOPLAM.
    """
    service = CSVImportService(ctx.obj["repository"])
    try:
        result = service.import_csv(
            _read_text(ctx, transactions_file), _read_text(ctx, products_file)
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo("\nImport complete:")
    click.echo(f"  Transactions: {result.transactions}")
    click.echo(f"  Products: {result.products}")
    click.echo(f"  Customers: {result.customers}")
    if result.errors:
        click.echo(f"  Skipped rows: {len(result.errors)}")
        for error in result.errors:
            click.echo(f"    {error}", err=True)


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_csv)
