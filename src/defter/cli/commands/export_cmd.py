"""CSV export command."""

import click

from defter.cli.error_handling import handle_domain_error
from defter.domain.csv_export import EXPORTABLE, CSVExportService


@click.command("export")
@click.argument("record_set", type=click.Choice(EXPORTABLE))
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False),
    default=".",
    show_default=True,
    help="Directory to write the file to",
)
@click.option("--filename", help="File name (defaults to <set>_YYYY-MM-DD.csv)")
@click.pass_context
def export_csv(ctx, record_set: str, output_dir: str, filename: str | None):
    """Export transactions, customers or products of the current ledger as CSV."""
    service = CSVExportService(ctx.obj["repository"])
    try:
        path = service.export(record_set, output_dir, filename=filename)
    except ValueError as e:
        handle_domain_error(ctx, e)
    except OSError as e:
        click.echo(f"Error: Could not write file: {e}", err=True)
        ctx.exit(1)
    click.echo(f"Exported {record_set} to {path}")


def register_commands(cli):
    """Register export command with main CLI."""
    cli.add_command(export_csv)
