"""Ledger management commands."""

import json

import click

from defter.cli.error_handling import handle_domain_error
from defter.cli.resolution import resolve_or_exit


@click.group()
def ledger_group():
    """Manage ledgers."""
    pass


@ledger_group.command("list")
@click.pass_context
def list_ledgers(ctx):
    """List all ledgers. The current one is marked with '*'."""
    repository = ctx.obj["repository"]
    try:
        current_id = repository.current.id
        ledgers = repository.list_ledgers()
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo("\nLedgers:")
    click.echo("-" * 72)
    for metadata in ledgers:
        marker = "*" if metadata.id == current_id else " "
        click.echo(
            f"{marker} {metadata.id:12s} | {metadata.name:25s} | "
            f"modified {metadata.last_modified:%Y-%m-%d %H:%M}"
        )


@ledger_group.command("create")
@click.argument("name")
@click.pass_context
def create_ledger(ctx, name: str):
    """Create a new, empty ledger and switch to it.

    Examples:
        defter ledger create "2024 Sezonu"
    """
    repository = ctx.obj["repository"]
    try:
        metadata = repository.create_ledger(name)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created ledger '{metadata.name}' (ID: {metadata.id})")


@ledger_group.command("switch")
@click.argument("ledger")
@click.pass_context
def switch_ledger(ctx, ledger: str):
    """Make another ledger current.

    LEDGER can be a ledger name or ID.
    """
    repository = ctx.obj["repository"]
    metadata = resolve_or_exit(ctx, repository.list_ledgers(), ledger, "Ledger")
    try:
        repository.switch_ledger(metadata.id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Switched to ledger '{metadata.name}'")


@ledger_group.command("rename")
@click.argument("ledger")
@click.argument("new_name")
@click.pass_context
def rename_ledger(ctx, ledger: str, new_name: str):
    """Rename a ledger.

    LEDGER can be a ledger name or ID.
    """
    repository = ctx.obj["repository"]
    metadata = resolve_or_exit(ctx, repository.list_ledgers(), ledger, "Ledger")
    try:
        renamed = repository.rename_ledger(metadata.id, new_name)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Renamed ledger '{metadata.name}' to '{renamed.name}'")


@ledger_group.command("delete")
@click.argument("ledger")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_ledger(ctx, ledger: str, yes: bool):
    """Delete a ledger with all of its records.

    Deleting the last ledger leaves a new, empty default ledger behind.
    """
    repository = ctx.obj["repository"]
    metadata = resolve_or_exit(ctx, repository.list_ledgers(), ledger, "Ledger")

    if not yes and not click.confirm(
        f"Delete ledger '{metadata.name}' and all of its records?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        repository.delete_ledger(metadata.id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted ledger '{metadata.name}'")
    click.echo(f"Current ledger: '{repository.current.name}'")


@ledger_group.command("export")
@click.argument("output", type=click.Path(dir_okay=False, writable=True))
@click.pass_context
def export_ledgers(ctx, output: str):
    """Write every ledger to a JSON bundle file."""
    repository = ctx.obj["repository"]
    try:
        bundle = repository.export_all()
    except ValueError as e:
        handle_domain_error(ctx, e)

    with open(output, "w", encoding="utf-8") as f:
        json.dump(bundle, f, ensure_ascii=False, indent=2)
    click.echo(f"Exported {len(bundle['databases'])} ledger(s) to {output}")


@ledger_group.command("import")
@click.argument("bundle_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def import_ledgers(ctx, bundle_file: str, yes: bool):
    """Import every ledger of a JSON bundle file.

    Record sets of a ledger that already exists here are overwritten by the
    bundle; its local name is kept.
    """
    repository = ctx.obj["repository"]
    try:
        with open(bundle_file, "r", encoding="utf-8") as f:
            bundle = json.load(f)
    except ValueError as e:
        click.echo(f"Error: {bundle_file} is not valid JSON: {e}", err=True)
        ctx.exit(1)

    databases = bundle.get("databases") if isinstance(bundle, dict) else None
    if isinstance(databases, list):
        overwritten = [
            d["metadata"].get("id")
            for d in databases
            if isinstance(d, dict) and isinstance(d.get("metadata"), dict)
            and repository.has_ledger(d["metadata"].get("id"))
        ]
        if overwritten and not yes and not click.confirm(
            f"{len(overwritten)} ledger(s) already exist and will be overwritten. Continue?"
        ):
            click.echo("Import cancelled.")
            return

    def report(done: int, total: int) -> None:
        click.echo(f"  [{done}/{total}] imported")

    try:
        count = repository.import_all(bundle, progress=report)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Imported {count} ledger(s); current ledger: '{repository.current.name}'")


def register_commands(cli):
    """Register ledger commands with main CLI."""
    cli.add_command(ledger_group, name="ledger")
