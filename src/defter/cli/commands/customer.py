"""Customer management commands."""

import click

from defter.cli.error_handling import handle_domain_error
from defter.cli.formatting import money
from defter.cli.resolution import resolve_or_exit
from defter.domain.customer import SORT_FIELDS, CustomerService


def _detail_options(func):
    for option in reversed(
        [
            click.option("--phone", help="Phone number"),
            click.option("--tc", help="National ID (TC kimlik no)"),
            click.option("--dob", help="Date of birth"),
            click.option("--city", help="City (il)"),
            click.option("--district", help="District (ilçe)"),
            click.option("--street", help="Street / neighbourhood"),
        ]
    ):
        func = option(func)
    return func


@click.group()
def customer_group():
    """Manage customers."""
    pass


@customer_group.command("add")
@click.argument("name")
@_detail_options
@click.pass_context
def add_customer(ctx, name: str, **details: str | None):
    """Add a customer.

    Examples:
        defter customer add "Ahmet Yılmaz" --phone 05551234567 --city Konya
    """
    service = CustomerService(ctx.obj["repository"])
    try:
        customer = service.add_customer(
            name, **{k: v for k, v in details.items() if v is not None}
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Added customer '{customer.name}' (ID: {customer.id})")


@customer_group.command("edit")
@click.argument("customer")
@click.option("--name", "new_name", help="New name; recorded transactions follow the rename")
@_detail_options
@click.pass_context
def edit_customer(ctx, customer: str, new_name: str | None, **details: str | None):
    """Edit a customer.

    CUSTOMER can be a customer name or ID. Only the given fields change.

    Examples:
        defter customer edit "Ahmet Yılmaz" --name "Ahmet Yılmaz (Köy)"
        defter customer edit _k2j4h5g6f --phone 05559876543
    """
    service = CustomerService(ctx.obj["repository"])
    record = resolve_or_exit(ctx, service.list_customers(), customer, "Customer")
    try:
        updated = service.edit_customer(
            record.id,
            new_name if new_name is not None else record.name,
            **{k: v for k, v in details.items() if v is not None},
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    if updated.name != record.name:
        click.echo(f"Renamed customer '{record.name}' to '{updated.name}'")
    else:
        click.echo(f"Updated customer '{updated.name}'")


@customer_group.command("delete")
@click.argument("customer")
@click.option("--cascade", is_flag=True, help="Also delete the customer's transactions")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_customer(ctx, customer: str, cascade: bool, yes: bool):
    """Delete a customer.

    A customer with transactions can only be deleted together with them
    (--cascade).
    """
    service = CustomerService(ctx.obj["repository"])
    record = resolve_or_exit(ctx, service.list_customers(), customer, "Customer")

    prompt = f"Delete customer '{record.name}'"
    prompt += " and all of their transactions?" if cascade else "?"
    if not yes and not click.confirm(prompt):
        click.echo("Deletion cancelled.")
        return

    try:
        removed = service.delete_customer(record.id, cascade=cascade)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted customer '{record.name}'")
    if removed:
        click.echo(f"Deleted {removed} transaction(s)")


@customer_group.command("list")
@click.option(
    "--sort",
    "sort_by",
    type=click.Choice(SORT_FIELDS),
    default="name",
    show_default=True,
    help="Sort field",
)
@click.option("--desc", is_flag=True, help="Sort descending")
@click.pass_context
def list_customers(ctx, sort_by: str, desc: bool):
    """List customers with their credit and paid totals."""
    service = CustomerService(ctx.obj["repository"])
    try:
        customers = service.list_customers(sort_by=sort_by, descending=desc)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not customers:
        click.echo("No customers found.")
        return

    click.echo(
        f"\n{'ID':10s}  {'Name':24s}  {'Phone':13s}  {'Address':30s}  "
        f"{'Veresiye':>12s}  {'Satış':>12s}"
    )
    click.echo("-" * 110)
    for c in customers:
        click.echo(
            f"{c.id:10s}  {c.name[:24]:24s}  {c.phone[:13]:13s}  {c.address[:30]:30s}  "
            f"{money(c.veresiye):>12s}  {money(c.satis):>12s}"
        )


def register_commands(cli):
    """Register customer commands with main CLI."""
    cli.add_command(customer_group, name="customer")
