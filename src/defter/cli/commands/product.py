"""Product catalog commands."""

import click

from defter.cli.error_handling import handle_domain_error
from defter.cli.formatting import money, quantity
from defter.cli.resolution import resolve_or_exit
from defter.domain.product import DEFAULT_PRODUCT_TYPE, ProductService


@click.group()
def product_group():
    """Manage the product catalog."""
    pass


@product_group.command("add")
@click.argument("name")
@click.argument("selling_price")
@click.option("--buying-price", help="Buying price, used for the profit figure")
@click.option("--type", "product_type", default=DEFAULT_PRODUCT_TYPE, show_default=True, help="Product type")
@click.option("--unit", default="", help="Unit (e.g. KG, TANE, ÇUVAL)")
@click.pass_context
def add_product(
    ctx, name: str, selling_price: str, buying_price: str | None, product_type: str, unit: str
):
    """Add a product. New products start with zero stock.

    Examples:
        defter product add Gübre 5 --buying-price 3,75 --type GÜBRE --unit ÇUVAL
    """
    service = ProductService(ctx.obj["repository"])
    try:
        product = service.add_product(
            name, selling_price, buying_price=buying_price, type=product_type, unit=unit
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Added product '{product.name}' (ID: {product.id}) at {money(product.selling_price)}")


@product_group.command("edit")
@click.argument("product")
@click.option("--name", "new_name", help="New name")
@click.option("--selling-price", help="New selling price")
@click.option("--buying-price", help="New buying price")
@click.option("--type", "product_type", help="New product type")
@click.option("--unit", help="New unit")
@click.pass_context
def edit_product(
    ctx,
    product: str,
    new_name: str | None,
    selling_price: str | None,
    buying_price: str | None,
    product_type: str | None,
    unit: str | None,
):
    """Edit a product. Stock is not changed.

    PRODUCT can be a product name or ID.
    """
    service = ProductService(ctx.obj["repository"])
    record = resolve_or_exit(ctx, service.list_products(), product, "Product")
    try:
        updated = service.edit_product(
            record.id,
            new_name if new_name is not None else record.name,
            selling_price=selling_price,
            buying_price=buying_price,
            type=product_type,
            unit=unit,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated product '{updated.name}'")


@product_group.command("delete")
@click.argument("product")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_product(ctx, product: str, yes: bool):
    """Delete a product. Recorded transactions are kept."""
    service = ProductService(ctx.obj["repository"])
    record = resolve_or_exit(ctx, service.list_products(), product, "Product")

    if not yes and not click.confirm(f"Delete product '{record.name}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_product(record.id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted product '{record.name}'")


@product_group.command("add-stock")
@click.argument("product")
@click.argument("qty", metavar="QUANTITY")
@click.pass_context
def add_stock(ctx, product: str, qty: str):
    """Add a delivery to a product's stock.

    Examples:
        defter product add-stock Gübre 20
    """
    service = ProductService(ctx.obj["repository"])
    record = resolve_or_exit(ctx, service.list_products(), product, "Product")
    try:
        updated = service.add_stock(record.id, qty)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Stock of '{updated.name}' is now {quantity(updated.stock)}")


@product_group.command("list")
@click.pass_context
def list_products(ctx):
    """List the product catalog."""
    service = ProductService(ctx.obj["repository"])
    try:
        products = service.list_products()
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not products:
        click.echo("No products found.")
        return

    click.echo(
        f"\n{'ID':10s}  {'Name':24s}  {'Type':10s}  {'Unit':8s}  "
        f"{'Buying':>10s}  {'Selling':>10s}  {'Stock':>8s}"
    )
    click.echo("-" * 92)
    for p in products:
        click.echo(
            f"{p.id:10s}  {p.name[:24]:24s}  {p.type[:10]:10s}  {p.unit[:8]:8s}  "
            f"{money(p.buying_price):>10s}  {money(p.selling_price):>10s}  {quantity(p.stock):>8s}"
        )


def register_commands(cli):
    """Register product commands with main CLI."""
    cli.add_command(product_group, name="product")
