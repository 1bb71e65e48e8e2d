"""Commands recording sales and payments."""

import click

from defter.cli.error_handling import handle_domain_error
from defter.cli.formatting import money, quantity, type_label
from defter.domain.entities import TransactionType
from defter.domain.transaction import TransactionService

TYPE_CHOICES = ["sale", "credit", "both", "return"]


@click.command("sale")
@click.argument("customer")
@click.argument("product")
@click.argument("qty", metavar="QUANTITY")
@click.option("--price", help="Unit price (defaults to the catalog selling price)")
@click.option(
    "--type",
    "txn_type",
    type=click.Choice(TYPE_CHOICES, case_sensitive=False),
    default="sale",
    show_default=True,
    help="sale=SATIŞ, credit=VERESİYE, both=İKİSİDE, return=İADE",
)
@click.option("--date", help="Transaction date (DD.MM.YYYY, YYYY-MM-DD or 'today', 'dün')")
@click.option("--product-type", help="Product type (defaults to the catalog type)")
@click.option("--unit", help="Unit (defaults to the catalog unit)")
@click.pass_context
def record_sale(
    ctx,
    customer: str,
    product: str,
    qty: str,
    price: str | None,
    txn_type: str,
    date: str | None,
    product_type: str | None,
    unit: str | None,
):
    """Record a sale, credit sale or return of a catalog product.

    Examples:
        defter sale "Ahmet Yılmaz" Gübre 10
        defter sale "Ahmet Yılmaz" Gübre 10 --type credit --price 5,50
        defter sale "Ahmet Yılmaz" Gübre 2 --type return
    """
    service = TransactionService(ctx.obj["repository"])
    try:
        txn = service.record_transaction(
            customer=customer,
            product_name=product,
            quantity=qty,
            price=price,
            type=TransactionType[txn_type.upper()],
            date=date,
            product_type=product_type,
            unit=unit,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(
        f"Recorded {type_label(txn.type)} {txn.id}: {quantity(txn.quantity)} {txn.unit} "
        f"{txn.product_name} x {money(txn.price)} = {money(txn.total)}"
    )
    catalog_product = service.repository.data.find_product(txn.product_name)
    if catalog_product is not None:
        click.echo(f"Stock left: {quantity(catalog_product.stock)}")


@click.command("payment")
@click.argument("customer")
@click.argument("amount")
@click.option("--date", help="Payment date (DD.MM.YYYY, YYYY-MM-DD or 'today', 'dün')")
@click.pass_context
def record_payment(ctx, customer: str, amount: str, date: str | None):
    """Record a payment received from a customer.

    Examples:
        defter payment "Ahmet Yılmaz" 250
    """
    service = TransactionService(ctx.obj["repository"])
    try:
        txn = service.record_payment(customer=customer, amount=amount, date=date)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Recorded payment {txn.id}: {money(txn.total)} from {txn.customer}")


def register_commands(cli):
    """Register sale and payment commands with main CLI."""
    cli.add_command(record_sale)
    cli.add_command(record_payment)
