"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from wms.application.add_product import AddProductHandler
from wms.domain.exceptions import DomainException
from wms.infrastructure.bootstrap import product_repository


@click.command("add")
@click.option("--sku", required=True, help="Stock keeping unit.")
@click.option("--name", required=True, help="Product name.")
@click.option("--unit", default="KG", help="Unit of measure.")
@click.option(
    "--temp-class",
    default="FROZEN",
    type=click.Choice(["FROZEN", "CHILL", "DRY"], case_sensitive=False),
)
def product_add(sku: str, name: str, unit: str, temp_class: str) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(product_repo=product_repository())

    try:
        product = handler.handle(sku=sku, name=name, unit=unit, temp_class=temp_class)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} {product.sku} '{product.name}' added")


@click.command("list")
def product_list() -> None:
    """List all products in the catalog."""
    repo = product_repository()
    products = repo.list_all()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'SKU':<12} {'Name':<24} {'Unit':<5} {'Temp':<6}")
    click.echo("-" * 57)
    for p in products:
        click.echo(
            f"{p.id:<6} {p.sku:<12} {p.name[:24]:<24} {p.unit:<5} {p.temp_class.value:<6}"
        )
