import click

from wms.infrastructure.cli.inventory_commands import (
    inventory_add,
    inventory_list,
    inventory_move,
)
from wms.infrastructure.cli.location_commands import (
    location_add,
    location_add_zone,
    location_block,
    location_list,
    location_unblock,
)
from wms.infrastructure.cli.order_commands import (
    order_advance,
    order_cancel,
    order_complete,
    order_create,
    order_list,
    order_note,
    order_putaway,
    order_reconcile,
    order_show,
    order_transition,
)
from wms.infrastructure.cli.product_commands import product_add, product_list
from wms.infrastructure.logging_config import configure_logging
from wms.infrastructure.settings import get_settings


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log at DEBUG level.")
def cli(verbose: bool) -> None:
    """WMS: cold-storage warehouse management."""
    settings = get_settings()
    configure_logging("DEBUG" if verbose else settings.LOG_LEVEL, settings.LOG_FORMAT)


@cli.group()
def order() -> None:
    """Manage inbound and outbound orders."""


@cli.group()
def inventory() -> None:
    """Manage lot inventory."""


@cli.group()
def location() -> None:
    """Manage zones and locations."""


@cli.group()
def product() -> None:
    """Manage products."""


# Register subcommands
order.add_command(order_advance)
order.add_command(order_cancel)
order.add_command(order_complete)
order.add_command(order_create)
order.add_command(order_list)
order.add_command(order_note)
order.add_command(order_putaway)
order.add_command(order_reconcile)
order.add_command(order_show)
order.add_command(order_transition)
inventory.add_command(inventory_add)
inventory.add_command(inventory_list)
inventory.add_command(inventory_move)
location.add_command(location_add)
location.add_command(location_add_zone)
location.add_command(location_block)
location.add_command(location_list)
location.add_command(location_unblock)
product.add_command(product_add)
product.add_command(product_list)
