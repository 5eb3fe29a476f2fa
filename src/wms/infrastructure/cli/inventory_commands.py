"""CLI commands for lot-level inventory."""

from __future__ import annotations

from datetime import datetime

import click

from wms.application.add_inventory import AddInventoryHandler
from wms.application.dto import InventoryFilter
from wms.application.list_inventory import ListInventoryHandler
from wms.application.move_inventory import MoveInventoryHandler
from wms.domain.exceptions import DomainException
from wms.domain.service.expiry import ExpiryStatus
from wms.infrastructure.bootstrap import (
    inventory_repository,
    ledger,
    location_repository,
    lot_repository,
    product_repository,
    zone_repository,
)


@click.command("add")
@click.option("--product", required=True, help="Product ID or SKU.")
@click.option("--location", "location_id", required=True, help="Target location ID.")
@click.option("--lot", "lot_no", required=True, help="Lot / batch number.")
@click.option("--expiry", required=True, type=click.DateTime(formats=["%Y-%m-%d"]))
@click.option("--mfg", default=None, type=click.DateTime(formats=["%Y-%m-%d"]))
@click.option("--quantity", required=True, type=int, help="Units to add.")
@click.option("--supplier", default="", help="Supplier name.")
@click.option("--origin", default="VN", help="Country of origin.")
def inventory_add(
    product: str,
    location_id: str,
    lot_no: str,
    expiry: datetime,
    mfg: datetime | None,
    quantity: int,
    supplier: str,
    origin: str,
) -> None:
    """Add stock of a lot directly into a location."""
    handler = AddInventoryHandler(product_repo=product_repository(), ledger=ledger())

    try:
        record = handler.handle(
            product=product,
            location_id=location_id,
            lot_no=lot_no,
            manufacture_date=mfg.date() if mfg else None,
            expiry_date=expiry.date(),
            qty=quantity,
            supplier=supplier,
            origin_country=origin,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Added {quantity} of lot {lot_no} to {location_id} "
        f"(now {record.qty} there, lot ID {record.lot_id})"
    )


@click.command("list")
@click.option("--search", default=None, help="Match SKU, product name or lot number.")
@click.option(
    "--expiry-status",
    default=None,
    type=click.Choice([s.value for s in ExpiryStatus], case_sensitive=False),
)
@click.option("--zone", "zone_id", default=None, help="Only this zone.")
@click.option(
    "--temp-class",
    default=None,
    type=click.Choice(["FROZEN", "CHILL", "DRY"], case_sensitive=False),
)
def inventory_list(
    search: str | None,
    expiry_status: str | None,
    zone_id: str | None,
    temp_class: str | None,
) -> None:
    """Show stock per lot and location, closest to expiry first."""
    handler = ListInventoryHandler(
        inventory_repo=inventory_repository(),
        lot_repo=lot_repository(),
        location_repo=location_repository(),
        zone_repo=zone_repository(),
        product_repo=product_repository(),
    )
    rows = handler.handle(
        InventoryFilter(
            search=search,
            expiry_status=expiry_status,
            zone_id=zone_id,
            temp_class=temp_class,
        )
    )

    if not rows:
        click.echo("No inventory records found.")
        return

    click.echo(
        f"{'SKU':<12} {'Product':<20} {'Lot':<12} {'Zone':<10} {'Location':<10} "
        f"{'Qty':>7} {'Unit':<4} {'Expiry':<10} {'Status':<8} {'Days':>5}"
    )
    click.echo("-" * 106)
    for row in rows:
        click.echo(
            f"{row.sku:<12} {row.product_name[:20]:<20} {row.lot_no:<12} "
            f"{row.zone[:10]:<10} {row.location:<10} {row.qty:>7} {row.unit:<4} "
            f"{row.expiry_date:<10} {row.expiry_status:<8} {row.days_until_expiry:>5}"
        )

    summary = ListInventoryHandler.summarize(rows)
    click.echo("-" * 106)
    click.echo("  ".join(f"{status}: {count}" for status, count in summary.items()))


@click.command("move")
@click.option("--lot-id", required=True, type=int, help="Lot ID to move.")
@click.option("--from", "from_location", required=True, help="Source location ID.")
@click.option("--to", "to_location", required=True, help="Target location ID.")
@click.option("--quantity", required=True, type=int, help="Units to move.")
def inventory_move(lot_id: int, from_location: str, to_location: str, quantity: int) -> None:
    """Move stock of a lot between locations."""
    handler = MoveInventoryHandler(ledger=ledger())

    try:
        record = handler.handle(lot_id, from_location, to_location, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Moved {quantity} of lot {lot_id} from {from_location} to {to_location} "
        f"(now {record.qty} there)"
    )
