"""CLI commands for zones and storage locations."""

from __future__ import annotations

import click

from wms.application.add_location import AddLocationHandler
from wms.application.add_zone import AddZoneHandler
from wms.application.list_locations import ListLocationsHandler
from wms.application.set_location_status import SetLocationStatusHandler
from wms.domain.exceptions import DomainException
from wms.infrastructure.bootstrap import location_repository, zone_repository


@click.command("add-zone")
@click.option("--id", "zone_id", required=True, help="Zone ID.")
@click.option("--name", required=True, help="Zone name.")
@click.option(
    "--temp-class",
    required=True,
    type=click.Choice(["FROZEN", "CHILL", "DRY"], case_sensitive=False),
)
def location_add_zone(zone_id: str, name: str, temp_class: str) -> None:
    """Add a storage zone."""
    handler = AddZoneHandler(zone_repo=zone_repository())

    try:
        zone = handler.handle(zone_id, name, temp_class)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Zone {zone.id} ({zone.name}, {zone.temp_class.value}) added.")


@click.command("add")
@click.option("--id", "location_id", required=True, help="Location ID.")
@click.option("--code", required=True, help="Location code, e.g. A-01-01.")
@click.option("--zone", "zone_id", required=True, help="Zone the location belongs to.")
@click.option("--max-qty", required=True, type=int, help="Capacity of the location.")
def location_add(location_id: str, code: str, zone_id: str, max_qty: int) -> None:
    """Add a storage location to a zone."""
    handler = AddLocationHandler(
        location_repo=location_repository(),
        zone_repo=zone_repository(),
    )

    try:
        location = handler.handle(location_id, code, zone_id, max_qty)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Location {location.code} added to zone {location.zone_id} "
        f"(max {location.max_qty})."
    )


def _set_status(location_id: str, blocked: bool) -> None:
    handler = SetLocationStatusHandler(location_repo=location_repository())

    try:
        location = handler.handle(location_id, blocked=blocked)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Location {location.code} is now {location.status.value}.")


@click.command("block")
@click.option("--id", "location_id", required=True, help="Location ID.")
def location_block(location_id: str) -> None:
    """Block a location for new stock."""
    _set_status(location_id, blocked=True)


@click.command("unblock")
@click.option("--id", "location_id", required=True, help="Location ID.")
def location_unblock(location_id: str) -> None:
    """Re-open a blocked location."""
    _set_status(location_id, blocked=False)


@click.command("list")
@click.option("--zone", "zone_id", default=None, help="Only this zone.")
@click.option("--status", default=None, help="OPEN, BLOCKED, EMPTY, OCCUPIED or FULL.")
@click.option("--search", default=None, help="Match location code.")
def location_list(zone_id: str | None, status: str | None, search: str | None) -> None:
    """List locations with their fill level."""
    handler = ListLocationsHandler(
        location_repo=location_repository(),
        zone_repo=zone_repository(),
    )
    rows = handler.handle(zone_id=zone_id, status=status, search=search)

    if not rows:
        click.echo("No locations found.")
        return

    click.echo(
        f"{'Code':<12} {'Zone':<12} {'Max':>8} {'Current':>8} {'Free':>8} "
        f"{'Status':<8} {'Occupancy':<9}"
    )
    click.echo("-" * 71)
    for row in rows:
        click.echo(
            f"{row.code:<12} {row.zone[:12]:<12} {row.max_qty:>8} {row.current_qty:>8} "
            f"{row.headroom:>8} {row.status:<8} {row.occupancy:<9}"
        )
