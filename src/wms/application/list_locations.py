"""Application service: List Locations use case (query)."""

from __future__ import annotations

from wms.application.dto import LocationDTO
from wms.domain.repository.location_repository import LocationRepository, ZoneRepository
from wms.domain.service import capacity


class ListLocationsHandler:

    def __init__(self, location_repo: LocationRepository, zone_repo: ZoneRepository) -> None:
        self._location_repo = location_repo
        self._zone_repo = zone_repo

    def handle(
        self,
        zone_id: str | None = None,
        status: str | None = None,
        search: str | None = None,
    ) -> list[LocationDTO]:
        """List locations; *status* matches OPEN/BLOCKED or EMPTY/OCCUPIED/FULL."""
        zones = {zone.id: zone for zone in self._zone_repo.list_all()}
        result: list[LocationDTO] = []
        for loc in sorted(self._location_repo.list_all(), key=lambda l: l.code):
            if zone_id and loc.zone_id != zone_id:
                continue
            if status and status.upper() not in (loc.status.value, loc.occupancy.value):
                continue
            if search and search.strip().lower() not in loc.code.lower():
                continue
            zone = zones.get(loc.zone_id)
            result.append(
                LocationDTO(
                    id=loc.id,
                    code=loc.code,
                    zone_id=loc.zone_id,
                    zone=zone.name if zone else loc.zone_id,
                    max_qty=loc.max_qty,
                    current_qty=loc.current_qty,
                    headroom=capacity.headroom(loc),
                    status=loc.status.value,
                    occupancy=loc.occupancy.value,
                )
            )
        return result
