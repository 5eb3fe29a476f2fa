"""Application service: Add Location use case."""

from __future__ import annotations

from wms.domain.exceptions import NotFoundError, ValidationError
from wms.domain.model.location import Location
from wms.domain.repository.location_repository import LocationRepository, ZoneRepository


class AddLocationHandler:

    def __init__(self, location_repo: LocationRepository, zone_repo: ZoneRepository) -> None:
        self._location_repo = location_repo
        self._zone_repo = zone_repo

    def handle(self, location_id: str, code: str, zone_id: str, max_qty: int) -> Location:
        if self._zone_repo.get_by_id(zone_id) is None:
            raise NotFoundError(f"Zone '{zone_id}' not found")

        location = Location.create(location_id, code, zone_id, max_qty)
        if self._location_repo.get_by_id(location.id) is not None:
            raise ValidationError(f"Location '{location.id}' already exists")
        self._location_repo.save(location)
        return location
