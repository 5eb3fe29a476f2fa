"""Application service: Add Zone use case."""

from __future__ import annotations

from wms.domain.exceptions import ValidationError
from wms.domain.model.location import Zone
from wms.domain.model.value_objects import TempClass
from wms.domain.repository.location_repository import ZoneRepository


class AddZoneHandler:

    def __init__(self, zone_repo: ZoneRepository) -> None:
        self._zone_repo = zone_repo

    def handle(self, zone_id: str, name: str, temp_class: str) -> Zone:
        try:
            temp = TempClass(temp_class.strip().upper())
        except ValueError as exc:
            raise ValidationError(f"Unknown temperature class {temp_class!r}") from exc

        zone = Zone.create(zone_id, name, temp)
        if self._zone_repo.get_by_id(zone.id) is not None:
            raise ValidationError(f"Zone '{zone.id}' already exists")
        self._zone_repo.save(zone)
        return zone
