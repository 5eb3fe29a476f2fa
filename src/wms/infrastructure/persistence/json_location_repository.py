"""JSON-file-backed implementations of LocationRepository and ZoneRepository."""

from __future__ import annotations

from pathlib import Path

from wms.domain.model.location import Location, LocationStatus, Zone
from wms.domain.model.value_objects import TempClass
from wms.domain.repository.location_repository import LocationRepository, ZoneRepository
from wms.domain.repository.versioning import check_version
from wms.infrastructure.persistence.json_store import JsonFileStore


class JsonLocationRepository(LocationRepository):

    def __init__(self, file_path: Path) -> None:
        self._store = JsonFileStore(file_path)

    # --- LocationRepository interface -----------------------------------------

    def get_by_id(self, location_id: str) -> Location | None:
        for raw in self._store.load_raw():
            if raw["id"] == location_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Location]:
        return [self._to_domain(raw) for raw in self._store.load_raw()]

    def save(self, location: Location) -> None:
        with self._store.locked():
            records = self._store.load_raw()
            index = next(
                (i for i, raw in enumerate(records) if raw["id"] == location.id), None
            )
            stored = records[index]["version"] if index is not None else None
            check_version("Location", location.code, stored, location.version)

            location.version += 1
            if index is None:
                records.append(self._to_raw(location))
            else:
                records[index] = self._to_raw(location)
            self._store.persist_raw(records)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(location: Location) -> dict:
        return {
            "id": location.id,
            "code": location.code,
            "zone_id": location.zone_id,
            "max_qty": location.max_qty,
            "current_qty": location.current_qty,
            "status": location.status.value,
            "version": location.version,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Location:
        return Location(
            id=raw["id"],
            code=raw["code"],
            zone_id=raw["zone_id"],
            max_qty=raw["max_qty"],
            current_qty=raw.get("current_qty", 0),
            status=LocationStatus(raw.get("status", LocationStatus.OPEN.value)),
            version=raw.get("version", 0),
        )


class JsonZoneRepository(ZoneRepository):

    def __init__(self, file_path: Path) -> None:
        self._store = JsonFileStore(file_path)

    def get_by_id(self, zone_id: str) -> Zone | None:
        for raw in self._store.load_raw():
            if raw["id"] == zone_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Zone]:
        return [self._to_domain(raw) for raw in self._store.load_raw()]

    def save(self, zone: Zone) -> None:
        with self._store.locked():
            zones = self._store.load_raw()
            replaced = False
            for i, raw in enumerate(zones):
                if raw["id"] == zone.id:
                    zones[i] = self._to_raw(zone)
                    replaced = True
                    break
            if not replaced:
                zones.append(self._to_raw(zone))
            self._store.persist_raw(zones)

    @staticmethod
    def _to_raw(zone: Zone) -> dict:
        return {"id": zone.id, "name": zone.name, "temp_class": zone.temp_class.value}

    @staticmethod
    def _to_domain(raw: dict) -> Zone:
        return Zone(
            id=raw["id"],
            name=raw["name"],
            temp_class=TempClass(raw.get("temp_class", TempClass.FROZEN.value)),
        )
