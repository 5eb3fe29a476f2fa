"""JSON-file-backed implementation of InventoryRepository."""

from __future__ import annotations

from pathlib import Path

from wms.domain.model.inventory import InventoryRecord
from wms.domain.repository.inventory_repository import InventoryRepository
from wms.infrastructure.persistence.json_store import JsonFileStore, parse_datetime


class JsonInventoryRepository(InventoryRepository):

    def __init__(self, file_path: Path) -> None:
        self._store = JsonFileStore(file_path)

    # --- InventoryRepository interface ----------------------------------------

    def get(self, lot_id: int, location_id: str) -> InventoryRecord | None:
        for raw in self._store.load_raw():
            if raw["lot_id"] == lot_id and raw["location_id"] == location_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[InventoryRecord]:
        return [self._to_domain(raw) for raw in self._store.load_raw()]

    def save(self, record: InventoryRecord) -> None:
        with self._store.locked():
            records = self._store.load_raw()
            index = next(
                (
                    i
                    for i, raw in enumerate(records)
                    if (raw["lot_id"], raw["location_id"]) == record.key
                ),
                None,
            )
            # A drained binding disappears instead of lingering at zero
            if record.is_empty:
                if index is not None:
                    del records[index]
            elif index is None:
                records.append(self._to_raw(record))
            else:
                records[index] = self._to_raw(record)
            self._store.persist_raw(records)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(record: InventoryRecord) -> dict:
        return {
            "lot_id": record.lot_id,
            "location_id": record.location_id,
            "qty": record.qty,
            "updated_at": record.updated_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> InventoryRecord:
        return InventoryRecord(
            lot_id=raw["lot_id"],
            location_id=raw["location_id"],
            qty=raw["qty"],
            updated_at=parse_datetime(raw["updated_at"]),
        )
