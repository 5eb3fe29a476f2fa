"""JSON-file-backed implementation of LotRepository."""

from __future__ import annotations

from pathlib import Path

from wms.domain.model.lot import Lot
from wms.domain.repository.lot_repository import LotRepository
from wms.domain.repository.versioning import check_version
from wms.infrastructure.persistence.json_store import JsonFileStore, iso, parse_date


class JsonLotRepository(LotRepository):

    def __init__(self, file_path: Path) -> None:
        self._store = JsonFileStore(file_path)

    # --- LotRepository interface ----------------------------------------------

    def get_by_id(self, lot_id: int) -> Lot | None:
        for raw in self._store.load_raw():
            if raw["id"] == lot_id:
                return self._to_domain(raw)
        return None

    def get_by_lot_no(self, product_id: str, lot_no: str) -> Lot | None:
        for raw in self._store.load_raw():
            if raw["product_id"] == product_id and raw["lot_no"] == lot_no:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Lot]:
        return [self._to_domain(raw) for raw in self._store.load_raw()]

    def save(self, lot: Lot) -> None:
        with self._store.locked():
            lots = self._store.load_raw()
            if lot.id is None:
                lot.id = max((raw["id"] for raw in lots), default=0) + 1

            index = next((i for i, raw in enumerate(lots) if raw["id"] == lot.id), None)
            stored = lots[index]["version"] if index is not None else None
            check_version("Lot", lot.lot_no, stored, lot.version)

            lot.version += 1
            if index is None:
                lots.append(self._to_raw(lot))
            else:
                lots[index] = self._to_raw(lot)
            self._store.persist_raw(lots)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(lot: Lot) -> dict:
        return {
            "id": lot.id,
            "product_id": lot.product_id,
            "lot_no": lot.lot_no,
            "manufacture_date": iso(lot.manufacture_date),
            "expiry_date": iso(lot.expiry_date),
            "total_qty": lot.total_qty,
            "available_qty": lot.available_qty,
            "allocated_qty": lot.allocated_qty,
            "origin_country": lot.origin_country,
            "supplier": lot.supplier,
            "version": lot.version,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Lot:
        return Lot(
            id=raw["id"],
            product_id=raw["product_id"],
            lot_no=raw["lot_no"],
            manufacture_date=parse_date(raw.get("manufacture_date")),
            expiry_date=parse_date(raw["expiry_date"]),
            total_qty=raw["total_qty"],
            available_qty=raw["available_qty"],
            allocated_qty=raw.get("allocated_qty", 0),
            origin_country=raw.get("origin_country", "VN"),
            supplier=raw.get("supplier", ""),
            version=raw.get("version", 0),
        )
