"""Application service: Move Inventory use case."""

from __future__ import annotations

from wms.application.dto import InventoryRecordDTO, to_record_dto
from wms.domain.service.ledger import InventoryLedger


class MoveInventoryHandler:

    def __init__(self, ledger: InventoryLedger) -> None:
        self._ledger = ledger

    def handle(
        self,
        lot_id: int,
        from_location_id: str,
        to_location_id: str,
        qty: int,
    ) -> InventoryRecordDTO:
        record = self._ledger.move_inventory(lot_id, from_location_id, to_location_id, qty)
        return to_record_dto(record)
