"""Abstract repository for InventoryRecord bindings."""

from __future__ import annotations

from abc import ABC, abstractmethod

from wms.domain.model.inventory import InventoryRecord


class InventoryRepository(ABC):

    @abstractmethod
    def get(self, lot_id: int, location_id: str) -> InventoryRecord | None:
        """Return the record for a (lot, location) pair, or None."""

    @abstractmethod
    def list_all(self) -> list[InventoryRecord]:
        """Return every record."""

    @abstractmethod
    def save(self, record: InventoryRecord) -> None:
        """Persist a record; a record with zero quantity is deleted."""
