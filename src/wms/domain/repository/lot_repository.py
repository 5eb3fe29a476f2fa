"""Abstract repository for Lot aggregates."""

from __future__ import annotations

from abc import ABC, abstractmethod

from wms.domain.model.lot import Lot


class LotRepository(ABC):

    @abstractmethod
    def get_by_id(self, lot_id: int) -> Lot | None:
        """Return a detached copy of a lot, or None."""

    @abstractmethod
    def get_by_lot_no(self, product_id: str, lot_no: str) -> Lot | None:
        """Return the lot with this number for a product, or None."""

    @abstractmethod
    def list_all(self) -> list[Lot]:
        """Return every lot."""

    @abstractmethod
    def save(self, lot: Lot) -> None:
        """Persist with a version check; assigns IDs to new lots."""
