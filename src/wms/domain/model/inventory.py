"""InventoryRecord: binding of a lot's quantity to one location."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class InventoryRecord:
    """One row per (lot, location) pair.

    Summed per location, ``qty`` equals the location's ``current_qty``;
    summed per lot it equals the lot's ``allocated_qty``.
    """

    lot_id: int
    location_id: str
    qty: int
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def key(self) -> tuple[int, str]:
        return (self.lot_id, self.location_id)

    @property
    def is_empty(self) -> bool:
        return self.qty == 0
