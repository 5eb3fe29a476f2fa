"""Order line variants.

Inbound lines track expected / received / damaged quantities; outbound
lines track requested / picked / rejected quantities.  In both cases the
accepted quantity is derived and never stored independently, so
``accepted + damaged == received`` holds by construction once a count
has been recorded.

Lines are replaced, never mutated, by the reconciliation engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class InboundLine:
    id: int
    product_id: str
    sku: str
    expected_qty: int
    unit: str = "KG"
    received_qty: int | None = None
    damaged_qty: int = 0
    # putaway plan
    lot_no: str | None = None
    manufacture_date: date | None = None
    expiry_date: date | None = None
    location_id: str | None = None
    # set once the accepted quantity is committed to a lot
    lot_id: int | None = None

    @property
    def is_recorded(self) -> bool:
        return self.received_qty is not None

    @property
    def accepted_qty(self) -> int:
        if self.received_qty is None:
            return 0
        return max(self.received_qty - self.damaged_qty, 0)

    @property
    def has_putaway_plan(self) -> bool:
        return bool(self.lot_no) and self.expiry_date is not None and bool(self.location_id)


@dataclass(frozen=True)
class OutboundLine:
    id: int
    product_id: str
    sku: str
    requested_qty: int
    unit: str = "KG"
    picked_qty: int | None = None
    rejected_qty: int = 0
    # pick source
    lot_id: int | None = None
    location_id: str | None = None

    @property
    def is_recorded(self) -> bool:
        return self.picked_qty is not None

    @property
    def accepted_qty(self) -> int:
        """Quantity that will actually leave on the truck."""
        if self.picked_qty is None:
            return 0
        return max(self.picked_qty - self.rejected_qty, 0)

    @property
    def has_pick_source(self) -> bool:
        return self.lot_id is not None and bool(self.location_id)
