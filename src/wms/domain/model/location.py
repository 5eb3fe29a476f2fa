"""Zone and Location aggregates.

A Zone is a logical storage area (usually a temperature class); a Location
is one addressable slot inside a zone with a fixed capacity.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from wms.domain.exceptions import ValidationError
from wms.domain.model.value_objects import TempClass


class LocationStatus(Enum):
    OPEN = "OPEN"
    BLOCKED = "BLOCKED"


class Occupancy(Enum):
    """Display-only fill level, derived from quantities."""

    EMPTY = "EMPTY"
    OCCUPIED = "OCCUPIED"
    FULL = "FULL"


@dataclass
class Zone:
    id: str
    name: str
    temp_class: TempClass = TempClass.FROZEN

    @staticmethod
    def create(zone_id: str, name: str, temp_class: TempClass) -> Zone:
        if not zone_id or not zone_id.strip():
            raise ValidationError("Zone ID is required")
        if not name or not name.strip():
            raise ValidationError("Zone name is required")
        return Zone(id=zone_id.strip(), name=name.strip(), temp_class=temp_class)


@dataclass
class Location:
    """Aggregate root for a storage slot.

    Invariants:
    - ``0 <= current_qty <= max_qty``
    - BLOCKED locations accept no new stock

    ``current_qty`` must only be changed by the inventory ledger, which
    performs the capacity check and the increment as one unit.
    """

    id: str
    code: str
    zone_id: str
    max_qty: int
    current_qty: int = 0
    status: LocationStatus = LocationStatus.OPEN
    version: int = 0

    @staticmethod
    def create(location_id: str, code: str, zone_id: str, max_qty: int) -> Location:
        if not location_id or not location_id.strip():
            raise ValidationError("Location ID is required")
        if not code or not code.strip():
            raise ValidationError("Location code is required")
        if isinstance(max_qty, bool) or not isinstance(max_qty, int) or max_qty <= 0:
            raise ValidationError("Location capacity must be a positive integer")
        return Location(
            id=location_id.strip(),
            code=code.strip().upper(),
            zone_id=zone_id,
            max_qty=max_qty,
        )

    @property
    def is_blocked(self) -> bool:
        return self.status == LocationStatus.BLOCKED

    @property
    def occupancy(self) -> Occupancy:
        if self.current_qty == 0:
            return Occupancy.EMPTY
        if self.current_qty >= self.max_qty:
            return Occupancy.FULL
        return Occupancy.OCCUPIED

    def occupy(self, qty: int) -> None:
        if qty <= 0:
            raise ValidationError("Placed quantity must be positive")
        if self.current_qty + qty > self.max_qty:
            raise ValidationError(
                f"Location {self.code} would exceed its capacity of {self.max_qty}"
            )
        self.current_qty += qty

    def vacate(self, qty: int) -> None:
        if qty <= 0:
            raise ValidationError("Released quantity must be positive")
        if qty > self.current_qty:
            raise ValidationError(
                f"Location {self.code} holds only {self.current_qty}"
            )
        self.current_qty -= qty

    def block(self) -> None:
        self.status = LocationStatus.BLOCKED

    def unblock(self) -> None:
        self.status = LocationStatus.OPEN
