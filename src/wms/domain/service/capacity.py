"""Domain service: Capacity validation.

Pure, side-effect-free predicates over a Location.  Safe to call
speculatively (e.g. to show "only N kg free" before submitting); the
authoritative check-and-commit happens inside the inventory ledger while
it holds the location lock.
"""

from __future__ import annotations

from wms.domain.exceptions import CapacityExceededError
from wms.domain.model.location import Location


def headroom(location: Location) -> int:
    """Free capacity left in the location."""
    return max(location.max_qty - location.current_qty, 0)


def fits(location: Location, qty: int) -> bool:
    return qty >= 0 and location.current_qty + qty <= location.max_qty


def check(location: Location, qty: int) -> None:
    """Raise CapacityExceededError unless *qty* fits."""
    if not fits(location, qty):
        raise CapacityExceededError(
            location_id=location.id,
            requested=qty,
            remaining=headroom(location),
        )
