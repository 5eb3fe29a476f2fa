"""Lot aggregate: a traceable batch of one product.

A lot's quantity is split between the part already bound to storage
locations (``allocated_qty``) and the part not yet placed
(``available_qty``).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from wms.domain.exceptions import InsufficientQuantityError, ValidationError


@dataclass
class Lot:
    """Aggregate root for a product batch.

    Invariants:
    - ``available_qty + allocated_qty == total_qty``
    - both parts are always >= 0
    """

    id: int | None
    product_id: str
    lot_no: str
    manufacture_date: date | None
    expiry_date: date
    total_qty: int
    available_qty: int
    allocated_qty: int = 0
    origin_country: str = "VN"
    supplier: str = ""
    version: int = 0

    # --- Factory (used for NEW lots only) -------------------------------------

    @staticmethod
    def create(
        product_id: str,
        lot_no: str,
        manufacture_date: date | None,
        expiry_date: date,
        total_qty: int,
        supplier: str = "",
        origin_country: str = "VN",
    ) -> Lot:
        if not lot_no or not lot_no.strip():
            raise ValidationError("Lot number is required")
        if isinstance(total_qty, bool) or not isinstance(total_qty, int):
            raise ValidationError(f"Lot quantity must be an integer, got {total_qty!r}")
        if total_qty <= 0:
            raise ValidationError("Lot quantity must be positive")
        if expiry_date is None:
            raise ValidationError(f"Lot {lot_no} needs an expiry date")
        if manufacture_date is not None and expiry_date < manufacture_date:
            raise ValidationError(
                f"Lot {lot_no} expires ({expiry_date}) before it was "
                f"manufactured ({manufacture_date})"
            )
        return Lot(
            id=None,
            product_id=product_id,
            lot_no=lot_no.strip(),
            manufacture_date=manufacture_date,
            expiry_date=expiry_date,
            total_qty=total_qty,
            available_qty=total_qty,
            supplier=supplier,
            origin_country=origin_country,
        )

    # --- Quantity movements ---------------------------------------------------

    def augment(self, qty: int, expiry_date: date) -> None:
        """Add freshly received units of the same batch (unplaced)."""
        if qty <= 0:
            raise ValidationError("Received quantity must be positive")
        if expiry_date != self.expiry_date:
            raise ValidationError(
                f"Lot {self.lot_no} expires on {self.expiry_date}, "
                f"not {expiry_date}"
            )
        self.total_qty += qty
        self.available_qty += qty

    def allocate(self, qty: int) -> None:
        """Move units from the unplaced pool onto a location."""
        if qty <= 0:
            raise ValidationError("Allocated quantity must be positive")
        if qty > self.available_qty:
            raise InsufficientQuantityError(
                f"Lot {self.lot_no} has only {self.available_qty} unplaced",
                requested=qty,
                available=self.available_qty,
            )
        self.available_qty -= qty
        self.allocated_qty += qty

    def deallocate(self, qty: int) -> None:
        """Return units taken off a location to the unplaced pool."""
        self._check_allocated(qty)
        self.allocated_qty -= qty
        self.available_qty += qty

    def consume(self, qty: int) -> None:
        """Permanently remove shipped units from the lot."""
        self._check_allocated(qty)
        self.allocated_qty -= qty
        self.total_qty -= qty

    def _check_allocated(self, qty: int) -> None:
        if qty <= 0:
            raise ValidationError("Released quantity must be positive")
        if qty > self.allocated_qty:
            raise InsufficientQuantityError(
                f"Lot {self.lot_no} has only {self.allocated_qty} placed",
                requested=qty,
                available=self.allocated_qty,
            )
