"""Domain service: Lot & Location Ledger.

The only component allowed to change ``Location.current_qty`` and the
lot's available/allocated split.  Each public operation:

  Phase 1: takes the location and lot locks, reloads the records and
            validates everything (existence, blocked status, capacity,
            bound quantities).  Fails fast before any mutation.
  Phase 2: mutates and persists.  The location is saved first since it
            is the contended record; its version check is the
            cross-process guard against a racing writer.

Because the capacity check and the increment happen under the same lock,
two concurrent placements can never both pass the check and overshoot.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Callable, Iterable

from wms.domain.exceptions import (
    InsufficientQuantityError,
    LocationBlockedError,
    NotFoundError,
    ValidationError,
)
from wms.domain.model.inventory import InventoryRecord
from wms.domain.model.location import Location
from wms.domain.model.lot import Lot
from wms.domain.repository.inventory_repository import InventoryRepository
from wms.domain.repository.location_repository import LocationRepository
from wms.domain.repository.lot_repository import LotRepository
from wms.domain.service import capacity
from wms.domain.service.locking import (
    DEFAULT_LOCKS,
    KeyedLocks,
    location_key,
    lot_key,
    lot_number_key,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StockReceipt:
    """Units of one lot arriving at one location."""

    product_id: str
    location_id: str
    lot_no: str
    expiry_date: date
    qty: int
    manufacture_date: date | None = None
    supplier: str = ""
    origin_country: str = "VN"


@dataclass(frozen=True)
class StockWithdrawal:
    """Units of one lot leaving one location.

    ``product_id``, when given, is the product the caller expects the lot
    to hold; a lot of any other product is refused.
    """

    lot_id: int
    location_id: str
    qty: int
    product_id: str | None = None


class InventoryLedger:

    def __init__(
        self,
        lot_repo: LotRepository,
        location_repo: LocationRepository,
        inventory_repo: InventoryRepository,
        locks: KeyedLocks | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._lot_repo = lot_repo
        self._location_repo = location_repo
        self._inventory_repo = inventory_repo
        self._locks = locks or DEFAULT_LOCKS
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # --- Lots -----------------------------------------------------------------

    def create_lot(
        self,
        product_id: str,
        lot_no: str,
        manufacture_date: date | None,
        expiry_date: date,
        total_qty: int,
        supplier: str = "",
        origin_country: str = "VN",
    ) -> Lot:
        """Register a new, not yet placed lot."""
        lot = Lot.create(
            product_id=product_id,
            lot_no=lot_no,
            manufacture_date=manufacture_date,
            expiry_date=expiry_date,
            total_qty=total_qty,
            supplier=supplier,
            origin_country=origin_country,
        )
        with self._locks.hold(lot_number_key(product_id, lot.lot_no)):
            if self._lot_repo.get_by_lot_no(product_id, lot.lot_no) is not None:
                raise ValidationError(
                    f"Lot {lot.lot_no} already exists for product {product_id}"
                )
            self._lot_repo.save(lot)
        logger.info("Created lot %s (#%s) with %d units", lot.lot_no, lot.id, total_qty)
        return lot

    # --- Placement ------------------------------------------------------------

    def place_inventory(self, lot_id: int, location_id: str, qty: int) -> InventoryRecord:
        """Bind *qty* unplaced units of a lot to a location."""
        _require_positive(qty)
        with self._locks.hold(location_key(location_id), lot_key(lot_id)):
            location = self._open_location(location_id)
            lot = self._lot(lot_id)
            capacity.check(location, qty)
            if qty > lot.available_qty:
                raise InsufficientQuantityError(
                    f"Lot {lot.lot_no} has only {lot.available_qty} unplaced units",
                    requested=qty,
                    available=lot.available_qty,
                )
            record = self._bind(lot, location, qty)
            self._location_repo.save(location)
            self._lot_repo.save(lot)
            self._inventory_repo.save(record)

        logger.info(
            "Placed %d of lot %s in %s (%d/%d)",
            qty, lot.lot_no, location.code, location.current_qty, location.max_qty,
        )
        return record

    def receive_stock(self, receipt: StockReceipt) -> InventoryRecord:
        """Create or top up a lot and place the units, as one unit of work."""
        return self.receive_many([receipt])[0]

    def receive_many(self, receipts: Iterable[StockReceipt]) -> list[InventoryRecord]:
        """Receive several lots at once; either all are placed or none.

        Existing lots (same product and lot number) are augmented, others
        are created.
        """
        receipts = list(receipts)
        if not receipts:
            return []
        for r in receipts:
            _require_positive(r.qty)
            if not r.lot_no or not r.lot_no.strip():
                raise ValidationError("Lot number is required")

        lot_keys = {(r.product_id, r.lot_no.strip()) for r in receipts}
        keys = [location_key(r.location_id) for r in receipts]
        keys += [lot_number_key(*key) for key in lot_keys]
        with self._locks.hold(*keys):
            known = [self._lot_repo.get_by_lot_no(*key) for key in lot_keys]
            with self._locks.hold(*(lot_key(lot.id) for lot in known if lot)):
                # Phase 1: validate (lots are re-read under their locks)
                locations = self._check_capacity(
                    (r.location_id, r.qty) for r in receipts
                )
                lots: dict[tuple[str, str], Lot] = {}
                for r in receipts:
                    key = (r.product_id, r.lot_no.strip())
                    lot = lots.get(key) or self._lot_repo.get_by_lot_no(*key)
                    if lot is None:
                        lot = Lot.create(
                            product_id=r.product_id,
                            lot_no=r.lot_no,
                            manufacture_date=r.manufacture_date,
                            expiry_date=r.expiry_date,
                            total_qty=r.qty,
                            supplier=r.supplier,
                            origin_country=r.origin_country,
                        )
                    else:
                        lot.augment(r.qty, r.expiry_date)
                    lots[key] = lot

                # Phase 2: mutate and persist
                for r in receipts:
                    locations[r.location_id].occupy(r.qty)
                    lots[(r.product_id, r.lot_no.strip())].allocate(r.qty)
                for location in locations.values():
                    self._location_repo.save(location)
                for lot in lots.values():
                    self._lot_repo.save(lot)

                now = self._clock()
                records = []
                for r in receipts:
                    lot = lots[(r.product_id, r.lot_no.strip())]
                    record = self._inventory_repo.get(lot.id, r.location_id)
                    if record is None:
                        record = InventoryRecord(lot_id=lot.id, location_id=r.location_id, qty=0)
                    record.qty += r.qty
                    record.updated_at = now
                    self._inventory_repo.save(record)
                    records.append(record)

        for r in receipts:
            logger.info("Received %d of lot %s into %s", r.qty, r.lot_no, r.location_id)
        return records

    # --- Removal --------------------------------------------------------------

    def release_inventory(self, lot_id: int, location_id: str, qty: int) -> None:
        """Unbind units from a location; they return to the lot's unplaced pool."""
        self._withdraw([StockWithdrawal(lot_id, location_id, qty)], consume=False)

    def ship_inventory(self, lot_id: int, location_id: str, qty: int) -> None:
        """Unbind units from a location and remove them from the lot."""
        self._withdraw([StockWithdrawal(lot_id, location_id, qty)], consume=True)

    def ship_many(self, withdrawals: Iterable[StockWithdrawal]) -> None:
        """Ship several (lot, location) quantities; either all or none."""
        self._withdraw(list(withdrawals), consume=True)

    def move_inventory(
        self,
        lot_id: int,
        from_location_id: str,
        to_location_id: str,
        qty: int,
    ) -> InventoryRecord:
        """Relocate units of a lot between two locations."""
        _require_positive(qty)
        if from_location_id == to_location_id:
            raise ValidationError("Source and target location are the same")

        with self._locks.hold(
            location_key(from_location_id),
            location_key(to_location_id),
            lot_key(lot_id),
        ):
            source = self._location(from_location_id)
            target = self._open_location(to_location_id)
            lot = self._lot(lot_id)
            capacity.check(target, qty)
            bound = self._bound_record(lot, source, qty)

            source.vacate(qty)
            bound.qty -= qty
            bound.updated_at = self._clock()
            lot.deallocate(qty)
            record = self._bind(lot, target, qty)

            self._location_repo.save(source)
            self._location_repo.save(target)
            self._lot_repo.save(lot)
            self._inventory_repo.save(bound)
            self._inventory_repo.save(record)

        logger.info(
            "Moved %d of lot %s from %s to %s",
            qty, lot.lot_no, source.code, target.code,
        )
        return record

    # --- Internal helpers -----------------------------------------------------

    def _withdraw(self, withdrawals: list[StockWithdrawal], consume: bool) -> None:
        if not withdrawals:
            return
        for w in withdrawals:
            _require_positive(w.qty)

        keys = [location_key(w.location_id) for w in withdrawals]
        keys += [lot_key(w.lot_id) for w in withdrawals]
        with self._locks.hold(*keys):
            # Phase 1: validate against the aggregated quantity per pair
            per_pair: dict[tuple[int, str], int] = defaultdict(int)
            for w in withdrawals:
                per_pair[(w.lot_id, w.location_id)] += w.qty

            locations: dict[str, Location] = {}
            lots: dict[int, Lot] = {}
            records: list[InventoryRecord] = []
            for (lot_id, location_id), qty in per_pair.items():
                location = locations.get(location_id) or self._location(location_id)
                lot = lots.get(lot_id) or self._lot(lot_id)
                records.append(self._bound_record(lot, location, qty))
                locations[location_id] = location
                lots[lot_id] = lot

            for w in withdrawals:
                lot = lots[w.lot_id]
                if w.product_id is not None and lot.product_id != w.product_id:
                    raise ValidationError(
                        f"Lot {lot.lot_no} holds product {lot.product_id}, "
                        f"not product {w.product_id}"
                    )

            # Phase 2: mutate and persist
            now = self._clock()
            for record in records:
                qty = per_pair[record.key]
                locations[record.location_id].vacate(qty)
                lot = lots[record.lot_id]
                if consume:
                    lot.consume(qty)
                else:
                    lot.deallocate(qty)
                record.qty -= qty
                record.updated_at = now

            for location in locations.values():
                self._location_repo.save(location)
            for lot in lots.values():
                self._lot_repo.save(lot)
            for record in records:
                self._inventory_repo.save(record)

        verb = "Shipped" if consume else "Released"
        for w in withdrawals:
            logger.info("%s %d of lot #%s from %s", verb, w.qty, w.lot_id, w.location_id)

    def _check_capacity(self, demands: Iterable[tuple[str, int]]) -> dict[str, Location]:
        """Load each location once and check the summed demand against it."""
        per_location: dict[str, int] = defaultdict(int)
        for location_id, qty in demands:
            per_location[location_id] += qty

        locations: dict[str, Location] = {}
        for location_id, qty in per_location.items():
            location = self._open_location(location_id)
            capacity.check(location, qty)
            locations[location_id] = location
        return locations

    def _bind(self, lot: Lot, location: Location, qty: int) -> InventoryRecord:
        location.occupy(qty)
        lot.allocate(qty)
        record = self._inventory_repo.get(lot.id, location.id)
        if record is None:
            record = InventoryRecord(lot_id=lot.id, location_id=location.id, qty=0)
        record.qty += qty
        record.updated_at = self._clock()
        return record

    def _bound_record(self, lot: Lot, location: Location, qty: int) -> InventoryRecord:
        record = self._inventory_repo.get(lot.id, location.id)
        bound = record.qty if record is not None else 0
        if qty > bound:
            raise InsufficientQuantityError(
                f"Only {bound} of lot {lot.lot_no} stored in {location.code}, "
                f"cannot take {qty}",
                requested=qty,
                available=bound,
            )
        return record

    def _location(self, location_id: str) -> Location:
        location = self._location_repo.get_by_id(location_id)
        if location is None:
            raise NotFoundError(f"Location '{location_id}' not found")
        return location

    def _open_location(self, location_id: str) -> Location:
        location = self._location(location_id)
        if location.is_blocked:
            raise LocationBlockedError(f"Location {location.code} is blocked")
        return location

    def _lot(self, lot_id: int) -> Lot:
        lot = self._lot_repo.get_by_id(lot_id)
        if lot is None:
            raise NotFoundError(f"Lot #{lot_id} not found")
        return lot


def _require_positive(qty: int) -> None:
    if isinstance(qty, bool) or not isinstance(qty, int):
        raise ValidationError(f"Quantity must be an integer, got {qty!r}")
    if qty <= 0:
        raise ValidationError("Quantity must be positive")
