"""Application service: List Inventory use case (query).

Joins inventory records with their lot, product, location and zone, and
classifies every row's expiry against the clock at read time.  Rows are
sorted so the lots closest to expiry come first.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timezone
from typing import Callable

from wms.application.dto import InventoryFilter, InventoryRowDTO
from wms.domain.repository.inventory_repository import InventoryRepository
from wms.domain.repository.location_repository import LocationRepository, ZoneRepository
from wms.domain.repository.lot_repository import LotRepository
from wms.domain.repository.product_repository import ProductRepository
from wms.domain.service import expiry


class ListInventoryHandler:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        lot_repo: LotRepository,
        location_repo: LocationRepository,
        zone_repo: ZoneRepository,
        product_repo: ProductRepository,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._inventory_repo = inventory_repo
        self._lot_repo = lot_repo
        self._location_repo = location_repo
        self._zone_repo = zone_repo
        self._product_repo = product_repo
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def handle(self, filters: InventoryFilter | None = None) -> list[InventoryRowDTO]:
        filters = filters or InventoryFilter()
        now = self._clock()

        lots = {lot.id: lot for lot in self._lot_repo.list_all()}
        locations = {loc.id: loc for loc in self._location_repo.list_all()}
        zones = {zone.id: zone for zone in self._zone_repo.list_all()}
        products = {p.id: p for p in self._product_repo.list_all()}

        rows: list[InventoryRowDTO] = []
        for record in self._inventory_repo.list_all():
            if record.qty <= 0:
                continue
            lot = lots[record.lot_id]
            location = locations[record.location_id]
            zone = zones.get(location.zone_id)
            product = products.get(lot.product_id)

            if filters.zone_id and location.zone_id != filters.zone_id:
                continue
            if filters.temp_class and (
                zone is None or zone.temp_class.value != filters.temp_class.upper()
            ):
                continue

            days = expiry.days_until_expiry(lot.expiry_date, now)
            row = InventoryRowDTO(
                sku=product.sku if product else lot.product_id,
                product_name=product.name if product else "",
                lot_no=lot.lot_no,
                lot_id=lot.id,
                zone=zone.name if zone else location.zone_id,
                location=location.code,
                qty=record.qty,
                unit=product.unit if product else "",
                expiry_date=lot.expiry_date.isoformat(),
                expiry_status=expiry.classify_days(days).value,
                days_until_expiry=days,
            )
            if filters.expiry_status and row.expiry_status != filters.expiry_status.upper():
                continue
            if filters.search and not _matches(row, filters.search):
                continue
            rows.append(row)

        rows.sort(key=lambda r: (r.days_until_expiry, r.sku, r.lot_no, r.location))
        return rows

    @staticmethod
    def summarize(rows: list[InventoryRowDTO]) -> dict[str, int]:
        """Count rows per expiry tier (every tier present, possibly 0)."""
        counts = Counter(row.expiry_status for row in rows)
        return {status.value: counts.get(status.value, 0) for status in expiry.ExpiryStatus}


def _matches(row: InventoryRowDTO, term: str) -> bool:
    term = term.strip().lower()
    return (
        term in row.sku.lower()
        or term in row.product_name.lower()
        or term in row.lot_no.lower()
    )
