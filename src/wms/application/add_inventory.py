"""Application service: Add Inventory use case.

Direct stock addition outside an inbound order: registers (or tops up)
the lot and places the quantity into a location in one atomic step.
"""

from __future__ import annotations

import logging
from datetime import date

from wms.application.dto import InventoryRecordDTO, to_record_dto
from wms.domain.exceptions import DomainException, NotFoundError
from wms.domain.repository.product_repository import ProductRepository
from wms.domain.service.ledger import InventoryLedger, StockReceipt

logger = logging.getLogger(__name__)


class AddInventoryHandler:

    def __init__(self, product_repo: ProductRepository, ledger: InventoryLedger) -> None:
        self._product_repo = product_repo
        self._ledger = ledger

    def handle(
        self,
        product: str,
        location_id: str,
        lot_no: str,
        manufacture_date: date | None,
        expiry_date: date,
        qty: int,
        supplier: str = "",
        origin_country: str = "VN",
    ) -> InventoryRecordDTO:
        """Add *qty* of a product (ID or SKU) to a location."""
        found = self._product_repo.get_by_id(product) or self._product_repo.get_by_sku(product)
        if found is None:
            raise NotFoundError(f"Product not found: '{product}'")

        try:
            record = self._ledger.receive_stock(
                StockReceipt(
                    product_id=found.id,
                    location_id=location_id,
                    lot_no=lot_no,
                    expiry_date=expiry_date,
                    manufacture_date=manufacture_date,
                    qty=qty,
                    supplier=supplier,
                    origin_country=origin_country,
                )
            )
        except DomainException as exc:
            logger.warning("Adding %s of %s to %s rejected: %s", qty, found.sku, location_id, exc)
            raise
        return to_record_dto(record)
