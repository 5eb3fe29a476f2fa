"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from pathlib import Path

from wms.domain.service.ledger import InventoryLedger
from wms.infrastructure.persistence.json_inventory_repository import (
    JsonInventoryRepository,
)
from wms.infrastructure.persistence.json_location_repository import (
    JsonLocationRepository,
    JsonZoneRepository,
)
from wms.infrastructure.persistence.json_lot_repository import JsonLotRepository
from wms.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from wms.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from wms.infrastructure.settings import get_settings


def _data_dir() -> Path:
    # Read on every call so tests can point WMS_DATA_DIR elsewhere
    return get_settings().DATA_DIR


def product_repository() -> JsonProductRepository:
    return JsonProductRepository(_data_dir() / "products.json")


def order_repository() -> JsonOrderRepository:
    return JsonOrderRepository(_data_dir() / "orders.json")


def lot_repository() -> JsonLotRepository:
    return JsonLotRepository(_data_dir() / "lots.json")


def location_repository() -> JsonLocationRepository:
    return JsonLocationRepository(_data_dir() / "locations.json")


def zone_repository() -> JsonZoneRepository:
    return JsonZoneRepository(_data_dir() / "zones.json")


def inventory_repository() -> JsonInventoryRepository:
    return JsonInventoryRepository(_data_dir() / "inventory.json")


def ledger() -> InventoryLedger:
    return InventoryLedger(
        lot_repo=lot_repository(),
        location_repo=location_repository(),
        inventory_repo=inventory_repository(),
    )
