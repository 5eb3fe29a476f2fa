"""Tests for stock entry, movement and the expiry-aware inventory listing."""

from datetime import date, datetime, timezone

import pytest

from wms.application.add_inventory import AddInventoryHandler
from wms.application.dto import InventoryFilter
from wms.application.list_inventory import ListInventoryHandler
from wms.application.move_inventory import MoveInventoryHandler
from wms.domain.exceptions import CapacityExceededError, NotFoundError
from wms.domain.model.location import Location, Zone
from wms.domain.model.product import Product
from wms.domain.model.value_objects import TempClass
from wms.domain.service.ledger import InventoryLedger
from wms.domain.service.locking import KeyedLocks
from tests.fakes import (
    FakeInventoryRepository,
    FakeLocationRepository,
    FakeLotRepository,
    FakeProductRepository,
    FakeZoneRepository,
)

NOW = datetime(2026, 3, 1, tzinfo=timezone.utc)


def _setup():
    products = FakeProductRepository([
        Product(id="1", sku="SAL-01", name="Salmon Fillet"),
        Product(id="2", sku="BUT-03", name="Butter", unit="BOX", temp_class=TempClass.CHILL),
    ])
    zones = FakeZoneRepository([
        Zone(id="Z1", name="Freezer", temp_class=TempClass.FROZEN),
        Zone(id="Z2", name="Chiller", temp_class=TempClass.CHILL),
    ])
    locations = FakeLocationRepository([
        Location(id="L1", code="F-01", zone_id="Z1", max_qty=1000),
        Location(id="L2", code="F-02", zone_id="Z1", max_qty=50),
        Location(id="L3", code="C-01", zone_id="Z2", max_qty=1000),
    ])
    lots = FakeLotRepository()
    inventory = FakeInventoryRepository()
    ledger = InventoryLedger(lots, locations, inventory, locks=KeyedLocks())
    adder = AddInventoryHandler(products, ledger)
    lister = ListInventoryHandler(inventory, lots, locations, zones, products, clock=lambda: NOW)
    return adder, lister, ledger, lots, locations


def _stock(adder: AddInventoryHandler) -> None:
    # 40, 10, 3 and -2 days from NOW
    adder.handle("SAL-01", "L1", "S-NORMAL", None, date(2026, 4, 10), 100)
    adder.handle("SAL-01", "L2", "S-WARN", None, date(2026, 3, 11), 20)
    adder.handle("BUT-03", "L3", "B-CRIT", None, date(2026, 3, 4), 30)
    adder.handle("2", "L3", "B-OLD", None, date(2026, 2, 27), 5)


class TestAddInventory:

    def test_resolves_product_by_sku_or_id(self):
        adder, _, _, lots, locations = _setup()
        by_sku = adder.handle("sal-01", "L1", "LOT-1", date(2026, 1, 1), date(2027, 1, 1), 30)
        by_id = adder.handle("1", "L1", "LOT-1", None, date(2027, 1, 1), 20)
        assert by_sku.lot_id == by_id.lot_id
        assert by_id.qty == 50
        assert lots.get_by_id(by_id.lot_id).total_qty == 50
        assert locations.get_by_id("L1").current_qty == 50

    def test_unknown_product(self):
        adder, _, _, _, _ = _setup()
        with pytest.raises(NotFoundError):
            adder.handle("NOPE", "L1", "LOT-1", None, date(2027, 1, 1), 1)

    def test_capacity_enforced(self):
        adder, _, _, lots, _ = _setup()
        with pytest.raises(CapacityExceededError):
            adder.handle("SAL-01", "L2", "LOT-1", None, date(2027, 1, 1), 51)
        assert lots.list_all() == []


class TestListInventory:

    def test_rows_sorted_by_days_to_expiry(self):
        adder, lister, _, _, _ = _setup()
        _stock(adder)
        rows = lister.handle()
        assert [r.lot_no for r in rows] == ["B-OLD", "B-CRIT", "S-WARN", "S-NORMAL"]
        assert [r.expiry_status for r in rows] == ["EXPIRED", "CRITICAL", "WARNING", "NORMAL"]
        assert [r.days_until_expiry for r in rows] == [-2, 3, 10, 40]

    def test_row_contents(self):
        adder, lister, _, _, _ = _setup()
        _stock(adder)
        row = next(r for r in lister.handle() if r.lot_no == "B-CRIT")
        assert row.sku == "BUT-03"
        assert row.product_name == "Butter"
        assert row.zone == "Chiller"
        assert row.location == "C-01"
        assert row.unit == "BOX"
        assert row.qty == 30
        assert row.expiry_date == "2026-03-04"

    @pytest.mark.parametrize(
        "filters, expected",
        [
            (InventoryFilter(search="salmon"), {"S-NORMAL", "S-WARN"}),
            (InventoryFilter(search="b-old"), {"B-OLD"}),
            (InventoryFilter(expiry_status="critical"), {"B-CRIT"}),
            (InventoryFilter(zone_id="Z2"), {"B-CRIT", "B-OLD"}),
            (InventoryFilter(temp_class="frozen"), {"S-NORMAL", "S-WARN"}),
            (InventoryFilter(search="SAL", expiry_status="NORMAL"), {"S-NORMAL"}),
        ],
    )
    def test_filters(self, filters, expected):
        adder, lister, _, _, _ = _setup()
        _stock(adder)
        assert {r.lot_no for r in lister.handle(filters)} == expected

    def test_summary_counts_every_tier(self):
        adder, lister, _, _, _ = _setup()
        _stock(adder)
        adder.handle("SAL-01", "L1", "S-NORMAL-2", None, date(2026, 6, 1), 1)
        summary = ListInventoryHandler.summarize(lister.handle())
        assert summary == {"EXPIRED": 1, "CRITICAL": 1, "WARNING": 1, "NORMAL": 2}

    def test_empty_warehouse(self):
        _, lister, _, _, _ = _setup()
        assert lister.handle() == []
        assert ListInventoryHandler.summarize([]) == {
            "EXPIRED": 0, "CRITICAL": 0, "WARNING": 0, "NORMAL": 0,
        }


class TestMoveInventory:

    def test_move_then_list(self):
        adder, lister, ledger, _, locations = _setup()
        record = adder.handle("SAL-01", "L1", "LOT-1", None, date(2027, 1, 1), 100)
        moved = MoveInventoryHandler(ledger).handle(record.lot_id, "L1", "L2", 40)
        assert moved.qty == 40
        assert locations.get_by_id("L1").current_qty == 60
        assert sorted((r.location, r.qty) for r in lister.handle()) == [("F-01", 60), ("F-02", 40)]
