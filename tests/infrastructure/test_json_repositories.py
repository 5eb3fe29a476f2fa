"""Round-trip and version-check tests for the JSON-file repositories."""

import json
from datetime import date, datetime, timezone

import pytest

from wms.domain.exceptions import ConcurrencyConflictError, InvalidStateError
from wms.domain.model.inventory import InventoryRecord
from wms.domain.model.location import Location, LocationStatus, Zone
from wms.domain.model.lot import Lot
from wms.domain.model.order import (
    InboundOrder,
    InboundStatus,
    OutboundOrder,
    OutboundStatus,
)
from wms.domain.model.order_line import InboundLine, OutboundLine
from wms.domain.model.product import Product
from wms.domain.model.value_objects import Priority, TempClass
from wms.domain.service.reconciliation import InboundLineUpdate
from wms.infrastructure.persistence.json_inventory_repository import JsonInventoryRepository
from wms.infrastructure.persistence.json_location_repository import (
    JsonLocationRepository,
    JsonZoneRepository,
)
from wms.infrastructure.persistence.json_lot_repository import JsonLotRepository
from wms.infrastructure.persistence.json_order_repository import JsonOrderRepository
from wms.infrastructure.persistence.json_product_repository import JsonProductRepository


class TestJsonOrderRepository:

    def test_creates_empty_file(self, tmp_path):
        JsonOrderRepository(tmp_path / "sub" / "orders.json")
        assert json.loads((tmp_path / "sub" / "orders.json").read_text()) == []

    def test_inbound_round_trip(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        order = InboundOrder.create(
            "Acme",
            [InboundLine(id=1, product_id="1", sku="SAL-01", expected_qty=500,
                         lot_no="SUP-1", expiry_date=date(2027, 1, 1))],
            scheduled_time=datetime(2026, 3, 2, 8, 30, tzinfo=timezone.utc),
            priority=Priority.HIGH,
            carrier="TRUCK-1",
        )
        order.transition_to("SCHEDULED", actor="clerk")
        order.transition_to("RECEIVING")
        order.reconcile([InboundLineUpdate(1, 480, 20)])
        order.annotate("pallet 3 wet")
        repo.save(order)

        loaded = repo.get_by_id(order.id)
        assert isinstance(loaded, InboundOrder)
        assert loaded.status == InboundStatus.RECEIVING
        assert loaded.lines == order.lines
        assert loaded.lines[0].accepted_qty == 460
        assert loaded.history == order.history
        assert loaded.notes == ["pallet 3 wet"]
        assert loaded.priority == Priority.HIGH
        assert loaded.scheduled_time == order.scheduled_time
        assert loaded.version == 1

        raw = json.loads((tmp_path / "orders.json").read_text())[0]
        assert raw["order_number"] == "IB-00001"
        assert raw["lines"][0]["accepted_qty"] == 460
        assert raw["totals"]["damaged"] == 20

    def test_outbound_round_trip(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        order = OutboundOrder.create(
            "Retail", [OutboundLine(id=1, product_id="1", sku="SAL-01", requested_qty=5)]
        )
        repo.save(order)
        loaded = repo.get_by_id(order.id)
        assert isinstance(loaded, OutboundOrder)
        assert loaded.lines == order.lines
        assert loaded.order_number == "OB-00001"

    def test_ids_are_sequential_across_directions(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        a = InboundOrder.create("A", [InboundLine(1, "1", "S", 1)])
        b = OutboundOrder.create("B", [OutboundLine(1, "1", "S", 1)])
        repo.save(a)
        repo.save(b)
        assert (a.id, b.id) == (1, 2)
        assert [o.id for o in repo.list_all()] == [1, 2]

    def test_stale_save_rejected(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        repo.save(InboundOrder.create("A", [InboundLine(1, "1", "S", 1)]))
        first, second = repo.get_by_id(1), repo.get_by_id(1)
        first.transition_to("SCHEDULED")
        repo.save(first)
        second.cancel()
        with pytest.raises(ConcurrencyConflictError):
            repo.save(second)
        assert repo.get_by_id(1).status == InboundStatus.SCHEDULED

    def test_completion_claim_is_visible_to_another_reader(self, tmp_path):
        path = tmp_path / "orders.json"
        order = OutboundOrder.create("B", [OutboundLine(1, "1", "S", 1)])
        order.status = OutboundStatus.LOADED
        JsonOrderRepository(path).save(order)

        mine = JsonOrderRepository(path).get_by_id(order.id)
        mine.claim_completion()
        JsonOrderRepository(path).save(mine)

        theirs = JsonOrderRepository(path).get_by_id(order.id)
        assert theirs.completing
        with pytest.raises(InvalidStateError):
            theirs.claim_completion()

    def test_missing_order(self, tmp_path):
        assert JsonOrderRepository(tmp_path / "orders.json").get_by_id(9) is None


class TestJsonLotRepository:

    def test_round_trip_and_lookup(self, tmp_path):
        repo = JsonLotRepository(tmp_path / "lots.json")
        lot = Lot.create("1", "LOT-1", date(2026, 1, 1), date(2027, 1, 1), 100)
        lot.allocate(40)
        repo.save(lot)
        assert lot.id == 1
        loaded = repo.get_by_lot_no("1", "LOT-1")
        assert loaded == lot
        assert repo.get_by_lot_no("2", "LOT-1") is None

    def test_stale_save_rejected(self, tmp_path):
        repo = JsonLotRepository(tmp_path / "lots.json")
        repo.save(Lot.create("1", "LOT-1", None, date(2027, 1, 1), 100))
        first, second = repo.get_by_id(1), repo.get_by_id(1)
        first.allocate(10)
        repo.save(first)
        second.allocate(95)
        with pytest.raises(ConcurrencyConflictError):
            repo.save(second)
        assert repo.get_by_id(1).allocated_qty == 10


class TestJsonLocationRepositories:

    def test_location_round_trip(self, tmp_path):
        repo = JsonLocationRepository(tmp_path / "locations.json")
        loc = Location.create("L1", "A-01", "Z1", 500)
        loc.occupy(120)
        loc.block()
        repo.save(loc)
        loaded = repo.get_by_id("L1")
        assert loaded == loc
        assert loaded.status == LocationStatus.BLOCKED

    def test_location_stale_save_rejected(self, tmp_path):
        repo = JsonLocationRepository(tmp_path / "locations.json")
        repo.save(Location.create("L1", "A-01", "Z1", 500))
        first, second = repo.get_by_id("L1"), repo.get_by_id("L1")
        first.occupy(400)
        repo.save(first)
        second.occupy(400)
        with pytest.raises(ConcurrencyConflictError):
            repo.save(second)
        assert repo.get_by_id("L1").current_qty == 400

    def test_zone_round_trip(self, tmp_path):
        repo = JsonZoneRepository(tmp_path / "zones.json")
        repo.save(Zone.create("Z1", "Freezer", TempClass.FROZEN))
        repo.save(Zone.create("Z1", "Deep Freezer", TempClass.FROZEN))
        assert [z.name for z in repo.list_all()] == ["Deep Freezer"]


class TestJsonInventoryRepository:

    def test_upsert_and_delete_when_empty(self, tmp_path):
        repo = JsonInventoryRepository(tmp_path / "inventory.json")
        record = InventoryRecord(lot_id=1, location_id="L1", qty=30)
        repo.save(record)
        record.qty = 45
        repo.save(record)
        assert repo.get(1, "L1").qty == 45
        assert len(repo.list_all()) == 1

        record.qty = 0
        repo.save(record)
        assert repo.get(1, "L1") is None
        assert repo.list_all() == []


class TestJsonProductRepository:

    def test_round_trip_and_sku_lookup(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        repo.save(Product.create("1", "sal-01", "Salmon", "kg", TempClass.FROZEN))
        product = repo.get_by_sku("Sal-01")
        assert product.id == "1"
        assert product.unit == "KG"
        assert repo.get_by_id("1") == product
