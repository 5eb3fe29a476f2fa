"""JSON-file-backed implementation of OrderRepository.

Inbound and outbound orders share one file; each entry carries its
``direction`` tag so it is rebuilt as the right aggregate class.
"""

from __future__ import annotations

from pathlib import Path

from wms.domain.model.order import ORDER_TYPES, Order, StatusChange
from wms.domain.model.order_line import InboundLine, OutboundLine
from wms.domain.model.value_objects import Direction, Priority
from wms.domain.repository.order_repository import OrderRepository
from wms.domain.repository.versioning import check_version
from wms.infrastructure.persistence.json_store import (
    JsonFileStore,
    iso,
    parse_date,
    parse_datetime,
)


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._store = JsonFileStore(file_path)

    # --- OrderRepository interface --------------------------------------------

    def next_id(self) -> int:
        orders = self._store.load_raw()
        if not orders:
            return 1
        return max(o["id"] for o in orders) + 1

    def get_by_id(self, order_id: int) -> Order | None:
        for raw in self._store.load_raw():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Order]:
        return [self._to_domain(raw) for raw in self._store.load_raw()]

    def save(self, order: Order) -> None:
        with self._store.locked():
            orders = self._store.load_raw()

            if order.id is None:
                order.id = self.next_id()

            # Upsert: replace if exists, otherwise append
            index = next(
                (i for i, raw in enumerate(orders) if raw["id"] == order.id), None
            )
            stored = orders[index]["version"] if index is not None else None
            check_version("Order", order.order_number, stored, order.version)

            order.version += 1
            if index is None:
                orders.append(self._to_raw(order))
            else:
                orders[index] = self._to_raw(order)
            self._store.persist_raw(orders)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        totals = order.totals
        return {
            "id": order.id,
            "order_number": order.order_number,
            "direction": order.direction.value,
            "status": order.status.value,
            "counterparty": order.counterparty,
            "carrier": order.carrier,
            "priority": order.priority.value,
            "scheduled_time": iso(order.scheduled_time),
            "created_at": order.created_at.isoformat(),
            "version": order.version,
            "lines": [_line_to_raw(line) for line in order.lines],
            "totals": {
                "expected": totals.expected,
                "received": totals.received,
                "damaged": totals.damaged,
                "accepted": totals.accepted,
            },
            "history": [
                {
                    "from": change.from_status,
                    "to": change.to_status,
                    "at": change.at.isoformat(),
                    "actor": change.actor,
                }
                for change in order.history
            ],
            "notes": list(order.notes),
            "completing": order.completing,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        direction = Direction(raw["direction"])
        order_cls = ORDER_TYPES[direction]
        return order_cls(
            id=raw["id"],
            counterparty=raw["counterparty"],
            lines=[_line_to_domain(direction, line) for line in raw["lines"]],
            scheduled_time=parse_datetime(raw.get("scheduled_time")),
            priority=Priority(raw.get("priority", Priority.MEDIUM.value)),
            carrier=raw.get("carrier", ""),
            status=order_cls.STATUS(raw["status"]),
            created_at=parse_datetime(raw["created_at"]),
            version=raw.get("version", 0),
            history=[
                StatusChange(
                    from_status=h["from"],
                    to_status=h["to"],
                    at=parse_datetime(h["at"]),
                    actor=h.get("actor"),
                )
                for h in raw.get("history", [])
            ],
            notes=list(raw.get("notes", [])),
            completing=raw.get("completing", False),
        )


def _line_to_raw(line) -> dict:
    if isinstance(line, InboundLine):
        return {
            "id": line.id,
            "product_id": line.product_id,
            "sku": line.sku,
            "unit": line.unit,
            "expected_qty": line.expected_qty,
            "received_qty": line.received_qty,
            "damaged_qty": line.damaged_qty,
            "accepted_qty": line.accepted_qty,
            "lot_no": line.lot_no,
            "manufacture_date": iso(line.manufacture_date),
            "expiry_date": iso(line.expiry_date),
            "location_id": line.location_id,
            "lot_id": line.lot_id,
        }
    return {
        "id": line.id,
        "product_id": line.product_id,
        "sku": line.sku,
        "unit": line.unit,
        "requested_qty": line.requested_qty,
        "picked_qty": line.picked_qty,
        "rejected_qty": line.rejected_qty,
        "accepted_qty": line.accepted_qty,
        "lot_id": line.lot_id,
        "location_id": line.location_id,
    }


def _line_to_domain(direction: Direction, raw: dict):
    # accepted_qty is derived; it is written for readers of the file only
    if direction is Direction.INBOUND:
        return InboundLine(
            id=raw["id"],
            product_id=raw["product_id"],
            sku=raw["sku"],
            unit=raw.get("unit", "KG"),
            expected_qty=raw["expected_qty"],
            received_qty=raw.get("received_qty"),
            damaged_qty=raw.get("damaged_qty", 0),
            lot_no=raw.get("lot_no"),
            manufacture_date=parse_date(raw.get("manufacture_date")),
            expiry_date=parse_date(raw.get("expiry_date")),
            location_id=raw.get("location_id"),
            lot_id=raw.get("lot_id"),
        )
    return OutboundLine(
        id=raw["id"],
        product_id=raw["product_id"],
        sku=raw["sku"],
        unit=raw.get("unit", "KG"),
        requested_qty=raw["requested_qty"],
        picked_qty=raw.get("picked_qty"),
        rejected_qty=raw.get("rejected_qty", 0),
        lot_id=raw.get("lot_id"),
        location_id=raw.get("location_id"),
    )
