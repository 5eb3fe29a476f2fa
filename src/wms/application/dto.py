"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.  Every command handler
returns the canonical state *after* it was persisted, so callers render
what the store holds rather than what they expect it to hold.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from wms.domain.model.inventory import InventoryRecord
from wms.domain.model.order import Order
from wms.domain.model.order_line import InboundLine


# --- Inputs -------------------------------------------------------------------


@dataclass(frozen=True)
class OrderLineSpec:
    """Input: what the caller asked for (SKU + quantity).

    Inbound lines may already carry the supplier's batch details.
    """

    sku: str
    quantity: int
    lot_no: str | None = None
    expiry_date: date | None = None
    manufacture_date: date | None = None


@dataclass(frozen=True)
class InventoryFilter:
    search: str | None = None  # SKU, product name or lot number
    expiry_status: str | None = None
    zone_id: str | None = None
    temp_class: str | None = None


# --- Outputs ------------------------------------------------------------------


@dataclass(frozen=True)
class OrderLineDTO:
    id: int
    product_id: str
    sku: str
    unit: str
    ordered_qty: int  # expected (inbound) / requested (outbound)
    counted_qty: int | None  # received / picked
    damaged_qty: int  # damaged / rejected
    accepted_qty: int
    lot_no: str | None
    lot_id: int | None
    location_id: str | None
    expiry_date: str | None


@dataclass(frozen=True)
class StatusChangeDTO:
    from_status: str
    to_status: str
    at: str
    actor: str | None


@dataclass(frozen=True)
class OrderDTO:
    id: int
    order_number: str
    direction: str
    status: str
    next_status: str | None
    counterparty: str
    carrier: str
    priority: str
    scheduled_time: str | None
    created_at: str
    lines: list[OrderLineDTO]
    total_expected: int
    total_received: int
    total_damaged: int
    total_accepted: int
    history: list[StatusChangeDTO]
    notes: list[str]
    version: int
    completing: bool = False


@dataclass(frozen=True)
class InventoryRecordDTO:
    lot_id: int
    location_id: str
    qty: int
    updated_at: str


@dataclass(frozen=True)
class InventoryRowDTO:
    sku: str
    product_name: str
    lot_no: str
    lot_id: int
    zone: str
    location: str
    qty: int
    unit: str
    expiry_date: str
    expiry_status: str
    days_until_expiry: int


@dataclass(frozen=True)
class LocationDTO:
    id: str
    code: str
    zone_id: str
    zone: str
    max_qty: int
    current_qty: int
    headroom: int
    status: str
    occupancy: str


# --- Mapping ------------------------------------------------------------------


def to_order_dto(order: Order) -> OrderDTO:
    totals = order.totals
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        order_number=order.order_number,  # type: ignore[arg-type]
        direction=order.direction.value,
        status=order.status.value,
        next_status=order.next_status.value if order.next_status else None,
        counterparty=order.counterparty,
        carrier=order.carrier,
        priority=order.priority.value,
        scheduled_time=_fmt(order.scheduled_time),
        created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        lines=[_line_dto(line) for line in order.lines],
        total_expected=totals.expected,
        total_received=totals.received,
        total_damaged=totals.damaged,
        total_accepted=totals.accepted,
        history=[
            StatusChangeDTO(
                from_status=change.from_status,
                to_status=change.to_status,
                at=change.at.isoformat(),
                actor=change.actor,
            )
            for change in order.history
        ],
        notes=list(order.notes),
        version=order.version,
        completing=order.completing,
    )


def to_record_dto(record: InventoryRecord) -> InventoryRecordDTO:
    return InventoryRecordDTO(
        lot_id=record.lot_id,
        location_id=record.location_id,
        qty=record.qty,
        updated_at=record.updated_at.isoformat(),
    )


def _line_dto(line) -> OrderLineDTO:
    if isinstance(line, InboundLine):
        return OrderLineDTO(
            id=line.id,
            product_id=line.product_id,
            sku=line.sku,
            unit=line.unit,
            ordered_qty=line.expected_qty,
            counted_qty=line.received_qty,
            damaged_qty=line.damaged_qty,
            accepted_qty=line.accepted_qty,
            lot_no=line.lot_no,
            lot_id=line.lot_id,
            location_id=line.location_id,
            expiry_date=_fmt(line.expiry_date),
        )
    return OrderLineDTO(
        id=line.id,
        product_id=line.product_id,
        sku=line.sku,
        unit=line.unit,
        ordered_qty=line.requested_qty,
        counted_qty=line.picked_qty,
        damaged_qty=line.rejected_qty,
        accepted_qty=line.accepted_qty,
        lot_no=None,
        lot_id=line.lot_id,
        location_id=line.location_id,
        expiry_date=None,
    )


def _fmt(value: date | datetime | None) -> str | None:
    return value.isoformat() if value is not None else None
