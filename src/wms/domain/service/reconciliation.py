"""Domain service: Line Reconciliation.

Records counted quantities against order lines.  The engine only enforces
internal consistency (non-negative counts, damaged never above received);
partial receipt and over-receipt are both legitimate outcomes.

Every function validates the complete batch before building any result
and never mutates its inputs, so a rejected batch can simply be corrected
and resubmitted.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Iterable, Sequence

from wms.domain.exceptions import ValidationError
from wms.domain.model.order_line import InboundLine, OutboundLine
from wms.domain.model.value_objects import require_count


@dataclass(frozen=True)
class InboundLineUpdate:
    line_id: int
    received_qty: int
    damaged_qty: int = 0


@dataclass(frozen=True)
class OutboundLineUpdate:
    line_id: int
    picked_qty: int
    rejected_qty: int = 0
    lot_id: int | None = None
    location_id: str | None = None


@dataclass(frozen=True)
class PutawayAssignment:
    line_id: int
    location_id: str
    lot_no: str | None = None
    expiry_date: date | None = None
    manufacture_date: date | None = None


@dataclass(frozen=True)
class OrderTotals:
    """Order-level aggregates.

    For outbound orders ``expected`` is the requested quantity,
    ``received`` the picked quantity and ``damaged`` the rejected one.
    """

    expected: int
    received: int
    damaged: int
    accepted: int


def reconcile_inbound(
    lines: Sequence[InboundLine],
    updates: Iterable[InboundLineUpdate],
) -> list[InboundLine]:
    """Apply received / damaged counts to inbound lines."""
    by_line = _index_updates(lines, updates)

    for line_id, upd in by_line.items():
        received = require_count(f"Line {line_id} received quantity", upd.received_qty)
        damaged = require_count(f"Line {line_id} damaged quantity", upd.damaged_qty)
        if damaged > received:
            raise ValidationError(
                f"Line {line_id}: damaged quantity {damaged} exceeds "
                f"received quantity {received}"
            )

    return [
        replace(
            line,
            received_qty=by_line[line.id].received_qty,
            damaged_qty=by_line[line.id].damaged_qty,
        )
        if line.id in by_line
        else line
        for line in lines
    ]


def reconcile_outbound(
    lines: Sequence[OutboundLine],
    updates: Iterable[OutboundLineUpdate],
) -> list[OutboundLine]:
    """Apply picked / rejected counts (and optionally the pick source)."""
    by_line = _index_updates(lines, updates)

    for line_id, upd in by_line.items():
        picked = require_count(f"Line {line_id} picked quantity", upd.picked_qty)
        rejected = require_count(f"Line {line_id} rejected quantity", upd.rejected_qty)
        if rejected > picked:
            raise ValidationError(
                f"Line {line_id}: rejected quantity {rejected} exceeds "
                f"picked quantity {picked}"
            )
        if (upd.lot_id is None) != (not upd.location_id):
            raise ValidationError(
                f"Line {line_id}: pick source needs both a lot and a location"
            )

    result: list[OutboundLine] = []
    for line in lines:
        upd = by_line.get(line.id)
        if upd is None:
            result.append(line)
            continue
        changes: dict = {"picked_qty": upd.picked_qty, "rejected_qty": upd.rejected_qty}
        if upd.lot_id is not None:
            changes["lot_id"] = upd.lot_id
            changes["location_id"] = upd.location_id
        result.append(replace(line, **changes))
    return result


def apply_putaway_plan(
    lines: Sequence[InboundLine],
    assignments: Iterable[PutawayAssignment],
) -> list[InboundLine]:
    """Record where (and as which lot) each inbound line will be stored.

    Lot details already captured on the line are kept unless the
    assignment overrides them.
    """
    by_line = _index_updates(lines, assignments)
    current = {line.id: line for line in lines}

    planned: dict[int, InboundLine] = {}
    for line_id, a in by_line.items():
        if not a.location_id or not a.location_id.strip():
            raise ValidationError(f"Line {line_id}: a target location is required")
        line = current[line_id]
        lot_no = (a.lot_no or line.lot_no or "").strip()
        expiry = a.expiry_date or line.expiry_date
        mfg = a.manufacture_date or line.manufacture_date
        if not lot_no:
            raise ValidationError(f"Line {line_id}: a lot number is required")
        if expiry is None:
            raise ValidationError(f"Line {line_id}: an expiry date is required")
        if mfg is not None and expiry < mfg:
            raise ValidationError(
                f"Line {line_id}: expiry {expiry} is before manufacture {mfg}"
            )
        planned[line_id] = replace(
            line,
            location_id=a.location_id.strip(),
            lot_no=lot_no,
            expiry_date=expiry,
            manufacture_date=mfg,
        )

    return [planned.get(line.id, line) for line in lines]


def order_totals(lines: Iterable[InboundLine | OutboundLine]) -> OrderTotals:
    expected = received = damaged = accepted = 0
    for line in lines:
        if isinstance(line, InboundLine):
            expected += line.expected_qty
            received += line.received_qty or 0
            damaged += line.damaged_qty
        else:
            expected += line.requested_qty
            received += line.picked_qty or 0
            damaged += line.rejected_qty
        accepted += line.accepted_qty
    return OrderTotals(
        expected=expected, received=received, damaged=damaged, accepted=accepted
    )


# --- Internal helpers ---------------------------------------------------------


def _index_updates(
    lines: Sequence[InboundLine | OutboundLine], updates: Iterable
) -> dict[int, object]:
    known = {line.id for line in lines}
    by_line: dict[int, object] = {}
    for upd in updates:
        if upd.line_id not in known:
            raise ValidationError(f"Line {upd.line_id} is not part of this order")
        if upd.line_id in by_line:
            raise ValidationError(f"Line {upd.line_id} appears twice in one batch")
        by_line[upd.line_id] = upd
    if not by_line:
        raise ValidationError("Must specify at least one line")
    return by_line
