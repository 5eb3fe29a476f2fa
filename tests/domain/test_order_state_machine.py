"""Unit tests for the inbound and outbound order state machines."""

from datetime import date

import pytest

from wms.domain.exceptions import (
    InvalidStateError,
    InvalidTransitionError,
    ValidationError,
)
from wms.domain.model.order import (
    MAX_LINES,
    InboundOrder,
    InboundStatus,
    Order,
    OutboundOrder,
    OutboundStatus,
)
from wms.domain.model.order_line import InboundLine, OutboundLine
from wms.domain.model.value_objects import Direction
from wms.domain.service.reconciliation import (
    InboundLineUpdate,
    OutboundLineUpdate,
    PutawayAssignment,
)


def _inbound_line(line_id: int = 1, product_id: str = "1", qty: int = 500) -> InboundLine:
    return InboundLine(id=line_id, product_id=product_id, sku=f"SKU-{product_id}", expected_qty=qty)


def _outbound_line(line_id: int = 1, product_id: str = "1", qty: int = 100) -> OutboundLine:
    return OutboundLine(id=line_id, product_id=product_id, sku=f"SKU-{product_id}", requested_qty=qty)


def _inbound(status: InboundStatus | None = None) -> InboundOrder:
    order = InboundOrder.create("Acme Seafood", [_inbound_line()])
    order.id = 7
    if status is not None:
        order.status = status
    return order


def _outbound(status: OutboundStatus | None = None) -> OutboundOrder:
    order = OutboundOrder.create("Retail Mart", [_outbound_line()])
    order.id = 8
    if status is not None:
        order.status = status
    return order


class TestOrderCreation:

    def test_inbound_starts_pending(self):
        order = InboundOrder.create("Acme", [_inbound_line()])
        assert order.status == InboundStatus.PENDING
        assert order.direction == Direction.INBOUND
        assert order.id is None  # assigned by repository

    def test_outbound_starts_released(self):
        order = OutboundOrder.create("Retail", [_outbound_line()])
        assert order.status == OutboundStatus.RELEASED
        assert order.direction == Direction.OUTBOUND

    def test_order_number_uses_direction_prefix(self):
        assert _inbound().order_number == "IB-00007"
        assert _outbound().order_number == "OB-00008"

    def test_counterparty_required(self):
        with pytest.raises(ValidationError, match="Counterparty"):
            InboundOrder.create("  ", [_inbound_line()])

    def test_empty_order_rejected(self):
        with pytest.raises(ValidationError, match="at least one line"):
            OutboundOrder.create("Retail", [])

    def test_too_many_lines(self):
        lines = [_inbound_line(i, str(i)) for i in range(1, MAX_LINES + 2)]
        with pytest.raises(ValidationError, match="Maximum"):
            InboundOrder.create("Acme", lines)

    def test_duplicate_product_rejected(self):
        with pytest.raises(ValidationError, match="only once"):
            InboundOrder.create("Acme", [_inbound_line(1, "1"), _inbound_line(2, "1")])

    def test_wrong_line_type_rejected(self):
        with pytest.raises(ValidationError):
            InboundOrder.create("Acme", [_outbound_line()])

    def test_foreign_status_rejected_on_construction(self):
        with pytest.raises(ValidationError):
            InboundOrder(id=1, counterparty="Acme", lines=[_inbound_line()],
                         status=OutboundStatus.PICKING)


class TestInboundWorkflow:

    def test_full_chain_up_to_putaway(self):
        order = _inbound()
        for target in ("SCHEDULED", "RECEIVING", "QC", "PUTAWAY"):
            order.transition_to(target, actor="clerk")
            assert order.status.value == target
        assert [h.to_status for h in order.history] == [
            "SCHEDULED", "RECEIVING", "QC", "PUTAWAY",
        ]
        assert all(h.actor == "clerk" for h in order.history)

    def test_skipping_qc_rejected(self):
        order = _inbound(InboundStatus.RECEIVING)
        with pytest.raises(InvalidTransitionError):
            order.transition_to(InboundStatus.PUTAWAY)
        assert order.status == InboundStatus.RECEIVING
        assert order.history == []

    def test_moving_backwards_rejected(self):
        order = _inbound(InboundStatus.QC)
        with pytest.raises(InvalidTransitionError):
            order.transition_to("RECEIVING")

    def test_completion_needs_the_stock_step(self):
        order = _inbound(InboundStatus.PUTAWAY)
        with pytest.raises(InvalidTransitionError, match="completing"):
            order.transition_to(InboundStatus.COMPLETED)

    def test_unknown_status_rejected(self):
        with pytest.raises(InvalidTransitionError, match="Unknown"):
            _inbound().transition_to("SHIPPED")

    def test_status_of_other_direction_rejected(self):
        with pytest.raises(InvalidTransitionError):
            _inbound().transition_to(OutboundStatus.PICKING)

    def test_next_status(self):
        assert _inbound().next_status == InboundStatus.SCHEDULED
        assert _inbound(InboundStatus.PUTAWAY).next_status == InboundStatus.COMPLETED
        assert _inbound(InboundStatus.COMPLETED).next_status is None


class TestOutboundWorkflow:

    def test_full_chain_up_to_loaded(self):
        order = _outbound()
        for target in ("PICKING", "PACKING", "LOADED"):
            order.transition_to(target)
        assert order.status == OutboundStatus.LOADED
        assert order.pre_completion_status == OutboundStatus.LOADED

    def test_skipping_packing_rejected(self):
        order = _outbound(OutboundStatus.PICKING)
        with pytest.raises(InvalidTransitionError):
            order.transition_to("LOADED")


class TestCancellation:

    @pytest.mark.parametrize(
        "status",
        [s for s in InboundStatus if s not in (InboundStatus.COMPLETED, InboundStatus.CANCELLED)],
    )
    def test_inbound_cancellable_from_every_open_status(self, status):
        order = _inbound(status)
        order.cancel(actor="supervisor")
        assert order.status == InboundStatus.CANCELLED
        assert order.history[-1].from_status == status.value

    @pytest.mark.parametrize(
        "status",
        [s for s in OutboundStatus if s not in (OutboundStatus.SHIPPED, OutboundStatus.CANCELLED)],
    )
    def test_outbound_cancellable_from_every_open_status(self, status):
        order = _outbound(status)
        order.cancel()
        assert order.status == OutboundStatus.CANCELLED


class TestTerminalStates:

    @pytest.mark.parametrize("target", [s.value for s in InboundStatus])
    def test_completed_inbound_is_immutable(self, target):
        order = _inbound(InboundStatus.COMPLETED)
        with pytest.raises(InvalidTransitionError):
            order.transition_to(target)
        assert order.status == InboundStatus.COMPLETED

    @pytest.mark.parametrize("target", [s.value for s in OutboundStatus])
    def test_shipped_outbound_is_immutable(self, target):
        order = _outbound(OutboundStatus.SHIPPED)
        with pytest.raises(InvalidTransitionError):
            order.transition_to(target)

    def test_cancelled_cannot_be_cancelled_again(self):
        order = _inbound(InboundStatus.CANCELLED)
        with pytest.raises(InvalidTransitionError):
            order.cancel()

    def test_notes_still_allowed(self):
        order = _inbound(InboundStatus.COMPLETED)
        order.annotate("  temperature log attached ")
        assert order.notes == ["temperature log attached"]

    def test_blank_note_rejected(self):
        with pytest.raises(ValidationError):
            _inbound().annotate("   ")


class TestOperationGating:

    def test_inbound_reconcile_only_while_receiving(self):
        order = _inbound(InboundStatus.SCHEDULED)
        with pytest.raises(InvalidStateError):
            order.reconcile([InboundLineUpdate(line_id=1, received_qty=10)])

    def test_inbound_reconcile_in_receiving(self):
        order = _inbound(InboundStatus.RECEIVING)
        totals = order.reconcile([InboundLineUpdate(line_id=1, received_qty=480, damaged_qty=20)])
        assert totals.accepted == 460

    def test_outbound_reconcile_in_picking_and_packing(self):
        for status in (OutboundStatus.PICKING, OutboundStatus.PACKING):
            order = _outbound(status)
            totals = order.reconcile([OutboundLineUpdate(line_id=1, picked_qty=90)])
            assert totals.received == 90

    def test_outbound_reconcile_after_loading_rejected(self):
        order = _outbound(OutboundStatus.LOADED)
        with pytest.raises(InvalidStateError):
            order.reconcile([OutboundLineUpdate(line_id=1, picked_qty=90)])

    def test_putaway_plan_only_in_qc_or_putaway(self):
        assignment = PutawayAssignment(1, "L1", "LOT-1", date(2027, 1, 1))
        with pytest.raises(InvalidStateError):
            _inbound(InboundStatus.RECEIVING).plan_putaway([assignment])
        order = _inbound(InboundStatus.QC)
        order.plan_putaway([assignment])
        assert order.lines[0].has_putaway_plan


class TestCompletion:

    def test_complete_requires_pre_completion_status(self):
        order = _inbound(InboundStatus.QC)
        with pytest.raises(InvalidStateError):
            order.complete()

    def test_inbound_complete_requires_putaway_plan_for_accepted_stock(self):
        order = _inbound(InboundStatus.RECEIVING)
        order.reconcile([InboundLineUpdate(line_id=1, received_qty=10)])
        order.status = InboundStatus.PUTAWAY
        with pytest.raises(ValidationError, match="putaway plan"):
            order.complete()
        assert order.status == InboundStatus.PUTAWAY

    def test_inbound_with_nothing_accepted_completes(self):
        order = _inbound(InboundStatus.PUTAWAY)
        order.complete(actor="clerk")
        assert order.status == InboundStatus.COMPLETED
        assert order.is_terminal

    def test_outbound_complete_requires_pick_source(self):
        order = _outbound(OutboundStatus.PICKING)
        order.reconcile([OutboundLineUpdate(line_id=1, picked_qty=5)])
        order.status = OutboundStatus.LOADED
        with pytest.raises(ValidationError, match="pick source"):
            order.complete()

    def test_bind_lot_records_lot_on_line(self):
        order = _inbound()
        order.bind_lot(1, 42)
        assert order.lines[0].lot_id == 42

    def test_base_order_cannot_be_instantiated(self):
        with pytest.raises(TypeError):
            Order(id=None, counterparty="Acme", lines=[])


class TestCompletionClaim:

    def test_claim_then_complete_clears_it(self):
        order = _inbound(InboundStatus.PUTAWAY)
        order.claim_completion()
        assert order.completing
        order.complete()
        assert order.status == InboundStatus.COMPLETED
        assert not order.completing

    def test_second_claim_rejected(self):
        order = _outbound(OutboundStatus.LOADED)
        order.claim_completion()
        with pytest.raises(InvalidStateError, match="in progress"):
            order.claim_completion()

    def test_claim_requires_pre_completion_status(self):
        order = _inbound(InboundStatus.QC)
        with pytest.raises(InvalidStateError):
            order.claim_completion()
        assert not order.completing

    def test_claimed_order_refuses_other_changes(self):
        order = _inbound(InboundStatus.PUTAWAY)
        order.claim_completion()
        with pytest.raises(InvalidStateError):
            order.cancel()
        with pytest.raises(InvalidStateError):
            order.annotate("late truck")
        with pytest.raises(InvalidStateError):
            order.plan_putaway([PutawayAssignment(1, "L1", "LOT-1", date(2027, 1, 1))])
        assert order.status == InboundStatus.PUTAWAY
        assert order.notes == []

    def test_released_claim_allows_cancel(self):
        order = _inbound(InboundStatus.PUTAWAY)
        order.claim_completion()
        order.release_completion_claim()
        order.cancel()
        assert order.status == InboundStatus.CANCELLED
