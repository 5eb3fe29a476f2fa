"""CLI commands for inbound and outbound orders."""

from __future__ import annotations

from datetime import date, datetime

import click

from wms.application.annotate_order import AnnotateOrderHandler
from wms.application.cancel_order import CancelOrderHandler
from wms.application.complete_order import CompleteOrderHandler
from wms.application.create_order import CreateOrderHandler
from wms.application.dto import OrderDTO, OrderLineSpec
from wms.application.list_orders import ListOrdersHandler
from wms.application.plan_putaway import PlanPutawayHandler
from wms.application.reconcile_order_lines import ReconcileOrderLinesHandler
from wms.application.show_order import ShowOrderHandler
from wms.application.transition_order import TransitionOrderHandler
from wms.domain.exceptions import DomainException
from wms.domain.service.reconciliation import (
    InboundLineUpdate,
    OutboundLineUpdate,
    PutawayAssignment,
)
from wms.infrastructure.bootstrap import (
    ledger,
    location_repository,
    order_repository,
    product_repository,
)


def _parse_int(value: str, what: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise click.BadParameter(f"Invalid {what} '{value}'.")


def _parse_date(value: str, what: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"Invalid {what} '{value}'. Expected YYYY-MM-DD.")


def _parse_lines(raw: str) -> list[OrderLineSpec]:
    """Parse 'SKU:Qty[:LotNo:Expiry],...' into OrderLineSpec list."""
    specs: list[OrderLineSpec] = []
    for chunk in raw.split(","):
        parts = [p.strip() for p in chunk.strip().split(":")]
        if len(parts) not in (2, 4):
            raise click.BadParameter(
                f"Invalid line format '{chunk.strip()}'. "
                f"Expected 'SKU:Qty' or 'SKU:Qty:LotNo:YYYY-MM-DD'."
            )
        spec = OrderLineSpec(sku=parts[0], quantity=_parse_int(parts[1], "quantity"))
        if len(parts) == 4:
            spec = OrderLineSpec(
                sku=spec.sku,
                quantity=spec.quantity,
                lot_no=parts[2],
                expiry_date=_parse_date(parts[3], "expiry date"),
            )
        specs.append(spec)
    return specs


def _parse_counts(raw: str) -> list[list[str]]:
    """Split 'a:b:c,d:e:f' into [['a','b','c'], ['d','e','f']]."""
    return [[p.strip() for p in chunk.strip().split(":")] for chunk in raw.split(",")]


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {dto.order_number}  ({dto.direction}, status={dto.status})")
    click.echo(f"Counterparty: {dto.counterparty}")
    if dto.carrier:
        click.echo(f"Carrier:      {dto.carrier}")
    click.echo(f"Priority:     {dto.priority}")
    if dto.scheduled_time:
        click.echo(f"Scheduled:    {dto.scheduled_time}")
    click.echo(f"Created:      {dto.created_at}")
    if dto.next_status:
        click.echo(f"Next step:    {dto.next_status}")
    if dto.completing:
        click.echo("Completion in progress")
    click.echo()

    click.echo(
        f"  {'#':>3} {'SKU':<14} {'Ordered':>8} {'Counted':>8} {'Damaged':>8} "
        f"{'Accepted':>9} {'Lot':<12} {'Location':<10}"
    )
    click.echo(f"  {'-'*78}")
    for line in dto.lines:
        counted = "-" if line.counted_qty is None else line.counted_qty
        lot = line.lot_no or (str(line.lot_id) if line.lot_id else "-")
        click.echo(
            f"  {line.id:>3} {line.sku:<14} {line.ordered_qty:>8} {counted:>8} "
            f"{line.damaged_qty:>8} {line.accepted_qty:>9} {lot:<12} "
            f"{line.location_id or '-':<10}"
        )
    click.echo(f"  {'-'*78}")
    click.echo(
        f"  {'Totals':<18} {dto.total_expected:>8} {dto.total_received:>8} "
        f"{dto.total_damaged:>8} {dto.total_accepted:>9}"
    )

    if dto.notes:
        click.echo()
        click.echo("Notes:")
        for note in dto.notes:
            click.echo(f"  - {note}")


@click.command("create")
@click.option(
    "--direction",
    required=True,
    type=click.Choice(["inbound", "outbound"], case_sensitive=False),
    help="Inbound (receiving) or outbound (shipping).",
)
@click.option("--counterparty", required=True, help="Supplier or customer name.")
@click.option(
    "--lines", required=True, help="Lines as 'SKU:Qty[:LotNo:YYYY-MM-DD],...'."
)
@click.option(
    "--priority",
    default="MEDIUM",
    type=click.Choice(["HIGH", "MEDIUM", "LOW"], case_sensitive=False),
)
@click.option("--carrier", default="", help="Carrier / truck reference.")
@click.option(
    "--scheduled",
    "scheduled",
    default=None,
    type=click.DateTime(formats=["%Y-%m-%d", "%Y-%m-%d %H:%M", "%Y-%m-%dT%H:%M"]),
    help="Scheduled dock time.",
)
def order_create(
    direction: str,
    counterparty: str,
    lines: str,
    priority: str,
    carrier: str,
    scheduled: datetime | None,
) -> None:
    """Create a new inbound or outbound order."""
    specs = _parse_lines(lines)

    handler = CreateOrderHandler(
        order_repo=order_repository(),
        product_repo=product_repository(),
    )

    try:
        dto = handler.handle(
            direction=direction,
            counterparty=counterparty,
            line_specs=specs,
            scheduled_time=scheduled,
            priority=priority,
            carrier=carrier,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_number} created  (id={dto.id}, status={dto.status})")


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
def order_show(order_id: int) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(order_repo=order_repository())

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
@click.option(
    "--direction",
    default=None,
    type=click.Choice(["inbound", "outbound"], case_sensitive=False),
)
@click.option("--status", default=None, help="Only orders in this status.")
def order_list(direction: str | None, status: str | None) -> None:
    """List orders, newest first."""
    dtos = ListOrdersHandler(order_repo=order_repository()).handle(direction, status)

    if not dtos:
        click.echo("No orders found.")
        return

    click.echo(
        f"{'ID':>4} {'Number':<10} {'Direction':<9} {'Status':<10} "
        f"{'Counterparty':<20} {'Lines':>5}"
    )
    click.echo("-" * 63)
    for dto in dtos:
        click.echo(
            f"{dto.id:>4} {dto.order_number:<10} {dto.direction:<9} {dto.status:<10} "
            f"{dto.counterparty:<20} {len(dto.lines):>5}"
        )


@click.command("transition")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option("--to", "target", required=True, help="Target status.")
@click.option("--actor", default=None, help="Who performs the change.")
def order_transition(order_id: int, target: str, actor: str | None) -> None:
    """Move an order to its next status (or CANCELLED)."""
    handler = TransitionOrderHandler(order_repo=order_repository(), ledger=ledger())

    try:
        dto = handler.handle(order_id, target, actor=actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_number} is now {dto.status}.")


@click.command("advance")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option("--actor", default=None, help="Who performs the change.")
def order_advance(order_id: int, actor: str | None) -> None:
    """Move an order one step along its workflow."""
    try:
        current = ShowOrderHandler(order_repo=order_repository()).handle(order_id)
        if current.next_status is None:
            raise click.ClickException(
                f"Order {current.order_number} is {current.status} and has no next step"
            )
        handler = TransitionOrderHandler(order_repo=order_repository(), ledger=ledger())
        dto = handler.handle(order_id, current.next_status, actor=actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_number} is now {dto.status}.")


@click.command("cancel")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to cancel.")
@click.option("--actor", default=None, help="Who cancels the order.")
def order_cancel(order_id: int, actor: str | None) -> None:
    """Cancel an order that has not reached a final status."""
    handler = CancelOrderHandler(order_repo=order_repository())

    try:
        handler.handle(order_id, actor=actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} cancelled.")


@click.command("complete")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to complete.")
@click.option("--actor", default=None, help="Who completes the order.")
def order_complete(order_id: int, actor: str | None) -> None:
    """Complete an order (puts away received stock or ships picked stock)."""
    handler = CompleteOrderHandler(order_repo=order_repository(), ledger=ledger())

    try:
        dto = handler.handle(order_id, actor=actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Order {dto.order_number} {dto.status.lower()}: "
        f"{dto.total_accepted} units moved."
    )


@click.command("reconcile")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option(
    "--counts",
    required=True,
    help=(
        "Inbound 'Line:Received[:Damaged],...'; outbound "
        "'Line:Picked[:Rejected[:LotId:Location]],...'."
    ),
)
def order_reconcile(order_id: int, counts: str) -> None:
    """Record counted quantities for order lines (all-or-nothing)."""
    try:
        dto = ShowOrderHandler(order_repo=order_repository()).handle(order_id)
        rows = _parse_counts(counts)
        if dto.direction == "INBOUND":
            updates = [_inbound_update(row) for row in rows]
        else:
            updates = [_outbound_update(row) for row in rows]
        dto = ReconcileOrderLinesHandler(order_repo=order_repository()).handle(
            order_id, updates
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Order {dto.order_number} reconciled: expected={dto.total_expected} "
        f"counted={dto.total_received} damaged={dto.total_damaged} "
        f"accepted={dto.total_accepted}"
    )


def _inbound_update(row: list[str]) -> InboundLineUpdate:
    if len(row) not in (2, 3):
        raise click.BadParameter(
            f"Invalid count '{':'.join(row)}'. Expected 'Line:Received[:Damaged]'."
        )
    return InboundLineUpdate(
        line_id=_parse_int(row[0], "line"),
        received_qty=_parse_int(row[1], "received quantity"),
        damaged_qty=_parse_int(row[2], "damaged quantity") if len(row) == 3 else 0,
    )


def _outbound_update(row: list[str]) -> OutboundLineUpdate:
    if len(row) not in (2, 3, 5):
        raise click.BadParameter(
            f"Invalid count '{':'.join(row)}'. "
            f"Expected 'Line:Picked[:Rejected[:LotId:Location]]'."
        )
    return OutboundLineUpdate(
        line_id=_parse_int(row[0], "line"),
        picked_qty=_parse_int(row[1], "picked quantity"),
        rejected_qty=_parse_int(row[2], "rejected quantity") if len(row) >= 3 else 0,
        lot_id=_parse_int(row[3], "lot ID") if len(row) == 5 else None,
        location_id=row[4] if len(row) == 5 else None,
    )


@click.command("putaway")
@click.option("--id", "order_id", required=True, type=int, help="Inbound order ID.")
@click.option(
    "--plan",
    required=True,
    help="Assignments as 'Line:Location:LotNo:YYYY-MM-DD,...'.",
)
def order_putaway(order_id: int, plan: str) -> None:
    """Assign target locations and lot details to inbound lines."""
    assignments: list[PutawayAssignment] = []
    for row in _parse_counts(plan):
        if len(row) not in (2, 4):
            raise click.BadParameter(
                f"Invalid assignment '{':'.join(row)}'. "
                f"Expected 'Line:Location[:LotNo:YYYY-MM-DD]'."
            )
        assignments.append(
            PutawayAssignment(
                line_id=_parse_int(row[0], "line"),
                location_id=row[1],
                lot_no=row[2] if len(row) == 4 else None,
                expiry_date=(
                    _parse_date(row[3], "expiry date") if len(row) == 4 else None
                ),
            )
        )

    handler = PlanPutawayHandler(
        order_repo=order_repository(),
        location_repo=location_repository(),
    )

    try:
        dto = handler.handle(order_id, assignments)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Putaway planned for {len(assignments)} line(s) of {dto.order_number}.")


@click.command("note")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option("--text", required=True, help="Note text.")
def order_note(order_id: int, text: str) -> None:
    """Attach a note to an order (allowed in every status)."""
    handler = AnnotateOrderHandler(order_repo=order_repository())

    try:
        dto = handler.handle(order_id, text)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Note added to {dto.order_number}.")
