"""Order aggregates: the lifecycle state machine.

Inbound and outbound orders are separate aggregate classes sharing one
base.  Each declares its own status enum and a strictly linear workflow:
a step can never be skipped or reordered, and CANCELLED is reachable from
any non-terminal status.  Terminal orders accept nothing but notes.

The aggregate decides *whether* an operation is legal; quantity
bookkeeping is delegated to the reconciliation service and stock
movements are coordinated by the application handlers through the
inventory ledger.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import ClassVar, Iterable

from wms.domain.exceptions import (
    InvalidStateError,
    InvalidTransitionError,
    ValidationError,
)
from wms.domain.model.order_line import InboundLine, OutboundLine
from wms.domain.model.value_objects import Direction, Priority
from wms.domain.service import reconciliation
from wms.domain.service.reconciliation import (
    InboundLineUpdate,
    OrderTotals,
    OutboundLineUpdate,
    PutawayAssignment,
)


class InboundStatus(Enum):
    PENDING = "PENDING"
    SCHEDULED = "SCHEDULED"
    RECEIVING = "RECEIVING"
    QC = "QC"
    PUTAWAY = "PUTAWAY"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class OutboundStatus(Enum):
    RELEASED = "RELEASED"
    PICKING = "PICKING"
    PACKING = "PACKING"
    LOADED = "LOADED"
    SHIPPED = "SHIPPED"
    CANCELLED = "CANCELLED"


# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
MAX_LINES = 50


@dataclass(frozen=True)
class StatusChange:
    """Audit entry for one status change."""

    from_status: str
    to_status: str
    at: datetime
    actor: str | None = None


@dataclass
class Order(ABC):
    """Common base of the inbound and outbound aggregates.

    Use ``create()`` on a concrete subclass for new orders; it enforces
    all business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    DIRECTION: ClassVar[Direction]
    STATUS: ClassVar[type[Enum]]
    FLOW: ClassVar[tuple]
    ACTIVE: ClassVar[frozenset]
    PREFIX: ClassVar[str]
    LINE_TYPE: ClassVar[type]

    id: int | None
    counterparty: str
    lines: list
    scheduled_time: datetime | None = None
    priority: Priority = Priority.MEDIUM
    carrier: str = ""
    status: Enum | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    version: int = 0
    history: list[StatusChange] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)
    completing: bool = False

    def __post_init__(self) -> None:
        if self.status is None:
            self.status = self.FLOW[0]
        if not isinstance(self.status, self.STATUS):
            raise ValidationError(
                f"{self.status!r} is not a {self.DIRECTION.value} order status"
            )

    # --- Factory (used for NEW orders only) -----------------------------------

    @classmethod
    def create(
        cls,
        counterparty: str,
        lines: list,
        scheduled_time: datetime | None = None,
        priority: Priority = Priority.MEDIUM,
        carrier: str = "",
    ):
        if not counterparty or not counterparty.strip():
            raise ValidationError("Counterparty name is required")
        if not lines:
            raise ValidationError("Order must contain at least one line")
        if len(lines) > MAX_LINES:
            raise ValidationError(f"Maximum {MAX_LINES} lines per order")
        for line in lines:
            if not isinstance(line, cls.LINE_TYPE):
                raise ValidationError(
                    f"{cls.DIRECTION.value} orders take {cls.LINE_TYPE.__name__} lines"
                )

        line_ids = [line.id for line in lines]
        if len(set(line_ids)) != len(line_ids):
            raise ValidationError("Order line IDs must be unique")
        products = [line.product_id for line in lines]
        if len(set(products)) != len(products):
            raise ValidationError("Each product may appear only once per order")

        return cls(
            id=None,
            counterparty=counterparty.strip(),
            lines=list(lines),
            scheduled_time=scheduled_time,
            priority=priority,
            carrier=(carrier or "").strip(),
        )

    # --- Workflow description -------------------------------------------------

    @property
    def direction(self) -> Direction:
        return self.DIRECTION

    @property
    def order_number(self) -> str | None:
        if self.id is None:
            return None
        return f"{self.PREFIX}-{self.id:05d}"

    @property
    def completion_status(self) -> Enum:
        return self.FLOW[-1]

    @property
    def pre_completion_status(self) -> Enum:
        return self.FLOW[-2]

    @property
    def is_terminal(self) -> bool:
        return self.status in (self.completion_status, self.STATUS.CANCELLED)

    @property
    def next_status(self) -> Enum | None:
        if self.is_terminal:
            return None
        return self.FLOW[self.FLOW.index(self.status) + 1]

    @property
    def totals(self) -> OrderTotals:
        return reconciliation.order_totals(self.lines)

    def parse_status(self, value: Enum | str) -> Enum:
        """Resolve a status name for this order's direction."""
        if isinstance(value, self.STATUS):
            return value
        if isinstance(value, Enum):
            raise InvalidTransitionError(
                f"{value.value} is not a {self.DIRECTION.value} order status"
            )
        try:
            return self.STATUS(str(value).strip().upper())
        except ValueError as exc:
            raise InvalidTransitionError(
                f"Unknown {self.DIRECTION.value} order status {value!r}"
            ) from exc

    # --- State transitions ----------------------------------------------------

    def transition_to(
        self,
        target: Enum | str,
        actor: str | None = None,
        at: datetime | None = None,
    ) -> None:
        """Move to the single designated successor, or cancel.

        The completion status is not reachable here: completing an order
        also moves stock and goes through ``complete()``.
        """
        target = self.parse_status(target)
        if self.is_terminal:
            raise InvalidTransitionError(
                f"Order {self.order_number} is {self.status.value} and can no "
                f"longer change status"
            )
        self._require_unclaimed("change the status of")
        if target == self.STATUS.CANCELLED:
            self._record(target, actor, at)
            return
        if target != self.next_status:
            raise InvalidTransitionError(
                f"Cannot move order {self.order_number} from {self.status.value} "
                f"to {target.value} (next step is {self.next_status.value})"
            )
        if target == self.completion_status:
            raise InvalidTransitionError(
                f"{target.value} is reached by completing the order"
            )
        self._record(target, actor, at)

    def cancel(self, actor: str | None = None, at: datetime | None = None) -> None:
        self.transition_to(self.STATUS.CANCELLED, actor=actor, at=at)

    def complete(self, actor: str | None = None, at: datetime | None = None) -> None:
        """Transition pre-completion -> completion.

        Stock movements must be committed *before* calling this
        (coordinated by the application handler via the ledger).
        """
        self.require_completable()
        self._record(self.completion_status, actor, at)
        self.completing = False

    def claim_completion(self) -> None:
        """Mark the order as being completed, before any stock moves.

        Persisting the claim with a version-checked save lets only one
        writer, in any process, go on to commit the stock.
        """
        self.require_completable()
        self._require_unclaimed("complete")
        self.completing = True

    def release_completion_claim(self) -> None:
        self.completing = False

    def require_completable(self) -> None:
        if self.status != self.pre_completion_status:
            raise InvalidStateError(
                f"Cannot complete order {self.order_number} in "
                f"{self.status.value} status, expected "
                f"{self.pre_completion_status.value}"
            )
        self._check_lines_ready()

    def annotate(self, note: str) -> None:
        """Attach an audit note. Allowed in every status, not mid-completion."""
        if not note or not note.strip():
            raise ValidationError("Note text is required")
        self._require_unclaimed("annotate")
        self.notes.append(note.strip())

    # --- Internal helpers -----------------------------------------------------

    def _require_active(self, operation: str) -> None:
        if self.status not in self.ACTIVE:
            allowed = ", ".join(sorted(s.value for s in self.ACTIVE))
            raise InvalidStateError(
                f"Cannot {operation} order {self.order_number} in "
                f"{self.status.value} status (allowed: {allowed})"
            )

    def _require_unclaimed(self, operation: str) -> None:
        if self.completing:
            raise InvalidStateError(
                f"Cannot {operation} order {self.order_number} while its "
                f"completion is in progress"
            )

    def _record(self, target: Enum, actor: str | None, at: datetime | None) -> None:
        self.history.append(
            StatusChange(
                from_status=self.status.value,
                to_status=target.value,
                at=at or datetime.now(timezone.utc),
                actor=actor,
            )
        )
        self.status = target

    @abstractmethod
    def _check_lines_ready(self) -> None:
        """Raise if a line lacks what completion needs to move its stock."""

    def _find_line(self, line_id: int):
        for line in self.lines:
            if line.id == line_id:
                return line
        raise ValidationError(f"Line {line_id} is not part of this order")


@dataclass
class InboundOrder(Order):
    """A receiving order from a supplier."""

    DIRECTION: ClassVar[Direction] = Direction.INBOUND
    STATUS: ClassVar[type[Enum]] = InboundStatus
    FLOW: ClassVar[tuple] = (
        InboundStatus.PENDING,
        InboundStatus.SCHEDULED,
        InboundStatus.RECEIVING,
        InboundStatus.QC,
        InboundStatus.PUTAWAY,
        InboundStatus.COMPLETED,
    )
    ACTIVE: ClassVar[frozenset] = frozenset({InboundStatus.RECEIVING})
    PLANNING: ClassVar[frozenset] = frozenset({InboundStatus.QC, InboundStatus.PUTAWAY})
    PREFIX: ClassVar[str] = "IB"
    LINE_TYPE: ClassVar[type] = InboundLine

    def reconcile(self, updates: Iterable[InboundLineUpdate]) -> OrderTotals:
        self._require_active("reconcile")
        self._require_unclaimed("reconcile")
        self.lines = reconciliation.reconcile_inbound(self.lines, list(updates))
        return self.totals

    def plan_putaway(self, assignments: Iterable[PutawayAssignment]) -> None:
        self._require_unclaimed("plan putaway for")
        if self.status not in self.PLANNING:
            raise InvalidStateError(
                f"Cannot plan putaway for order {self.order_number} in "
                f"{self.status.value} status (allowed: PUTAWAY, QC)"
            )
        self.lines = reconciliation.apply_putaway_plan(self.lines, list(assignments))

    def bind_lot(self, line_id: int, lot_id: int) -> None:
        """Remember which lot a line's accepted quantity went into."""
        line = self._find_line(line_id)
        self.lines = [
            replace(existing, lot_id=lot_id) if existing.id == line.id else existing
            for existing in self.lines
        ]

    def _check_lines_ready(self) -> None:
        for line in self.lines:
            if line.accepted_qty > 0 and not line.has_putaway_plan:
                raise ValidationError(
                    f"Line {line.id} ({line.sku}) has no putaway plan "
                    f"(location, lot number and expiry date are required)"
                )


@dataclass
class OutboundOrder(Order):
    """A shipping order to a customer."""

    DIRECTION: ClassVar[Direction] = Direction.OUTBOUND
    STATUS: ClassVar[type[Enum]] = OutboundStatus
    FLOW: ClassVar[tuple] = (
        OutboundStatus.RELEASED,
        OutboundStatus.PICKING,
        OutboundStatus.PACKING,
        OutboundStatus.LOADED,
        OutboundStatus.SHIPPED,
    )
    ACTIVE: ClassVar[frozenset] = frozenset(
        {OutboundStatus.PICKING, OutboundStatus.PACKING}
    )
    PREFIX: ClassVar[str] = "OB"
    LINE_TYPE: ClassVar[type] = OutboundLine

    def reconcile(self, updates: Iterable[OutboundLineUpdate]) -> OrderTotals:
        self._require_active("reconcile")
        self._require_unclaimed("reconcile")
        self.lines = reconciliation.reconcile_outbound(self.lines, list(updates))
        return self.totals

    def _check_lines_ready(self) -> None:
        for line in self.lines:
            if line.accepted_qty > 0 and not line.has_pick_source:
                raise ValidationError(
                    f"Line {line.id} ({line.sku}) has no pick source "
                    f"(lot and location are required)"
                )


ORDER_TYPES: dict[Direction, type[Order]] = {
    Direction.INBOUND: InboundOrder,
    Direction.OUTBOUND: OutboundOrder,
}
