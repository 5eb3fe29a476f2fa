"""Application service: Create Order use case.

Orchestrates the flow between repositories and the domain model.
Resolves each requested SKU to a catalog product and lets the matching
Order aggregate (inbound or outbound) validate all business rules.
"""

from __future__ import annotations

import logging
from datetime import datetime

from wms.application.dto import OrderDTO, OrderLineSpec, to_order_dto
from wms.domain.exceptions import NotFoundError, ValidationError
from wms.domain.model.order import ORDER_TYPES
from wms.domain.model.order_line import InboundLine, OutboundLine
from wms.domain.model.value_objects import Direction, Priority, Quantity
from wms.domain.repository.order_repository import OrderRepository
from wms.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class CreateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo

    def handle(
        self,
        direction: Direction | str,
        counterparty: str,
        line_specs: list[OrderLineSpec],
        scheduled_time: datetime | None = None,
        priority: Priority | str = Priority.MEDIUM,
        carrier: str = "",
    ) -> OrderDTO:
        """Create a new inbound or outbound order in its initial status.

        Steps:
        1. Resolve each SKU to a Product (fail if not found).
        2. Build one line per product, numbered from 1.
        3. Let the Order aggregate validate all business rules.
        4. Persist and return a DTO.
        """
        direction = _parse_enum(Direction, direction, "direction")
        priority = _parse_enum(Priority, priority, "priority")
        order_cls = ORDER_TYPES[direction]

        lines = []
        for number, spec in enumerate(line_specs, start=1):
            product = self._product_repo.get_by_sku(spec.sku)
            if product is None:
                raise NotFoundError(f"Product not found: '{spec.sku}'")
            qty = Quantity(spec.quantity).value

            if direction == Direction.INBOUND:
                lines.append(
                    InboundLine(
                        id=number,
                        product_id=product.id,
                        sku=product.sku,
                        unit=product.unit,
                        expected_qty=qty,
                        lot_no=spec.lot_no,
                        expiry_date=spec.expiry_date,
                        manufacture_date=spec.manufacture_date,
                    )
                )
            else:
                lines.append(
                    OutboundLine(
                        id=number,
                        product_id=product.id,
                        sku=product.sku,
                        unit=product.unit,
                        requested_qty=qty,
                    )
                )

        order = order_cls.create(
            counterparty=counterparty,
            lines=lines,
            scheduled_time=scheduled_time,
            priority=priority,
            carrier=carrier,
        )
        self._order_repo.save(order)

        logger.info(
            "Created %s order %s for %s with %d lines",
            direction.value.lower(), order.order_number, order.counterparty, len(lines),
        )
        return to_order_dto(order)


def _parse_enum(enum_cls, value, label: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().upper())
    except ValueError as exc:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(
            f"Invalid {label} {value!r} (expected one of: {allowed})"
        ) from exc
