"""Application service: Plan Putaway use case.

During QC or PUTAWAY, assigns each inbound line a target location and
the lot it will be stored as.  Locations must exist; capacity is only
enforced when the order is completed and stock actually moves.
"""

from __future__ import annotations

from typing import Sequence

from wms.application.dto import OrderDTO, to_order_dto
from wms.domain.exceptions import NotFoundError, ValidationError
from wms.domain.model.order import InboundOrder
from wms.domain.repository.location_repository import LocationRepository
from wms.domain.repository.order_repository import OrderRepository
from wms.domain.service.locking import DEFAULT_LOCKS, KeyedLocks, order_key
from wms.domain.service.reconciliation import PutawayAssignment


class PlanPutawayHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        location_repo: LocationRepository,
        locks: KeyedLocks | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._location_repo = location_repo
        self._locks = locks or DEFAULT_LOCKS

    def handle(self, order_id: int, assignments: Sequence[PutawayAssignment]) -> OrderDTO:
        with self._locks.hold(order_key(order_id)):
            order = self._order_repo.get_by_id(order_id)
            if order is None:
                raise NotFoundError(f"Order #{order_id} not found")
            if not isinstance(order, InboundOrder):
                raise ValidationError(
                    f"Order {order.order_number} is outbound; putaway applies "
                    f"to inbound orders only"
                )

            for a in assignments:
                if self._location_repo.get_by_id(a.location_id) is None:
                    raise NotFoundError(f"Location '{a.location_id}' not found")

            order.plan_putaway(assignments)
            self._order_repo.save(order)

        return to_order_dto(order)
