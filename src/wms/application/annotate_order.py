"""Application service: Annotate Order use case.

Notes are audit metadata and may be added even to terminal orders.
"""

from __future__ import annotations

from wms.application.dto import OrderDTO, to_order_dto
from wms.domain.exceptions import NotFoundError
from wms.domain.repository.order_repository import OrderRepository
from wms.domain.service.locking import DEFAULT_LOCKS, KeyedLocks, order_key


class AnnotateOrderHandler:

    def __init__(self, order_repo: OrderRepository, locks: KeyedLocks | None = None) -> None:
        self._order_repo = order_repo
        self._locks = locks or DEFAULT_LOCKS

    def handle(self, order_id: int, note: str) -> OrderDTO:
        with self._locks.hold(order_key(order_id)):
            order = self._order_repo.get_by_id(order_id)
            if order is None:
                raise NotFoundError(f"Order #{order_id} not found")
            order.annotate(note)
            self._order_repo.save(order)
        return to_order_dto(order)
