"""Application service: Cancel Order use case.

Any non-terminal order can be cancelled.  No stock has moved before
completion, so cancelling never touches the ledger; reconciled counts
stay on the lines as a historical record.
"""

from __future__ import annotations

import logging

from wms.application.dto import OrderDTO, to_order_dto
from wms.domain.exceptions import NotFoundError
from wms.domain.repository.order_repository import OrderRepository
from wms.domain.service.locking import DEFAULT_LOCKS, KeyedLocks, order_key

logger = logging.getLogger(__name__)


class CancelOrderHandler:

    def __init__(self, order_repo: OrderRepository, locks: KeyedLocks | None = None) -> None:
        self._order_repo = order_repo
        self._locks = locks or DEFAULT_LOCKS

    def handle(self, order_id: int, actor: str | None = None) -> OrderDTO:
        with self._locks.hold(order_key(order_id)):
            order = self._order_repo.get_by_id(order_id)
            if order is None:
                raise NotFoundError(f"Order #{order_id} not found")

            order.cancel(actor=actor)
            self._order_repo.save(order)

        logger.info("Order %s cancelled", order.order_number)
        return to_order_dto(order)
