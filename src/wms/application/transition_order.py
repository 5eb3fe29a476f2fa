"""Application service: Transition Order use case.

Moves an order one step along its workflow (or cancels it).  A request
for the completion status is handed to CompleteOrderHandler so that
stock is always committed together with the final status.
"""

from __future__ import annotations

import logging
from enum import Enum

from wms.application.complete_order import CompleteOrderHandler
from wms.application.dto import OrderDTO, to_order_dto
from wms.domain.exceptions import DomainException, NotFoundError
from wms.domain.repository.order_repository import OrderRepository
from wms.domain.service.ledger import InventoryLedger
from wms.domain.service.locking import DEFAULT_LOCKS, KeyedLocks, order_key

logger = logging.getLogger(__name__)


class TransitionOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        ledger: InventoryLedger,
        locks: KeyedLocks | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._ledger = ledger
        self._locks = locks or DEFAULT_LOCKS

    def handle(
        self,
        order_id: int,
        target: Enum | str,
        actor: str | None = None,
    ) -> OrderDTO:
        with self._locks.hold(order_key(order_id)):
            order = self._order_repo.get_by_id(order_id)
            if order is None:
                raise NotFoundError(f"Order #{order_id} not found")

            try:
                target = order.parse_status(target)
                if (
                    target == order.completion_status
                    and order.status == order.pre_completion_status
                ):
                    complete = CompleteOrderHandler(
                        self._order_repo, self._ledger, self._locks
                    )
                    return complete.handle(order_id, actor=actor)

                previous = order.status
                order.transition_to(target, actor=actor)
            except DomainException as exc:
                logger.warning("Transition of order #%s rejected: %s", order_id, exc)
                raise

            self._order_repo.save(order)

        logger.info(
            "Order %s moved %s -> %s",
            order.order_number, previous.value, order.status.value,
        )
        return to_order_dto(order)
