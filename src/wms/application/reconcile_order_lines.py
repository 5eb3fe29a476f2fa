"""Application service: Reconcile Order Lines use case.

Records counted quantities while an order is being handled (RECEIVING
for inbound, PICKING or PACKING for outbound).  The batch is applied as a
whole or not at all; on rejection nothing is saved, so the caller can fix
the input and resubmit without double counting.
"""

from __future__ import annotations

import logging
from typing import Sequence

from wms.application.dto import OrderDTO, to_order_dto
from wms.domain.exceptions import DomainException, NotFoundError, ValidationError
from wms.domain.model.order import InboundOrder
from wms.domain.repository.order_repository import OrderRepository
from wms.domain.service.locking import DEFAULT_LOCKS, KeyedLocks, order_key
from wms.domain.service.reconciliation import InboundLineUpdate, OutboundLineUpdate

logger = logging.getLogger(__name__)


class ReconcileOrderLinesHandler:

    def __init__(self, order_repo: OrderRepository, locks: KeyedLocks | None = None) -> None:
        self._order_repo = order_repo
        self._locks = locks or DEFAULT_LOCKS

    def handle(
        self,
        order_id: int,
        updates: Sequence[InboundLineUpdate | OutboundLineUpdate],
    ) -> OrderDTO:
        with self._locks.hold(order_key(order_id)):
            order = self._order_repo.get_by_id(order_id)
            if order is None:
                raise NotFoundError(f"Order #{order_id} not found")

            expected = InboundLineUpdate if isinstance(order, InboundOrder) else OutboundLineUpdate
            try:
                for upd in updates:
                    if not isinstance(upd, expected):
                        raise ValidationError(
                            f"{order.direction.value} orders take "
                            f"{expected.__name__} entries"
                        )
                totals = order.reconcile(updates)
            except DomainException as exc:
                logger.warning("Reconciliation of order #%s rejected: %s", order_id, exc)
                raise

            self._order_repo.save(order)

        logger.info(
            "Reconciled %d lines of order %s (received %d, damaged %d)",
            len(updates), order.order_number, totals.received, totals.damaged,
        )
        return to_order_dto(order)
