"""Application service: Complete Order use case.

The last step of both workflows, and the only one that moves stock:

- inbound (PUTAWAY -> COMPLETED): every accepted quantity is committed to
  the ledger as a new or topped-up lot, bound to the planned location;
- outbound (LOADED -> SHIPPED): every accepted (picked minus rejected)
  quantity is shipped from its pick source.

The order is first claimed with a version-checked save, so of two writers
(threads or separate processes) that loaded the same order only one gets
to move stock.  The ledger validates the whole order before writing
anything, so a single line that does not fit leaves lots and locations
untouched and the claim is released again.
"""

from __future__ import annotations

import logging

from wms.application.dto import OrderDTO, to_order_dto
from wms.domain.exceptions import DomainException, NotFoundError
from wms.domain.model.order import InboundOrder, Order
from wms.domain.repository.order_repository import OrderRepository
from wms.domain.service.ledger import InventoryLedger, StockReceipt, StockWithdrawal
from wms.domain.service.locking import DEFAULT_LOCKS, KeyedLocks, order_key

logger = logging.getLogger(__name__)


class CompleteOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        ledger: InventoryLedger,
        locks: KeyedLocks | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._ledger = ledger
        self._locks = locks or DEFAULT_LOCKS

    def handle(self, order_id: int, actor: str | None = None) -> OrderDTO:
        with self._locks.hold(order_key(order_id)):
            order = self._order_repo.get_by_id(order_id)
            if order is None:
                raise NotFoundError(f"Order #{order_id} not found")

            try:
                order.claim_completion()
                self._order_repo.save(order)
            except DomainException as exc:
                logger.warning("Completion of order #%s rejected: %s", order_id, exc)
                raise

            try:
                if isinstance(order, InboundOrder):
                    self._put_away(order)
                else:
                    self._ship(order)
            except DomainException as exc:
                logger.warning("Completion of order #%s rejected: %s", order_id, exc)
                order.release_completion_claim()
                self._order_repo.save(order)
                raise

            order.complete(actor=actor)
            self._order_repo.save(order)

        logger.info("Order %s is %s", order.order_number, order.status.value)
        return to_order_dto(order)

    def _put_away(self, order: InboundOrder) -> None:
        lines = [line for line in order.lines if line.accepted_qty > 0]
        records = self._ledger.receive_many(
            StockReceipt(
                product_id=line.product_id,
                location_id=line.location_id,
                lot_no=line.lot_no,
                expiry_date=line.expiry_date,
                manufacture_date=line.manufacture_date,
                qty=line.accepted_qty,
                supplier=order.counterparty,
            )
            for line in lines
        )
        for line, record in zip(lines, records):
            order.bind_lot(line.id, record.lot_id)

    def _ship(self, order: Order) -> None:
        self._ledger.ship_many(
            StockWithdrawal(
                lot_id=line.lot_id,
                location_id=line.location_id,
                qty=line.accepted_qty,
                product_id=line.product_id,
            )
            for line in order.lines
            if line.accepted_qty > 0
        )
