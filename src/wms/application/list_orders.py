"""Application service: List Orders use case (query)."""

from __future__ import annotations

from wms.application.dto import OrderDTO, to_order_dto
from wms.domain.repository.order_repository import OrderRepository


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(
        self,
        direction: str | None = None,
        status: str | None = None,
    ) -> list[OrderDTO]:
        """Return orders, newest first, optionally filtered."""
        orders = self._order_repo.list_all()
        if direction:
            orders = [o for o in orders if o.direction.value == direction.upper()]
        if status:
            orders = [o for o in orders if o.status.value == status.upper()]
        orders.sort(key=lambda o: o.id or 0, reverse=True)
        return [to_order_dto(o) for o in orders]
