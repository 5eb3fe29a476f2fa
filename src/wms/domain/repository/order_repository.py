"""Abstract repository for Order aggregates."""

from __future__ import annotations

from abc import ABC, abstractmethod

from wms.domain.model.order import Order


class OrderRepository(ABC):

    @abstractmethod
    def next_id(self) -> int:
        """Generate the next unique order ID."""

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return a detached copy of an order, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Order]:
        """Return every order, inbound and outbound."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist a new or updated order.

        Assigns an ID to new orders and bumps ``order.version``.  Raises
        ConcurrencyConflictError if the stored version moved on since the
        order was loaded.
        """
