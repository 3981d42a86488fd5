"""Abstract repository for the Order aggregate.

Every method is a coroutine: implementations talk to a database.
Not-found is an ordinary outcome (``None`` / ``False``), never an
exception.  Storage failures surface as ``PersistenceError`` subclasses.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from arcoffee.domain.model.order import Order, OrderStatus


class OrderRepository(ABC):

    @abstractmethod
    async def create(self, order: Order) -> str:
        """Persist a new order with its lines and option snapshots.

        Writes the header, then each line, then each line's options, and
        returns the order number.  Sets ``order.id`` (and each line's
        ``id``) on success.

        Raises ``OrderNumberConflictError`` when the number is taken,
        ``PersistenceError`` when nothing could be stored, and
        ``PartialOrderWriteError`` when the header exists but some lines
        do not.
        """

    @abstractmethod
    async def find_by_order_number(self, order_number: str) -> Order | None:
        """Return the order with this (normalized) number, or None."""

    @abstractmethod
    async def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its storage ID, or None if not found."""

    @abstractmethod
    async def list_all(self, status: OrderStatus | None = None) -> list[Order]:
        """Return every order, newest first, optionally filtered by status."""

    @abstractmethod
    async def update_status(
        self, order_id: int, status: OrderStatus, updated_at: datetime
    ) -> bool:
        """Overwrite the status of an order; False if it does not exist."""
