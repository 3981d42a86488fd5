"""Application services for the admin back-office (queries).

Both read straight from the repository on every call so the admin sees
what is actually stored, never a client-side copy.
"""

from __future__ import annotations

from arcoffee.application.dto import OrderDTO, OrderStatsDTO
from arcoffee.application.mapping import order_to_dto
from arcoffee.domain.model.order import OrderStatus
from arcoffee.domain.model.value_objects import Money
from arcoffee.domain.repository.order_repository import OrderRepository

ALL_STATUSES = "all"


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    async def handle(self, status: str | None = None) -> list[OrderDTO]:
        """Every order, newest first; *status* ``None`` or ``"all"`` disables the filter."""
        wanted = None
        if status and status != ALL_STATUSES:
            wanted = OrderStatus.parse(status)
        orders = await self._order_repo.list_all(status=wanted)
        return [order_to_dto(o) for o in orders]


class OrderStatsHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    async def handle(self) -> OrderStatsDTO:
        orders = await self._order_repo.list_all()

        revenue = Money.zero()
        for order in orders:
            if order.status is not OrderStatus.CANCELLED:
                revenue = revenue + order.total_price

        return OrderStatsDTO(
            total_orders=len(orders),
            pending_orders=sum(1 for o in orders if o.status is OrderStatus.PENDING),
            completed_orders=sum(1 for o in orders if o.status is OrderStatus.COMPLETED),
            revenue=str(revenue),
            revenue_amount=revenue.amount,
        )
