"""Application service: Track Order use case (query).

The customer-facing lookup.  An unknown order number is an ordinary
answer (``None``) that the caller renders as "order not found"; storage
trouble is logged and answered the same way rather than raised.
"""

from __future__ import annotations

import logging

from arcoffee.application.dto import OrderDTO
from arcoffee.application.mapping import order_to_dto
from arcoffee.domain.exceptions import PersistenceError
from arcoffee.domain.model.value_objects import OrderNumber
from arcoffee.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class TrackOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    async def handle(self, order_number: str) -> OrderDTO | None:
        normalized = OrderNumber.normalize(order_number)
        if not normalized:
            return None

        try:
            order = await self._order_repo.find_by_order_number(normalized)
        except PersistenceError:
            logger.error("Could not look up order %s", normalized, exc_info=True)
            return None
        except Exception:
            logger.exception("Unexpected error looking up order %s", normalized)
            return None

        if order is None:
            logger.debug("Order %s not found", normalized)
            return None
        return order_to_dto(order)
