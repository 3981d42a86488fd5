"""Application service: Update Order Status use case (admin).

Applies the permissive transition policy of the Order aggregate: any
status may be set except the current one, which is a no-op.  Concurrent
updates of the same order are not reconciled; the last write wins.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from arcoffee.application.dto import StatusUpdateResult
from arcoffee.domain.exceptions import PersistenceError, ValidationError
from arcoffee.domain.model.order import OrderStatus
from arcoffee.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)

UPDATE_FAILED_MESSAGE = "Gagal mengupdate status"
ORDER_NOT_FOUND_MESSAGE = "Pesanan tidak ditemukan"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UpdateOrderStatusHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._order_repo = order_repo
        self._clock = clock

    async def handle(self, order_id: int, new_status: str | OrderStatus) -> StatusUpdateResult:
        try:
            status = (
                new_status
                if isinstance(new_status, OrderStatus)
                else OrderStatus.parse(new_status)
            )
        except ValidationError as exc:
            return StatusUpdateResult(StatusUpdateResult.FAILED, error=str(exc))

        try:
            order = await self._order_repo.get_by_id(order_id)
            if order is None:
                return StatusUpdateResult(
                    StatusUpdateResult.NOT_FOUND, error=ORDER_NOT_FOUND_MESSAGE
                )

            if not order.transition_to(status, self._clock()):
                return StatusUpdateResult(StatusUpdateResult.UNCHANGED, status=status.value)

            updated = await self._order_repo.update_status(
                order_id, order.status, order.updated_at
            )
        except PersistenceError:
            logger.error("Could not update status of order #%s", order_id, exc_info=True)
            return StatusUpdateResult(StatusUpdateResult.FAILED, error=UPDATE_FAILED_MESSAGE)
        except Exception:
            logger.exception("Unexpected error updating order #%s", order_id)
            return StatusUpdateResult(StatusUpdateResult.FAILED, error=UPDATE_FAILED_MESSAGE)

        if not updated:
            # Removed between the read and the write.
            return StatusUpdateResult(
                StatusUpdateResult.NOT_FOUND, error=ORDER_NOT_FOUND_MESSAGE
            )

        logger.info("Order %s set to %s", order.order_number, status.value)
        return StatusUpdateResult(StatusUpdateResult.UPDATED, status=status.value)
