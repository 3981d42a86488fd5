"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from arcoffee.application.list_orders import ListOrdersHandler, OrderStatsHandler
from arcoffee.application.submit_order import SubmitOrderHandler
from arcoffee.application.track_order import TrackOrderHandler
from arcoffee.application.update_order_status import UpdateOrderStatusHandler
from arcoffee.domain.service.order_number_generator import OrderNumberGenerator
from arcoffee.infrastructure.config import DATA_DIR, Settings
from arcoffee.infrastructure.persistence.database import (
    create_engine,
    create_schema,
    create_session_factory,
)
from arcoffee.infrastructure.persistence.sql_order_repository import SqlOrderRepository


class Container:
    """Holds the engine and hands out handlers sharing one repository."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        if settings.database_url.startswith("sqlite") and str(DATA_DIR) in settings.database_url:
            DATA_DIR.mkdir(parents=True, exist_ok=True)
        self.engine: AsyncEngine = create_engine(settings.database_url)
        self.session_factory: async_sessionmaker[AsyncSession] = create_session_factory(
            self.engine
        )
        self.order_repository = SqlOrderRepository(
            self.session_factory, atomic=settings.atomic_writes
        )

    async def init_schema(self) -> None:
        await create_schema(self.engine)

    async def dispose(self) -> None:
        await self.engine.dispose()

    def submit_order(self) -> SubmitOrderHandler:
        return SubmitOrderHandler(
            order_repo=self.order_repository,
            number_generator=OrderNumberGenerator(prefix=self.settings.order_prefix),
            max_attempts=self.settings.checkout_attempts,
        )

    def track_order(self) -> TrackOrderHandler:
        return TrackOrderHandler(self.order_repository)

    def list_orders(self) -> ListOrdersHandler:
        return ListOrdersHandler(self.order_repository)

    def order_stats(self) -> OrderStatsHandler:
        return OrderStatsHandler(self.order_repository)

    def update_order_status(self) -> UpdateOrderStatusHandler:
        return UpdateOrderStatusHandler(self.order_repository)
