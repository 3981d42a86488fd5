"""SQLAlchemy-backed implementation of OrderRepository.

Writes follow the dependency order header -> lines -> option snapshots,
one statement group at a time, sequentially.

By default every step commits on its own (best effort): once the header
is stored the order number is live, so a failing line is logged and
skipped and the remaining lines are still written.  The caller learns
about the gap through ``PartialOrderWriteError``.

With ``atomic=True`` the whole aggregate is written in one transaction
and a failure anywhere leaves nothing behind.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, NoReturn, TypeVar, cast

from sqlalchemy import select, update
from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from arcoffee.domain.exceptions import (
    OrderNumberConflictError,
    PartialOrderWriteError,
    PersistenceError,
)
from arcoffee.domain.model.order import (
    Order,
    OrderItemOption,
    OrderLineItem,
    OrderStatus,
)
from arcoffee.domain.model.value_objects import Money, OrderNumber, Quantity
from arcoffee.domain.repository.order_repository import OrderRepository
from arcoffee.infrastructure.persistence.tables import (
    OrderItemOptionTable,
    OrderItemTable,
    OrderTable,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SqlOrderRepository(OrderRepository):

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        atomic: bool = False,
    ) -> None:
        self._session_factory = session_factory
        self._atomic = atomic

    # --- OrderRepository interface --------------------------------------------

    async def create(self, order: Order) -> str:
        if self._atomic:
            return await self._create_atomic(order)
        return await self._create_best_effort(order)

    async def find_by_order_number(self, order_number: str) -> Order | None:
        stmt = self._select_orders().where(
            OrderTable.order_number == OrderNumber.normalize(order_number)
        )
        try:
            async with self._session_factory() as session:
                row = (await session.execute(stmt)).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to load order {order_number}: {exc}") from exc
        return self._to_domain(row) if row is not None else None

    async def get_by_id(self, order_id: int) -> Order | None:
        stmt = self._select_orders().where(OrderTable.id == order_id)
        try:
            async with self._session_factory() as session:
                row = (await session.execute(stmt)).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to load order #{order_id}: {exc}") from exc
        return self._to_domain(row) if row is not None else None

    async def list_all(self, status: OrderStatus | None = None) -> list[Order]:
        stmt = self._select_orders().order_by(
            OrderTable.created_at.desc(), OrderTable.id.desc()
        )
        if status is not None:
            stmt = stmt.where(OrderTable.status == status.value)
        try:
            async with self._session_factory() as session:
                rows = (await session.execute(stmt)).scalars().all()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to list orders: {exc}") from exc
        return [self._to_domain(row) for row in rows]

    async def update_status(
        self, order_id: int, status: OrderStatus, updated_at: datetime
    ) -> bool:
        stmt = (
            update(OrderTable)
            .where(OrderTable.id == order_id)
            .values(status=status.value, updated_at=_as_utc(updated_at))
        )
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    result = cast(CursorResult[Any], await session.execute(stmt))
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to update order #{order_id}: {exc}") from exc
        return result.rowcount > 0

    # --- Create strategies ----------------------------------------------------

    async def _create_best_effort(self, order: Order) -> str:
        try:
            order_id = await self._in_transaction(self._insert_header, order)
        except IntegrityError as exc:
            await self._raise_for_integrity(order, exc)
        except SQLAlchemyError as exc:
            raise PersistenceError(
                f"Failed to store order {order.order_number}: {exc}"
            ) from exc
        order.id = order_id

        failed: list[int] = []
        for index, item in enumerate(order.items):
            try:
                item.id = await self._in_transaction(self._insert_line, order_id, item)
            except SQLAlchemyError:
                logger.error(
                    "Could not store line %d (%s) of order %s",
                    index,
                    item.product_name,
                    order.order_number,
                    exc_info=True,
                )
                failed.append(index)
                continue

            if not item.options:
                continue
            try:
                await self._in_transaction(self._insert_options, item.id, item.options)
            except SQLAlchemyError:
                logger.error(
                    "Could not store options of line %d (%s) of order %s",
                    index,
                    item.product_name,
                    order.order_number,
                    exc_info=True,
                )
                failed.append(index)

        if failed:
            raise PartialOrderWriteError(order.order_number, failed)
        return order.order_number

    async def _create_atomic(self, order: Order) -> str:
        line_ids: list[int] = []
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    order_id = await self._insert_header(session, order)
                    for item in order.items:
                        line_id = await self._insert_line(session, order_id, item)
                        if item.options:
                            await self._insert_options(session, line_id, item.options)
                        line_ids.append(line_id)
        except IntegrityError as exc:
            await self._raise_for_integrity(order, exc)
        except SQLAlchemyError as exc:
            raise PersistenceError(
                f"Failed to store order {order.order_number}: {exc}"
            ) from exc

        order.id = order_id
        for item, line_id in zip(order.items, line_ids):
            item.id = line_id
        return order.order_number

    # --- Write steps ----------------------------------------------------------

    async def _in_transaction(
        self, step: Callable[..., Awaitable[T]], *args: Any
    ) -> T:
        async with self._session_factory() as session:
            async with session.begin():
                return await step(session, *args)

    async def _insert_header(self, session: AsyncSession, order: Order) -> int:
        row = OrderTable(
            order_number=order.order_number,
            customer_name=order.customer_name,
            customer_phone=order.customer_phone,
            notes=order.notes,
            status=order.status.value,
            total_price=order.total_price.amount,
            created_at=_as_utc(order.created_at),
            updated_at=_as_utc(order.updated_at),
        )
        session.add(row)
        await session.flush()
        return row.id

    async def _insert_line(
        self, session: AsyncSession, order_id: int, item: OrderLineItem
    ) -> int:
        row = OrderItemTable(
            order_id=order_id,
            product_id=item.product_id,
            product_name=item.product_name,
            product_price=item.product_price.amount,
            quantity=item.quantity.value,
            subtotal=item.subtotal.amount,
            notes=item.notes,
            created_at=datetime.now(timezone.utc),
        )
        session.add(row)
        await session.flush()
        return row.id

    async def _insert_options(
        self,
        session: AsyncSession,
        line_id: int,
        options: list[OrderItemOption],
    ) -> None:
        session.add_all(
            OrderItemOptionTable(
                order_item_id=line_id,
                option_id=opt.option_id,
                option_name=opt.option_name,
                extra_price=opt.extra_price.amount,
            )
            for opt in options
        )
        await session.flush()

    async def _raise_for_integrity(self, order: Order, exc: IntegrityError) -> NoReturn:
        """Tell an order-number clash apart from any other constraint failure."""
        try:
            async with self._session_factory() as session:
                taken = (
                    await session.execute(
                        select(OrderTable.id).where(
                            OrderTable.order_number == order.order_number
                        )
                    )
                ).first() is not None
        except SQLAlchemyError as lookup_exc:
            raise PersistenceError(
                f"Failed to store order {order.order_number}: {exc}"
            ) from lookup_exc
        if taken:
            raise OrderNumberConflictError(order.order_number) from exc
        raise PersistenceError(
            f"Failed to store order {order.order_number}: {exc}"
        ) from exc

    # --- Reads ----------------------------------------------------------------

    @staticmethod
    def _select_orders():
        return select(OrderTable).options(
            selectinload(OrderTable.items).selectinload(OrderItemTable.options)
        )

    @staticmethod
    def _to_domain(row: OrderTable) -> Order:
        items = [
            OrderLineItem(
                id=i.id,
                product_id=i.product_id,
                product_name=i.product_name,
                product_price=Money(i.product_price),
                quantity=Quantity(i.quantity),
                subtotal=Money(i.subtotal),
                notes=i.notes,
                options=[
                    OrderItemOption(
                        option_id=o.option_id,
                        option_name=o.option_name,
                        extra_price=Money(o.extra_price),
                    )
                    for o in i.options
                ],
            )
            for i in row.items
        ]
        return Order(
            id=row.id,
            order_number=row.order_number,
            customer_name=row.customer_name,
            customer_phone=row.customer_phone,
            notes=row.notes,
            items=items,
            total_price=Money(row.total_price),
            status=OrderStatus(row.status),
            created_at=_as_utc(row.created_at),
            updated_at=_as_utc(row.updated_at),
        )


def _as_utc(value: datetime) -> datetime:
    # SQLite keeps the wall time only, so everything is stored and read as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
