"""Application service: Submit Order (checkout) use case.

Validates the storefront's checkout payload, reprices every line with
the Pricing Model, allocates an order number and hands the aggregate to
the repository.  Every outcome, including storage failures, comes back
as a ``CheckoutResult``; nothing is raised to the caller.

Steps:
1. Validate fields and build priced line items (no storage touched).
2. Optionally re-verify prices against the live catalog.
3. Generate an order number and persist; on a number conflict,
   regenerate and retry a bounded number of times.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from arcoffee.application.dto import CheckoutItemSpec, CheckoutPayload, CheckoutResult
from arcoffee.domain.exceptions import (
    OrderNumberConflictError,
    PartialOrderWriteError,
    PersistenceError,
    ValidationError,
)
from arcoffee.domain.model.order import (
    MAX_LINE_ITEMS,
    MIN_CUSTOMER_NAME_LENGTH,
    Order,
    OrderItemOption,
    OrderLineItem,
)
from arcoffee.domain.model.product import OptionGroup, check_option_groups
from arcoffee.domain.model.value_objects import Money, PhoneNumber, Quantity
from arcoffee.domain.repository.order_repository import OrderRepository
from arcoffee.domain.repository.price_catalog import PriceCatalog
from arcoffee.domain.service.order_number_generator import OrderNumberGenerator

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3

# Customer-facing messages (the storefront is Indonesian).
INVALID_ORDER_MESSAGE = "Data pesanan tidak valid"
ORDER_FAILED_MESSAGE = "Gagal membuat pesanan"
SYSTEM_ERROR_MESSAGE = "Terjadi kesalahan sistem"
NAME_TOO_SHORT_MESSAGE = "Nama terlalu pendek"
INVALID_PHONE_MESSAGE = "Nomor telepon tidak valid"
EMPTY_CART_MESSAGE = "Keranjang belanja kosong"
TOO_MANY_ITEMS_MESSAGE = f"Maksimal {MAX_LINE_ITEMS} item per pesanan"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SubmitOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        number_generator: OrderNumberGenerator,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        catalog: PriceCatalog | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._order_repo = order_repo
        self._number_generator = number_generator
        self._max_attempts = max_attempts
        self._catalog = catalog
        self._clock = clock

    async def handle(self, payload: CheckoutPayload) -> CheckoutResult:
        try:
            name, phone, lines = await self._validate(payload)
        except ValidationError as exc:
            logger.info("Rejected checkout: %s %s", exc, exc.field_errors)
            return CheckoutResult.failed(INVALID_ORDER_MESSAGE, exc.field_errors)
        except PersistenceError:
            logger.error("Price verification failed", exc_info=True)
            return CheckoutResult.failed(SYSTEM_ERROR_MESSAGE)
        except Exception:
            logger.exception("Unexpected error while validating checkout")
            return CheckoutResult.failed(SYSTEM_ERROR_MESSAGE)

        total = Money.zero()
        for line in lines:
            total = total + line.subtotal
        if payload.total_price is not None and payload.total_price != total.amount:
            logger.warning(
                "Client total %s differs from computed total %s; using computed",
                payload.total_price,
                total.amount,
            )

        return await self._persist(name, phone, lines, payload.notes)

    # --- Persistence ----------------------------------------------------------

    async def _persist(
        self,
        name: str,
        phone: PhoneNumber,
        lines: list[OrderLineItem],
        notes: str | None,
    ) -> CheckoutResult:
        for attempt in range(1, self._max_attempts + 1):
            candidate: str | None = None
            try:
                order = Order.create(
                    order_number=self._number_generator.generate(),
                    customer_name=name,
                    customer_phone=phone,
                    items=lines,
                    notes=notes,
                    now=self._clock(),
                )
                candidate = order.order_number
                order_number = await self._order_repo.create(order)
            except OrderNumberConflictError as exc:
                logger.warning(
                    "Order number %s already taken (attempt %d of %d)",
                    exc.order_number,
                    attempt,
                    self._max_attempts,
                )
                continue
            except PartialOrderWriteError as exc:
                logger.error(
                    "Order %s stored incompletely, missing lines %s",
                    exc.order_number,
                    exc.failed_lines,
                )
                return CheckoutResult.failed(
                    SYSTEM_ERROR_MESSAGE, order_number=exc.order_number
                )
            except PersistenceError:
                logger.error("Could not store order %s", candidate, exc_info=True)
                return CheckoutResult.failed(ORDER_FAILED_MESSAGE)
            except Exception:
                logger.exception("Unexpected error while storing order %s", candidate)
                return CheckoutResult.failed(SYSTEM_ERROR_MESSAGE)

            logger.info("Order %s created, total %s", order_number, order.total_price)
            return CheckoutResult.ok(order_number)

        logger.error("No free order number after %d attempts", self._max_attempts)
        return CheckoutResult.failed(ORDER_FAILED_MESSAGE)

    # --- Validation -----------------------------------------------------------

    async def _validate(
        self, payload: CheckoutPayload
    ) -> tuple[str, PhoneNumber, list[OrderLineItem]]:
        errors: dict[str, str] = {}

        name = (payload.customer_name or "").strip()
        if len(name) < MIN_CUSTOMER_NAME_LENGTH:
            errors["customer_name"] = NAME_TOO_SHORT_MESSAGE

        phone: PhoneNumber | None = None
        try:
            phone = PhoneNumber.parse(payload.customer_phone)
        except ValidationError:
            errors["customer_phone"] = INVALID_PHONE_MESSAGE

        if not payload.items:
            errors["items"] = EMPTY_CART_MESSAGE
        elif len(payload.items) > MAX_LINE_ITEMS:
            errors["items"] = TOO_MANY_ITEMS_MESSAGE

        lines: list[OrderLineItem] = []
        for i, spec in enumerate(payload.items):
            try:
                lines.append(await self._build_line(spec))
            except ValidationError as exc:
                errors[f"items[{i}]"] = str(exc)

        if errors or phone is None:
            raise ValidationError(INVALID_ORDER_MESSAGE, errors)
        return name, phone, lines

    async def _build_line(self, spec: CheckoutItemSpec) -> OrderLineItem:
        if not spec.product_id.strip():
            raise ValidationError("Product reference is required")
        if not spec.product_name.strip():
            raise ValidationError("Product name is required")

        product_price = Money.of(spec.product_price)
        quantity = Quantity(spec.quantity)

        options: list[OrderItemOption] = []
        groups: list[OptionGroup] = []
        for opt in spec.options:
            if not opt.option_id.strip():
                raise ValidationError("Option reference is required")
            if not opt.option_name.strip():
                raise ValidationError("Option name is required")
            if opt.group is not None:
                try:
                    groups.append(OptionGroup(opt.group))
                except ValueError as exc:
                    raise ValidationError(f"Unknown option group {opt.group!r}") from exc
            options.append(
                OrderItemOption(
                    option_id=opt.option_id,
                    option_name=opt.option_name.strip(),
                    extra_price=Money.of(opt.extra_price),
                )
            )
        check_option_groups(groups)

        if self._catalog is not None:
            await _verify_prices(self._catalog, spec.product_id, product_price, options)

        line = OrderLineItem.create(
            product_id=spec.product_id,
            product_name=spec.product_name.strip(),
            product_price=product_price,
            quantity=quantity,
            options=options,
            notes=(spec.notes or "").strip() or None,
        )
        if spec.subtotal is not None and spec.subtotal != line.subtotal.amount:
            logger.warning(
                "Client subtotal %s for %s differs from computed %s; using computed",
                spec.subtotal,
                line.product_name,
                line.subtotal.amount,
            )
        return line


async def _verify_prices(
    catalog: PriceCatalog,
    product_id: str,
    product_price: Money,
    options: list[OrderItemOption],
) -> None:
    """Reject a line whose prices no longer match the catalog."""
    current = await catalog.product_price(product_id)
    if current is None:
        raise ValidationError("Produk tidak ditemukan")
    if current != product_price:
        raise ValidationError("Harga produk telah berubah")

    for opt in options:
        current = await catalog.option_price(opt.option_id)  # type: ignore[arg-type]
        if current is None:
            raise ValidationError(f"Opsi '{opt.option_name}' tidak ditemukan")
        if current != opt.extra_price:
            raise ValidationError(f"Harga opsi '{opt.option_name}' telah berubah")
