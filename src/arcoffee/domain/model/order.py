"""Order aggregate — the core of the domain.

The Order is an aggregate root that owns its line items, and each line
owns frozen snapshots of the options that were picked.  Nothing in the
aggregate points back at live catalog rows: names and prices are copied
at checkout so historical orders keep displaying what was paid.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from arcoffee.domain.exceptions import ValidationError
from arcoffee.domain.model.value_objects import Money, OrderNumber, PhoneNumber, Quantity
from arcoffee.domain.service.pricing import compute_line_subtotal


class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    READY = "ready"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.COMPLETED, OrderStatus.CANCELLED)

    @staticmethod
    def parse(raw: str) -> OrderStatus:
        try:
            return OrderStatus(raw.strip().lower())
        except (AttributeError, ValueError) as exc:
            allowed = ", ".join(s.value for s in OrderStatus)
            raise ValidationError(
                f"Unknown order status {raw!r} (expected one of: {allowed})"
            ) from exc


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class OrderItemOption:
    """Snapshot of an option as it was priced at checkout.

    ``option_id`` is informational only; the option may since have been
    renamed, repriced or deleted.
    """

    option_id: str | None
    option_name: str
    extra_price: Money


@dataclass
class OrderLineItem:
    """Captures the price snapshot of a product at order-creation time.

    Use ``OrderLineItem.create()`` for new lines so the subtotal is
    computed, never taken from the caller.  ``product_id`` may dangle if
    the product is later removed from the catalog.
    """

    product_id: str | None
    product_name: str
    product_price: Money  # locked at order-creation time
    quantity: Quantity
    subtotal: Money
    options: list[OrderItemOption] = field(default_factory=list)
    notes: str | None = None
    id: int | None = None

    @staticmethod
    def create(
        product_id: str,
        product_name: str,
        product_price: Money,
        quantity: Quantity,
        options: list[OrderItemOption] | None = None,
        notes: str | None = None,
    ) -> OrderLineItem:
        options = list(options or [])
        subtotal = compute_line_subtotal(
            product_price, [o.extra_price for o in options], quantity.value
        )
        return OrderLineItem(
            product_id=product_id,
            product_name=product_name,
            product_price=product_price,
            quantity=quantity,
            subtotal=subtotal,
            options=options,
            notes=notes or None,
        )

    @property
    def unit_price(self) -> Money:
        unit = self.product_price
        for option in self.options:
            unit = unit + option.extra_price
        return unit


# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
MIN_CUSTOMER_NAME_LENGTH = 3
MAX_LINE_ITEMS = 50


@dataclass
class Order:
    """Aggregate root for a pay-on-pickup order.

    Use the ``Order.create()`` factory for new orders — it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: int | None
    order_number: str
    customer_name: str
    customer_phone: str
    items: list[OrderLineItem]
    total_price: Money
    notes: str | None = None
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        order_number: OrderNumber,
        customer_name: str,
        customer_phone: PhoneNumber,
        items: list[OrderLineItem],
        notes: str | None = None,
        now: datetime | None = None,
    ) -> Order:
        """Create a new order, enforcing all invariants."""
        name = (customer_name or "").strip()
        if len(name) < MIN_CUSTOMER_NAME_LENGTH:
            raise ValidationError(
                f"Customer name must be at least {MIN_CUSTOMER_NAME_LENGTH} characters"
            )

        if not items:
            raise ValidationError("Order must contain at least one item")

        if len(items) > MAX_LINE_ITEMS:
            raise ValidationError(f"Maximum {MAX_LINE_ITEMS} items per order")

        total = Money.zero()
        for item in items:
            total = total + item.subtotal

        created = now or _utcnow()
        return Order(
            id=None,
            order_number=order_number.value,
            customer_name=name,
            customer_phone=customer_phone.value,
            items=list(items),
            total_price=total,
            notes=(notes or "").strip() or None,
            status=OrderStatus.PENDING,
            created_at=created,
            updated_at=created,
        )

    # --- State transitions ----------------------------------------------------

    def available_transitions(self) -> list[OrderStatus]:
        """Every status the admin may pick: anything but the current one.

        The policy is deliberately permissive so mistakes can be undone,
        including moving a completed order back to pending.
        """
        return [s for s in OrderStatus if s is not self.status]

    def transition_to(self, new_status: OrderStatus, at: datetime | None = None) -> bool:
        """Set the status, returning False when it is already *new_status*.

        Re-selecting the current status is a no-op, not an error, and
        leaves ``updated_at`` alone.
        """
        if not isinstance(new_status, OrderStatus):
            raise ValidationError(f"Unknown order status {new_status!r}")
        if new_status is self.status:
            return False
        self.status = new_status
        self.updated_at = at or _utcnow()
        return True

    # --- Computed properties --------------------------------------------------

    @property
    def line_count(self) -> int:
        return len(self.items)

    @property
    def item_count(self) -> int:
        return sum(item.quantity.value for item in self.items)
