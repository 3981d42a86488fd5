"""Data Transfer Objects — plain containers that cross layer boundaries.

Inputs mirror the checkout payload the storefront submits and are
validated with pydantic schemas (camelCase aliases, strict types);
outputs are what the tracking page, the admin screens and the CLI
display.  Neither exposes domain objects to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, StrictStr
from pydantic import ValidationError as SchemaError

from arcoffee.domain.exceptions import ValidationError
from arcoffee.domain.model.cart import Cart


# --- Checkout input -----------------------------------------------------------


def _whole_number(value: Any) -> Any:
    # JSON clients send 18000.0 as often as 18000.
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


Amount = Annotated[int, Field(strict=True, ge=0), BeforeValidator(_whole_number)]
LineQuantity = Annotated[int, Field(strict=True, ge=1)]


class CheckoutOptionSpec(BaseModel):
    """Input: one picked option, with the price the storefront showed."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    option_id: StrictStr = Field(..., alias="optionId")
    option_name: StrictStr = Field(..., alias="optionName")
    extra_price: Amount = Field(..., alias="extraPrice")
    group: StrictStr | None = Field(None, description="size | ice | sugar | addon")


class CheckoutItemSpec(BaseModel):
    """Input: one cart line.  ``subtotal`` is a client hint only."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    product_id: StrictStr = Field(..., alias="productId")
    product_name: StrictStr = Field(..., alias="productName")
    product_price: Amount = Field(..., alias="productPrice")
    quantity: LineQuantity
    options: tuple[CheckoutOptionSpec, ...] = ()
    subtotal: Amount | None = None
    notes: StrictStr | None = None


class CheckoutPayload(BaseModel):
    """Input: the whole checkout form.  ``total_price`` is a client hint only."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    customer_name: StrictStr = Field(..., alias="customerName")
    customer_phone: StrictStr = Field(..., alias="customerPhone")
    items: tuple[CheckoutItemSpec, ...]
    total_price: Amount | None = Field(None, alias="totalPrice")
    notes: StrictStr | None = None

    @staticmethod
    def from_dict(raw: Any) -> CheckoutPayload:
        """Build a payload from the storefront's JSON (camelCase keys).

        Missing keys, wrong types and negative amounts become a
        ValidationError keyed by JSON path (``items[0].quantity``);
        business rules are checked later by the checkout handler.
        """
        if not isinstance(raw, dict):
            raise ValidationError("Checkout payload must be an object")
        try:
            return CheckoutPayload.model_validate(raw)
        except SchemaError as exc:
            raise ValidationError("Invalid checkout payload", _field_errors(exc)) from exc

    @staticmethod
    def from_cart(
        cart: Cart,
        customer_name: str,
        customer_phone: str,
        notes: str | None = None,
    ) -> CheckoutPayload:
        return CheckoutPayload(
            customer_name=customer_name,
            customer_phone=customer_phone,
            notes=notes,
            total_price=cart.total.amount,
            items=tuple(
                CheckoutItemSpec(
                    product_id=line.product.id,
                    product_name=line.product.name,
                    product_price=line.product.price.amount,
                    quantity=line.quantity,
                    subtotal=line.subtotal.amount,
                    notes=line.notes,
                    options=tuple(
                        CheckoutOptionSpec(
                            option_id=o.id,
                            option_name=o.name,
                            extra_price=o.extra_price.amount,
                            group=o.group.value,
                        )
                        for o in line.selected_options
                    ),
                )
                for line in cart.lines
            ),
        )


def _field_errors(exc: SchemaError) -> dict[str, str]:
    errors: dict[str, str] = {}
    for err in exc.errors():
        key = ""
        for part in err["loc"]:
            if isinstance(part, int):
                key += f"[{part}]"
            else:
                key += f".{part}" if key else str(part)
        errors.setdefault(key or "payload", err["msg"])
    return errors


# --- Results ------------------------------------------------------------------


@dataclass(frozen=True)
class CheckoutResult:
    """Output of checkout: either an order number or a displayable error.

    A partially stored order still carries its ``order_number`` so the
    caller can point the customer (or the barista) at it.
    """

    success: bool
    order_number: str | None = None
    error: str | None = None
    field_errors: dict[str, str] = field(default_factory=dict)

    @staticmethod
    def ok(order_number: str) -> CheckoutResult:
        return CheckoutResult(success=True, order_number=order_number)

    @staticmethod
    def failed(
        error: str,
        field_errors: dict[str, str] | None = None,
        order_number: str | None = None,
    ) -> CheckoutResult:
        return CheckoutResult(
            success=False,
            order_number=order_number,
            error=error,
            field_errors=dict(field_errors or {}),
        )


@dataclass(frozen=True)
class StatusUpdateResult:
    """Output of a status change.  ``outcome`` is one of the constants below."""

    UPDATED = "updated"
    UNCHANGED = "unchanged"
    NOT_FOUND = "not_found"
    FAILED = "failed"

    outcome: str
    status: str | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.outcome in (self.UPDATED, self.UNCHANGED)


# --- Order views --------------------------------------------------------------


@dataclass(frozen=True)
class OrderItemOptionDTO:
    option_name: str
    extra_price: str  # formatted, e.g. "Rp 3.000"
    extra_amount: int


@dataclass(frozen=True)
class OrderLineItemDTO:
    """Output: a single line item as displayed to the user."""

    product_id: str | None
    product_name: str
    quantity: int
    product_price: str
    subtotal: str
    subtotal_amount: int
    notes: str | None
    options: list[OrderItemOptionDTO]


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int
    order_number: str
    customer_name: str
    customer_phone: str
    notes: str | None
    status: str
    status_label: str
    status_description: str
    available_statuses: list[str]
    items: list[OrderLineItemDTO]
    total: str
    total_amount: int
    created_at: str
    updated_at: str


@dataclass(frozen=True)
class OrderStatsDTO:
    """Output: the admin dashboard numbers."""

    total_orders: int
    pending_orders: int
    completed_orders: int
    revenue: str
    revenue_amount: int
