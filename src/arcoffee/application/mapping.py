"""Domain -> DTO mapping shared by the query handlers."""

from __future__ import annotations

from arcoffee.application.dto import OrderDTO, OrderItemOptionDTO, OrderLineItemDTO
from arcoffee.application.status_display import display_for
from arcoffee.domain.model.order import Order

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M UTC"


def order_to_dto(order: Order) -> OrderDTO:
    display = display_for(order.status)
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        order_number=order.order_number,
        customer_name=order.customer_name,
        customer_phone=order.customer_phone,
        notes=order.notes,
        status=order.status.value,
        status_label=display.label,
        status_description=display.description,
        available_statuses=[s.value for s in order.available_transitions()],
        items=[
            OrderLineItemDTO(
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity.value,
                product_price=str(item.product_price),
                subtotal=str(item.subtotal),
                subtotal_amount=item.subtotal.amount,
                notes=item.notes,
                options=[
                    OrderItemOptionDTO(
                        option_name=opt.option_name,
                        extra_price=str(opt.extra_price),
                        extra_amount=opt.extra_price.amount,
                    )
                    for opt in item.options
                ],
            )
            for item in order.items
        ],
        total=str(order.total_price),
        total_amount=order.total_price.amount,
        created_at=order.created_at.strftime(TIMESTAMP_FORMAT),
        updated_at=order.updated_at.strftime(TIMESTAMP_FORMAT),
    )
