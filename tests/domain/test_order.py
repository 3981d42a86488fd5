"""Unit tests for the Order aggregate and its business rules."""

from datetime import datetime, timedelta, timezone

import pytest

from arcoffee.domain.exceptions import ValidationError
from arcoffee.domain.model.order import (
    Order,
    OrderItemOption,
    OrderLineItem,
    OrderStatus,
)
from arcoffee.domain.model.value_objects import Money, OrderNumber, PhoneNumber, Quantity

NOW = datetime(2026, 10, 19, 8, 30, tzinfo=timezone.utc)


def _make_item(
    name: str = "Caffe Latte",
    qty: int = 1,
    price: int = 18000,
    options: list[tuple[str, int]] | None = None,
) -> OrderLineItem:
    """Helper to build a valid line item."""
    return OrderLineItem.create(
        product_id="p-1",
        product_name=name,
        product_price=Money(price),
        quantity=Quantity(qty),
        options=[OrderItemOption(None, n, Money(p)) for n, p in options or []],
    )


def _make_order(items: list[OrderLineItem] | None = None, name: str = "Budi Santoso") -> Order:
    return Order.create(
        order_number=OrderNumber("ARC-TEST123"),
        customer_name=name,
        customer_phone=PhoneNumber.parse("081234567890"),
        items=items if items is not None else [_make_item()],
        now=NOW,
    )


class TestOrderCreation:

    def test_happy_path(self):
        order = _make_order([_make_item(qty=2, price=10000)])
        assert order.customer_name == "Budi Santoso"
        assert order.status == OrderStatus.PENDING
        assert order.total_price == Money(20000)
        assert order.created_at == order.updated_at == NOW

    def test_id_is_none_for_new_orders(self):
        assert _make_order().id is None  # assigned by repository

    def test_total_is_sum_of_line_subtotals(self):
        order = _make_order([
            _make_item("Americano", qty=1, price=15000),
            _make_item("Kopi Susu", qty=3, price=20000, options=[("Boba", 2000), ("Jelly", 2000)]),
        ])
        assert order.total_price == Money(87000)
        assert order.item_count == 4
        assert order.line_count == 2

    def test_name_is_trimmed(self):
        assert _make_order(name="  Sari  ").customer_name == "Sari"

    def test_short_name_rejected(self):
        with pytest.raises(ValidationError, match="at least 3"):
            _make_order(name="Al")

    def test_no_items_rejected(self):
        with pytest.raises(ValidationError, match="at least one item"):
            _make_order([])

    def test_51_items_rejected(self):
        with pytest.raises(ValidationError, match="Maximum 50 items"):
            _make_order([_make_item() for _ in range(51)])


class TestOrderLineItem:

    def test_subtotal_includes_options(self):
        item = _make_item(qty=2, price=18000, options=[("Large", 3000), ("Extra Shot", 5000)])
        assert item.subtotal == Money(52000)
        assert item.unit_price == Money(26000)

    def test_option_snapshot_is_frozen(self):
        snapshot = OrderItemOption("opt-1", "Large", Money(3000))
        with pytest.raises(AttributeError):
            snapshot.extra_price = Money(9999)  # type: ignore[misc]

    def test_empty_notes_become_none(self):
        item = OrderLineItem.create("p-1", "Latte", Money(1), Quantity(1), notes="")
        assert item.notes is None


class TestOrderTransitions:

    @pytest.mark.parametrize("target", [
        OrderStatus.PROCESSING,
        OrderStatus.READY,
        OrderStatus.COMPLETED,
        OrderStatus.CANCELLED,
    ])
    def test_pending_to_any_other_status(self, target):
        order = _make_order()
        later = NOW + timedelta(minutes=5)
        assert order.transition_to(target, later) is True
        assert order.status == target
        assert order.updated_at == later
        assert order.created_at == NOW

    def test_same_status_is_a_noop(self):
        order = _make_order()
        assert order.transition_to(OrderStatus.PENDING, NOW + timedelta(minutes=1)) is False
        assert order.updated_at == NOW

    def test_regression_is_allowed(self):
        order = _make_order()
        order.transition_to(OrderStatus.COMPLETED)
        assert order.transition_to(OrderStatus.PENDING) is True
        assert order.status == OrderStatus.PENDING

    def test_available_transitions_exclude_current(self):
        order = _make_order()
        order.transition_to(OrderStatus.READY)
        assert OrderStatus.READY not in order.available_transitions()
        assert len(order.available_transitions()) == len(OrderStatus) - 1

    def test_non_status_rejected(self):
        with pytest.raises(ValidationError, match="Unknown order status"):
            _make_order().transition_to("ready")  # type: ignore[arg-type]


class TestOrderStatus:

    def test_parse_is_case_insensitive(self):
        assert OrderStatus.parse(" Ready ") is OrderStatus.READY

    def test_parse_unknown_rejected(self):
        with pytest.raises(ValidationError, match="Unknown order status"):
            OrderStatus.parse("shipped")

    def test_terminal_statuses(self):
        assert {s for s in OrderStatus if s.is_terminal} == {
            OrderStatus.COMPLETED,
            OrderStatus.CANCELLED,
        }
