"""Integration tests for the SubmitOrder (checkout) use case.

Uses in-memory fake repositories — no database.
"""

import asyncio

import pytest

from arcoffee.application.submit_order import (
    EMPTY_CART_MESSAGE,
    INVALID_ORDER_MESSAGE,
    INVALID_PHONE_MESSAGE,
    NAME_TOO_SHORT_MESSAGE,
    ORDER_FAILED_MESSAGE,
    SYSTEM_ERROR_MESSAGE,
    SubmitOrderHandler,
)
from arcoffee.domain.exceptions import PersistenceError
from arcoffee.domain.model.order import OrderStatus
from arcoffee.domain.model.value_objects import Money
from arcoffee.domain.service.order_number_generator import OrderNumberGenerator
from tests.fakes import (
    FakeOrderRepository,
    FakePriceCatalog,
    SequenceGenerator,
    item,
    option,
    payload,
)


def _setup(generator=None, catalog=None, max_attempts=3):
    order_repo = FakeOrderRepository()
    handler = SubmitOrderHandler(
        order_repo,
        generator or OrderNumberGenerator(),
        max_attempts=max_attempts,
        catalog=catalog,
    )
    return handler, order_repo


def _submit(handler, checkout):
    return asyncio.run(handler.handle(checkout))


class TestSubmitOrderHappyPath:

    def test_end_to_end_scenario(self):
        handler, order_repo = _setup()
        result = _submit(handler, payload([
            item("p-americano", "Americano", 15000, 1),
            item("p-kopsu", "Kopi Susu", 20000, 3, options=[
                option("opt-boba", "Boba", 2000),
                option("opt-jelly", "Jelly", 2000),
            ]),
        ], customer_name="Budi Santoso", customer_phone="081234567890"))

        assert result.success is True
        assert result.order_number.startswith("ARC-")

        order = asyncio.run(order_repo.find_by_order_number(result.order_number))
        assert order is not None
        assert order.total_price == Money(87000)
        assert order.status == OrderStatus.PENDING

    def test_round_trip_matches_payload(self):
        handler, order_repo = _setup()
        checkout = payload([
            item("p-latte", "Caffe Latte", 18000, 2, options=[
                option("opt-large", "Large", 3000, group="size"),
                option("opt-shot", "Extra Shot", 5000, group="addon"),
            ], notes="less sweet"),
            item("p-americano", "Americano", 15000, 1),
        ], customer_name="Sari Dewi", customer_phone="0812 3456 7890", notes="ambil jam 9")
        result = _submit(handler, checkout)

        order = asyncio.run(order_repo.find_by_order_number(result.order_number))
        assert order.customer_name == "Sari Dewi"
        assert order.customer_phone == "081234567890"
        assert order.notes == "ambil jam 9"
        assert order.line_count == 2
        assert order.total_price == Money(52000 + 15000)

        latte = order.items[0]
        assert latte.subtotal == Money(52000)
        assert latte.notes == "less sweet"
        assert [(o.option_name, o.extra_price.amount) for o in latte.options] == [
            ("Large", 3000),
            ("Extra Shot", 5000),
        ]

    def test_client_totals_are_not_trusted(self):
        handler, order_repo = _setup()
        checkout = payload(
            [item(price=18000, quantity=2, subtotal=1)],
            total_price=1,
        )
        result = _submit(handler, checkout)
        order = asyncio.run(order_repo.find_by_order_number(result.order_number))
        assert order.total_price == Money(36000)
        assert order.items[0].subtotal == Money(36000)

    def test_each_submit_creates_a_new_order(self):
        handler, order_repo = _setup()
        first = _submit(handler, payload())
        second = _submit(handler, payload())
        assert first.order_number != second.order_number
        assert len(asyncio.run(order_repo.list_all())) == 2


class TestSubmitOrderValidation:

    def test_phone_with_nine_characters_rejected(self):
        handler, order_repo = _setup()
        result = _submit(handler, payload(customer_phone="081234567"))
        assert result.success is False
        assert result.error == INVALID_ORDER_MESSAGE
        assert result.field_errors["customer_phone"] == INVALID_PHONE_MESSAGE
        assert order_repo.create_calls == 0

    def test_phone_with_letters_rejected(self):
        handler, _ = _setup()
        result = _submit(handler, payload(customer_phone="08123abcde"))
        assert result.field_errors["customer_phone"] == INVALID_PHONE_MESSAGE

    def test_empty_items_rejected(self):
        handler, order_repo = _setup()
        result = _submit(handler, payload(items=[]))
        assert result.success is False
        assert result.field_errors["items"] == EMPTY_CART_MESSAGE
        assert order_repo.create_calls == 0

    def test_short_name_rejected(self):
        handler, _ = _setup()
        result = _submit(handler, payload(customer_name="Al"))
        assert result.field_errors["customer_name"] == NAME_TOO_SHORT_MESSAGE

    def test_unknown_option_group_rejected(self):
        handler, _ = _setup()
        result = _submit(handler, payload([item(options=[option("o", "Foam", 0, group="topping")])]))
        assert "Unknown option group" in result.field_errors["items[0]"]

    def test_blank_product_name_rejected(self):
        handler, _ = _setup()
        result = _submit(handler, payload([item(name="   ")]))
        assert "Product name" in result.field_errors["items[0]"]

    def test_missing_product_reference_rejected(self):
        handler, _ = _setup()
        result = _submit(handler, payload([item(product_id="")]))
        assert "Product reference" in result.field_errors["items[0]"]

    def test_two_sizes_on_one_line_rejected(self):
        handler, _ = _setup()
        result = _submit(handler, payload([item(options=[
            option("opt-large", "Large", 3000, group="size"),
            option("opt-regular", "Regular", 0, group="size"),
        ])]))
        assert "Only one 'size'" in result.field_errors["items[0]"]

    def test_all_errors_reported_together(self):
        handler, _ = _setup()
        result = _submit(handler, payload(
            [item(), item(product_id=" ")], customer_name="", customer_phone="123",
        ))
        assert set(result.field_errors) == {"customer_name", "customer_phone", "items[1]"}


class TestSubmitOrderOrderNumbers:

    def test_conflict_is_retried(self):
        gen = SequenceGenerator("ARC-AAA0001", "ARC-AAA0002")
        handler, order_repo = _setup(generator=gen)
        order_repo.conflicts_remaining = 1

        result = _submit(handler, payload())

        assert result.success is True
        assert result.order_number == "ARC-AAA0002"
        assert order_repo.create_calls == 2

    def test_gives_up_after_max_attempts(self):
        gen = SequenceGenerator("ARC-A1", "ARC-A2", "ARC-A3")
        handler, order_repo = _setup(generator=gen)
        order_repo.conflicts_remaining = 5

        result = _submit(handler, payload())

        assert result.success is False
        assert result.error == ORDER_FAILED_MESSAGE
        assert gen.calls == 3

    def test_invalid_max_attempts_rejected(self):
        with pytest.raises(ValueError):
            SubmitOrderHandler(FakeOrderRepository(), OrderNumberGenerator(), max_attempts=0)


class TestSubmitOrderStorageFailures:

    def test_storage_error_becomes_generic_message(self):
        handler, order_repo = _setup()
        order_repo.fail_create_with = PersistenceError("disk I/O error at /var/lib/db")

        result = _submit(handler, payload())

        assert result.success is False
        assert result.error == ORDER_FAILED_MESSAGE
        assert "disk" not in result.error

    def test_unexpected_error_does_not_escape(self):
        handler, order_repo = _setup()
        order_repo.fail_create_with = RuntimeError("boom")

        result = _submit(handler, payload())

        assert result.success is False
        assert result.error == SYSTEM_ERROR_MESSAGE

    def test_partial_write_reports_order_number(self):
        gen = SequenceGenerator("ARC-PART001")
        handler, order_repo = _setup(generator=gen)
        order_repo.fail_lines = [1]

        result = _submit(handler, payload([item(), item("p-2", "Americano", 15000)]))

        assert result.success is False
        assert result.error == SYSTEM_ERROR_MESSAGE
        assert result.order_number == "ARC-PART001"
        stored = asyncio.run(order_repo.find_by_order_number("ARC-PART001"))
        assert stored.line_count == 1


class TestSubmitOrderPriceVerification:

    def _catalog(self):
        return FakePriceCatalog(
            products={"p-latte": 18000},
            options={"opt-large": 3000},
        )

    def test_matching_prices_accepted(self):
        handler, _ = _setup(catalog=self._catalog())
        result = _submit(handler, payload([item(options=[option("opt-large", "Large", 3000)])]))
        assert result.success is True

    def test_changed_product_price_rejected(self):
        handler, order_repo = _setup(catalog=self._catalog())
        result = _submit(handler, payload([item(price=10000)]))
        assert result.success is False
        assert "Harga produk telah berubah" in result.field_errors["items[0]"]
        assert order_repo.create_calls == 0

    def test_unknown_option_rejected(self):
        handler, _ = _setup(catalog=self._catalog())
        result = _submit(handler, payload([item(options=[option("opt-gone", "Gone", 0)])]))
        assert "tidak ditemukan" in result.field_errors["items[0]"]


class UnreachableCatalog(FakePriceCatalog):

    async def product_price(self, product_id):
        raise ConnectionError("catalog unreachable")


class BrokenGenerator:

    def generate(self):
        raise RuntimeError("clock went backwards")


class TestSubmitOrderNeverRaises:

    def test_catalog_outage_is_a_system_error(self):
        handler, order_repo = _setup(catalog=UnreachableCatalog())

        result = _submit(handler, payload())

        assert result.success is False
        assert result.error == SYSTEM_ERROR_MESSAGE
        assert "catalog" not in result.error
        assert order_repo.create_calls == 0

    def test_order_number_failure_is_a_system_error(self):
        handler, order_repo = _setup(generator=BrokenGenerator())

        result = _submit(handler, payload())

        assert result.success is False
        assert result.error == SYSTEM_ERROR_MESSAGE
        assert order_repo.create_calls == 0

    def test_notes_are_trimmed(self):
        handler, order_repo = _setup()

        result = _submit(handler, payload([item(notes="  less ice  ")], notes="   "))

        order = asyncio.run(order_repo.find_by_order_number(result.order_number))
        assert order.notes is None
        assert order.items[0].notes == "less ice"
