"""Pricing Model: line subtotals and cart totals.

Pure functions, no I/O.  Checkout relies on them being deterministic so
that client-submitted totals can be treated as hints and recomputed.
"""

from __future__ import annotations

from typing import Iterable, Protocol

from arcoffee.domain.exceptions import ValidationError
from arcoffee.domain.model.value_objects import Money


class PricedLine(Protocol):
    base_price: Money
    option_prices: list[Money]
    quantity: int


def compute_line_subtotal(
    base_price: Money,
    option_prices: Iterable[Money],
    quantity: int,
) -> Money:
    """Return ``(base_price + sum(option_prices)) * quantity``."""
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValidationError(f"Quantity must be a positive integer, got {quantity!r}")

    unit = base_price
    for price in option_prices:
        unit = unit + price
    return unit * quantity


def compute_cart_total(lines: Iterable[PricedLine]) -> Money:
    """Sum of every line's subtotal."""
    total = Money.zero()
    for line in lines:
        total = total + compute_line_subtotal(
            line.base_price, line.option_prices, line.quantity
        )
    return total
