"""Shopping cart held by the storefront until checkout.

The cart is transient and belongs to one customer.  It is priced with
the same Pricing Model checkout uses, but checkout never trusts the
numbers a cart reports: it recomputes them from the submitted lines.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from arcoffee.domain.exceptions import ValidationError
from arcoffee.domain.model.product import Option, Product, check_option_groups
from arcoffee.domain.model.value_objects import Money, Quantity
from arcoffee.domain.service.pricing import compute_cart_total, compute_line_subtotal


@dataclass(frozen=True)
class CartLine:
    product: Product
    quantity: int
    selected_options: tuple[Option, ...] = ()
    notes: str | None = None

    def __post_init__(self) -> None:
        Quantity(self.quantity)
        check_option_groups([o.group for o in self.selected_options])
        for option in self.selected_options:
            if self.product.options and not self.product.offers(option):
                raise ValidationError(
                    f"Option '{option.name}' is not offered for {self.product.name}"
                )

    @property
    def base_price(self) -> Money:
        return self.product.price

    @property
    def option_prices(self) -> list[Money]:
        return [o.extra_price for o in self.selected_options]

    @property
    def subtotal(self) -> Money:
        return compute_line_subtotal(self.base_price, self.option_prices, self.quantity)

    def same_selection(self, other: CartLine) -> bool:
        return (
            self.product.id == other.product.id
            and {o.id for o in self.selected_options} == {o.id for o in other.selected_options}
            and (self.notes or "") == (other.notes or "")
        )


@dataclass
class Cart:

    lines: list[CartLine] = field(default_factory=list)

    def add(
        self,
        product: Product,
        quantity: int = 1,
        options: list[Option] | None = None,
        notes: str | None = None,
    ) -> CartLine:
        """Add a line, merging into an identical existing selection."""
        if not product.is_available:
            raise ValidationError(f"{product.name} is currently unavailable")

        line = CartLine(product, quantity, tuple(options or ()), notes or None)
        for i, existing in enumerate(self.lines):
            if existing.same_selection(line):
                merged = CartLine(
                    existing.product,
                    existing.quantity + quantity,
                    existing.selected_options,
                    existing.notes,
                )
                self.lines[i] = merged
                return merged
        self.lines.append(line)
        return line

    def update_quantity(self, index: int, quantity: int) -> None:
        line = self._line_at(index)
        if quantity <= 0:
            del self.lines[index]
            return
        self.lines[index] = CartLine(
            line.product, quantity, line.selected_options, line.notes
        )

    def remove(self, index: int) -> None:
        self._line_at(index)
        del self.lines[index]

    def clear(self) -> None:
        self.lines.clear()

    @property
    def total(self) -> Money:
        return compute_cart_total(self.lines)

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def _line_at(self, index: int) -> CartLine:
        if not 0 <= index < len(self.lines):
            raise ValidationError(f"No cart line at position {index}")
        return self.lines[index]
