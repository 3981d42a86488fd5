"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from arcoffee.domain.exceptions import ValidationError


@dataclass(frozen=True)
class Money:
    """Monetary amount in whole currency units.

    The store prices everything in whole Rupiah, so the amount is an
    ``int`` and there is no rounding anywhere in the pricing path.
    """

    amount: int
    currency: str = "IDR"

    def __post_init__(self) -> None:
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise ValidationError(
                f"Money amount must be an int, got {type(self.amount).__name__}"
            )
        if self.amount < 0:
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, factor: int) -> Money:
        if isinstance(factor, bool) or not isinstance(factor, int):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.amount * factor, self.currency)

    def __lt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount >= other.amount

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        # Indonesian grouping: 18000 -> "Rp 18.000"
        return "Rp " + f"{self.amount:,}".replace(",", ".")

    # --- Internal helpers -----------------------------------------------------

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def zero() -> Money:
        return Money(0)

    @staticmethod
    def of(amount: str | float | int) -> Money:
        """Convenient factory for values arriving from JSON or the CLI.

        Floats are accepted only when they hold a whole number
        (``18000.0``), since JSON clients routinely send those.
        """
        if isinstance(amount, bool):
            raise ValidationError(f"Invalid money amount: {amount!r}")
        if isinstance(amount, float):
            if not amount.is_integer():
                raise ValidationError(
                    f"Money amount must be a whole number, got {amount!r}"
                )
            return Money(int(amount))
        if isinstance(amount, str):
            try:
                return Money(int(amount.strip()))
            except ValueError as exc:
                raise ValidationError(f"Invalid money amount: {amount!r}") from exc
        return Money(amount)


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity.

    Enforces the invariant that you cannot order zero or negative items.
    """

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)


_PHONE_FORMATTING = re.compile(r"[\s\-.()]")
_DIGITS = re.compile(r"^\d+$")
MIN_PHONE_LENGTH = 10


@dataclass(frozen=True)
class PhoneNumber:
    """Customer phone number, stored as digits only.

    Spaces, dashes, dots, parentheses and a single leading ``+`` are
    accepted as formatting and stripped.  Anything else (letters, other
    symbols) is rejected rather than silently removed.
    """

    value: str

    def __post_init__(self) -> None:
        if len(self.value) < MIN_PHONE_LENGTH:
            raise ValidationError(
                f"Phone number must have at least {MIN_PHONE_LENGTH} digits"
            )
        if not _DIGITS.match(self.value):
            raise ValidationError("Phone number may only contain digits")

    @staticmethod
    def parse(raw: str) -> PhoneNumber:
        text = (raw or "").strip()
        if len(text) < MIN_PHONE_LENGTH:
            raise ValidationError(
                f"Phone number must have at least {MIN_PHONE_LENGTH} digits"
            )
        if text.startswith("+"):
            text = text[1:]
        return PhoneNumber(_PHONE_FORMATTING.sub("", text))

    def __str__(self) -> str:
        return self.value


_ORDER_NUMBER = re.compile(r"^[A-Z0-9]+-[A-Z0-9]+$")


@dataclass(frozen=True)
class OrderNumber:
    """The customer-facing order handle, e.g. ``ARC-M1X2Y3Z``.

    Never changes once assigned.  Lookups go through ``normalize`` so a
    customer typing ``arc-m1x2y3z `` still finds the order.
    """

    value: str

    def __post_init__(self) -> None:
        if not _ORDER_NUMBER.match(self.value):
            raise ValidationError(f"Invalid order number: {self.value!r}")

    @property
    def prefix(self) -> str:
        return self.value.split("-", 1)[0]

    @staticmethod
    def normalize(raw: str) -> str:
        return (raw or "").strip().upper()

    def __str__(self) -> str:
        return self.value
