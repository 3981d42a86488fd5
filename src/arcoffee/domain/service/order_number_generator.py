"""Order Identifier Generator.

Produces ``<PREFIX>-<base36 epoch millis><3 random base36 chars>``,
uppercase, e.g. ``ARC-M1X2Y3Z``.  The timestamp segment keeps numbers
roughly sortable and short; the random suffix separates numbers issued
in the same millisecond and stops customers from enumerating orders.

Within one generator the timestamp segment never repeats: when the clock
has not moved past the last issued value it is bumped by one.  Across
processes collisions are improbable, not impossible, and checkout retries
on the uniqueness conflict the repository reports.
"""

from __future__ import annotations

import secrets
import string
import time
from typing import Callable

from arcoffee.domain.exceptions import ValidationError
from arcoffee.domain.model.value_objects import OrderNumber

BASE36_ALPHABET = string.digits + string.ascii_uppercase
SUFFIX_LENGTH = 3
DEFAULT_PREFIX = "ARC"


def to_base36(value: int) -> str:
    if value < 0:
        raise ValueError("Only non-negative integers can be encoded")
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(BASE36_ALPHABET[rem])
    return "".join(reversed(digits))


def _epoch_millis() -> int:
    return time.time_ns() // 1_000_000


def _random_suffix() -> str:
    return "".join(secrets.choice(BASE36_ALPHABET) for _ in range(SUFFIX_LENGTH))


class OrderNumberGenerator:

    def __init__(
        self,
        prefix: str = DEFAULT_PREFIX,
        clock: Callable[[], int] = _epoch_millis,
        random_suffix: Callable[[], str] = _random_suffix,
    ) -> None:
        prefix = prefix.strip().upper()
        if not prefix.isalnum():
            raise ValidationError(f"Order number prefix must be alphanumeric, got {prefix!r}")
        self._prefix = prefix
        self._clock = clock
        self._random_suffix = random_suffix
        self._last_stamp = -1

    @property
    def prefix(self) -> str:
        return self._prefix

    def generate(self) -> OrderNumber:
        now = self._clock()
        if now <= self._last_stamp:
            now = self._last_stamp + 1
        self._last_stamp = now
        stamp = to_base36(now)
        return OrderNumber(f"{self._prefix}-{stamp}{self._random_suffix().upper()}")
