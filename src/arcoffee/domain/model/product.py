"""Catalog reference data: products and their options.

The catalog is owned by the back-office; the order core only reads
prices and names from it at cart-building time.  Everything here is
immutable from the order core's point of view.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from arcoffee.domain.exceptions import ValidationError
from arcoffee.domain.model.value_objects import Money


class OptionGroup(Enum):
    SIZE = "size"
    ICE = "ice"
    SUGAR = "sugar"
    ADDON = "addon"

    @property
    def is_exclusive(self) -> bool:
        """Only one option of an exclusive group may be picked per line."""
        return self is not OptionGroup.ADDON


@dataclass(frozen=True)
class Option:
    """A named price modifier, e.g. ``size / Large / +3000``."""

    id: str
    group: OptionGroup
    name: str
    extra_price: Money

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValidationError("Option name is required")


@dataclass(frozen=True)
class Product:
    """A menu item with its base price and the options it offers."""

    id: str
    name: str
    price: Money
    options: tuple[Option, ...] = ()
    is_available: bool = True

    def offers(self, option: Option) -> bool:
        return any(o.id == option.id for o in self.options)


def check_option_groups(groups: list[OptionGroup]) -> None:
    """Reject a selection holding two options of the same exclusive group."""
    seen: set[OptionGroup] = set()
    for group in groups:
        if group.is_exclusive and group in seen:
            raise ValidationError(
                f"Only one '{group.value}' option may be selected"
            )
        seen.add(group)
