"""Read-only view of the catalog used to re-verify checkout prices.

The catalog itself is managed by the back-office.  Checkout only needs
the current price of a product and the current extra price of an
option, looked up by id.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from arcoffee.domain.model.value_objects import Money


class PriceCatalog(ABC):

    @abstractmethod
    async def product_price(self, product_id: str) -> Money | None:
        """Current base price of a product, or None if it is unknown."""

    @abstractmethod
    async def option_price(self, option_id: str) -> Money | None:
        """Current extra price of an option, or None if it is unknown."""
