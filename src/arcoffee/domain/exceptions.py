"""Domain-level exceptions.

All business rule violations and storage failures are expressed as
subclasses of DomainException so the application layer can translate
them uniformly into result objects for the caller.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated.

    ``field_errors`` maps a payload field (e.g. ``customer_phone`` or
    ``items[1].quantity``) to a human-readable message when the failure
    can be attributed to a specific input.
    """

    def __init__(self, message: str, field_errors: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.field_errors: dict[str, str] = dict(field_errors or {})


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class PersistenceError(DomainException):
    """The order store could not complete a read or write."""


class OrderNumberConflictError(PersistenceError):
    """The generated order number is already taken."""

    def __init__(self, order_number: str) -> None:
        super().__init__(f"Order number {order_number} already exists")
        self.order_number = order_number


class PartialOrderWriteError(PersistenceError):
    """The order header was written but some of its lines were not.

    The order is trackable under ``order_number``; ``failed_lines`` holds
    the zero-based indexes of the lines (or their option snapshots) that
    could not be stored.
    """

    def __init__(self, order_number: str, failed_lines: list[int]) -> None:
        super().__init__(
            f"Order {order_number} stored without line(s) "
            f"{', '.join(str(i) for i in failed_lines)}"
        )
        self.order_number = order_number
        self.failed_lines = list(failed_lines)
