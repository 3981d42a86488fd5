"""How each order status is presented to customers and baristas.

The mapping is closed over ``OrderStatus``: adding a status without a
display entry fails at import time instead of falling through to a
blank badge.
"""

from __future__ import annotations

from dataclasses import dataclass

from arcoffee.domain.model.order import OrderStatus


@dataclass(frozen=True)
class StatusDisplay:
    label: str
    short_label: str
    description: str


STATUS_DISPLAY: dict[OrderStatus, StatusDisplay] = {
    OrderStatus.PENDING: StatusDisplay(
        label="Menunggu Konfirmasi",
        short_label="Menunggu",
        description="Pesanan Anda sedang menunggu konfirmasi dari barista.",
    ),
    OrderStatus.PROCESSING: StatusDisplay(
        label="Sedang Diproses",
        short_label="Diproses",
        description="Barista sedang menyiapkan pesanan Anda.",
    ),
    OrderStatus.READY: StatusDisplay(
        label="Siap Diambil",
        short_label="Siap",
        description="Pesanan Anda sudah siap! Silakan ambil di counter.",
    ),
    OrderStatus.COMPLETED: StatusDisplay(
        label="Selesai",
        short_label="Selesai",
        description="Terima kasih! Pesanan telah selesai.",
    ),
    OrderStatus.CANCELLED: StatusDisplay(
        label="Dibatalkan",
        short_label="Dibatalkan",
        description="Pesanan dibatalkan.",
    ),
}

_missing = [s.value for s in OrderStatus if s not in STATUS_DISPLAY]
if _missing:
    raise RuntimeError(f"No display entry for order status: {', '.join(_missing)}")

# Progress indicator on the tracking page; cancelled is off the track.
PROGRESS_STEPS: tuple[OrderStatus, ...] = (
    OrderStatus.PENDING,
    OrderStatus.PROCESSING,
    OrderStatus.READY,
    OrderStatus.COMPLETED,
)


def display_for(status: OrderStatus) -> StatusDisplay:
    return STATUS_DISPLAY[status]


def progress_index(status: OrderStatus) -> int | None:
    """Position of *status* on the progress track, None when cancelled."""
    if status not in PROGRESS_STEPS:
        return None
    return PROGRESS_STEPS.index(status)
