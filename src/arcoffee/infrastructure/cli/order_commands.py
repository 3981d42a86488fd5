"""CLI commands for the Order aggregate."""

from __future__ import annotations

import json

import click

from arcoffee.application.dto import CheckoutPayload, OrderDTO, StatusUpdateResult
from arcoffee.application.status_display import PROGRESS_STEPS, display_for, progress_index
from arcoffee.domain.exceptions import ValidationError
from arcoffee.domain.model.order import OrderStatus
from arcoffee.infrastructure.cli.runner import run_with_container
from arcoffee.infrastructure.config import Settings

_STATUS_CHOICES = [s.value for s in OrderStatus]


def _load_payload(stream) -> CheckoutPayload:
    """Parse a checkout JSON document into a CheckoutPayload."""
    try:
        raw = json.load(stream)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"Not valid JSON: {exc}", param_hint="--file")
    try:
        return CheckoutPayload.from_dict(raw)
    except ValidationError as exc:
        details = "; ".join(f"{k}: {v}" for k, v in exc.field_errors.items())
        raise click.BadParameter(f"{exc} ({details})", param_hint="--file")


@click.command("submit")
@click.option(
    "--file", "payload_file", required=True, type=click.File("r", encoding="utf-8"),
    help="Checkout payload as JSON ('-' for stdin).",
)
@click.pass_obj
def order_submit(settings: Settings, payload_file) -> None:
    """Submit a cart for checkout (pay on pickup)."""
    payload = _load_payload(payload_file)

    result = run_with_container(
        settings, lambda c: c.submit_order().handle(payload)
    )

    if not result.success:
        lines = [result.error or "Checkout failed"]
        lines += [f"  {field}: {message}" for field, message in result.field_errors.items()]
        if result.order_number:
            lines.append(f"  order number: {result.order_number}")
        raise click.ClickException("\n".join(lines))

    click.echo(f"Order {result.order_number} created  (status=pending)")


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {dto.order_number}  (#{dto.id}, status={dto.status})")
    click.echo(f"Customer: {dto.customer_name}  {dto.customer_phone}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo(f"Updated:  {dto.updated_at}")
    if dto.notes:
        click.echo(f"Notes:    {dto.notes}")
    click.echo()

    click.echo(f"  {'Product':<24} {'Qty':>5} {'Price':>12} {'Subtotal':>12}")
    click.echo(f"  {'-'*56}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<24} {item.quantity:>5} {item.product_price:>12} {item.subtotal:>12}"
        )
        for opt in item.options:
            click.echo(f"    + {opt.option_name:<20} {opt.extra_price:>12}")
        if item.notes:
            click.echo(f"    note: {item.notes}")
    click.echo(f"  {'-'*56}")
    click.echo(f"  {'Order Total':<30} {dto.total:>25}")


def _display_progress(status: OrderStatus) -> None:
    current = progress_index(status)
    if current is None:
        return
    steps = []
    for i, step in enumerate(PROGRESS_STEPS):
        marker = "x" if i <= current else " "
        steps.append(f"[{marker}] {display_for(step).short_label}")
    click.echo("  " + "  ->  ".join(steps))


@click.command("track")
@click.argument("order_number")
@click.pass_obj
def order_track(settings: Settings, order_number: str) -> None:
    """Show the status of an order by its order number."""
    dto = run_with_container(settings, lambda c: c.track_order().handle(order_number))

    if dto is None:
        raise click.ClickException(f"Pesanan {order_number.strip().upper()} tidak ditemukan")

    status = OrderStatus(dto.status)
    click.echo(f"{dto.status_label}: {dto.status_description}")
    _display_progress(status)
    click.echo()
    _display_order(dto)


@click.command("list")
@click.option(
    "--status", default="all", type=click.Choice(["all", *_STATUS_CHOICES]),
    help="Only show orders with this status.",
)
@click.pass_obj
def order_list(settings: Settings, status: str) -> None:
    """List orders, newest first."""
    orders = run_with_container(settings, lambda c: c.list_orders().handle(status))

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<6} {'Order':<16} {'Customer':<20} {'Status':<12} {'Total':>14}  Created")
    click.echo("-" * 90)
    for o in orders:
        click.echo(
            f"{o.id:<6} {o.order_number:<16} {o.customer_name[:20]:<20} "
            f"{o.status:<12} {o.total:>14}  {o.created_at}"
        )


@click.command("set-status")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to update.")
@click.option("--status", required=True, type=click.Choice(_STATUS_CHOICES), help="New status.")
@click.pass_obj
def order_set_status(settings: Settings, order_id: int, status: str) -> None:
    """Set the status of an order (any status may be chosen)."""
    result = run_with_container(
        settings, lambda c: c.update_order_status().handle(order_id, status)
    )

    if result.outcome == StatusUpdateResult.UPDATED:
        label = display_for(OrderStatus(status)).label
        click.echo(f"Order #{order_id} status diubah ke {label}.")
    elif result.outcome == StatusUpdateResult.UNCHANGED:
        click.echo(f"Order #{order_id} is already {status}.")
    else:
        raise click.ClickException(result.error or "Status update failed")


@click.command("stats")
@click.pass_obj
def order_stats(settings: Settings) -> None:
    """Show dashboard numbers."""
    stats = run_with_container(settings, lambda c: c.order_stats().handle())

    click.echo(f"Total orders:     {stats.total_orders}")
    click.echo(f"Pending:          {stats.pending_orders}")
    click.echo(f"Completed:        {stats.completed_orders}")
    click.echo(f"Revenue:          {stats.revenue}")
