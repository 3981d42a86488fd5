import logging

import click

from arcoffee.infrastructure.cli.db_commands import db_init
from arcoffee.infrastructure.cli.order_commands import (
    order_list,
    order_set_status,
    order_stats,
    order_submit,
    order_track,
)
from arcoffee.infrastructure.config import ConfigError, Settings


@click.group()
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Overrides ARCOFFEE_LOG_LEVEL.",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """ARCoffee — orders, checkout and order tracking"""
    try:
        settings = Settings.from_env()
    except ConfigError as exc:
        raise click.ClickException(str(exc))

    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = settings


@cli.group()
def order() -> None:
    """Checkout, track and manage orders."""


@cli.group()
def db() -> None:
    """Manage the order database."""


# Register subcommands
order.add_command(order_list)
order.add_command(order_set_status)
order.add_command(order_stats)
order.add_command(order_submit)
order.add_command(order_track)
db.add_command(db_init)
