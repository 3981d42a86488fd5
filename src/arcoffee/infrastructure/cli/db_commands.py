"""CLI commands for database setup."""

from __future__ import annotations

import click

from arcoffee.infrastructure.cli.runner import run_with_container
from arcoffee.infrastructure.config import Settings


@click.command("init")
@click.pass_obj
def db_init(settings: Settings) -> None:
    """Create the order tables if they do not exist."""

    async def _init(container) -> None:
        await container.init_schema()

    run_with_container(settings, _init)
    click.echo("Order tables ready.")
