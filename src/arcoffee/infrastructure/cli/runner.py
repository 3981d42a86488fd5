"""Bridges synchronous click commands to the async handlers."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, TypeVar

import click

from arcoffee.domain.exceptions import DomainException
from arcoffee.infrastructure.bootstrap import Container
from arcoffee.infrastructure.config import Settings

T = TypeVar("T")


def run_with_container(
    settings: Settings, work: Callable[[Container], Awaitable[T]]
) -> T:
    """Build a container, run *work* on a fresh event loop, dispose the engine."""

    async def _main() -> T:
        container = Container(settings)
        try:
            await container.init_schema()
            return await work(container)
        finally:
            await container.dispose()

    try:
        return asyncio.run(_main())
    except DomainException as exc:
        raise click.ClickException(str(exc))
