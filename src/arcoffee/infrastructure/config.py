"""Runtime configuration, read from ``ARCOFFEE_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
DATA_DIR = Path(__file__).resolve().parents[3] / "data"

DEFAULT_DATABASE_URL = f"sqlite+aiosqlite:///{DATA_DIR / 'arcoffee.db'}"
DEFAULT_ORDER_PREFIX = "ARC"
DEFAULT_CHECKOUT_ATTEMPTS = 3
DEFAULT_LOG_LEVEL = "WARNING"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


class ConfigError(ValueError):
    """An environment variable holds an unusable value."""


@dataclass(frozen=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    order_prefix: str = DEFAULT_ORDER_PREFIX
    checkout_attempts: int = DEFAULT_CHECKOUT_ATTEMPTS
    atomic_writes: bool = False
    log_level: str = DEFAULT_LOG_LEVEL

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        return Settings(
            database_url=env.get("ARCOFFEE_DATABASE_URL", DEFAULT_DATABASE_URL),
            order_prefix=env.get("ARCOFFEE_ORDER_PREFIX", DEFAULT_ORDER_PREFIX),
            checkout_attempts=_parse_int(
                env, "ARCOFFEE_CHECKOUT_ATTEMPTS", DEFAULT_CHECKOUT_ATTEMPTS
            ),
            atomic_writes=_parse_bool(env, "ARCOFFEE_ATOMIC_WRITES", False),
            log_level=env.get("ARCOFFEE_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        )


def _parse_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{key} must be an integer, got {raw!r}") from exc
    if value < 1:
        raise ConfigError(f"{key} must be at least 1, got {value}")
    return value


def _parse_bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = env.get(key)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigError(f"{key} must be a boolean, got {raw!r}")
