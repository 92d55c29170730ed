"""Utility functions for reading typed values from the environment."""

from __future__ import annotations

import logging
import os
from typing import Final

logger = logging.getLogger("spotilens.utils.environment")

_TRUTHY: Final[tuple[str, ...]] = ("true", "1", "yes", "y", "on")


def truthy(value: str | None) -> bool:
    return (value or "").strip().lower() in _TRUTHY


def env_flag(name: str, default: bool = False) -> bool:
    """Return the boolean value of ``$name`` (unset → *default*)."""
    raw = os.getenv(name)
    if raw is None:
        return default
    return truthy(raw)


def env_int(name: str, default: int) -> int:
    """Return ``$name`` as a positive int, falling back to *default*.

    Non-numeric or non-positive values are ignored with a warning rather than
    aborting startup.
    """
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r; using %s", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Ignoring non-positive %s=%r; using %s", name, raw, default)
        return default
    return value
