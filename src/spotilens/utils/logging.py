"""Logging helpers shared across spotilens modules."""

from __future__ import annotations

import logging
import os
import sys
from typing import Final

_DEFAULT_FORMAT: Final[str] = "%(asctime)s %(levelname)s %(name)s %(message)s"


def mask_sensitive(value: str | None, keep_chars: int = 4) -> str:
    """Return *value* with everything but the first *keep_chars* masked.

    Used for verifiers, codes and tokens so that log lines can still be
    correlated without exposing the secret itself.
    """
    if not value:
        return "Not Provided"
    if len(value) <= keep_chars:
        return "*" * len(value)
    return f"{value[:keep_chars]}****"


def setup_logging(level: int | str | None = None, stream=None) -> logging.Logger:  # noqa: ANN001
    """Configure the root logger once and return the ``spotilens`` logger.

    *level* falls back to ``SPOTILENS_LOG_LEVEL`` and then to ``WARNING``.
    """
    if level is None:
        level = os.getenv("SPOTILENS_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=level,
        format=_DEFAULT_FORMAT,
        stream=stream or sys.stderr,
    )
    logger = logging.getLogger("spotilens")
    logger.setLevel(level)
    return logger
