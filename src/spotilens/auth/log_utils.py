"""Structured logging helpers for the login flow.

This module purposefully restricts **which** contextual attributes are attached
to log records in order to avoid accidentally leaking secrets.  The adapter
ONLY injects the following *non-sensitive* fields:

- ``correlation_id`` - Per-request id set by the correlation middleware
- ``flow_state``     - Current startup state (``unauthenticated`` ...)

Usage
-----
>>> from spotilens.auth.log_utils import get_flow_logger
>>> log = get_flow_logger(correlation_id="c0ffee", flow_state="pending_callback")
>>> log.info("Exchanging authorization code")
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, MutableMapping


class _FlowLoggerAdapter(logging.LoggerAdapter):
    """Inject whitelisted flow context into log records."""

    extra_keys = ("correlation_id", "flow_state")

    def __init__(self, logger: logging.Logger, extra: Mapping[str, Any] | None = None):
        extra_clean: MutableMapping[str, Any] = {}
        for k in self.extra_keys:
            if extra and extra.get(k) is not None:
                extra_clean[k] = str(extra[k])
        super().__init__(logger, extra_clean)

    def process(self, msg: str, kwargs: MutableMapping[str, Any]):
        if "extra" not in kwargs or kwargs["extra"] is None:
            kwargs["extra"] = {}
        # merge but do not overwrite call-site provided extras
        for k, v in self.extra.items():
            kwargs["extra"].setdefault(k, v)
        if self.extra:
            context = " ".join(f"{k}={v}" for k, v in self.extra.items())
            msg = f"{msg} [{context}]"
        return msg, kwargs

    def with_state(self, flow_state: str) -> "_FlowLoggerAdapter":
        """Return a copy of this adapter tagged with *flow_state*."""
        return _FlowLoggerAdapter(self.logger, {**self.extra, "flow_state": flow_state})


def get_flow_logger(
    *,
    base_logger_name: str = "spotilens.flow",
    correlation_id: str | None = None,
    flow_state: str | None = None,
) -> _FlowLoggerAdapter:
    """Return a LoggerAdapter pre-filled with flow context."""
    logger = logging.getLogger(base_logger_name)
    return _FlowLoggerAdapter(
        logger,
        {"correlation_id": correlation_id, "flow_state": flow_state},
    )
