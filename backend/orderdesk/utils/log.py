"""Structured logging helpers built on *structlog*.

The rest of the codebase does ``from orderdesk.utils.log import get_logger``
and logs with keyword context::

    log = get_logger(dao="customers", backend="sqlite")
    log.info("Customer inserted", customer_id=3)
"""

from __future__ import annotations

import logging
from typing import Any

import structlog

_DEFAULT_PROCESSORS = [
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
    structlog.processors.JSONRenderer(),
]


def configure_logging(level: str = "INFO") -> None:
    """(Re)configure the process-wide structlog pipeline.

    *level* is a standard logging level name; unknown names fall back to INFO.
    """

    numeric = logging.getLevelName(level.strip().upper())
    if not isinstance(numeric, int):
        numeric = logging.INFO

    structlog.configure(
        processors=_DEFAULT_PROCESSORS,
        wrapper_class=structlog.make_filtering_bound_logger(numeric),
        cache_logger_on_first_use=False,
    )


# Attach the default processor chain only if the application has not
# configured structlog already.
if not structlog.is_configured():
    configure_logging()

# Keep the logger global so every import shares the same base instance.
log = structlog.get_logger("orderdesk")


def get_logger(**bindings: Any):  # noqa: D401 – factory helper
    """Return a child logger with optional key/value bindings.

    The logger stays lazy so a later :func:`configure_logging` call still
    applies to loggers created at import time.
    """

    return structlog.get_logger("orderdesk", **bindings)


__all__ = ["log", "get_logger", "configure_logging"]
