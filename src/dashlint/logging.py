"""
Logging setup for dashlint.

Logs go to stderr so that report output on stdout (notably --format json)
stays machine readable.
"""

import logging
import sys
from typing import Any

import structlog

LOG_FORMATS = ("console", "json")


def configure_logging(level: int | str = logging.WARNING, log_format: str = "console") -> None:
    """
    Configure structlog on top of standard logging.

    Args:
        level: Log level name or number
        log_format: "console" for human-readable lines, "json" for one JSON object per line
    """
    if log_format not in LOG_FORMATS:
        raise ValueError(f"Unknown log format: {log_format}")

    if log_format == "json":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(level=level, format="%(message)s", stream=sys.stderr, force=True)


def bind_context(**kwargs: Any) -> structlog.stdlib.BoundLogger:
    """Return a logger carrying the given fields, e.g. the dashboard being linted."""
    return structlog.get_logger().bind(**kwargs)
