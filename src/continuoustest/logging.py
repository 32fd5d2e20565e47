"""
Structured logging for the continuous test client.

The client emits debug events (``write_batch_sent``, ``query_range_warnings``,
``query_range_completed``) through a logger bound to the tenant it writes
for. Hosts call ``configure_logging`` once at startup to route those events
through stdlib logging.
"""

import logging
from typing import Any

import structlog


def configure_logging(level: int | str = logging.INFO, *, json_output: bool = True) -> None:
    """
    Route structlog events through stdlib logging.

    Args:
        level: Minimum stdlib level to emit
        json_output: Render one JSON object per line; otherwise use the
            human-readable console renderer
    """
    renderer: Any = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(level=level, format="%(message)s")
    logging.getLogger().setLevel(level)


def bind_context(**kwargs: Any) -> structlog.stdlib.BoundLogger:
    """Return a logger carrying ``kwargs`` (e.g. tenant) on every event."""
    return structlog.get_logger().bind(**kwargs)
