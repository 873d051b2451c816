"""
Structured logging utilities.

Provides the one-time structlog setup for a run and a context manager for
operation logging with timing and error tracking.
"""

from __future__ import annotations

import logging
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from permissions_updater.core.config.logging_config import LoggingConfig

logger = structlog.get_logger(__name__)


def configure_logging(logging_config: LoggingConfig) -> None:
    """
    Route structlog through the standard library and render to stderr.

    Args:
        logging_config: Level and format for the root handler
    """
    level = logging.getLevelName(logging_config.level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(level=level, format=logging_config.format, stream=sys.stderr, force=True)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )


@contextmanager
def log_operation(operation: str, **context: Any) -> Iterator[None]:
    """
    Context manager for structured operation logging.

    Logs operation start, completion, and errors with timing information.

    Args:
        operation: Name of the operation being performed
        **context: Additional context to include in logs

    Example:
        with log_operation("reconcile", kind="group"):
            driver.run()
    """
    start_time = time.monotonic()
    logger.info("operation_started", operation=operation, **context)

    try:
        yield
    except Exception as e:
        latency_ms = int((time.monotonic() - start_time) * 1000)
        logger.error("operation_failed", operation=operation, latency_ms=latency_ms, error=str(e), **context)
        raise
    else:
        latency_ms = int((time.monotonic() - start_time) * 1000)
        logger.info("operation_completed", operation=operation, latency_ms=latency_ms, **context)
