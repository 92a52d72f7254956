"""Lightweight timing helper for instrumentation.

``log_duration`` emits a single log entry at a configurable level once the
block completes, making it safe for production telemetry.

Environment Variables:
* ``ENHANCER_GENIE_PROFILE`` – When set to "1", "true", or "yes", DEBUG-level
  timings are emitted as well. When disabled, only INFO-level and above
  timings are logged.
"""
from __future__ import annotations

import logging
import os
import time
from contextlib import contextmanager
from typing import Iterator, Optional, Union


def is_profiling_enabled() -> bool:
    """
    Check if profiling is enabled via environment variable.

    Returns:
        True if ENHANCER_GENIE_PROFILE is set to "1", "true", or "yes" (case-insensitive)
    """
    value = os.environ.get("ENHANCER_GENIE_PROFILE", "").lower()
    return value in ("1", "true", "yes")


@contextmanager
def log_duration(
    logger: Union[logging.Logger, logging.LoggerAdapter],
    message: str,
    *,
    level: int = logging.INFO,
    extra: Optional[dict] = None,
) -> Iterator[None]:
    """
    Measure the time spent inside a block and log a single completion line.

    Args:
        logger: Logger or LoggerAdapter instance
        message: Message to log (duration will be appended)
        level: Log level (default: logging.INFO)
        extra: Optional dict of extra logging context

    Example:
        >>> with log_duration(logger, "Catalog fetch"):
        ...     client.fetch_catalog()
        # Logs: "Catalog fetch completed in 0.345s"
    """
    should_log = is_profiling_enabled() or level >= logging.INFO

    if not should_log:
        yield
        return

    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        logger.log(level, "%s completed in %.3fs", message, duration, extra=extra)
