"""
Logging and tracing configuration for content-forms.

Operations log through the ``content-forms`` logger. ``setup_tracing``
attaches a console handler and/or a JSON-lines file handler, and
``traced_operation`` / ``trace_operation`` record the start, end and
duration of compile, hydrate and encode calls at DEBUG level.
"""

import functools
import json
import logging
import sys
import time
from contextlib import contextmanager
from typing import Any, Iterator

from content_forms.config import get_config

LOGGER_NAME = "content-forms"

logger = logging.getLogger(LOGGER_NAME)


class JsonLinesFormatter(logging.Formatter):
    """
    Formats records as one JSON object per line.

    Useful for persistent logging and later analysis.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        operation = getattr(record, "operation", None)
        if operation is not None:
            entry["operation"] = operation
            entry["duration_ms"] = getattr(record, "duration_ms", None)
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_tracing(
    enabled: bool = True,
    console: bool = True,
    verbose: bool = False,
    file_path: str | None = None,
) -> logging.Logger:
    """
    Configure logging for content-forms.

    Args:
        enabled: Whether logging is enabled.
        console: Whether to log to stderr.
        verbose: Whether to log operation spans (DEBUG level).
        file_path: Optional file path to write JSON-lines logs to.

    Returns:
        The configured ``content-forms`` logger.

    Example:
        >>> from content_forms.tracing import setup_tracing
        >>> setup_tracing(console=True, verbose=True)
        >>> # Now compile/hydrate/encode calls are logged with timings
    """
    logger.handlers.clear()
    logger.propagate = False

    if not enabled:
        logger.disabled = True
        return logger

    logger.disabled = False
    config = get_config()
    logger.setLevel(logging.DEBUG if verbose or config.verbose_output else config.log_level)

    if console:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
        logger.addHandler(handler)

    file_path = file_path or config.log_file
    if file_path:
        file_handler = logging.FileHandler(file_path)
        file_handler.setFormatter(JsonLinesFormatter())
        logger.addHandler(file_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return logger


def disable_tracing() -> None:
    """Disable all content-forms logging."""
    logger.disabled = True


def enable_tracing() -> None:
    """Re-enable content-forms logging with the current handlers."""
    logger.disabled = False


@contextmanager
def traced_operation(name: str, **metadata: Any) -> Iterator[None]:
    """
    Context manager for tracing a specific operation.

    Args:
        name: Name of the operation to trace.
        **metadata: Extra values logged with the start message.

    Example:
        >>> with traced_operation("compile_format", fields=3):
        ...     schema = compile_format(fields)
    """
    started = time.perf_counter()
    logger.debug(f"[{name}] start {metadata}" if metadata else f"[{name}] start")
    try:
        yield
    except Exception:
        duration_ms = (time.perf_counter() - started) * 1000
        logger.debug(
            f"[{name}] failed after {duration_ms:.2f}ms",
            extra={"operation": name, "duration_ms": duration_ms},
        )
        raise
    duration_ms = (time.perf_counter() - started) * 1000
    logger.debug(
        f"[{name}] end {duration_ms:.2f}ms",
        extra={"operation": name, "duration_ms": duration_ms},
    )


def trace_operation(name: str):
    """Decorator to trace a compile/hydrate/encode operation."""

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            with traced_operation(name):
                return func(*args, **kwargs)

        return wrapper

    return decorator
