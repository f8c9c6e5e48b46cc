"""
Logging configuration for the trout stocking loader.

This module sets up rich console logging and optional JSON file logging,
including per-run context tracking and timing of the pipeline stages.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler

_RESERVED_ATTRS = frozenset(
    [
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "taskName",
        "exc_info",
        "exc_text",
        "stack_info",
    ]
)


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Add extra fields if present
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ContextFilter(logging.Filter):
    """Add context information to log records."""

    def __init__(self) -> None:
        super().__init__()
        self.context: dict[str, Any] = {}

    def set_context(self, **kwargs: Any) -> None:
        """Set context values."""
        self.context.update(kwargs)

    def filter(self, record: logging.LogRecord) -> bool:
        """Add context to the log record."""
        for key, value in self.context.items():
            setattr(record, key, value)
        return True


# Global context filter instance
context_filter = ContextFilter()


def setup_logging(
    log_level: Optional[str] = None,
    log_file_path: Optional[Path] = None,
    dev_mode: bool = False,
) -> None:
    """
    Configure logging for the application.

    Args:
        log_level: Logging level name, INFO when not given
        log_file_path: Optional path for a JSON lines file log
        dev_mode: Show locals in rich tracebacks
    """
    log_level = (log_level or "INFO").upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    # Console handler on stderr so stdout carries only the run result
    console_handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
        tracebacks_show_locals=dev_mode,
    )
    console_handler.setLevel(log_level)
    console_handler.addFilter(context_filter)
    console_handler.setFormatter(logging.Formatter("%(message)s", datefmt="%Y-%m-%d %H:%M:%S"))
    root_logger.addHandler(console_handler)

    if log_file_path:
        log_file_path = Path(log_file_path)
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file_path, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.addFilter(context_filter)
        file_handler.setFormatter(StructuredFormatter())

        root_logger.addHandler(file_handler)

    # Configure third-party loggers
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("asyncpg").setLevel(logging.WARNING)
    logging.getLogger("fitz").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.debug(
        "Logging configured",
        extra={
            "log_level": log_level,
            "log_file": str(log_file_path) if log_file_path else None,
        },
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the given name.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


class LogContext:
    """Context manager for temporary logging context."""

    def __init__(self, **kwargs: Any) -> None:
        self.context = kwargs
        self.old_context: dict[str, Any] = {}

    def __enter__(self) -> "LogContext":
        for key in self.context:
            if key in context_filter.context:
                self.old_context[key] = context_filter.context[key]

        context_filter.set_context(**self.context)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        for key in self.context:
            context_filter.context.pop(key, None)

        if self.old_context:
            context_filter.set_context(**self.old_context)


def log_performance(func):
    """
    Decorator to log function performance.

    Usage:
        @log_performance
        async def download(self, url: str) -> bytes:
            ...
    """
    import asyncio
    import functools
    import time

    @functools.wraps(func)
    async def async_wrapper(*args, **kwargs):
        logger = get_logger(func.__module__)
        start_time = time.perf_counter()

        try:
            logger.debug(f"Starting {func.__name__}")
            result = await func(*args, **kwargs)
            logger.debug(
                f"Completed {func.__name__}",
                extra={"duration_seconds": time.perf_counter() - start_time},
            )
            return result
        except Exception as e:
            logger.debug(
                f"Failed {func.__name__}",
                extra={"duration_seconds": time.perf_counter() - start_time, "error": str(e)},
            )
            raise

    @functools.wraps(func)
    def sync_wrapper(*args, **kwargs):
        logger = get_logger(func.__module__)
        start_time = time.perf_counter()

        try:
            logger.debug(f"Starting {func.__name__}")
            result = func(*args, **kwargs)
            logger.debug(
                f"Completed {func.__name__}",
                extra={"duration_seconds": time.perf_counter() - start_time},
            )
            return result
        except Exception as e:
            logger.debug(
                f"Failed {func.__name__}",
                extra={"duration_seconds": time.perf_counter() - start_time, "error": str(e)},
            )
            raise

    if asyncio.iscoroutinefunction(func):
        return async_wrapper
    return sync_wrapper
