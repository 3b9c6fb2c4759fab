"""
Logging configuration for the design extraction scheduler.

Console output goes through Rich; an optional file handler writes one JSON
object per record. Run-scoped fields (run id, batch number) are attached to
every record through a shared context filter.
"""

import functools
import json
import logging
import time
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler

from design_extraction.config import get_settings

# Attributes every LogRecord carries; anything else came in through `extra`
# or the context filter.
_RESERVED_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}


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

        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_ATTRS:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


# Per-task context; asyncio tasks start with a copy of their creator's
_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})


class ContextFilter(logging.Filter):
    """Add context information to log records."""

    @property
    def context(self) -> dict[str, Any]:
        return dict(_log_context.get())

    def filter(self, record: logging.LogRecord) -> bool:
        """Add context to the log record."""
        for key, value in _log_context.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


# Shared by every handler installed through setup_logging
context_filter = ContextFilter()


def setup_logging(
    log_level: Optional[str] = None,
    log_file_path: Optional[Path] = None,
    use_structured_logging: Optional[bool] = None,
) -> None:
    """
    Configure logging for the application.

    Args:
        log_level: Logging level (defaults to settings)
        log_file_path: Path to log file (defaults to settings)
        use_structured_logging: Use JSON structured logging for files
    """
    settings = get_settings()

    log_level = (log_level or settings.log_level).upper()
    log_file_path = log_file_path or settings.get_log_file_path()
    if use_structured_logging is None:
        use_structured_logging = settings.structured_logging

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
        tracebacks_show_locals=settings.dev_mode,
    )
    console_handler.setLevel(log_level)
    console_handler.addFilter(context_filter)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    if log_file_path:
        file_handler = logging.FileHandler(log_file_path, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.addFilter(context_filter)

        if use_structured_logging:
            file_handler.setFormatter(StructuredFormatter())
        else:
            file_handler.setFormatter(
                logging.Formatter(
                    "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                    datefmt="%Y-%m-%d %H:%M:%S",
                )
            )

        root_logger.addHandler(file_handler)

    logging.getLogger("asyncio").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.debug(
        "Logging configured",
        extra={
            "log_level": log_level,
            "log_file": str(log_file_path) if log_file_path else None,
            "structured_logging": use_structured_logging,
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
        self._token: Optional[Token] = None

    def __enter__(self) -> "LogContext":
        self._token = _log_context.set({**_log_context.get(), **self.context})
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._token is not None:
            _log_context.reset(self._token)
            self._token = None


def log_performance(func):
    """
    Decorator to log how long a function took.

    Usage:
        @log_performance
        async def optimize_extraction(self, nodes, extraction_fn):
            ...
    """

    @functools.wraps(func)
    async def async_wrapper(*args, **kwargs):
        logger = get_logger(func.__module__)
        start_time = time.perf_counter()

        try:
            with LogContext(function=func.__name__):
                logger.debug(f"Starting {func.__name__}")
                result = await func(*args, **kwargs)
                logger.debug(
                    f"Completed {func.__name__}",
                    extra={"duration_seconds": time.perf_counter() - start_time},
                )
                return result
        except Exception as e:
            logger.error(
                f"Failed {func.__name__}",
                extra={"duration_seconds": time.perf_counter() - start_time, "error": str(e)},
            )
            raise

    return async_wrapper
