"""
Logging utilities for the asset bucket sync.

Provides structured logging with entry/exit decorators, JSON formatting,
a per-run identifier and the name of the bucket currently being synced.

Features:
    - Structured JSON logging when LOG_FORMAT=json
    - Run ID tracking across all buckets of one sync run
    - Bucket context so every line emitted while syncing a bucket names it
    - Entry/exit decorators with timing
    - Colorized console output for development (coloredlogs)

Example usage:
    >>> from asset_buckets.utils.logging import get_logger, bucket_context
    >>>
    >>> logger = get_logger(__name__)
    >>> with bucket_context("textures"):
    ...     logger.info("Uploading asset bucket")
"""

import logging
import functools
import json
import os
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterator, Optional, TypeVar, cast

import coloredlogs

# Type variable for generic decorator typing
F = TypeVar("F", bound=Callable[..., Any])

# Context variables for run and bucket identification
_run_id: ContextVar[Optional[str]] = ContextVar("run_id", default=None)
_bucket_name: ContextVar[Optional[str]] = ContextVar("bucket_name", default=None)

# Global logging configuration
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Attributes every LogRecord carries; anything else came in through `extra`
_STANDARD_RECORD_ATTRS = frozenset(
    {
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
        "message",
        "asctime",
    }
)


# ============================================================================
# Run / Bucket Context
# ============================================================================

def get_run_id() -> str:
    """
    Get the current run ID, generating one on first use.

    Returns:
        Run ID shared by every log line of this sync run
    """
    run_id = _run_id.get()
    if run_id is None:
        run_id = uuid.uuid4().hex
        _run_id.set(run_id)
    return run_id


def set_run_id(run_id: str) -> None:
    """Set the run ID for the current context."""
    _run_id.set(run_id)


def clear_run_id() -> None:
    """Clear the run ID for the current context."""
    _run_id.set(None)


def get_bucket_name() -> Optional[str]:
    """Name of the bucket being synced, or None outside a bucket."""
    return _bucket_name.get()


@contextmanager
def bucket_context(name: str) -> Iterator[None]:
    """
    Tag every log record emitted inside the block with a bucket name.

    Args:
        name: Bucket name

    Example:
        >>> with bucket_context("root-bucket"):
        ...     logger.info("Fetching releases...")
    """
    token = _bucket_name.set(name)
    try:
        yield
    finally:
        _bucket_name.reset(token)


class ContextFilter(logging.Filter):
    """Copy run ID and bucket name onto every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = get_run_id()
        record.bucket = get_bucket_name() or "-"
        return True


# ============================================================================
# JSON Formatter
# ============================================================================

class JSONFormatter(logging.Formatter):
    """
    JSON log formatter for structured logging.

    Example output:
        {
            "timestamp": "2026-01-04T10:30:15.123456Z",
            "level": "INFO",
            "logger": "asset_buckets.uploader.uploader",
            "message": "photo.png uploaded successfully",
            "run_id": "4f0c...",
            "bucket": "textures",
            "extra": {"status": 201}
        }
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as JSON string.

        Args:
            record: Log record to format

        Returns:
            JSON-formatted log string
        """
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "run_id": getattr(record, "run_id", None) or get_run_id(),
            "bucket": getattr(record, "bucket", None) or get_bucket_name(),
        }

        log_data["source"] = {
            "file": record.pathname,
            "line": record.lineno,
            "function": record.funcName,
        }

        extra_fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_RECORD_ATTRS and key not in ("run_id", "bucket")
        }
        if extra_fields:
            log_data["extra"] = extra_fields

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(log_data, default=str)


def setup_logging(level: str = "INFO", enable_colors: bool = True) -> None:
    """
    Configure global logging settings for the application.

    Sets up structured JSON logging when LOG_FORMAT=json, colorized text via
    coloredlogs otherwise. Output goes to stderr.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        enable_colors: Whether to enable colorized console output (default: True)

    Example:
        >>> setup_logging(level="DEBUG", enable_colors=False)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    json_output = os.getenv("LOG_FORMAT", "text").lower() == "json"

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    if json_output:
        handler = logging.StreamHandler()
        handler.setLevel(log_level)
        handler.setFormatter(JSONFormatter())
        root_logger.addHandler(handler)
    elif enable_colors:
        coloredlogs.install(
            level=log_level,
            fmt=LOG_FORMAT,
            datefmt=LOG_DATE_FORMAT,
            logger=root_logger,
        )
    else:
        handler = logging.StreamHandler()
        handler.setLevel(log_level)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        root_logger.addHandler(handler)

    for handler in root_logger.handlers:
        handler.addFilter(ContextFilter())

    # urllib3 logs every connection at DEBUG; keep it out of verbose runs
    logging.getLogger("urllib3").setLevel(max(log_level, logging.INFO))


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the specified name.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)


def log_function_call(func: F) -> F:
    """
    Decorator that logs function entry and exit with parameters and return values.

    - Logs function entry with all parameter values
    - Logs function exit with return value and execution time
    - Logs exceptions with full traceback, then re-raises

    Args:
        func: Function to be decorated

    Returns:
        Wrapped function with logging

    Example:
        >>> @log_function_call
        ... def write_bucket_manifest(bucket, meta_dir):
        ...     ...
        >>> # 2026-01-04 10:30:15 - module - INFO - ENTER write_bucket_manifest(...)
        >>> # 2026-01-04 10:30:15 - module - INFO - EXIT write_bucket_manifest -> ... (0.00s)
    """
    logger = get_logger(func.__module__)

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        arg_names = func.__code__.co_varnames[: func.__code__.co_argcount]
        args_repr = [f"{name}={value!r}" for name, value in zip(arg_names, args)]
        kwargs_repr = [f"{key}={value!r}" for key, value in kwargs.items()]
        all_args = ", ".join(args_repr + kwargs_repr)

        logger.debug(
            f"ENTER {func.__name__}({all_args})",
            extra={"function": func.__name__, "event": "function_entry"},
        )

        start_time = datetime.now()

        try:
            result = func(*args, **kwargs)
        except Exception as error:
            execution_time = (datetime.now() - start_time).total_seconds()
            logger.error(
                f"ERROR {func.__name__} raised {type(error).__name__}: {error}",
                extra={
                    "function": func.__name__,
                    "duration_seconds": execution_time,
                    "event": "function_error",
                    "error_type": type(error).__name__,
                },
                exc_info=True,
            )
            raise

        execution_time = (datetime.now() - start_time).total_seconds()
        logger.debug(
            f"EXIT {func.__name__} -> {result!r} ({execution_time:.2f}s)",
            extra={
                "function": func.__name__,
                "duration_seconds": execution_time,
                "event": "function_exit",
            },
        )
        return result

    return cast(F, wrapper)
