"""
Structured JSON logging configuration.

This module sets up library-wide JSON logging with:
- Consistent field names across all logs
- Repository operation and comic book tracking
- Persistence intent tracking for unit-of-work activity
- SQL statement tracing (statement, duration, row count)

Logs are output to stdout in JSON format for easy parsing by
log aggregation systems.
"""

import json
import logging
import sys
from datetime import datetime
from typing import Any, Dict, Optional


# Attributes every LogRecord carries; anything else came in via extra={...}
_RESERVED_ATTRS = frozenset([
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "message", "pathname", "process", "processName", "relativeCreated",
    "thread", "threadName", "exc_info", "exc_text", "stack_info",
    "taskName",
])


class JSONFormatter(logging.Formatter):
    """
    Custom JSON formatter for structured logging.

    Outputs log records as single-line JSON objects with consistent fields:
    - timestamp: ISO 8601 format with microseconds
    - level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - message: Log message
    - logger: Logger name (module path)
    - operation: Repository operation name (if available)
    - comic_book_id: Comic book being written (if available)
    - entity: Entity class name (if available)
    - intent: Persistence intent (if available)
    - statement: Executed SQL statement (if available)
    - duration_ms: Statement duration in milliseconds (if available)
    - rowcount: Rows affected by a statement (if available)
    - exception: Exception details (if exception occurred)

    Example output:
        {"timestamp": "2025-11-24T10:30:00.123456", "level": "INFO",
         "message": "Comic book added", "logger": "comic_library.repositories.comic_book",
         "operation": "add_comic_book", "comic_book_id": 7}
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as JSON string.

        Args:
            record: LogRecord to format

        Returns:
            JSON string representation of log record
        """
        log_data: Dict[str, Any] = {
            "timestamp": datetime.utcnow().isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if record.stack_info:
            log_data["stack_info"] = self.formatStack(record.stack_info)

        # Fields passed via logger.info("msg", extra={...})
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key in log_data:
                continue
            if value is not None:
                log_data[key] = value

        return json.dumps(log_data, default=str)


def setup_logging(
    level: str = "INFO",
    json_format: bool = True
) -> None:
    """
    Configure library logging.

    Sets up:
    - Root logger with specified level
    - JSON formatter (if json_format=True)
    - StreamHandler to stdout
    - Removes default handlers

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON formatter (True) or simple formatter (False)

    Example:
        setup_logging(level=settings.log_level, json_format=settings.log_json)

    Note:
        Call this once at startup, before any logging occurs.
    """
    root_logger = logging.getLogger()

    log_level = getattr(logging, level.upper(), logging.INFO)
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)

    if json_format:
        formatter = JSONFormatter()
    else:
        # Simple format for development/debugging
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # SQLAlchemy's own echo output duplicates the comic_library.sql trace
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get logger instance with given name.

    Args:
        name: Logger name (usually __name__ of the module)

    Returns:
        Logger instance

    Example:
        logger = get_logger(__name__)
        logger.info("Comic book added", extra={"comic_book_id": 7})
    """
    return logging.getLogger(name)


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    operation: Optional[str] = None,
    comic_book_id: Optional[int] = None,
    entity: Optional[str] = None,
    intent: Optional[str] = None,
    **extra_fields: Any
) -> None:
    """
    Log message with structured context fields.

    Args:
        logger: Logger instance
        level: Log level (debug, info, warning, error, critical)
        message: Log message
        operation: Repository operation name
        comic_book_id: Comic book identifier
        entity: Entity class name
        intent: Persistence intent name
        **extra_fields: Additional fields to include

    Example:
        log_with_context(
            logger,
            "info",
            "Comic book deleted",
            operation="delete_comic_book",
            comic_book_id=5,
            rowcount=1
        )
    """
    extra: Dict[str, Any] = {}

    if operation is not None:
        extra["operation"] = operation
    if comic_book_id is not None:
        extra["comic_book_id"] = comic_book_id
    if entity is not None:
        extra["entity"] = entity
    if intent is not None:
        extra["intent"] = intent

    extra.update(extra_fields)

    log_method = getattr(logger, level.lower())
    log_method(message, extra=extra)
