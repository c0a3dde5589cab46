"""
Tests for structured JSON logging configuration.

This module tests:
- JSONFormatter (JSON log output)
- setup_logging() (logging configuration)
- get_logger() (logger factory)
- log_with_context() (context fields)

Tests follow AAA (Arrange, Act, Assert) pattern.
"""

import io
import json
import logging

import pytest

from comic_library.core.logging_config import (
    JSONFormatter,
    get_logger,
    log_with_context,
    setup_logging,
)


@pytest.fixture
def json_stream():
    """
    Logger writing JSON lines to an in-memory stream.

    Yields:
        (logger, stream) tuple
    """
    logger = logging.getLogger("test_comic_library_json")
    logger.setLevel(logging.DEBUG)
    logger.handlers = []
    logger.propagate = False

    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JSONFormatter())
    logger.addHandler(handler)

    yield logger, stream

    logger.handlers = []


@pytest.fixture
def restore_root_logger():
    """Put the root logger's handlers and level back after the test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers = handlers
    root.setLevel(level)


class TestJSONFormatter:
    """Tests for JSON log formatter."""

    def test_basic_message(self, json_stream):
        # Arrange
        logger, stream = json_stream

        # Act
        logger.info("Comic book added")

        # Assert
        log_data = json.loads(stream.getvalue().strip())
        assert log_data["level"] == "INFO"
        assert log_data["message"] == "Comic book added"
        assert log_data["logger"] == "test_comic_library_json"
        assert "timestamp" in log_data

    def test_extra_fields_included(self, json_stream):
        # Arrange
        logger, stream = json_stream

        # Act
        logger.info("Comic book deleted", extra={"comic_book_id": 5, "rowcount": 0})

        # Assert
        log_data = json.loads(stream.getvalue().strip())
        assert log_data["comic_book_id"] == 5
        assert log_data["rowcount"] == 0

    def test_exception_included(self, json_stream):
        # Arrange
        logger, stream = json_stream

        # Act
        try:
            raise RuntimeError("constraint failed")
        except RuntimeError:
            logger.error("Comic book write failed", exc_info=True)

        # Assert
        log_data = json.loads(stream.getvalue().strip())
        assert log_data["level"] == "ERROR"
        assert "RuntimeError: constraint failed" in log_data["exception"]

    def test_non_serializable_extra_stringified(self, json_stream):
        logger, stream = json_stream

        logger.debug("Statement", extra={"parameters": object()})

        log_data = json.loads(stream.getvalue().strip())
        assert log_data["parameters"].startswith("<object object")


class TestLogWithContext:
    """Tests for log_with_context()."""

    def test_context_fields(self, json_stream):
        # Arrange
        logger, stream = json_stream

        # Act
        log_with_context(
            logger,
            "info",
            "Comic book updated",
            operation="update_comic_book",
            comic_book_id=7,
            intent="overwrite",
        )

        # Assert
        log_data = json.loads(stream.getvalue().strip())
        assert log_data["operation"] == "update_comic_book"
        assert log_data["comic_book_id"] == 7
        assert log_data["intent"] == "overwrite"
        assert "entity" not in log_data

    def test_level_respected(self, json_stream):
        logger, stream = json_stream
        logger.setLevel(logging.INFO)

        log_with_context(logger, "debug", "Tracking entity", entity="Series")

        assert stream.getvalue() == ""


class TestSetupLogging:
    """Tests for setup_logging() and get_logger()."""

    def test_json_handler_installed(self, restore_root_logger):
        # Act
        setup_logging(level="WARNING", json_format=True)

        # Assert
        root = restore_root_logger
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)

    def test_plain_text_handler(self, restore_root_logger):
        setup_logging(level="DEBUG", json_format=False)

        root = restore_root_logger
        assert root.level == logging.DEBUG
        assert not isinstance(root.handlers[0].formatter, JSONFormatter)

    def test_sqlalchemy_engine_quieted(self, restore_root_logger):
        setup_logging(level="DEBUG")

        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

    def test_get_logger_returns_named_logger(self):
        assert get_logger("comic_library.test").name == "comic_library.test"
