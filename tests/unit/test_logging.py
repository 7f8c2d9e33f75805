"""Unit tests for logging configuration."""

import io
import json
import logging
from collections.abc import Generator

import pytest
import structlog

from pushin_pay.logging import LIBRARY_LOGGER, configure_logging


@pytest.fixture(autouse=True)
def restore_logging() -> Generator[None, None, None]:
    """Put root and library loggers back the way each test found them."""
    root_logger = logging.getLogger()
    library_logger = logging.getLogger(LIBRARY_LOGGER)
    saved = (
        list(root_logger.handlers),
        root_logger.level,
        list(library_logger.handlers),
        library_logger.level,
        library_logger.propagate,
    )
    yield
    root_logger.handlers[:] = saved[0]
    root_logger.setLevel(saved[1])
    library_logger.handlers[:] = saved[2]
    library_logger.setLevel(saved[3])
    library_logger.propagate = saved[4]
    structlog.reset_defaults()


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_leaves_host_root_handlers_alone(self) -> None:
        """By default only the library logger gets a handler."""
        root_logger = logging.getLogger()
        host_handler = logging.NullHandler()
        root_logger.addHandler(host_handler)
        root_level = root_logger.level

        handler = configure_logging(level="DEBUG", log_format="console")

        library_logger = logging.getLogger(LIBRARY_LOGGER)
        assert host_handler in root_logger.handlers
        assert handler not in root_logger.handlers
        assert root_logger.level == root_level
        assert library_logger.handlers == [handler]
        assert library_logger.level == logging.DEBUG
        assert library_logger.propagate is False
        assert isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter)

    def test_take_over_root(self) -> None:
        """Scripts can opt in to a root handler and quiet transport loggers."""
        root_logger = logging.getLogger()
        host_handler = logging.NullHandler()
        root_logger.addHandler(host_handler)

        handler = configure_logging(level="WARNING", take_over_root=True)

        assert handler in root_logger.handlers
        assert host_handler in root_logger.handlers
        assert root_logger.level == logging.WARNING
        assert logging.getLogger(LIBRARY_LOGGER).propagate is True
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.WARNING

    def test_reconfiguring_replaces_only_own_handler(self) -> None:
        """Repeated calls swap the installed handler instead of stacking."""
        first = configure_logging()
        second = configure_logging()

        library_logger = logging.getLogger(LIBRARY_LOGGER)
        assert first not in library_logger.handlers
        assert library_logger.handlers == [second]

    def test_switching_to_root_removes_library_handler(self) -> None:
        """Moving to the root logger does not leave a second handler behind."""
        first = configure_logging()
        second = configure_logging(take_over_root=True)

        assert first not in logging.getLogger(LIBRARY_LOGGER).handlers
        assert second in logging.getLogger().handlers

    def test_library_events_render_as_json(self) -> None:
        """Events from client modules come out as JSON lines on the given stream."""
        stream = io.StringIO()
        configure_logging(level="INFO", log_format="json", stream=stream)

        structlog.get_logger(f"{LIBRARY_LOGGER}.application.services").info("charge_created", charge_id="c1")

        event = json.loads(stream.getvalue())
        assert event["event"] == "charge_created"
        assert event["charge_id"] == "c1"
        assert event["level"] == "info"
        assert event["logger"] == "pushin_pay.application.services"
        assert "timestamp" in event

    def test_level_filters_library_events(self) -> None:
        """Events below the configured level are dropped."""
        stream = io.StringIO()
        configure_logging(level="WARNING", stream=stream)

        structlog.get_logger(f"{LIBRARY_LOGGER}.client").info("pushin_pay_client_created")

        assert stream.getvalue() == ""
