"""Unit tests for logging configuration."""

import logging

from cleanpatch.logging import HANDLER_NAME, get_logger, setup_logging


class TestSetupLogging:
    """Tests for setup_logging function."""

    def teardown_method(self):
        logger = logging.getLogger("cleanpatch")
        for handler in list(logger.handlers):
            if handler.get_name() == HANDLER_NAME:
                logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)
        logger.propagate = True

    def test_setup_logging_creates_handler(self):
        logger = setup_logging()

        assert logger.name == "cleanpatch"
        assert any(h.get_name() == HANDLER_NAME for h in logger.handlers)

    def test_setup_logging_twice_keeps_one_handler(self):
        setup_logging()
        logger = setup_logging()

        assert sum(1 for h in logger.handlers if h.get_name() == HANDLER_NAME) == 1

    def test_setup_logging_with_custom_level(self):
        logger = setup_logging(level=logging.DEBUG)

        assert logger.level == logging.DEBUG

    def test_logger_propagate_is_false(self):
        assert setup_logging().propagate is False

    def test_setup_logging_formatter(self):
        logger = setup_logging()

        assert all(h.formatter is not None for h in logger.handlers if h.get_name() == HANDLER_NAME)


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger_uses_provided_name(self):
        assert get_logger("cleanpatch.patch.matcher").name == "cleanpatch.patch.matcher"

    def test_get_logger_same_name_returns_same_logger(self):
        assert get_logger("shared.module") is get_logger("shared.module")
