"""Tests for the logging helpers."""

import logging
import os
from unittest.mock import patch

from clawpress.config import reset_config
from clawpress.context.request_context import request_context
from clawpress.utils.logger import (
    LOGGER_NAME,
    ContextAwareLogger,
    UserContextFilter,
    get_logger,
    reset_logging,
)


class TestContextAwareLogger:
    def test_extra_is_appended_to_message(self, caplog):
        logger = ContextAwareLogger(logging.getLogger("clawpress.test"))

        with caplog.at_level(logging.INFO, logger="clawpress.test"):
            logger.info("Content attributed", extra={"post_id": 5, "user_id": 1})

        record = caplog.records[-1]
        assert record.getMessage() == "Content attributed | post_id=5 | user_id=1"
        assert record.post_id == 5

    def test_plain_message_without_extra(self, caplog):
        logger = ContextAwareLogger(logging.getLogger("clawpress.test"))

        with caplog.at_level(logging.WARNING, logger="clawpress.test"):
            logger.warning("Just a message")

        assert caplog.records[-1].getMessage() == "Just a message"

    def test_reserved_keys_stay_in_message_only(self, caplog):
        logger = ContextAwareLogger(logging.getLogger("clawpress.test"))

        with caplog.at_level(logging.INFO, logger="clawpress.test"):
            logger.info("Application password created", extra={"name": "OpenClaw", "user_id": 2})

        record = caplog.records[-1]
        assert record.getMessage() == "Application password created | name=OpenClaw | user_id=2"
        assert record.name == "clawpress.test"

    def test_disabled_levels_are_skipped(self, caplog):
        logger = ContextAwareLogger(logging.getLogger("clawpress.test"))

        with caplog.at_level(logging.WARNING, logger="clawpress.test"):
            logger.debug("noise", extra={"post_id": 1})

        assert caplog.records == []


class TestUserContextFilter:
    def test_stamps_current_user(self):
        record = logging.LogRecord("clawpress", logging.INFO, __file__, 1, "msg", None, None)

        with request_context(user_id=42, rest_request=True):
            assert UserContextFilter().filter(record) is True

        assert record.user_id == 42
        assert record.rest_request is True

    def test_anonymous_request_untouched(self):
        record = logging.LogRecord("clawpress", logging.INFO, __file__, 1, "msg", None, None)

        assert UserContextFilter().filter(record) is True
        assert not hasattr(record, "user_id")


class TestGetLogger:
    def test_is_cached_and_attaches_one_handler(self):
        first = get_logger()
        second = get_logger()

        assert first is second
        handlers = [h for h in first.logger.handlers if h.get_name() == LOGGER_NAME]
        assert len(handlers) == 1
        assert isinstance(handlers[0].filters[0], UserContextFilter)

    def test_level_comes_from_config(self):
        with patch.dict(os.environ, {"LOG_LEVEL": "debug"}):
            reset_config()
            reset_logging()
            logger = get_logger()

        assert logger.logger.name == "clawpress"
        assert logger.logger.level == logging.DEBUG

    def test_reset_detaches_handler(self):
        logger = get_logger()
        reset_logging()

        assert not [h for h in logger.logger.handlers if h.get_name() == LOGGER_NAME]
        assert get_logger() is not logger
