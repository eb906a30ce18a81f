"""
Logging helpers for ClawPress.

All plugin logging goes through one ``clawpress`` logger wrapped in
ContextAwareLogger, which renders the ``extra`` mapping into the message as
pipe-delimited ``key=value`` pairs so the context survives whatever formatter
the host installs. The first ``get_logger`` call attaches a stdout handler
configured from ``AppConfig.logging``; ``reset_logging`` detaches it again.
"""

import logging
import sys
from typing import Optional

from ..config import get_config

LOGGER_NAME = "clawpress"

# Attributes LogRecord already owns; extra keys with these names stay in the
# rendered message only.
_RESERVED = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}

_logger: Optional["ContextAwareLogger"] = None


class ContextAwareLogger:
    """Wraps a stdlib logger and renders ``extra`` into the message."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def _log(self, level: int, msg: str, extra: Optional[dict] = None, **kwargs) -> None:
        if not self.logger.isEnabledFor(level):
            return
        if extra:
            msg = " | ".join([msg] + [f"{k}={v}" for k, v in extra.items()])
            extra = {k: v for k, v in extra.items() if k not in _RESERVED}
        self.logger.log(level, msg, extra=extra, **kwargs)

    def debug(self, msg, **kwargs):
        self._log(logging.DEBUG, msg, **kwargs)

    def info(self, msg, **kwargs):
        self._log(logging.INFO, msg, **kwargs)

    def warning(self, msg, **kwargs):
        self._log(logging.WARNING, msg, **kwargs)

    def error(self, msg, **kwargs):
        self._log(logging.ERROR, msg, **kwargs)

    def exception(self, msg, **kwargs):
        kwargs.setdefault("exc_info", True)
        self._log(logging.ERROR, msg, **kwargs)


class UserContextFilter(logging.Filter):
    """Stamps the acting user and the REST flag onto records logged mid-request."""

    def filter(self, record):
        # Lazy import, request_context imports exceptions which log through us
        from ..context.request_context import RequestContext

        user_id = RequestContext.get_current_user_id()
        if user_id:
            record.user_id = user_id
            record.rest_request = RequestContext.is_rest_request()
        return True


def _build_handler() -> logging.Handler:
    settings = get_config().logging
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(settings.format))
    handler.addFilter(UserContextFilter())
    handler.set_name(LOGGER_NAME)
    return handler


def get_logger() -> ContextAwareLogger:
    """Return the plugin logger, attaching its handler on first use."""
    global _logger
    if _logger is None:
        logger = logging.getLogger(LOGGER_NAME)
        logger.setLevel(get_config().logging.level)
        if not any(h.get_name() == LOGGER_NAME for h in logger.handlers):
            logger.addHandler(_build_handler())
        _logger = ContextAwareLogger(logger)
    return _logger


def reset_logging() -> None:
    """Detach the plugin handler so the next get_logger rereads the config."""
    global _logger
    logger = logging.getLogger(LOGGER_NAME)
    for handler in [h for h in logger.handlers if h.get_name() == LOGGER_NAME]:
        logger.removeHandler(handler)
        handler.close()
    _logger = None
