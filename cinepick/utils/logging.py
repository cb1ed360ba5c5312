"""Logging setup for Cinepick.

The terminal belongs to the interactive menus, so log records go to stderr
and default to INFO (WARNING in production). ``--log-level DEBUG`` shows
per-request and per-candidate detail.
"""

import logging
import sys
from collections.abc import MutableMapping
from typing import Any, Literal

from cinepick.config import get_settings

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Libraries that log every request or statement at INFO
_QUIET_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "aiosqlite", "redis")


def setup_logging(level: LogLevel | None = None) -> None:
    """Configure the root logger.

    Args:
        level: Override log level (default: LOG_LEVEL setting, else WARNING
            for production and INFO otherwise)
    """
    settings = get_settings()
    if level is None:
        level = settings.log_level or ("WARNING" if settings.is_production else "INFO")

    logging.basicConfig(
        level=getattr(logging, level),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class LogContext(logging.LoggerAdapter):
    """Logger that prefixes every message with ``[key=value]`` pairs.

    Example:
        log = LogContext(logger, user=3, kind="movie")
        log.info("12 recommendations")  # "[user=3] [kind=movie] 12 recommendations"
    """

    def __init__(self, logger: logging.Logger, **context: object) -> None:
        super().__init__(logger, context)
        self.prefix = " ".join(f"[{key}={value}]" for key, value in context.items())

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        return f"{self.prefix} {msg}", kwargs
