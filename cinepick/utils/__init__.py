"""Utility modules for Cinepick."""

from cinepick.utils.cache import cache, cached
from cinepick.utils.http_client import close_all_clients, get_tmdb_client
from cinepick.utils.logging import get_logger, LogContext, setup_logging
from cinepick.utils.retry import retry_async, RetryConfig

__all__ = [
    # Caching
    "cache",
    "cached",
    # HTTP
    "close_all_clients",
    "get_tmdb_client",
    # Logging
    "get_logger",
    "LogContext",
    "setup_logging",
    # Retry
    "retry_async",
    "RetryConfig",
]
