"""Shared httpx client for TMDB.

One client per process: a recommendation run issues many small requests
(one per seed, per popularity page and per detail refresh) and they all
reuse the same connection pool.
"""

import httpx

from cinepick import __version__
from cinepick.constants import HTTPX_TIMEOUT
from cinepick.utils.logging import get_logger

logger = get_logger(__name__)

_POOL_LIMITS = httpx.Limits(
    max_connections=20,
    max_keepalive_connections=10,
    keepalive_expiry=30,
)

_tmdb_client: httpx.AsyncClient | None = None


async def _log_response(response: httpx.Response) -> None:
    request = response.request
    logger.debug(f"{request.method} {request.url.path} -> {response.status_code}")


def get_tmdb_client() -> httpx.AsyncClient:
    """Get the process-wide client, creating it on first use."""
    global _tmdb_client
    if _tmdb_client is None:
        _tmdb_client = httpx.AsyncClient(
            timeout=HTTPX_TIMEOUT,
            limits=_POOL_LIMITS,
            headers={"User-Agent": f"cinepick/{__version__}"},
            event_hooks={"response": [_log_response]},
        )
    return _tmdb_client


async def close_all_clients() -> None:
    """Close the shared client. Safe to call when it was never created."""
    global _tmdb_client
    if _tmdb_client is not None:
        await _tmdb_client.aclose()
        _tmdb_client = None
