"""TMDB API integration for movie and TV show metadata.

Every public method reports failure by returning None (or an empty
collection). Transport errors, non-200 statuses and undecodable bodies are
logged and never raised to the caller.
"""

import asyncio
from typing import Any

import httpx
from pydantic import ValidationError

from cinepick.config import Settings, get_settings
from cinepick.constants import SIMILAR_PAGE, TMDB_API_BASE_URL, TMDB_IMAGE_BASE_URL
from cinepick.exceptions import MissingCredentialsError
from cinepick.models.catalog import ItemKind
from cinepick.models.schemas import (
    CatalogItemData,
    CatalogPage,
    Episode,
    Genre,
    SeasonDetails,
    SeasonSummary,
)
from cinepick.services.metadata.fields import KIND_FIELDS
from cinepick.utils.cache import CACHE_TTL_DETAILS, cached
from cinepick.utils.http_client import get_tmdb_client
from cinepick.utils.logging import get_logger
from cinepick.utils.retry import DEFAULT_RETRY_CONFIG, RetryConfig, retry_async

logger = get_logger(__name__)

# Monetization types that count as "available to stream" in a region
STREAMING_OFFER_TYPES = ("flatrate", "free", "ads")

# Genre taxonomies, cached process-wide per kind after the first successful fetch
_genre_cache: dict[ItemKind, dict[int, str]] = {}


def _int_list(value: Any) -> list[int]:
    """Integer entries of a JSON list; anything else yields nothing."""
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, int) and not isinstance(v, bool)]


def _dicts(value: Any) -> list[dict[str, Any]]:
    """Object entries of a JSON list; anything else yields nothing."""
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, dict)]


def _text(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


def _int(value: Any) -> int | None:
    return value if isinstance(value, int) and not isinstance(value, bool) else None


def _number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def clear_genre_cache() -> None:
    """Forget cached genre taxonomies."""
    _genre_cache.clear()


def poster_url(path: str | None, size: str = "w342") -> str | None:
    """Full image URL for a TMDB poster path."""
    return f"{TMDB_IMAGE_BASE_URL}/{size}{path}" if path else None


class TMDBService:
    """Service for fetching movie and TV metadata from TMDB."""

    def __init__(
        self,
        read_access_token: str = "",
        api_key: str = "",
        language: str = "en-US",
        region: str = "US",
        client: httpx.AsyncClient | None = None,
        retry_config: RetryConfig = DEFAULT_RETRY_CONFIG,
    ) -> None:
        self.api_key = api_key
        self.language = language
        self.region = region
        self.retry_config = retry_config
        self._client = client
        self._genre_locks: dict[ItemKind, asyncio.Lock] = {}

        # Prefer the v4 read access token (Bearer); fall back to the v3 key
        # as a query parameter.
        if read_access_token:
            self.headers = {
                "Authorization": f"Bearer {read_access_token}",
                "Accept": "application/json",
            }
            self.use_api_key_param = False
        else:
            self.headers = {"Accept": "application/json"}
            self.use_api_key_param = True

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "TMDBService":
        """Build the service from configuration.

        Raises:
            MissingCredentialsError: neither a read access token nor a v3 key is set
        """
        settings = settings or get_settings()
        if not settings.has_tmdb_credentials:
            raise MissingCredentialsError()
        if not settings.tmdb_api_read_access_token:
            logger.warning(
                "Using TMDB_API_KEY as a query parameter; "
                "TMDB_API_READ_ACCESS_TOKEN is the preferred credential"
            )
        return cls(
            read_access_token=settings.tmdb_api_read_access_token,
            api_key=settings.tmdb_api_key,
            language=settings.tmdb_language,
            region=settings.streaming_region,
        )

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client or get_tmdb_client()

    def _add_api_key(self, params: dict) -> dict:
        """Add API key to params if using v3 key."""
        if self.use_api_key_param:
            params["api_key"] = self.api_key
        return params

    async def _get(self, endpoint: str, params: dict | None = None) -> dict[str, Any] | None:
        """GET a TMDB endpoint and decode the JSON body, or None on any failure."""
        params = self._add_api_key({"language": self.language, **(params or {})})
        try:
            response = await retry_async(
                self.client.get,
                f"{TMDB_API_BASE_URL}/{endpoint}",
                params=params,
                headers=self.headers,
                config=self.retry_config,
                operation_name=f"TMDB {endpoint}",
            )
        except httpx.HTTPError as e:
            logger.warning(f"TMDB network error for {endpoint}: {e!r}")
            return None

        if response is None:
            return None

        if response.status_code != 200:
            if response.status_code == 401:
                logger.error(
                    f"TMDB rejected credentials for {endpoint} (401); "
                    "check TMDB_API_READ_ACCESS_TOKEN / TMDB_API_KEY"
                )
            else:
                logger.warning(f"TMDB {endpoint} returned {response.status_code}")
            return None

        try:
            data = response.json()
        except ValueError:
            logger.warning(f"TMDB {endpoint} returned a body that is not JSON")
            return None

        if not isinstance(data, dict):
            logger.warning(f"TMDB {endpoint} returned unexpected payload type {type(data).__name__}")
            return None
        return data

    # ------------------------------------------------------------------
    # Genres
    # ------------------------------------------------------------------

    async def get_genre_list(self, kind: ItemKind) -> list[Genre]:
        """Get the official genres for a kind."""
        names = await self._genre_names(kind)
        return [Genre(id=genre_id, name=name) for genre_id, name in names.items()]

    async def resolve_genre_names(self, ids: list[int] | set[int], kind: ItemKind) -> dict[int, str]:
        """Map genre ids to names. Unknown ids are left out."""
        if not ids:
            return {}
        names = await self._genre_names(kind)
        return {genre_id: names[genre_id] for genre_id in ids if genre_id in names}

    async def _genre_names(self, kind: ItemKind) -> dict[int, str]:
        if kind in _genre_cache:
            return _genre_cache[kind]

        lock = self._genre_locks.setdefault(kind, asyncio.Lock())
        async with lock:
            if kind in _genre_cache:
                return _genre_cache[kind]

            data = await self._get(f"genre/{KIND_FIELDS[kind].path}/list")
            if not data or not isinstance(data.get("genres"), list):
                # Not cached: the next call tries again
                return {}

            names = {
                g["id"]: g["name"]
                for g in data["genres"]
                if isinstance(g, dict) and isinstance(g.get("id"), int) and g.get("name")
            }
            _genre_cache[kind] = names
            logger.debug(f"Cached {len(names)} {kind.value} genres")
            return names

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    async def fetch_similar_items(
        self,
        remote_id: int,
        kind: ItemKind,
        page: int = SIMILAR_PAGE,
    ) -> CatalogPage | None:
        """Get TMDB's recommendations for an item."""
        data = await self._get(
            f"{KIND_FIELDS[kind].path}/{remote_id}/recommendations", {"page": str(page)}
        )
        return await self._parse_page(data, kind) if data is not None else None

    async def fetch_popular(self, kind: ItemKind, page: int = 1) -> CatalogPage | None:
        """Get a page (1-based) of the popularity feed."""
        data = await self._get(f"{KIND_FIELDS[kind].path}/popular", {"page": str(page)})
        return await self._parse_page(data, kind) if data is not None else None

    async def search(self, query: str, kind: ItemKind, page: int = 1) -> CatalogPage | None:
        """Search movies or TV shows by title."""
        query = query.strip()
        if not query:
            return None
        data = await self._get(
            f"search/{KIND_FIELDS[kind].path}",
            {"query": query, "page": str(page), "include_adult": "false"},
        )
        return await self._parse_page(data, kind) if data is not None else None

    async def _parse_page(self, data: dict[str, Any], kind: ItemKind) -> CatalogPage:
        raw_items = _dicts(data.get("results"))
        genre_ids = {gid for raw in raw_items for gid in _int_list(raw.get("genre_ids"))}
        genre_names = await self.resolve_genre_names(genre_ids, kind)

        items = []
        for raw in raw_items:
            item = self._parse_list_entry(raw, kind, genre_names)
            if item is not None:
                items.append(item)

        return CatalogPage(
            page=_int(data.get("page")) or 1,
            total_pages=_int(data.get("total_pages")) or 1,
            total_results=_int(data.get("total_results")) or len(items),
            items=items,
        )

    def _parse_list_entry(
        self,
        raw: dict[str, Any],
        kind: ItemKind,
        genre_names: dict[int, str],
    ) -> CatalogItemData | None:
        fields = KIND_FIELDS[kind]
        try:
            return CatalogItemData(
                remote_id=raw["id"],
                kind=kind,
                title=fields.title_of(raw),
                year=fields.year_of(raw),
                genres=[genre_names[g] for g in _int_list(raw.get("genre_ids")) if g in genre_names],
                language=_text(raw.get("original_language")),
                vote_average=_number(raw.get("vote_average")),
                vote_count=_int(raw.get("vote_count")),
                overview=_text(raw.get("overview")),
                poster_path=_text(raw.get("poster_path")),
                popularity=_number(raw.get("popularity")),
            )
        except (KeyError, TypeError, ValidationError) as e:
            logger.debug(f"Dropping malformed {kind.value} entry {raw.get('id')!r}: {e}")
            return None

    # ------------------------------------------------------------------
    # Details
    # ------------------------------------------------------------------

    async def fetch_item_details(
        self,
        remote_id: int,
        kind: ItemKind,
        fresh: bool = False,
    ) -> CatalogItemData | None:
        """Get full details, including runtime and streaming providers in the region.

        With ``fresh`` the response cache is bypassed, so rating and provider
        data reflect TMDB right now.
        """
        if fresh:
            raw = await self._fetch_details_json(remote_id, kind.value, language=self.language)
        else:
            raw = await self._cached_details_json(remote_id, kind.value, language=self.language)
        if not isinstance(raw, dict):
            return None

        fields = KIND_FIELDS[kind]
        try:
            return CatalogItemData(
                remote_id=raw["id"],
                kind=kind,
                title=fields.title_of(raw),
                year=fields.year_of(raw),
                genres=[g["name"] for g in _dicts(raw.get("genres")) if _text(g.get("name"))],
                language=_text(raw.get("original_language")),
                vote_average=_number(raw.get("vote_average")),
                vote_count=_int(raw.get("vote_count")),
                duration_minutes=fields.duration_of(raw),
                providers=self._extract_providers(raw),
                overview=_text(raw.get("overview")),
                tagline=_text(raw.get("tagline")),
                poster_path=_text(raw.get("poster_path")),
                popularity=_number(raw.get("popularity")),
                number_of_seasons=_int(raw.get("number_of_seasons")) if kind == ItemKind.TV else None,
                seasons=self._parse_seasons(raw) if kind == ItemKind.TV else [],
            )
        except (KeyError, TypeError, ValidationError) as e:
            logger.warning(f"Malformed TMDB details for {kind.value}/{remote_id}: {e}")
            return None

    @cached("tmdb:details", ttl=CACHE_TTL_DETAILS)
    async def _cached_details_json(
        self,
        remote_id: int,
        kind: str,
        language: str = "en-US",
    ) -> dict[str, Any] | None:
        return await self._fetch_details_json(remote_id, kind, language=language)

    async def _fetch_details_json(
        self,
        remote_id: int,
        kind: str,
        language: str = "en-US",
    ) -> dict[str, Any] | None:
        """Fetch raw details with watch providers appended."""
        return await self._get(
            f"{kind}/{remote_id}",
            {"language": language, "append_to_response": "watch/providers"},
        )

    def _extract_providers(self, raw: dict[str, Any]) -> list[str] | None:
        """Streaming provider names for the configured region.

        Returns None when the payload carries no provider block at all (unknown
        availability) and an empty list when the region has no streaming offer.
        """
        block = raw.get("watch/providers")
        if not isinstance(block, dict) or not isinstance(block.get("results"), dict):
            return None

        region = block["results"].get(self.region)
        if not isinstance(region, dict):
            return []

        names: list[str] = []
        for offer_type in STREAMING_OFFER_TYPES:
            for provider in _dicts(region.get(offer_type)):
                name = _text(provider.get("provider_name"))
                if name and name not in names:
                    names.append(name)
        return names

    @staticmethod
    def _parse_seasons(raw: dict[str, Any]) -> list[SeasonSummary]:
        """Regular seasons in listing order; specials (season 0) are left out."""
        seasons = []
        for entry in _dicts(raw.get("seasons")):
            number = _int(entry.get("season_number"))
            if number is None or number <= 0:
                continue
            seasons.append(
                SeasonSummary(
                    season_number=number,
                    name=_text(entry.get("name")) or "",
                    episode_count=_int(entry.get("episode_count")),
                    air_date=_text(entry.get("air_date")),
                )
            )
        return seasons

    # ------------------------------------------------------------------
    # Seasons
    # ------------------------------------------------------------------

    async def fetch_season_details(self, remote_id: int, season_number: int) -> SeasonDetails | None:
        """Get one season of a TV show with its episodes."""
        data = await self._get(f"tv/{remote_id}/season/{season_number}")
        if data is None:
            return None

        episodes = []
        for entry in _dicts(data.get("episodes")):
            number = _int(entry.get("episode_number"))
            if number is None:
                logger.debug(f"Dropping episode without a number in tv/{remote_id} S{season_number}")
                continue
            episodes.append(
                Episode(
                    episode_number=number,
                    name=_text(entry.get("name")) or "",
                    air_date=_text(entry.get("air_date")),
                    vote_average=_number(entry.get("vote_average")),
                    overview=_text(entry.get("overview")),
                )
            )

        return SeasonDetails(
            season_number=season_number,
            name=_text(data.get("name")) or "",
            episodes=episodes,
        )
