"""Per-kind TMDB field names.

Movies and TV shows carry the same information under different keys. The
rest of the code only sees normalized ``CatalogItemData``. Every accessor
tolerates values of the wrong JSON type and reports them as missing.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from cinepick.models.catalog import ItemKind


def _minutes(value: Any) -> int | None:
    """A positive whole number of minutes, or None."""
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value if value > 0 else None


@dataclass(frozen=True)
class KindFields(ABC):
    title: str
    original_title: str
    date: str
    path: str

    def title_of(self, raw: dict[str, Any]) -> str:
        for key in (self.title, self.original_title):
            value = raw.get(key)
            if isinstance(value, str) and value:
                return value
        return ""

    def year_of(self, raw: dict[str, Any]) -> int | None:
        date = raw.get(self.date)
        if not isinstance(date, str):
            return None
        year = date[:4]
        return int(year) if len(year) == 4 and year.isdigit() else None

    @abstractmethod
    def duration_of(self, raw: dict[str, Any]) -> int | None:
        """Runtime in minutes, or None when TMDB does not say."""


@dataclass(frozen=True)
class MovieFields(KindFields):
    def duration_of(self, raw: dict[str, Any]) -> int | None:
        return _minutes(raw.get("runtime"))


@dataclass(frozen=True)
class TvFields(KindFields):
    def duration_of(self, raw: dict[str, Any]) -> int | None:
        # First listed episode runtime is the representative one
        runtimes = raw.get("episode_run_time")
        if isinstance(runtimes, list) and runtimes:
            return _minutes(runtimes[0])
        last_episode = raw.get("last_episode_to_air")
        if isinstance(last_episode, dict):
            return _minutes(last_episode.get("runtime"))
        return None


KIND_FIELDS: dict[ItemKind, KindFields] = {
    ItemKind.MOVIE: MovieFields(
        title="title", original_title="original_title", date="release_date", path="movie"
    ),
    ItemKind.TV: TvFields(
        title="name", original_title="original_name", date="first_air_date", path="tv"
    ),
}
