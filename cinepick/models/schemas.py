"""Pydantic schemas for catalog records, preferences and ratings."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from cinepick.models.catalog import ItemKind


# CatalogItemData fields with no column in the catalog cache
_NOT_CACHED = frozenset({"remote_id", "kind", "local_id", "number_of_seasons", "seasons"})


class Genre(BaseModel):
    """TMDB genre."""

    id: int
    name: str


class SeasonSummary(BaseModel):
    """A season as listed in TV show details."""

    season_number: int
    name: str = ""
    episode_count: int | None = None
    air_date: str | None = None


class Episode(BaseModel):
    episode_number: int
    name: str = ""
    air_date: str | None = None
    vote_average: float | None = None
    overview: str | None = None


class SeasonDetails(BaseModel):
    """One season of a TV show with its episodes, in airing order."""

    season_number: int
    name: str = ""
    episodes: list[Episode] = Field(default_factory=list)


class CatalogItemData(BaseModel):
    """A catalog item as seen by the recommendation engine.

    Built from TMDB payloads (list entries or detail responses).
    ``local_id`` is set once the item has been written to the local cache.
    """

    remote_id: int
    kind: ItemKind
    title: str
    local_id: int | None = None
    year: int | None = None
    genres: list[str] = Field(default_factory=list)
    language: str | None = None
    vote_average: float | None = None
    vote_count: int | None = None
    duration_minutes: int | None = None
    providers: list[str] | None = None
    overview: str | None = None
    tagline: str | None = None
    poster_path: str | None = None
    popularity: float | None = None
    # TV details only; shown, never cached
    number_of_seasons: int | None = None
    seasons: list[SeasonSummary] = Field(default_factory=list)

    def cache_fields(self) -> dict:
        """Column values for the local cache, excluding identifiers."""
        return self.model_dump(exclude=set(_NOT_CACHED))


class CatalogPage(BaseModel):
    """One page of a paginated TMDB collection."""

    page: int = 1
    total_pages: int = 1
    total_results: int = 0
    items: list[CatalogItemData] = Field(default_factory=list)


class Preferences(BaseModel):
    """Declared taste constraints for one kind. ``None`` means "Any"."""

    model_config = ConfigDict(from_attributes=True)

    genres: list[str] | None = None
    languages: list[str] | None = None
    year_min: int | None = None
    year_max: int | None = None
    duration_min: int | None = Field(default=None, ge=0)
    duration_max: int | None = Field(default=None, ge=0)
    min_rating: float | None = Field(default=None, ge=0, le=10)
    providers: list[str] | None = None

    @field_validator("genres", "languages", "providers", mode="before")
    @classmethod
    def empty_list_is_unset(cls, v: object) -> list[str] | None:
        """Blank entries are dropped; an empty allow-set imposes no constraint.

        A single string is one entry, not a sequence of characters.
        """
        if v is None:
            return None
        if isinstance(v, str):
            v = [v]
        if not isinstance(v, (list, tuple, set, frozenset)):
            raise ValueError("must be a list of strings")
        if not all(isinstance(s, str) for s in v):
            raise ValueError("every entry must be a string")
        cleaned = [s.strip() for s in v if s.strip()]
        return cleaned or None

    @model_validator(mode="after")
    def check_ranges(self) -> "Preferences":
        if self.year_min is not None and self.year_max is not None and self.year_min > self.year_max:
            raise ValueError("year_min must not be greater than year_max")
        if (
            self.duration_min is not None
            and self.duration_max is not None
            and self.duration_min > self.duration_max
        ):
            raise ValueError("duration_min must not be greater than duration_max")
        return self

    @property
    def is_empty(self) -> bool:
        """True when no constraint is set."""
        return all(value is None for value in self.model_dump().values())

    @property
    def needs_details(self) -> bool:
        """True when a constraint relies on fields only a detail fetch returns fresh."""
        return (
            self.duration_min is not None
            or self.duration_max is not None
            or self.min_rating is not None
            or self.providers is not None
        )


class RatingRecord(BaseModel):
    """A user's rating joined with the rated item's identifiers."""

    local_id: int
    remote_id: int
    kind: ItemKind
    score: int
    rated_at: datetime
