"""SQLAlchemy models and pydantic schemas."""

from cinepick.models.base import Base
from cinepick.models.catalog import CatalogItem, ItemKind
from cinepick.models.preferences import UserPreferences
from cinepick.models.rating import Rating
from cinepick.models.schemas import (
    CatalogItemData,
    CatalogPage,
    Episode,
    Genre,
    Preferences,
    RatingRecord,
    SeasonDetails,
    SeasonSummary,
)
from cinepick.models.user import User

__all__ = [
    "Base",
    "User",
    "CatalogItem",
    "ItemKind",
    "Rating",
    "UserPreferences",
    "CatalogItemData",
    "CatalogPage",
    "Genre",
    "Preferences",
    "RatingRecord",
    "Episode",
    "SeasonDetails",
    "SeasonSummary",
]
