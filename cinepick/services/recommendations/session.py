"""One interactive recommendation session for a user and kind."""

from itertools import chain

from sqlalchemy.ext.asyncio import AsyncSession

from cinepick.constants import DISLIKE_SCORE, LIKE_SCORE
from cinepick.db.crud.items import upsert_cached_item
from cinepick.db.crud.preferences import get_preferences, save_preferences
from cinepick.db.crud.ratings import record_rating
from cinepick.db.crud.users import get_user
from cinepick.exceptions import UserNotFoundError
from cinepick.models.catalog import ItemKind
from cinepick.models.schemas import CatalogItemData, Preferences
from cinepick.services.metadata.tmdb import TMDBService
from cinepick.services.recommendations.engine import RecommendationEngine
from cinepick.services.recommendations.exclusions import ExclusionSet, initial_exclusions


class RecommendationSession:
    """Holds the session's preferences and exclusion set.

    Rating an item persists the rating and excludes the item for the rest of
    the session. Skipping only hides it for this session.
    """

    def __init__(
        self,
        db: AsyncSession,
        engine: RecommendationEngine,
        user_id: int,
        kind: ItemKind,
        preferences: Preferences,
        exclusions: ExclusionSet,
    ) -> None:
        self.db = db
        self.engine = engine
        self.user_id = user_id
        self.kind = kind
        self.preferences = preferences
        self.exclusions = exclusions
        self._skipped: set[int] = set()

    @classmethod
    async def start(
        cls,
        db: AsyncSession,
        client: TMDBService,
        user_id: int,
        kind: ItemKind,
    ) -> "RecommendationSession":
        """Load preferences and seed exclusions from the user's ratings."""
        if await get_user(db, user_id) is None:
            raise UserNotFoundError(user_id)
        preferences = await get_preferences(db, user_id, kind)
        exclusions = await initial_exclusions(db, user_id, kind)
        return cls(db, RecommendationEngine(db, client), user_id, kind, preferences, exclusions)

    async def next_batch(self, limit: int | None = None) -> list[CatalogItemData]:
        """Recommendations not yet rated or skipped in this session."""
        hidden = ExclusionSet(chain(self.exclusions, self._skipped))
        return await self.engine.recommend(self.user_id, self.kind, self.preferences, hidden, limit)

    def is_hidden(self, item: CatalogItemData) -> bool:
        return item.remote_id in self.exclusions or item.remote_id in self._skipped

    async def rate(self, item: CatalogItemData, score: int) -> None:
        """Persist a rating and exclude the item from later batches."""
        if item.local_id is None:
            item.local_id = (await upsert_cached_item(self.db, item)).id
        await record_rating(self.db, self.user_id, item.local_id, score)
        self.exclusions.add(item.remote_id)

    async def like(self, item: CatalogItemData) -> None:
        await self.rate(item, LIKE_SCORE)

    async def dislike(self, item: CatalogItemData) -> None:
        await self.rate(item, DISLIKE_SCORE)

    def skip(self, item: CatalogItemData) -> None:
        self._skipped.add(item.remote_id)

    async def update_preferences(self, preferences: Preferences) -> None:
        """Persist new preferences; later batches use them."""
        await save_preferences(self.db, self.user_id, self.kind, preferences)
        self.preferences = preferences
