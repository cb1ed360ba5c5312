"""Recommendation engine.

Strategy:
1. Seed from the user's most recently liked items
2. Aggregate similar items for the seeds, topped up from the popular feed
3. Drop excluded items (already rated, or reacted to this session)
4. Refresh details when a preference depends on detail-only or volatile data
5. Keep items matching every preference, in pool order

There is no re-ranking: the order is the pool order, similarity before
popularity, each in TMDB's order.
"""

import asyncio

from sqlalchemy.ext.asyncio import AsyncSession

from cinepick.db.crud.items import upsert_cached_item
from cinepick.db.crud.ratings import get_ratings_for_user
from cinepick.db.crud.users import get_user
from cinepick.exceptions import UserNotFoundError
from cinepick.models.catalog import ItemKind
from cinepick.models.schemas import CatalogItemData, Preferences
from cinepick.services.metadata.tmdb import TMDBService
from cinepick.services.recommendations.aggregator import CandidateAggregator, select_seeds
from cinepick.services.recommendations.exclusions import ExclusionSet
from cinepick.services.recommendations.predicate import (
    failed_rules,
    genres_match,
    language_matches,
    matches,
    year_matches,
)
from cinepick.utils.logging import LogContext, get_logger

logger = get_logger(__name__)

# Rules that list entries answer as well as detail responses; applied before
# refreshing so only plausible candidates cost a detail request.
_LIST_LEVEL_RULES = (genres_match, language_matches, year_matches)


class RecommendationEngine:
    """Produces ordered, filtered recommendations for one user and kind."""

    MAX_CONCURRENT_DETAILS = 8

    def __init__(
        self,
        db: AsyncSession,
        client: TMDBService,
        aggregator: CandidateAggregator | None = None,
    ) -> None:
        self.db = db
        self.client = client
        self.aggregator = aggregator or CandidateAggregator(client)

    async def recommend(
        self,
        user_id: int,
        kind: ItemKind,
        prefs: Preferences,
        exclusions: ExclusionSet,
        limit: int | None = None,
    ) -> list[CatalogItemData]:
        """Recommend items of ``kind`` for a user.

        Every returned item satisfies ``prefs``, is absent from
        ``exclusions`` and has been written to the local cache (``local_id``
        set). An unreachable catalog source yields an empty list.

        Raises:
            UserNotFoundError: ``user_id`` does not exist
        """
        if await get_user(self.db, user_id) is None:
            raise UserNotFoundError(user_id)

        log = LogContext(logger, user=user_id, kind=kind.value)

        ratings = await get_ratings_for_user(self.db, user_id, kind)
        seeds = select_seeds(ratings)
        log.info(f"Aggregating candidates from {len(seeds)} seeds ({len(ratings)} ratings)")

        pool = await self.aggregator.aggregate(seeds, kind)
        if pool.source_unavailable:
            log.error(f"Catalog source unreachable: all {pool.requests} requests failed")
            return []

        candidates = [item for item in pool.items if item.remote_id not in exclusions]

        if prefs.needs_details:
            candidates = [
                item for item in candidates if all(rule(item, prefs) for rule in _LIST_LEVEL_RULES)
            ]
            candidates = await self._refresh_details(candidates, kind)

        results: list[CatalogItemData] = []
        for item in candidates:
            if item.remote_id in exclusions:
                continue
            if not matches(item, prefs):
                log.debug(f"{item.remote_id} filtered out by {', '.join(failed_rules(item, prefs))}")
                continue
            results.append(item)
            if limit is not None and len(results) >= limit:
                break

        for item in results:
            cached = await upsert_cached_item(self.db, item)
            item.local_id = cached.id

        log.info(
            f"{len(results)} recommendations from a pool of {len(pool)} "
            f"({pool.similar_count} similar, {pool.failures}/{pool.requests} requests failed)"
        )
        return results

    async def _refresh_details(
        self,
        items: list[CatalogItemData],
        kind: ItemKind,
    ) -> list[CatalogItemData]:
        """Replace list entries with fresh detail records, keeping order.

        An item whose refresh fails keeps its list-level data; its unknown
        duration and providers then fail any active constraint on them.
        """
        semaphore = asyncio.Semaphore(self.MAX_CONCURRENT_DETAILS)

        async def refresh(item: CatalogItemData) -> CatalogItemData:
            async with semaphore:
                details = await self.client.fetch_item_details(item.remote_id, kind, fresh=True)
            if details is None:
                logger.debug(f"Details unavailable for {kind.value}/{item.remote_id}")
                return item
            return details

        return list(await asyncio.gather(*(refresh(item) for item in items)))
