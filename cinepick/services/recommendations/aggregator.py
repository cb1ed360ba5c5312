"""Candidate aggregation.

Builds the candidate pool for one recommendation call from two strategies:

1. Similarity: TMDB recommendations for each seed (a recently liked item),
   first page only, fetched concurrently.
2. Popularity: the popular feed, paged forward only while the pool is
   smaller than the target size.

The pool is de-duplicated by remote id with the first occurrence kept, so
similarity results come before popularity results and each source keeps its
own order. No preference filtering happens here.
"""

import asyncio
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from cinepick.constants import LIKE_THRESHOLD, MAX_FALLBACK_PAGES, MAX_SEEDS, TARGET_POOL_SIZE
from cinepick.models.catalog import ItemKind
from cinepick.models.schemas import CatalogItemData, CatalogPage, RatingRecord
from cinepick.services.metadata.tmdb import TMDBService
from cinepick.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class CandidatePool:
    """Merged candidates plus bookkeeping about the fetches behind them."""

    items: list[CatalogItemData] = field(default_factory=list)
    similar_count: int = 0  # leading items that came from similarity fetches
    requests: int = 0
    failures: int = 0

    @property
    def source_unavailable(self) -> bool:
        """True when every request of this aggregation failed."""
        return self.requests > 0 and self.failures == self.requests

    def __len__(self) -> int:
        return len(self.items)


def select_seeds(ratings: Iterable[RatingRecord], max_seeds: int = MAX_SEEDS) -> list[int]:
    """Remote ids of the most recently liked items.

    Only likes (score >= LIKE_THRESHOLD) qualify; disliked items never seed.
    Recency is the persisted ``rated_at``, ties broken by the newer local id.
    """
    liked = [r for r in ratings if r.score >= LIKE_THRESHOLD]
    liked.sort(key=lambda r: (r.rated_at, r.local_id), reverse=True)
    return [r.remote_id for r in liked[:max_seeds]]


class CandidateAggregator:
    """Fans out to the catalog source and merges the results."""

    def __init__(
        self,
        client: TMDBService,
        target_pool_size: int = TARGET_POOL_SIZE,
        max_fallback_pages: int = MAX_FALLBACK_PAGES,
    ) -> None:
        self.client = client
        self.target_pool_size = target_pool_size
        self.max_fallback_pages = max_fallback_pages

    async def aggregate(self, seed_ids: Sequence[int], kind: ItemKind) -> CandidatePool:
        """Build the ordered, de-duplicated candidate pool for ``seed_ids``."""
        pool = CandidatePool()
        merged: dict[int, CatalogItemData] = {}

        # All seed fetches settle before anything is merged.
        pages = await asyncio.gather(
            *(self.client.fetch_similar_items(seed_id, kind) for seed_id in seed_ids)
        )
        for seed_id, page in zip(seed_ids, pages):
            pool.requests += 1
            if page is None:
                pool.failures += 1
                logger.warning(f"Similar items unavailable for {kind.value} seed {seed_id}, skipping")
                continue
            self._merge(merged, page)

        pool.similar_count = len(merged)
        if seed_ids:
            logger.debug(
                f"{len(merged)} similar {kind.value} candidates from {len(seed_ids)} seeds"
            )

        if len(merged) < self.target_pool_size:
            await self._fill_from_popular(merged, pool, kind)

        pool.items = list(merged.values())
        return pool

    async def _fill_from_popular(
        self,
        merged: dict[int, CatalogItemData],
        pool: CandidatePool,
        kind: ItemKind,
    ) -> None:
        """Page through the popular feed until the pool reaches the target size."""
        page_number = 1
        total_pages: int | None = None

        while (
            len(merged) < self.target_pool_size
            and page_number <= self.max_fallback_pages
            and (total_pages is None or page_number <= total_pages)
        ):
            pool.requests += 1
            page = await self.client.fetch_popular(kind, page_number)
            if page is None:
                pool.failures += 1
                logger.warning(f"Popular {kind.value} page {page_number} unavailable, skipping")
            else:
                total_pages = page.total_pages
                self._merge(merged, page)
            page_number += 1

        logger.debug(
            f"Pool has {len(merged)} {kind.value} candidates after {page_number - 1} popular pages"
        )

    @staticmethod
    def _merge(merged: dict[int, CatalogItemData], page: CatalogPage) -> None:
        for item in page.items:
            merged.setdefault(item.remote_id, item)
