"""Exclusion set: remote ids that must not be recommended again this session."""

from collections.abc import Iterable, Iterator

from sqlalchemy.ext.asyncio import AsyncSession

from cinepick.db.crud.ratings import get_ratings_for_user
from cinepick.models.catalog import ItemKind


class ExclusionSet:
    """Grow-only set of remote ids.

    Seeded from the user's persisted ratings at session start and extended
    as the user reacts to recommendations. Ids are never removed; a new
    session rebuilds the set from storage.
    """

    def __init__(self, remote_ids: Iterable[int] = ()) -> None:
        self._ids: set[int] = set(remote_ids)

    def add(self, remote_id: int) -> None:
        """Exclude an id. Adding an id twice is harmless."""
        self._ids.add(remote_id)

    def __contains__(self, remote_id: object) -> bool:
        return remote_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[int]:
        return iter(self._ids)

    def __repr__(self) -> str:
        return f"<ExclusionSet(size={len(self._ids)})>"


async def initial_exclusions(db: AsyncSession, user_id: int, kind: ItemKind) -> ExclusionSet:
    """Every item of ``kind`` the user has ever rated, liked or not."""
    ratings = await get_ratings_for_user(db, user_id, kind)
    return ExclusionSet(r.remote_id for r in ratings)
