"""Tests for interactive recommendation sessions."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from cinepick.constants import DISLIKE_SCORE, LIKE_SCORE
from cinepick.db.crud.preferences import get_preferences
from cinepick.db.crud.ratings import get_ratings_for_user
from cinepick.exceptions import UserNotFoundError
from cinepick.models.catalog import ItemKind
from cinepick.models.schemas import Preferences
from cinepick.models.user import User
from cinepick.services.recommendations.session import RecommendationSession

from tests.conftest import FakeCatalog, make_item, make_page


@pytest.fixture
def catalog() -> FakeCatalog:
    return FakeCatalog(popular=[make_page([make_item(20), make_item(21), make_item(22)])])


class TestRecommendationSession:
    @pytest.mark.asyncio
    async def test_start_unknown_user(self, db_session: AsyncSession, catalog: FakeCatalog):
        with pytest.raises(UserNotFoundError):
            await RecommendationSession.start(db_session, catalog, 999, ItemKind.MOVIE)

    @pytest.mark.asyncio
    async def test_like_persists_and_excludes(
        self, db_session: AsyncSession, test_user: User, catalog: FakeCatalog
    ):
        session = await RecommendationSession.start(db_session, catalog, test_user.id, ItemKind.MOVIE)
        first = await session.next_batch()

        await session.like(first[0])
        await session.dislike(first[1])

        ratings = await get_ratings_for_user(db_session, test_user.id, ItemKind.MOVIE)
        assert {(r.remote_id, r.score) for r in ratings} == {(20, LIKE_SCORE), (21, DISLIKE_SCORE)}
        assert [item.remote_id for item in await session.next_batch()] == [22]

    @pytest.mark.asyncio
    async def test_rated_items_excluded_in_new_session(
        self, db_session: AsyncSession, test_user: User, catalog: FakeCatalog
    ):
        session = await RecommendationSession.start(db_session, catalog, test_user.id, ItemKind.MOVIE)
        await session.like((await session.next_batch())[0])

        fresh = await RecommendationSession.start(db_session, catalog, test_user.id, ItemKind.MOVIE)

        assert 20 in fresh.exclusions
        assert [item.remote_id for item in await fresh.next_batch()] == [21, 22]

    @pytest.mark.asyncio
    async def test_skip_only_lasts_for_the_session(
        self, db_session: AsyncSession, test_user: User, catalog: FakeCatalog
    ):
        session = await RecommendationSession.start(db_session, catalog, test_user.id, ItemKind.MOVIE)
        items = await session.next_batch()

        session.skip(items[0])

        assert session.is_hidden(items[0])
        assert 20 not in session.exclusions
        assert [item.remote_id for item in await session.next_batch()] == [21, 22]

        fresh = await RecommendationSession.start(db_session, catalog, test_user.id, ItemKind.MOVIE)
        assert [item.remote_id for item in await fresh.next_batch()] == [20, 21, 22]

    @pytest.mark.asyncio
    async def test_rate_uncached_item(self, db_session: AsyncSession, test_user: User, catalog: FakeCatalog):
        session = await RecommendationSession.start(db_session, catalog, test_user.id, ItemKind.MOVIE)
        item = make_item(77)

        await session.rate(item, 3)

        assert item.local_id is not None
        assert 77 in session.exclusions

    @pytest.mark.asyncio
    async def test_update_preferences(self, db_session: AsyncSession, test_user: User):
        catalog = FakeCatalog(
            popular=[make_page([make_item(20, genres=["Comedy"]), make_item(21, genres=["Horror"])])]
        )
        session = await RecommendationSession.start(db_session, catalog, test_user.id, ItemKind.MOVIE)

        await session.update_preferences(Preferences(genres=["Horror"]))

        stored = await get_preferences(db_session, test_user.id, ItemKind.MOVIE)
        assert stored.genres == ["Horror"]
        assert [item.remote_id for item in await session.next_batch()] == [21]
