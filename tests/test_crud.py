"""Tests for the interaction store CRUD operations."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from cinepick.db.crud.items import (
    get_cached_item_by_local_id,
    get_cached_item_by_remote_id,
    upsert_cached_item,
)
from cinepick.db.crud.preferences import get_preferences, save_preferences
from cinepick.db.crud.ratings import get_ratings_for_user, record_rating
from cinepick.db.crud.users import (
    DEMO_USERS,
    create_user,
    get_user_by_name,
    list_users,
    seed_demo_users,
)
from cinepick.exceptions import InvalidRatingError, UserNotFoundError
from cinepick.models.catalog import ItemKind
from cinepick.models.schemas import Preferences
from cinepick.models.user import User

from tests.conftest import make_item


class TestUpsertCachedItem:
    """Tests for upsert_cached_item."""

    @pytest.mark.asyncio
    async def test_insert_assigns_local_id(self, db_session: AsyncSession):
        item = await upsert_cached_item(db_session, make_item(550, title="Fight Club", year=1999))

        assert item.id is not None
        assert item.title == "Fight Club"
        fetched = await get_cached_item_by_local_id(db_session, item.id)
        assert fetched is not None
        assert fetched.remote_id == 550

    @pytest.mark.asyncio
    async def test_local_id_is_stable_across_updates(self, db_session: AsyncSession):
        first = await upsert_cached_item(db_session, make_item(550, vote_average=8.0))
        local_id = first.id

        updated = await upsert_cached_item(db_session, make_item(550, vote_average=8.4))

        assert updated.id == local_id
        assert updated.vote_average == 8.4

    @pytest.mark.asyncio
    async def test_identical_write_is_a_no_op(self, db_session: AsyncSession):
        record = make_item(550)
        first = await upsert_cached_item(db_session, record)
        stamp = first.updated_at

        second = await upsert_cached_item(db_session, record)

        assert second.id == first.id
        assert second.updated_at == stamp

    @pytest.mark.asyncio
    async def test_list_record_keeps_detail_fields(self, db_session: AsyncSession):
        await upsert_cached_item(db_session, make_item(550, duration_minutes=139, providers=["Hulu"]))

        item = await upsert_cached_item(db_session, make_item(550))

        assert item.duration_minutes == 139
        assert item.providers == ["Hulu"]

    @pytest.mark.asyncio
    async def test_same_remote_id_per_kind(self, db_session: AsyncSession):
        movie = await upsert_cached_item(db_session, make_item(1399, kind=ItemKind.MOVIE))
        show = await upsert_cached_item(db_session, make_item(1399, kind=ItemKind.TV))

        assert movie.id != show.id
        found = await get_cached_item_by_remote_id(db_session, 1399, ItemKind.TV)
        assert found.id == show.id


class TestRatings:
    """Tests for record_rating and get_ratings_for_user."""

    @pytest.mark.asyncio
    async def test_rating_is_overwritten(self, db_session: AsyncSession, test_user: User):
        item = await upsert_cached_item(db_session, make_item(550))

        await record_rating(db_session, test_user.id, item.id, 2)
        await record_rating(db_session, test_user.id, item.id, 5)

        ratings = await get_ratings_for_user(db_session, test_user.id, ItemKind.MOVIE)
        assert len(ratings) == 1
        assert ratings[0].score == 5
        assert ratings[0].remote_id == 550
        assert ratings[0].local_id == item.id

    @pytest.mark.asyncio
    async def test_most_recent_first(self, db_session: AsyncSession, test_user: User):
        for remote_id in (1, 2, 3):
            item = await upsert_cached_item(db_session, make_item(remote_id))
            await record_rating(db_session, test_user.id, item.id, 4)

        ratings = await get_ratings_for_user(db_session, test_user.id, ItemKind.MOVIE)

        assert [r.remote_id for r in ratings] == [3, 2, 1]

    @pytest.mark.asyncio
    async def test_filtered_by_kind(self, db_session: AsyncSession, test_user: User):
        show = await upsert_cached_item(db_session, make_item(1399, kind=ItemKind.TV))
        await record_rating(db_session, test_user.id, show.id, 5)

        assert await get_ratings_for_user(db_session, test_user.id, ItemKind.MOVIE) == []
        assert len(await get_ratings_for_user(db_session, test_user.id, ItemKind.TV)) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("score", [0, 6, -1])
    async def test_score_out_of_range(self, db_session: AsyncSession, test_user: User, score: int):
        item = await upsert_cached_item(db_session, make_item(550))

        with pytest.raises(InvalidRatingError):
            await record_rating(db_session, test_user.id, item.id, score)

    @pytest.mark.asyncio
    async def test_unknown_user(self, db_session: AsyncSession):
        item = await upsert_cached_item(db_session, make_item(550))

        with pytest.raises(UserNotFoundError):
            await record_rating(db_session, 404, item.id, 3)


class TestPreferences:
    """Tests for get_preferences and save_preferences."""

    @pytest.mark.asyncio
    async def test_defaults_when_unset(self, db_session: AsyncSession, test_user: User):
        prefs = await get_preferences(db_session, test_user.id, ItemKind.MOVIE)
        assert prefs.is_empty

    @pytest.mark.asyncio
    async def test_round_trip_per_kind(self, db_session: AsyncSession, test_user: User):
        saved = Preferences(genres=["Drama"], languages=["en"], year_min=2000, min_rating=7.0)
        await save_preferences(db_session, test_user.id, ItemKind.MOVIE, saved)

        assert await get_preferences(db_session, test_user.id, ItemKind.MOVIE) == saved
        assert (await get_preferences(db_session, test_user.id, ItemKind.TV)).is_empty

    @pytest.mark.asyncio
    async def test_save_replaces(self, db_session: AsyncSession, test_user: User):
        await save_preferences(db_session, test_user.id, ItemKind.MOVIE, Preferences(genres=["Drama"]))
        await save_preferences(db_session, test_user.id, ItemKind.MOVIE, Preferences(year_max=1999))

        prefs = await get_preferences(db_session, test_user.id, ItemKind.MOVIE)
        assert prefs.genres is None
        assert prefs.year_max == 1999


class TestUsers:
    @pytest.mark.asyncio
    async def test_seed_demo_users_once(self, db_session: AsyncSession):
        assert await seed_demo_users(db_session) == len(DEMO_USERS)
        assert await seed_demo_users(db_session) == 0

        users = await list_users(db_session)
        assert [u.name for u in users] == DEMO_USERS

        alice = await get_user_by_name(db_session, "alice")
        prefs = await get_preferences(db_session, alice.id, ItemKind.MOVIE)
        assert "Science Fiction" in prefs.genres

    @pytest.mark.asyncio
    async def test_create_user(self, db_session: AsyncSession):
        user = await create_user(db_session, "  Grace ")

        assert user.name == "Grace"
        assert (await get_user_by_name(db_session, "GRACE")).id == user.id
