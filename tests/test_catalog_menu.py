"""Tests for the per-kind menu flows, with scripted answers."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from cinepick.cli import catalog as catalog_cli
from cinepick.constants import LIKE_SCORE
from cinepick.db.crud.ratings import get_ratings_for_user
from cinepick.models.catalog import ItemKind
from cinepick.models.schemas import CatalogItemData, Episode, SeasonDetails, SeasonSummary
from cinepick.models.user import User
from cinepick.services.recommendations.session import RecommendationSession

from tests.conftest import FakeCatalog, make_item, make_page


def script(monkeypatch: pytest.MonkeyPatch, *answers: str) -> list[str]:
    """Answer prompts in order; returns the prompts that were asked."""
    replies = iter(answers)
    prompts: list[str] = []

    async def fake_ask(prompt: str) -> str:
        prompts.append(prompt)
        return next(replies)

    monkeypatch.setattr(catalog_cli, "ask", fake_ask)
    return prompts


def show(seasons: int = 2) -> CatalogItemData:
    return make_item(
        1399,
        kind=ItemKind.TV,
        title="Game of Thrones",
        number_of_seasons=seasons,
        seasons=[
            SeasonSummary(season_number=n, name=f"Season {n}", episode_count=10, air_date=f"{2010 + n}-04-17")
            for n in range(1, seasons + 1)
        ],
    )


class TestRecommendationWalk:
    @pytest.mark.asyncio
    async def test_view_details_then_next(
        self, db_session: AsyncSession, test_user: User, monkeypatch: pytest.MonkeyPatch, capsys
    ):
        catalog = FakeCatalog(
            popular=[make_page([make_item(20), make_item(21)])],
            details={20: make_item(20, duration_minutes=120)},
        )
        session = await RecommendationSession.start(db_session, catalog, test_user.id, ItemKind.MOVIE)
        prompts = script(monkeypatch, "v", "n", "q")

        await catalog_cli.present_recommendations(session, catalog)

        out = capsys.readouterr().out
        assert "Runtime: 120 min" in out
        assert "Returning to menu..." in out
        assert prompts[1].startswith("Action:")
        assert session.is_hidden(make_item(20))
        assert not session.is_hidden(make_item(21))
        assert catalog.detail_calls == [20]

    @pytest.mark.asyncio
    async def test_like_from_details(
        self, db_session: AsyncSession, test_user: User, monkeypatch: pytest.MonkeyPatch
    ):
        catalog = FakeCatalog(popular=[make_page([make_item(20)])])
        session = await RecommendationSession.start(db_session, catalog, test_user.id, ItemKind.MOVIE)
        script(monkeypatch, "v", "l")

        await catalog_cli.present_recommendations(session, catalog)

        ratings = await get_ratings_for_user(db_session, test_user.id, ItemKind.MOVIE)
        assert [(r.remote_id, r.score) for r in ratings] == [(20, LIKE_SCORE)]


class TestTvDetails:
    @pytest.mark.asyncio
    async def test_season_episodes(
        self, db_session: AsyncSession, test_user: User, monkeypatch: pytest.MonkeyPatch, capsys
    ):
        season = SeasonDetails(
            season_number=1,
            name="Season 1",
            episodes=[
                Episode(episode_number=1, name="Winter Is Coming", air_date="2011-04-17", vote_average=7.9),
                Episode(episode_number=2, name="The Kingsroad"),
            ],
        )
        catalog = FakeCatalog(details={1399: show()}, seasons={(1399, 1): season})
        session = await RecommendationSession.start(db_session, catalog, test_user.id, ItemKind.TV)
        prompts = script(monkeypatch, "1", "n")

        reaction = await catalog_cli.view_details(session, catalog, make_item(1399, kind=ItemKind.TV))

        out = capsys.readouterr().out
        assert reaction == "skipped"
        assert prompts[0] == "View episodes for season number (or 0 to skip): "
        assert "Seasons: 2" in out
        assert "E1: Winter Is Coming (Air: 2011-04-17, Rating: 7.9)" in out
        assert "E2: The Kingsroad (Air: TBA, Rating: N/A)" in out

    @pytest.mark.asyncio
    async def test_season_unavailable(
        self, db_session: AsyncSession, test_user: User, monkeypatch: pytest.MonkeyPatch, capsys
    ):
        catalog = FakeCatalog(details={1399: show()})
        session = await RecommendationSession.start(db_session, catalog, test_user.id, ItemKind.TV)
        script(monkeypatch, "2", "n")

        await catalog_cli.view_details(session, catalog, make_item(1399, kind=ItemKind.TV))

        assert "Could not fetch episodes for S2." in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_skip_or_unknown_season(
        self, db_session: AsyncSession, test_user: User, monkeypatch: pytest.MonkeyPatch, capsys
    ):
        catalog = FakeCatalog(details={1399: show()})
        session = await RecommendationSession.start(db_session, catalog, test_user.id, ItemKind.TV)
        script(monkeypatch, "0", "n")

        await catalog_cli.view_details(session, catalog, make_item(1399, kind=ItemKind.TV))
        script(monkeypatch, "7", "n")
        await catalog_cli.view_details(session, catalog, make_item(1399, kind=ItemKind.TV))

        assert "Fetching S" not in capsys.readouterr().out
