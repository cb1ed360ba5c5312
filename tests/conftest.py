"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, Iterable

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from cinepick.models.base import Base
from cinepick.models.catalog import ItemKind
from cinepick.models.schemas import CatalogItemData, CatalogPage, SeasonDetails
from cinepick.models.user import User
from cinepick.services.metadata.tmdb import clear_genre_cache


# Test database URL (uses SQLite for testing)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Create test engine
test_engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    poolclass=StaticPool,
)

test_session_maker = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with test_session_maker() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a test user."""
    user = User(name="Tester")
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture(autouse=True)
def reset_genre_cache():
    """Genre taxonomies are cached per process; start every test empty."""
    clear_genre_cache()
    yield
    clear_genre_cache()


def make_item(remote_id: int, kind: ItemKind = ItemKind.MOVIE, **fields) -> CatalogItemData:
    """Build a catalog record with sensible defaults."""
    defaults = {
        "title": f"Title {remote_id}",
        "year": 2015,
        "genres": ["Drama"],
        "language": "en",
        "vote_average": 7.5,
        "vote_count": 1000,
    }
    defaults.update(fields)
    return CatalogItemData(remote_id=remote_id, kind=kind, **defaults)


def make_page(items: Iterable[CatalogItemData], page: int = 1, total_pages: int = 1) -> CatalogPage:
    items = list(items)
    return CatalogPage(page=page, total_pages=total_pages, total_results=len(items), items=items)


class FakeCatalog:
    """In-memory stand-in for ``TMDBService``.

    ``similar`` maps a seed id to its page (None simulates a failed fetch),
    ``popular`` lists pages in order (None entries fail), and ``details``
    maps remote ids to full records. ``seasons`` maps (remote id, season
    number) to episode listings. Every call is recorded.
    """

    region = "US"

    def __init__(
        self,
        similar: dict[int, CatalogPage | None] | None = None,
        popular: list[CatalogPage | None] | None = None,
        details: dict[int, CatalogItemData] | None = None,
        seasons: dict[tuple[int, int], SeasonDetails] | None = None,
        offline: bool = False,
    ) -> None:
        self.similar = similar or {}
        self.popular = popular or []
        self.details = details or {}
        self.seasons = seasons or {}
        self.offline = offline
        self.similar_calls: list[int] = []
        self.popular_calls: list[int] = []
        self.detail_calls: list[int] = []
        self.fresh_detail_calls: list[int] = []

    async def fetch_similar_items(self, remote_id: int, kind: ItemKind, page: int = 1) -> CatalogPage | None:
        self.similar_calls.append(remote_id)
        if self.offline:
            return None
        return self.similar.get(remote_id, make_page([]))

    async def fetch_popular(self, kind: ItemKind, page: int = 1) -> CatalogPage | None:
        self.popular_calls.append(page)
        if self.offline or page > len(self.popular):
            return None
        return self.popular[page - 1]

    async def fetch_item_details(
        self, remote_id: int, kind: ItemKind, fresh: bool = False
    ) -> CatalogItemData | None:
        self.detail_calls.append(remote_id)
        if fresh:
            self.fresh_detail_calls.append(remote_id)
        if self.offline:
            return None
        details = self.details.get(remote_id)
        return details.model_copy(deep=True) if details is not None else None

    async def fetch_season_details(self, remote_id: int, season_number: int) -> SeasonDetails | None:
        if self.offline:
            return None
        return self.seasons.get((remote_id, season_number))


@pytest.fixture
def fake_catalog() -> FakeCatalog:
    return FakeCatalog()
