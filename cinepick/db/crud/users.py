"""CRUD operations for users, plus demo data seeding."""

from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cinepick.db.crud.preferences import save_preferences
from cinepick.models.catalog import ItemKind
from cinepick.models.schemas import Preferences
from cinepick.models.user import User
from cinepick.utils.logging import get_logger

logger = get_logger(__name__)

DEMO_USERS = ["Alice", "Bob", "Charlie", "Diana", "Edward", "Fiona"]

# Genre names follow TMDB's taxonomy for each kind.
DEMO_PREFERENCES: dict[str, dict[ItemKind, Preferences]] = {
    "Alice": {
        ItemKind.MOVIE: Preferences(
            genres=["Action", "Science Fiction"],
            languages=["en"],
            year_min=2010,
            min_rating=7.0,
            providers=["Netflix", "Disney Plus"],
        ),
        ItemKind.TV: Preferences(
            genres=["Sci-Fi & Fantasy", "Drama"],
            languages=["en"],
            year_min=2015,
            min_rating=7.5,
            providers=["Netflix", "Amazon Prime Video"],
        ),
    },
    "Bob": {
        ItemKind.MOVIE: Preferences(genres=["Comedy", "Romance"], duration_max=120, min_rating=6.5),
        ItemKind.TV: Preferences(genres=["Comedy"], duration_max=30, min_rating=7.0),
    },
    "Charlie": {
        ItemKind.MOVIE: Preferences(genres=["Horror", "Thriller"], languages=["en", "ko"], year_max=2022),
        ItemKind.TV: Preferences(genres=["Mystery", "Sci-Fi & Fantasy"], languages=["en", "ja"]),
    },
    "Diana": {
        ItemKind.MOVIE: Preferences(
            genres=["Drama", "History", "Documentary"], min_rating=7.5, duration_min=90
        ),
        ItemKind.TV: Preferences(
            genres=["Documentary", "Crime", "Drama"], min_rating=8.0, duration_min=40
        ),
    },
    "Edward": {
        ItemKind.MOVIE: Preferences(
            genres=["Animation", "Family", "Adventure"], providers=["Disney Plus", "Max"]
        ),
        ItemKind.TV: Preferences(
            genres=["Animation", "Action & Adventure"], providers=["Netflix", "Hulu"]
        ),
    },
    "Fiona": {
        ItemKind.MOVIE: Preferences(
            genres=["Mystery", "Crime"], year_min=2000, year_max=2020, min_rating=6.8
        ),
        ItemKind.TV: Preferences(
            genres=["Sci-Fi & Fantasy", "Action & Adventure"],
            year_min=2010,
            min_rating=7.2,
            providers=["Max"],
        ),
    },
}


async def get_user(db: AsyncSession, user_id: int) -> User | None:
    """Get a user by id."""
    return await db.get(User, user_id)


async def get_user_by_name(db: AsyncSession, name: str) -> User | None:
    """Get a user by name (case-insensitive)."""
    result = await db.execute(select(User).where(func.lower(User.name) == name.lower()))
    return result.scalar_one_or_none()


async def list_users(db: AsyncSession) -> Sequence[User]:
    """List users ordered by id."""
    result = await db.execute(select(User).order_by(User.id))
    return result.scalars().all()


async def create_user(db: AsyncSession, name: str) -> User:
    """Create a user."""
    user = User(name=name.strip())
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def seed_demo_users(db: AsyncSession) -> int:
    """Create the demo users and their preferences on an empty database.

    Returns:
        Number of users created (0 when users already exist)
    """
    existing = await db.scalar(select(func.count(User.id)))
    if existing:
        return 0

    for name in DEMO_USERS:
        user = await create_user(db, name)
        for kind, prefs in DEMO_PREFERENCES.get(name, {}).items():
            await save_preferences(db, user.id, kind, prefs)

    logger.info(f"Seeded {len(DEMO_USERS)} demo users with preferences")
    return len(DEMO_USERS)
