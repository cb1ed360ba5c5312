"""CRUD operations for user preferences."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cinepick.models.catalog import ItemKind
from cinepick.models.preferences import UserPreferences
from cinepick.models.schemas import Preferences


async def get_preferences(db: AsyncSession, user_id: int, kind: ItemKind) -> Preferences:
    """Get a user's preferences for a kind; unrestricted when none are stored."""
    result = await db.execute(
        select(UserPreferences).where(UserPreferences.user_id == user_id, UserPreferences.kind == kind)
    )
    row = result.scalar_one_or_none()
    if row is None:
        return Preferences()
    return Preferences.model_validate(row)


async def save_preferences(
    db: AsyncSession,
    user_id: int,
    kind: ItemKind,
    prefs: Preferences,
) -> UserPreferences:
    """Replace a user's preferences for a kind."""
    result = await db.execute(
        select(UserPreferences).where(UserPreferences.user_id == user_id, UserPreferences.kind == kind)
    )
    row = result.scalar_one_or_none()

    if row is None:
        row = UserPreferences(user_id=user_id, kind=kind)
        db.add(row)

    for field, value in prefs.model_dump().items():
        setattr(row, field, value)

    await db.commit()
    await db.refresh(row)
    return row
