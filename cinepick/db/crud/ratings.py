"""CRUD operations for ratings."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cinepick.constants import RATING_MAX, RATING_MIN
from cinepick.exceptions import InvalidRatingError, UserNotFoundError
from cinepick.models.base import utcnow
from cinepick.models.catalog import CatalogItem, ItemKind
from cinepick.models.rating import Rating
from cinepick.models.schemas import RatingRecord
from cinepick.models.user import User


async def get_ratings_for_user(
    db: AsyncSession,
    user_id: int,
    kind: ItemKind,
) -> list[RatingRecord]:
    """Get a user's ratings for one kind, most recently rated first."""
    result = await db.execute(
        select(Rating.item_id, CatalogItem.remote_id, CatalogItem.kind, Rating.score, Rating.rated_at)
        .join(CatalogItem, Rating.item_id == CatalogItem.id)
        .where(Rating.user_id == user_id, CatalogItem.kind == kind)
        .order_by(Rating.rated_at.desc(), Rating.id.desc())
    )
    return [
        RatingRecord(
            local_id=row.item_id,
            remote_id=row.remote_id,
            kind=row.kind,
            score=row.score,
            rated_at=row.rated_at,
        )
        for row in result.all()
    ]


async def record_rating(
    db: AsyncSession,
    user_id: int,
    local_item_id: int,
    score: int,
) -> Rating:
    """Create or overwrite the user's rating for an item.

    Raises:
        InvalidRatingError: score outside 1-5
        UserNotFoundError: no such user
    """
    if not RATING_MIN <= score <= RATING_MAX:
        raise InvalidRatingError(score)
    if await db.get(User, user_id) is None:
        raise UserNotFoundError(user_id)

    result = await db.execute(
        select(Rating).where(Rating.user_id == user_id, Rating.item_id == local_item_id)
    )
    rating = result.scalar_one_or_none()

    if rating is None:
        rating = Rating(user_id=user_id, item_id=local_item_id, score=score, rated_at=utcnow())
        db.add(rating)
    else:
        rating.score = score
        rating.rated_at = utcnow()

    await db.commit()
    await db.refresh(rating)
    return rating
