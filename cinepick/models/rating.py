"""User ratings of catalog items."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cinepick.models.base import Base, utcnow

if TYPE_CHECKING:
    from cinepick.models.catalog import CatalogItem
    from cinepick.models.user import User


class Rating(Base):
    """One score (1-5) per user and item; the latest write wins.

    ``rated_at`` is refreshed on every overwrite and drives seed recency.
    """

    __tablename__ = "ratings"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    item_id: Mapped[int] = mapped_column(ForeignKey("catalog_items.id", ondelete="CASCADE"))
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    rated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    user: Mapped["User"] = relationship("User", back_populates="ratings")
    item: Mapped["CatalogItem"] = relationship("CatalogItem", back_populates="ratings")

    __table_args__ = (
        UniqueConstraint("user_id", "item_id", name="uq_rating_user_item"),
        Index("ix_rating_user_rated_at", "user_id", "rated_at"),
    )

    def __repr__(self) -> str:
        return f"<Rating(user_id={self.user_id}, item_id={self.item_id}, score={self.score})>"
