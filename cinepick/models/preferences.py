"""Per-user, per-kind taste preferences."""

from typing import TYPE_CHECKING

from sqlalchemy import JSON, Enum, Float, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cinepick.models.base import Base, TimestampMixin
from cinepick.models.catalog import ItemKind

if TYPE_CHECKING:
    from cinepick.models.user import User


class UserPreferences(Base, TimestampMixin):
    """Stored preferences. Every column is nullable; NULL means "Any"."""

    __tablename__ = "user_preferences"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    kind: Mapped[ItemKind] = mapped_column(Enum(ItemKind), nullable=False)

    genres: Mapped[list | None] = mapped_column(JSON, nullable=True)
    languages: Mapped[list | None] = mapped_column(JSON, nullable=True)
    year_min: Mapped[int | None] = mapped_column(Integer, nullable=True)
    year_max: Mapped[int | None] = mapped_column(Integer, nullable=True)
    duration_min: Mapped[int | None] = mapped_column(Integer, nullable=True)
    duration_max: Mapped[int | None] = mapped_column(Integer, nullable=True)
    min_rating: Mapped[float | None] = mapped_column(Float, nullable=True)
    providers: Mapped[list | None] = mapped_column(JSON, nullable=True)

    user: Mapped["User"] = relationship("User", back_populates="preferences")

    __table_args__ = (UniqueConstraint("user_id", "kind", name="uq_preferences_user_kind"),)

    def __repr__(self) -> str:
        return f"<UserPreferences(user_id={self.user_id}, kind={self.kind.value})>"
