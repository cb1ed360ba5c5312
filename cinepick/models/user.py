"""User model."""

from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cinepick.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from cinepick.models.preferences import UserPreferences
    from cinepick.models.rating import Rating


class User(Base, TimestampMixin):
    """A person using the recommender on this machine."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, index=True)

    ratings: Mapped[list["Rating"]] = relationship(
        "Rating",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="select",
    )
    preferences: Mapped[list["UserPreferences"]] = relationship(
        "UserPreferences",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="select",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, name={self.name})>"
