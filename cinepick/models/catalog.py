"""Cached catalog items (movies and TV shows)."""

import enum
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Enum, Float, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cinepick.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from cinepick.models.rating import Rating


class ItemKind(str, enum.Enum):
    """Kind of catalog item. Values match TMDB path segments."""

    MOVIE = "movie"
    TV = "tv"

    @property
    def label(self) -> str:
        return "movie" if self is ItemKind.MOVIE else "TV show"


class CatalogItem(Base, TimestampMixin):
    """Local copy of a TMDB record.

    ``id`` is the local identifier, assigned on first write and never changed.
    ``(kind, remote_id)`` identifies the item on TMDB.
    """

    __tablename__ = "catalog_items"

    id: Mapped[int] = mapped_column(primary_key=True)
    kind: Mapped[ItemKind] = mapped_column(Enum(ItemKind), nullable=False)
    remote_id: Mapped[int] = mapped_column(Integer, nullable=False)

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    genres: Mapped[list] = mapped_column(JSON, default=list)  # genre names
    language: Mapped[str | None] = mapped_column(String(10), nullable=True)
    vote_average: Mapped[float | None] = mapped_column(Float, nullable=True)  # 0-10
    vote_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    duration_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    # None = availability never fetched, [] = fetched, nothing in region
    providers: Mapped[list | None] = mapped_column(JSON, nullable=True)

    overview: Mapped[str | None] = mapped_column(Text, nullable=True)
    tagline: Mapped[str | None] = mapped_column(String(500), nullable=True)
    poster_path: Mapped[str | None] = mapped_column(String(255), nullable=True)
    popularity: Mapped[float | None] = mapped_column(Float, nullable=True)

    ratings: Mapped[list["Rating"]] = relationship(
        "Rating",
        back_populates="item",
        cascade="all, delete-orphan",
        lazy="select",
    )

    __table_args__ = (UniqueConstraint("kind", "remote_id", name="uq_catalog_item_kind_remote"),)

    def __repr__(self) -> str:
        return f"<CatalogItem(id={self.id}, kind={self.kind.value}, remote_id={self.remote_id})>"
