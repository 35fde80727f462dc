"""SQLAlchemy ORM model for the favorite movies table.

The table is intentionally flat: one row per movie the user marked as a
favorite, keyed by the identity assigned by the movie-metadata source.  The
remaining columns are passed through verbatim from that source so the client
can render a favorite without a second lookup.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


def utcnow():
    """Return current UTC datetime."""
    return datetime.now(timezone.utc)


class FavoriteMovie(Base):
    """A movie persisted in the user's favorites list."""

    __tablename__ = "favorites"
    __table_args__ = (
        UniqueConstraint("movie_id", name="uq_favorites_movie_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    movie_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        doc="Identity assigned by the movie-metadata source.",
    )
    title: Mapped[str] = mapped_column(String, nullable=False)
    poster_path: Mapped[str | None] = mapped_column(String, nullable=True)
    release_date: Mapped[str | None] = mapped_column(String, nullable=True)
    overview: Mapped[str | None] = mapped_column(Text, nullable=True)
    vote_average: Mapped[float | None] = mapped_column(Float, nullable=True)
    vote_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    genre_ids: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        doc=(
            "JSON encoded list of genre identifiers.  Kept as text so the"
            " stored order is exactly the order supplied by the client."
        ),
    )
    original_language: Mapped[str | None] = mapped_column(String, nullable=True)
    popularity: Mapped[float | None] = mapped_column(Float, nullable=True)
    backdrop_path: Mapped[str | None] = mapped_column(String, nullable=True)
    adult: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    video: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    original_title: Mapped[str | None] = mapped_column(String, nullable=True)
    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<FavoriteMovie movie_id={self.movie_id} title={self.title!r}>"


__all__ = ["Base", "FavoriteMovie", "utcnow"]
