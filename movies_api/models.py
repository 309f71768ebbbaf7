"""SQLAlchemy table definitions.

``movies`` holds one row per movie; ``genres`` holds one row per (movie, genre)
pair. Column names follow the lowercase form the SQL statements use
(``yearofrelease``, ``movieid``).
"""

from __future__ import annotations

import uuid

from sqlalchemy import Column, ForeignKey, Integer, Table, Text, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class MovieRecord(Base):
    """Persisted movie row. The slug column is a lookup copy of the derived slug."""

    __tablename__ = "movies"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    slug: Mapped[str] = mapped_column(Text, index=True)
    title: Mapped[str] = mapped_column(Text)
    year_of_release: Mapped[int] = mapped_column("yearofrelease", Integer)

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"MovieRecord(id={self.id}, slug={self.slug})"


# No primary key: the same genre may be listed twice for one movie.
genres = Table(
    "genres",
    Base.metadata,
    Column("movieid", Uuid, ForeignKey("movies.id"), nullable=False, index=True),
    Column("name", Text, nullable=False),
)

movies = MovieRecord.__table__
