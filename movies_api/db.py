"""Database connections, schema setup and the movie repository."""

from __future__ import annotations

import logging
import uuid
from typing import Iterable

from sqlalchemy import Connection, Engine, create_engine, delete, func, insert, select, update

from movies_api.core.config import get_settings
from movies_api.models import Base, MovieRecord, genres, movies
from movies_api.services.models import Movie

logger = logging.getLogger(__name__)

# ASCII unit separator; genre names may contain commas.
_GENRE_SEPARATOR = "\x1f"


def _database_url() -> str:
    """Return the SQLAlchemy URL from settings (defaults to local SQLite for dev)."""
    return get_settings().database_url


engine = create_engine(_database_url(), echo=get_settings().database_echo, future=True)


class ConnectionFactory:
    """Hands out pooled connections from a single engine."""

    def __init__(self, bind: Engine) -> None:
        self.engine = bind

    def create_connection(self) -> Connection:
        return self.engine.connect()


_connection_factory = ConnectionFactory(engine)


def get_connection_factory() -> ConnectionFactory:
    """FastAPI dependency returning the process-wide connection factory."""

    return _connection_factory


def init_models(bind: Engine | None = None) -> None:
    """Create tables and the slug index if they do not exist."""

    Base.metadata.create_all(bind=bind or engine)


class MovieRepository:
    """Parameterized SQL over the ``movies`` and ``genres`` tables.

    Every public method opens its own connection. Writes run in a single
    transaction that commits only when all statements succeed and rolls back
    on any exception; database errors are not caught here.
    """

    def __init__(self, connections: ConnectionFactory) -> None:
        self._connections = connections

    def create(self, movie: Movie) -> bool:
        with self._connections.create_connection() as connection, connection.begin():
            result = connection.execute(
                insert(movies).values(
                    {
                        MovieRecord.id: movie.id,
                        MovieRecord.slug: movie.slug,
                        MovieRecord.title: movie.title,
                        MovieRecord.year_of_release: movie.year_of_release,
                    }
                )
            )
            created = result.rowcount > 0
            if created:
                self._insert_genres(connection, movie.id, movie.genres)
        logger.debug("Inserted movie %s (created=%s)", movie.id, created)
        return created

    def get_by_id(self, movie_id: uuid.UUID) -> Movie | None:
        query = select(MovieRecord.id, MovieRecord.title, MovieRecord.year_of_release).where(
            MovieRecord.id == movie_id
        )
        with self._connections.create_connection() as connection:
            row = connection.execute(query).one_or_none()
            if row is None:
                return None
            return self._with_genres(connection, row)

    def get_by_slug(self, slug: str) -> Movie | None:
        query = (
            select(MovieRecord.id, MovieRecord.title, MovieRecord.year_of_release)
            .where(MovieRecord.slug == slug)
            .limit(1)
        )
        with self._connections.create_connection() as connection:
            row = connection.execute(query).first()
            if row is None:
                return None
            return self._with_genres(connection, row)

    def get_all(self) -> list[Movie]:
        query = (
            select(
                MovieRecord.id,
                MovieRecord.title,
                MovieRecord.year_of_release,
                func.aggregate_strings(genres.c.name, _GENRE_SEPARATOR).label("genres"),
            )
            .select_from(MovieRecord)
            .outerjoin(genres, genres.c.movieid == MovieRecord.id)
            .group_by(MovieRecord.id, MovieRecord.title, MovieRecord.year_of_release)
        )
        with self._connections.create_connection() as connection:
            rows = connection.execute(query).all()
        return [
            Movie(
                id=movie_id,
                title=title,
                year_of_release=year_of_release,
                genres=_split_genres(aggregated),
            )
            for movie_id, title, year_of_release, aggregated in rows
        ]

    def delete_by_id(self, movie_id: uuid.UUID) -> bool:
        with self._connections.create_connection() as connection, connection.begin():
            connection.execute(delete(genres).where(genres.c.movieid == movie_id))
            result = connection.execute(delete(movies).where(MovieRecord.id == movie_id))
            deleted = result.rowcount > 0
        logger.debug("Deleted movie %s (deleted=%s)", movie_id, deleted)
        return deleted

    def update(self, movie: Movie) -> bool:
        """Overwrite title/year/slug and replace the genre rows.

        Genre rows are only rewritten when the movie row exists.
        """

        with self._connections.create_connection() as connection, connection.begin():
            result = connection.execute(
                update(movies)
                .where(MovieRecord.id == movie.id)
                .values(
                    {
                        MovieRecord.slug: movie.slug,
                        MovieRecord.title: movie.title,
                        MovieRecord.year_of_release: movie.year_of_release,
                    }
                )
            )
            updated = result.rowcount > 0
            if updated:
                connection.execute(delete(genres).where(genres.c.movieid == movie.id))
                self._insert_genres(connection, movie.id, movie.genres)
        logger.debug("Updated movie %s (updated=%s)", movie.id, updated)
        return updated

    def exists_by_id(self, movie_id: uuid.UUID) -> bool:
        query = select(func.count()).select_from(MovieRecord).where(MovieRecord.id == movie_id)
        with self._connections.create_connection() as connection:
            return connection.execute(query).scalar_one() > 0

    @staticmethod
    def _insert_genres(connection: Connection, movie_id: uuid.UUID, names: Iterable[str]) -> None:
        params = [{"movieid": movie_id, "name": name} for name in names]
        if params:
            connection.execute(insert(genres), params)

    @staticmethod
    def _with_genres(connection: Connection, row) -> Movie:
        movie_id, title, year_of_release = row
        names = connection.execute(
            select(genres.c.name).where(genres.c.movieid == movie_id)
        ).scalars()
        return Movie(
            id=movie_id,
            title=title,
            year_of_release=year_of_release,
            genres=list(names),
        )


def _split_genres(raw: str | None) -> list[str]:
    if not raw:
        return []
    return raw.split(_GENRE_SEPARATOR)
