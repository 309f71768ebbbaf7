"""Service layer sitting between the HTTP routes and the repository."""

from __future__ import annotations

import logging
import uuid

from fastapi import Depends

from movies_api.db import ConnectionFactory, MovieRepository, get_connection_factory
from movies_api.services.models import Movie

logger = logging.getLogger(__name__)


class MovieService:
    """Pass-through to :class:`MovieRepository`, except ``update`` checks existence first."""

    def __init__(self, repository: MovieRepository) -> None:
        self._repository = repository

    def create(self, movie: Movie) -> bool:
        created = self._repository.create(movie)
        if created:
            logger.info("Created movie %s (%s)", movie.id, movie.slug)
        return created

    def get_by_id(self, movie_id: uuid.UUID) -> Movie | None:
        return self._repository.get_by_id(movie_id)

    def get_by_slug(self, slug: str) -> Movie | None:
        return self._repository.get_by_slug(slug)

    def get_all(self) -> list[Movie]:
        return self._repository.get_all()

    def update(self, movie: Movie) -> Movie | None:
        """Return the updated movie, or ``None`` when no movie has ``movie.id``."""

        if not self._repository.exists_by_id(movie.id):
            logger.info("Update skipped, movie %s does not exist", movie.id)
            return None
        # The row can disappear between the existence check and the write.
        if not self._repository.update(movie):
            return None
        logger.info("Updated movie %s (%s)", movie.id, movie.slug)
        return movie

    def delete_by_id(self, movie_id: uuid.UUID) -> bool:
        deleted = self._repository.delete_by_id(movie_id)
        if deleted:
            logger.info("Deleted movie %s", movie_id)
        return deleted


def get_movie_service(
    connections: ConnectionFactory = Depends(get_connection_factory),
) -> MovieService:
    """FastAPI dependency building a service bound to the request's connection factory."""

    return MovieService(MovieRepository(connections))
