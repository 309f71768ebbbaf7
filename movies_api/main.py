"""FastAPI entrypoint exposing CRUD endpoints for movies."""

from __future__ import annotations

import logging
import re
import uuid
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request, Response, status
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from movies_api.core.config import get_settings
from movies_api.db import engine, init_models
from movies_api.services.models import Movie
from movies_api.services.movies import MovieService, get_movie_service

logger = logging.getLogger(__name__)

_HYPHENATED_UUID = r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
_UUID_LAYOUTS = re.compile(
    rf"[0-9a-fA-F]{{32}}|{_HYPHENATED_UUID}|\{{{_HYPHENATED_UUID}\}}|\({_HYPHENATED_UUID}\)"
)


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Ensure database tables before serving, release pooled connections after."""

    logger.info("Starting up Movies API...")
    init_models()
    yield
    logger.info("Shutting down Movies API...")
    engine.dispose()


app = FastAPI(title=get_settings().app_title, lifespan=lifespan)


class CamelModel(BaseModel):
    """Snake_case fields in Python, camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateMovieRequest(CamelModel):
    title: str = Field(..., min_length=1)
    year_of_release: int
    genres: list[str] = Field(default_factory=list)


class UpdateMovieRequest(CamelModel):
    title: str = Field(..., min_length=1)
    year_of_release: int
    genres: list[str] = Field(default_factory=list)


class MovieResponse(CamelModel):
    id: uuid.UUID
    title: str
    slug: str
    year_of_release: int
    genres: list[str]


class MoviesResponse(CamelModel):
    items: list[MovieResponse]


@app.post("/movies", response_model=MovieResponse, status_code=status.HTTP_201_CREATED)
def create_movie(
    payload: CreateMovieRequest,
    request: Request,
    response: Response,
    service: MovieService = Depends(get_movie_service),
) -> MovieResponse:
    movie = _request_to_movie(payload, movie_id=uuid.uuid4())
    service.create(movie)
    response.headers["Location"] = str(request.url_for("get_movie", id_or_slug=str(movie.id)))
    return _movie_to_response(movie)


@app.get("/movies/{id_or_slug}", response_model=MovieResponse)
def get_movie(
    id_or_slug: str,
    service: MovieService = Depends(get_movie_service),
) -> MovieResponse:
    """Look up by id when the parameter parses as a UUID, otherwise by slug."""

    movie_id = _parse_uuid(id_or_slug)
    if movie_id is not None:
        movie = service.get_by_id(movie_id)
    else:
        movie = service.get_by_slug(id_or_slug)
    if movie is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=id_or_slug)
    return _movie_to_response(movie)


@app.get("/movies", response_model=MoviesResponse)
def list_movies(service: MovieService = Depends(get_movie_service)) -> MoviesResponse:
    movies = service.get_all()
    return MoviesResponse(items=[_movie_to_response(movie) for movie in movies])


@app.put("/movies/{movie_id}", response_model=MovieResponse)
def update_movie(
    movie_id: uuid.UUID,
    payload: UpdateMovieRequest,
    service: MovieService = Depends(get_movie_service),
) -> MovieResponse:
    movie = _request_to_movie(payload, movie_id=movie_id)
    updated = service.update(movie)
    if updated is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(movie_id))
    return _movie_to_response(updated)


@app.delete("/movies/{movie_id}")
def delete_movie(
    movie_id: uuid.UUID,
    service: MovieService = Depends(get_movie_service),
) -> Response:
    if not service.delete_by_id(movie_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(movie_id))
    return Response(status_code=status.HTTP_200_OK)


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "healthy"}


def _request_to_movie(
    payload: CreateMovieRequest | UpdateMovieRequest, *, movie_id: uuid.UUID
) -> Movie:
    return Movie(
        id=movie_id,
        title=payload.title,
        year_of_release=payload.year_of_release,
        genres=list(payload.genres),
    )


def _movie_to_response(movie: Movie) -> MovieResponse:
    return MovieResponse(
        id=movie.id,
        title=movie.title,
        slug=movie.slug,
        year_of_release=movie.year_of_release,
        genres=list(movie.genres),
    )


def _parse_uuid(raw: str) -> uuid.UUID | None:
    """Parse ``raw`` only when it is a 32-digit, hyphenated, braced or parenthesized UUID."""

    if not _UUID_LAYOUTS.fullmatch(raw):
        return None
    return uuid.UUID(raw.strip("{}()"))
