"""Shared dataclasses for service layer."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from movies_api.services.slug import generate_slug


@dataclass(slots=True)
class Movie:
    """A movie record as handled between the HTTP layer and the repository."""

    id: uuid.UUID
    title: str
    year_of_release: int
    genres: list[str] = field(default_factory=list)

    @property
    def slug(self) -> str:
        return generate_slug(self.title, self.year_of_release)
