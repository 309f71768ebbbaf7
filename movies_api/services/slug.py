"""URL-safe slugs derived from a movie's title and release year."""

from __future__ import annotations

import re

# Single character class, no quantifiers: matching stays linear in the title.
_NON_SLUG_CHARS = re.compile(r"[^a-zA-Z0-9_-]")


def generate_slug(title: str, year: int) -> str:
    """Return ``title`` with every non ``[A-Za-z0-9_-]`` char dashed, lowercased, plus ``-{year}``.

    >>> generate_slug("The Matrix", 1999)
    'the-matrix-1999'
    """

    slugged_title = _NON_SLUG_CHARS.sub("-", title).lower()
    return f"{slugged_title}-{year}"
