"""Slug helpers for course content paths.

Course sections and lessons are stored as ``course/01-section/02-lesson``;
the numeric prefixes drive file ordering and are stripped for display URLs.
"""

from __future__ import annotations

import re

_NUMERIC_PREFIX_RE = re.compile(r"^\d+-")


def clean_slug(slug: str) -> str:
    """Remove a numeric ordering prefix (``01-intro`` -> ``intro``)."""
    return _NUMERIC_PREFIX_RE.sub("", slug, count=1)


def has_numeric_prefix(slug: str) -> bool:
    return _NUMERIC_PREFIX_RE.match(slug) is not None


def extract_slug_parts(full_slug: str) -> dict[str, str | None]:
    """Split ``course/section/lesson`` into cleaned parts.

    Missing parts are ``None``; the course part is kept as-is.
    """
    parts = full_slug.split("/")
    return {
        "course": parts[0] or None,
        "section": clean_slug(parts[1]) if len(parts) > 1 and parts[1] else None,
        "lesson": clean_slug(parts[2]) if len(parts) > 2 and parts[2] else None,
    }


def extract_cleaned_last_part(full_slug: str) -> str:
    last = full_slug.split("/")[-1] or full_slug
    return clean_slug(last)


def build_clean_path(course: str, section: str | None = None, lesson: str | None = None) -> str:
    """Join course, section and lesson slugs with prefixes stripped."""
    path_parts = [course]
    if section:
        path_parts.append(clean_slug(section))
    if lesson:
        path_parts.append(clean_slug(lesson))
    return "/".join(path_parts)
