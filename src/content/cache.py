"""In-process memo for index results.

One key-space per aggregate kind. The whole cache shares a single
freshness timestamp: once it expires every key-space is dropped on the
next write. Time-to-live is infinite for production builds and zero
otherwise, resolved on every read.

Instances are created by the caller and passed to the index classes.
All access happens on one event loop, so there is no locking.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable
from typing import Any

from coursesite.content.visibility import BuildMode

logger = logging.getLogger(__name__)

COURSES = "courses"
COURSE_SECTIONS = "course_sections"
COURSE_LESSONS = "course_lessons"
SECTION_LESSONS = "section_lessons"
POSTS = "posts"

KEY_SPACES = (COURSES, COURSE_SECTIONS, COURSE_LESSONS, SECTION_LESSONS, POSTS)


def _production_from_env() -> bool:
    return BuildMode.from_env().is_production


class ContentCache:
    """Key-space partitioned cache with a build-mode dependent TTL."""

    def __init__(
        self,
        is_production: Callable[[], bool] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._is_production = is_production or _production_from_env
        self._clock = clock
        self._spaces: dict[str, dict[str, Any]] = {name: {} for name in KEY_SPACES}
        self._stamp: float | None = None
        self.hits = 0
        self.misses = 0

    @property
    def ttl(self) -> float:
        return math.inf if self._is_production() else 0.0

    def _is_fresh(self) -> bool:
        if self._stamp is None:
            return False
        return self._clock() - self._stamp < self.ttl

    def get(self, space: str, key: str = "") -> Any | None:
        """Return the cached value, or None on a miss or after expiry."""
        if self._is_fresh() and key in self._spaces[space]:
            self.hits += 1
            return self._spaces[space][key]
        self.misses += 1
        return None

    def set(self, space: str, key: str, value: Any) -> None:
        if not self._is_fresh():
            self._reset_spaces()
            self._stamp = self._clock()
        self._spaces[space][key] = value

    def clear(self) -> None:
        """Drop every key-space and the freshness timestamp."""
        self._reset_spaces()
        self._stamp = None
        logger.debug("Content cache cleared")

    def size(self, space: str | None = None) -> int:
        if space is not None:
            return len(self._spaces[space])
        return sum(len(entries) for entries in self._spaces.values())

    def _reset_spaces(self) -> None:
        for entries in self._spaces.values():
            entries.clear()
