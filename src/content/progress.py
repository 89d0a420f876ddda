"""JSON-backed course progress store.

Persists per-course lesson completion in a single JSON file, loaded on
init and saved after every write operation.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

PROGRESS_FILENAME = ".coursesite-progress.json"


def _now() -> datetime:
    return datetime.now(tz=UTC)


class CourseProgress(BaseModel):
    """Completion state of one course."""

    completed_lessons: list[str] = Field(default_factory=list)
    last_viewed_lesson: str | None = None
    started_at: datetime = Field(default_factory=_now)
    last_updated: datetime = Field(default_factory=_now)


class _ProgressData(BaseModel):
    """Internal wrapper for JSON serialization."""

    courses: dict[str, CourseProgress] = Field(default_factory=dict)


class ProgressStore:
    """Tracks completed lessons per course slug."""

    def __init__(self, output_dir: Path) -> None:
        self._path = output_dir / PROGRESS_FILENAME
        self._data = self._load()

    # ── Private helpers ──────────────────────────────────────────

    def _load(self) -> _ProgressData:
        if not self._path.exists():
            return _ProgressData()
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            return _ProgressData.model_validate(raw)
        except (json.JSONDecodeError, ValueError, KeyError):
            logger.warning("Corrupt progress file at %s, starting fresh", self._path)
            return _ProgressData()

    def _save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            self._data.model_dump_json(indent=2),
            encoding="utf-8",
        )

    # ── Write operations ─────────────────────────────────────────

    def mark_completed(self, course_slug: str, lesson_slug: str) -> None:
        """Record a completed lesson and make it the last viewed one."""
        progress = self._data.courses.setdefault(course_slug, CourseProgress())
        if lesson_slug not in progress.completed_lessons:
            progress.completed_lessons.append(lesson_slug)
        progress.last_viewed_lesson = lesson_slug
        progress.last_updated = _now()
        self._save()

    def reset(self, course_slug: str) -> None:
        """Forget all progress for a course. No-op for unknown slugs."""
        if self._data.courses.pop(course_slug, None) is not None:
            self._save()

    # ── Read operations ──────────────────────────────────────────

    def get(self, course_slug: str) -> CourseProgress:
        """Return progress for a course, or a fresh empty record."""
        return self._data.courses.get(course_slug) or CourseProgress()

    def all(self) -> dict[str, CourseProgress]:
        return dict(self._data.courses)

    def is_completed(self, course_slug: str, lesson_slug: str) -> bool:
        return lesson_slug in self.get(course_slug).completed_lessons

    def last_viewed(self, course_slug: str) -> str | None:
        return self.get(course_slug).last_viewed_lesson

    def is_started(self, course_slug: str) -> bool:
        return bool(self.get(course_slug).completed_lessons)

    def completion_percentage(self, course_slug: str, total_lessons: int) -> int:
        """Rounded share of completed lessons; 0 for an empty course."""
        if total_lessons == 0:
            return 0
        done = len(self.get(course_slug).completed_lessons)
        # Half rounds up
        return int(done * 100 / total_lessons + 0.5)

    def is_course_completed(self, course_slug: str, total_lessons: int) -> bool:
        done = len(self.get(course_slug).completed_lessons)
        return total_lessons > 0 and done >= total_lessons
