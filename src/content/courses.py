"""Course, section and lesson queries.

Sections and lessons are matched to their course through the parent
references the store resolves at load time. Results are memoized in the
injected ContentCache.
"""

from __future__ import annotations

import asyncio
import logging
from urllib.parse import quote

from coursesite.content import cache as keys
from coursesite.content.cache import ContentCache
from coursesite.content.models import (
    Category,
    ContentKind,
    ContentRecord,
    CourseBundle,
    CourseLevel,
    NavigationResult,
)
from coursesite.content.ordering import (
    LessonOrder,
    by_explicit_order_ascending,
    by_global_lesson_order,
    by_published_date_descending,
    by_section_then_lesson_order,
    sort_records,
)
from coursesite.content.store import ContentStore
from coursesite.content.visibility import BuildMode, should_include

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Uncategorized"
LEVEL_ORDER = [CourseLevel.BEGINNER, CourseLevel.INTERMEDIATE, CourseLevel.ADVANCED]


def _count_url(prefix: str, name: str) -> str:
    return f"/courses/?{prefix}={quote(name, safe='')}"


class CourseIndex:
    """Sorted, draft-filtered views over the ``courses`` collection.

    Args:
        store: Content store to query.
        cache: Result cache; a private one is created when omitted.
        mode: Pinned build mode. When None the environment is read on
            every call.
        lesson_order: Ordering of lessons across sections.
    """

    def __init__(
        self,
        store: ContentStore,
        cache: ContentCache | None = None,
        mode: BuildMode | None = None,
        lesson_order: LessonOrder = LessonOrder.PATH,
    ) -> None:
        self.store = store
        self.mode = mode
        self.cache = cache or ContentCache(is_production=lambda: self._mode().is_production)
        self.lesson_order = lesson_order

    def _mode(self) -> BuildMode:
        return self.mode or BuildMode.from_env()

    def _visible(self, record: ContentRecord) -> bool:
        return should_include(record, self._mode())

    # ── Listings ─────────────────────────────────────────────────

    async def list_courses(self) -> list[ContentRecord]:
        """Visible courses, newest first."""
        cached = self.cache.get(keys.COURSES)
        if cached is not None:
            return list(cached)

        courses = await self.store.query(ContentKind.COURSE, self._visible)
        result = sort_records(courses, by_published_date_descending)
        self.cache.set(keys.COURSES, "", result)
        return list(result)

    async def list_sections(self, course_slug: str) -> list[ContentRecord]:
        """Sections of a course by ascending ``order``."""
        cached = self.cache.get(keys.COURSE_SECTIONS, course_slug)
        if cached is not None:
            return list(cached)

        sections = await self.store.query(
            ContentKind.SECTION,
            lambda r: r.course_id == course_slug and self._visible(r),
        )
        result = sort_records(sections, by_explicit_order_ascending)
        self.cache.set(keys.COURSE_SECTIONS, course_slug, result)
        return list(result)

    async def list_lessons(self, section_slug: str) -> list[ContentRecord]:
        """Visible lessons of one section by ascending ``order``."""
        cached = self.cache.get(keys.SECTION_LESSONS, section_slug)
        if cached is not None:
            return list(cached)

        lessons = await self.store.query(
            ContentKind.LESSON,
            lambda r: r.section_id == section_slug and self._visible(r),
        )
        result = sort_records(lessons, by_explicit_order_ascending)
        self.cache.set(keys.SECTION_LESSONS, section_slug, result)
        return list(result)

    async def list_all_lessons_for_course(self, course_slug: str) -> list[ContentRecord]:
        """Visible lessons of a course in reading order across sections."""
        cached = self.cache.get(keys.COURSE_LESSONS, course_slug)
        if cached is not None:
            return list(cached)

        lessons = await self.store.query(
            ContentKind.LESSON,
            lambda r: r.course_id == course_slug and self._visible(r),
        )
        if self.lesson_order == LessonOrder.SECTION:
            sections = await self.list_sections(course_slug)
            compare = by_section_then_lesson_order({s.slug: s.data.order for s in sections})
        else:
            compare = by_global_lesson_order
        result = sort_records(lessons, compare)
        self.cache.set(keys.COURSE_LESSONS, course_slug, result)
        return list(result)

    # ── Lookups ──────────────────────────────────────────────────

    async def get_course(self, slug: str) -> ContentRecord | None:
        """Return a visible course by slug, or None if not found."""
        for course in await self.list_courses():
            if course.slug == slug:
                return course
        return None

    async def get_lesson_count(self, course_slug: str) -> int:
        return len(await self.list_all_lessons_for_course(course_slug))

    async def get_course_bundle(self, course_slug: str) -> CourseBundle | None:
        """Fetch a course with its sections and lessons concurrently.

        Returns None when the course itself is not visible, whatever the
        sections and lessons contain.
        """
        course, sections, lessons = await asyncio.gather(
            self.get_course(course_slug),
            self.list_sections(course_slug),
            self.list_all_lessons_for_course(course_slug),
        )
        if course is None:
            return None
        return CourseBundle(course=course, sections=sections, lessons=lessons)

    async def get_lesson_navigation(
        self, course_slug: str, lesson_slug: str
    ) -> NavigationResult | None:
        """Previous/next lessons around ``lesson_slug``, or None if absent."""
        lessons = await self.list_all_lessons_for_course(course_slug)
        index = next((i for i, lesson in enumerate(lessons) if lesson.slug == lesson_slug), None)
        if index is None:
            logger.debug("Lesson %s not found in course %s", lesson_slug, course_slug)
            return None

        last = len(lessons) - 1
        return NavigationResult(
            current_lesson=lessons[index],
            previous_lesson=lessons[index - 1] if index > 0 else None,
            next_lesson=lessons[index + 1] if index < last else None,
            current_index=index,
            total_lessons=len(lessons),
            is_first=index == 0,
            is_last=index == last,
        )

    # ── Facets ───────────────────────────────────────────────────

    async def get_course_category_list(self) -> list[Category]:
        """Course counts per category, names sorted case-insensitively."""
        counts: dict[str, int] = {}
        for course in await self.list_courses():
            name = course.data.category.strip() or UNCATEGORIZED
            counts[name] = counts.get(name, 0) + 1

        return [
            Category(name=name, count=counts[name], url=_count_url("category", name))
            for name in sorted(counts, key=str.lower)
        ]

    async def get_course_level_list(self) -> list[Category]:
        """Course counts per level, Beginner to Advanced."""
        counts: dict[str, int] = {}
        for course in await self.list_courses():
            level = str(course.data.level)
            counts[level] = counts.get(level, 0) + 1

        return [
            Category(name=name, count=counts[name], url=_count_url("level", name))
            for name in sorted(counts, key=lambda name: LEVEL_ORDER.index(CourseLevel(name)))
        ]
