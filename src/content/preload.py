"""Cache warm-up for course pages.

Each helper runs the course queries a page will need so later calls are
served from the ContentCache. Only useful for production builds; with a
zero TTL the warmed entries expire immediately.
"""

from __future__ import annotations

import asyncio
import logging

from coursesite.content.courses import CourseIndex

logger = logging.getLogger(__name__)

HOMEPAGE_COURSE_COUNT = 5


async def preload_course_data(index: CourseIndex, course_slugs: list[str]) -> None:
    """Fetch sections and lessons for every slug concurrently."""
    await asyncio.gather(
        *(
            asyncio.gather(
                index.list_sections(slug),
                index.list_all_lessons_for_course(slug),
            )
            for slug in course_slugs
        )
    )


async def preload_course_detail(index: CourseIndex, course_slug: str) -> None:
    """Warm sections and lessons for one course detail page."""
    await preload_course_data(index, [course_slug])


async def preload_lesson_navigation(index: CourseIndex, course_slug: str) -> None:
    """Warm the reading-order lessons that lesson prev/next links use."""
    await preload_course_data(index, [course_slug])


async def preload_courses_page(index: CourseIndex) -> None:
    courses = await index.list_courses()
    await preload_course_data(index, [course.slug for course in courses])


async def batch_preload_course_data(
    index: CourseIndex, course_slugs: list[str], batch_size: int = 3
) -> None:
    """Preload in sequential batches of ``batch_size`` courses."""
    for start in range(0, len(course_slugs), batch_size):
        await preload_course_data(index, course_slugs[start : start + batch_size])


async def preload_homepage(index: CourseIndex) -> None:
    """Best-effort warm-up of the most recent courses.

    Failures are logged and swallowed; the home page renders without a
    warm cache.
    """
    try:
        courses = await index.list_courses()
        recent = [course.slug for course in courses[:HOMEPAGE_COURSE_COUNT]]
        if recent:
            await batch_preload_course_data(index, recent, batch_size=2)
    except Exception as exc:
        logger.warning("Failed to preload homepage data: %s", exc)
