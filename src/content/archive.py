"""Cross-collection feeds: the archive timeline and the home feed."""

from __future__ import annotations

import logging

from coursesite.content.courses import CourseIndex
from coursesite.content.models import (
    ArchiveItem,
    ArchiveItemData,
    ContentRecord,
    FeedItem,
    FeedItemData,
    PinnedCourseConfig,
)
from coursesite.content.ordering import by_published_date_descending, sort_records
from coursesite.content.posts import PostIndex

logger = logging.getLogger(__name__)


class ArchiveIndex:
    """Combines the post and course indexes into mixed-type feeds."""

    def __init__(
        self,
        courses: CourseIndex,
        posts: PostIndex,
        pinned: PinnedCourseConfig | None = None,
    ) -> None:
        self.courses = courses
        self.posts = posts
        self.pinned = pinned or PinnedCourseConfig()

    async def get_combined_archive(self) -> list[ArchiveItem]:
        """Posts, courses and lessons in one newest-first timeline."""
        posts = await self.posts.get_raw_sorted_posts()
        courses = await self.courses.list_courses()

        items: list[ArchiveItem] = [
            ArchiveItem(
                slug=post.slug,
                type="post",
                data=ArchiveItemData(
                    title=post.data.title,
                    published=post.data.published,
                    tags=post.data.tags,
                    category=post.data.category or None,
                ),
            )
            for post in posts
        ]
        items.extend(
            ArchiveItem(
                slug=course.slug,
                type="course",
                data=ArchiveItemData(
                    title=course.data.title,
                    published=course.data.published,
                    category=course.data.category,
                ),
            )
            for course in courses
        )

        for course in courses:
            for section in await self.courses.list_sections(course.slug):
                for lesson in await self.courses.list_lessons(section.slug):
                    items.append(
                        ArchiveItem(
                            slug=lesson.slug,
                            type="lesson",
                            data=ArchiveItemData(
                                title=lesson.data.title,
                                published=lesson.data.published,
                                course_title=course.data.title,
                                section_title=section.data.title,
                            ),
                        )
                    )

        return sort_records(items, by_published_date_descending)

    async def get_feed_with_pinned_course(self) -> list[FeedItem]:
        """Newest-first posts, led by the configured pinned course.

        A pinned course that cannot be resolved is logged and left out;
        the posts are still returned.
        """
        posts = await self.posts.get_raw_sorted_posts()
        feed: list[FeedItem] = []

        pinned = await self._resolve_pinned()
        if pinned is not None:
            feed.append(pinned)

        feed.extend(_post_feed_item(post) for post in posts)
        return feed

    async def _resolve_pinned(self) -> FeedItem | None:
        slug = self.pinned.course_slug
        if not (self.pinned.enable and slug):
            return None
        try:
            course = await self.courses.get_course(slug)
            if course is None:
                logger.warning("Pinned course %s not found", slug)
                return None
            total_lessons = await self.courses.get_lesson_count(course.slug)
        except Exception as exc:
            logger.warning("Failed to load pinned course %s: %s", slug, exc)
            return None

        return FeedItem(
            type="course",
            entry=course,
            slug=course.slug,
            data=FeedItemData(
                title=course.data.title,
                published=course.data.published,
                updated=course.data.updated,
                category=course.data.category,
                description=course.data.description,
                image=course.data.image,
                draft=course.data.draft,
                level=str(course.data.level),
                total_lessons=total_lessons,
            ),
        )


def _post_feed_item(post: ContentRecord) -> FeedItem:
    return FeedItem(
        type="post",
        entry=post,
        slug=post.slug,
        data=FeedItemData(
            title=post.data.title,
            published=post.data.published,
            updated=post.data.updated,
            tags=post.data.tags,
            category=post.data.category or None,
            description=post.data.description,
            image=post.data.image,
            draft=post.data.draft,
        ),
    )
