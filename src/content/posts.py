"""Blog post queries: sorted listings, prev/next links, tags and categories."""

from __future__ import annotations

from urllib.parse import quote

from coursesite.content import cache as keys
from coursesite.content.cache import ContentCache
from coursesite.content.courses import UNCATEGORIZED
from coursesite.content.models import Category, ContentKind, ContentRecord, PostSummary, Tag
from coursesite.content.ordering import by_published_date_descending, sort_records
from coursesite.content.store import ContentStore
from coursesite.content.visibility import BuildMode, should_include


def category_url(name: str) -> str:
    return f"/archive/category/{quote(name.strip(), safe='')}/"


class PostIndex:
    """Sorted, draft-filtered views over the ``posts`` collection."""

    def __init__(
        self,
        store: ContentStore,
        cache: ContentCache | None = None,
        mode: BuildMode | None = None,
    ) -> None:
        self.store = store
        self.mode = mode
        self.cache = cache or ContentCache(is_production=lambda: self._mode().is_production)

    def _mode(self) -> BuildMode:
        return self.mode or BuildMode.from_env()

    async def get_raw_sorted_posts(self) -> list[ContentRecord]:
        """Visible posts, newest first."""
        cached = self.cache.get(keys.POSTS)
        if cached is not None:
            return list(cached)

        posts = await self.store.query(
            ContentKind.POST, lambda r: should_include(r, self._mode())
        )
        result = sort_records(posts, by_published_date_descending)
        self.cache.set(keys.POSTS, "", result)
        return list(result)

    async def get_sorted_posts(self) -> list[ContentRecord]:
        """Newest-first posts with neighbour links filled in.

        ``next_*`` points at the newer neighbour and ``prev_*`` at the
        older one.
        """
        posts = await self.get_raw_sorted_posts()
        linked: list[ContentRecord] = []
        for i, post in enumerate(posts):
            update: dict[str, str] = {}
            if i > 0:
                update["next_slug"] = posts[i - 1].slug
                update["next_title"] = posts[i - 1].data.title
            if i < len(posts) - 1:
                update["prev_slug"] = posts[i + 1].slug
                update["prev_title"] = posts[i + 1].data.title
            linked.append(post.model_copy(update={"data": post.data.model_copy(update=update)}))
        return linked

    async def get_sorted_posts_list(self) -> list[PostSummary]:
        return [PostSummary(slug=p.slug, data=p.data) for p in await self.get_raw_sorted_posts()]

    async def get_tag_list(self) -> list[Tag]:
        """Tag usage counts, names sorted case-insensitively."""
        counts: dict[str, int] = {}
        for post in await self.get_raw_sorted_posts():
            for tag in post.data.tags:
                counts[tag] = counts.get(tag, 0) + 1
        return [Tag(name=name, count=counts[name]) for name in sorted(counts, key=str.lower)]

    async def get_category_list(self) -> list[Category]:
        counts: dict[str, int] = {}
        for post in await self.get_raw_sorted_posts():
            name = (post.data.category or "").strip() or UNCATEGORIZED
            counts[name] = counts.get(name, 0) + 1
        return [
            Category(name=name, count=counts[name], url=category_url(name))
            for name in sorted(counts, key=str.lower)
        ]
