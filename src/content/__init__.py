"""Content domain: records, the filesystem store and the index layer.

The store loads posts and course material from Markdown files; the
index classes answer sorted, draft-filtered queries over them and
memoize results in a ContentCache.
"""

from coursesite.content.models import (
    ArchiveItem,
    Category,
    ContentKind,
    ContentRecord,
    CourseBundle,
    CourseLevel,
    FeedItem,
    LoadReport,
    NavigationResult,
    PinnedCourseConfig,
    SkippedRecord,
    Tag,
)
from coursesite.content.cache import ContentCache
from coursesite.content.ordering import LessonOrder
from coursesite.content.visibility import BuildMode
from coursesite.content.store import ContentStore
from coursesite.content.courses import CourseIndex
from coursesite.content.posts import PostIndex
from coursesite.content.archive import ArchiveIndex
from coursesite.content.progress import ProgressStore

__all__ = [
    "ArchiveIndex",
    "ArchiveItem",
    "BuildMode",
    "Category",
    "ContentCache",
    "ContentKind",
    "ContentRecord",
    "ContentStore",
    "CourseBundle",
    "CourseIndex",
    "CourseLevel",
    "FeedItem",
    "LessonOrder",
    "LoadReport",
    "NavigationResult",
    "PinnedCourseConfig",
    "PostIndex",
    "ProgressStore",
    "SkippedRecord",
    "Tag",
]
