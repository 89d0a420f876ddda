"""Content domain models: pure Pydantic v2 data types.

Front matter schemas for the two collections (``posts`` and ``courses``),
the loaded ContentRecord, and the derived shapes produced by the index
layer (navigation, archive and feed items, tag and category counts).
No I/O happens here.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, time
from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, PositiveInt


def _date_to_datetime(value: Any) -> Any:
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime.combine(value, time.min)
    return value


def _to_naive_utc(value: datetime) -> datetime:
    # Mixed aware/naive values would not compare.
    if value.tzinfo is not None:
        return value.astimezone(UTC).replace(tzinfo=None)
    return value


Timestamp = Annotated[
    datetime,
    BeforeValidator(_date_to_datetime),
    AfterValidator(_to_naive_utc),
]


class ContentKind(StrEnum):
    """Kind of a loaded content record."""

    POST = "post"
    COURSE = "course"
    SECTION = "section"
    LESSON = "lesson"


class CourseLevel(StrEnum):
    """Difficulty level of a course."""

    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


# ---------------------------------------------------------------------------
# Front matter schemas
# ---------------------------------------------------------------------------


class _FrontMatter(BaseModel):
    model_config = ConfigDict(frozen=True)


class PostData(_FrontMatter):
    """Front matter of a blog post."""

    title: str
    published: Timestamp
    updated: Timestamp | None = None
    draft: bool = False
    description: str = ""
    image: str = ""
    tags: list[str] = Field(default_factory=list)
    category: str | None = ""
    lang: str = ""

    # Filled in by the post index
    prev_title: str = ""
    prev_slug: str = ""
    next_title: str = ""
    next_slug: str = ""


class CourseData(_FrontMatter):
    """Front matter of a course landing page."""

    title: str
    description: str
    image: str | None = None
    level: CourseLevel
    category: str
    published: Timestamp
    updated: Timestamp | None = None
    draft: bool = False


class SectionData(_FrontMatter):
    """Front matter of a course section. Sections carry no draft flag."""

    title: str
    description: str | None = None
    order: PositiveInt


class LessonData(_FrontMatter):
    """Front matter of a single lesson."""

    title: str
    order: PositiveInt
    published: Timestamp
    updated: Timestamp | None = None
    draft: bool = False

    prev_title: str = ""
    prev_slug: str = ""
    next_title: str = ""
    next_slug: str = ""


RecordData = PostData | CourseData | SectionData | LessonData

SCHEMAS: dict[ContentKind, type[_FrontMatter]] = {
    ContentKind.POST: PostData,
    ContentKind.COURSE: CourseData,
    ContentKind.SECTION: SectionData,
    ContentKind.LESSON: LessonData,
}


# ---------------------------------------------------------------------------
# Loaded records
# ---------------------------------------------------------------------------


class ContentRecord(BaseModel):
    """A content file loaded from disk.

    ``id`` is the path relative to the collection root and ``slug`` is the
    same path without extension or trailing ``/index``. Sections and
    lessons carry explicit parent references resolved at load time:
    ``course_id`` is the owning course slug and ``section_id`` the owning
    section slug.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    slug: str
    kind: ContentKind
    data: RecordData
    body: str = ""
    course_id: str | None = None
    section_id: str | None = None

    @property
    def has_draft_field(self) -> bool:
        return "draft" in type(self.data).model_fields

    @property
    def is_draft(self) -> bool:
        return getattr(self.data, "draft", False) is True


class SkippedRecord(BaseModel):
    """A content file excluded from the store, with the reason."""

    path: str
    slug: str
    reason: str


class LoadReport(BaseModel):
    """Outcome of loading a content directory: valid records and skips."""

    records: list[ContentRecord] = Field(default_factory=list)
    skipped: list[SkippedRecord] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Derived shapes
# ---------------------------------------------------------------------------


class PostSummary(BaseModel):
    """A post without its body, for list pages."""

    slug: str
    data: PostData


class NavigationResult(BaseModel):
    """Previous/next links around a lesson within its course."""

    current_lesson: ContentRecord
    previous_lesson: ContentRecord | None = None
    next_lesson: ContentRecord | None = None
    current_index: int
    total_lessons: int
    is_first: bool
    is_last: bool


class CourseBundle(BaseModel):
    """A course with its sections and its globally ordered lessons."""

    course: ContentRecord
    sections: list[ContentRecord] = Field(default_factory=list)
    lessons: list[ContentRecord] = Field(default_factory=list)


class ArchiveItemData(BaseModel):
    title: str
    published: datetime
    tags: list[str] | None = None
    category: str | None = None
    course_title: str | None = None
    section_title: str | None = None


class ArchiveItem(BaseModel):
    """Type-tagged projection of a post, course or lesson for the timeline."""

    slug: str
    type: Literal["post", "course", "lesson"]
    data: ArchiveItemData


class FeedItemData(BaseModel):
    title: str
    published: datetime
    updated: datetime | None = None
    tags: list[str] | None = None
    category: str | None = None
    description: str | None = None
    image: str | None = None
    draft: bool | None = None
    level: str | None = None
    total_lessons: int | None = None


class FeedItem(BaseModel):
    """Home feed entry: a post, or the pinned course."""

    type: Literal["post", "course"]
    entry: ContentRecord
    slug: str
    data: FeedItemData


class Tag(BaseModel):
    name: str
    count: int


class Category(BaseModel):
    """A named bucket with its entry count and listing URL."""

    name: str
    count: int
    url: str


class PinnedCourseConfig(BaseModel):
    """[pinned_course] section: a course promoted to the top of the home feed."""

    enable: bool = False
    course_slug: str = ""
