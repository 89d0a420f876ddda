"""Comparators and sorting for content records.

Comparators follow the ``cmp(a, b) -> int`` convention. Records of
different kinds compare equal, so callers filter by kind before sorting.
Sorting is stable: ties keep input order.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from enum import StrEnum
from functools import cmp_to_key
from typing import Any, TypeVar

from coursesite.content.models import ContentKind, ContentRecord

T = TypeVar("T")

Comparator = Callable[[Any, Any], int]

MERGE_SORT_THRESHOLD = 50


class LessonOrder(StrEnum):
    """How lessons are ordered across the sections of a course."""

    PATH = "path"  # section path segment, lexicographic
    SECTION = "section"  # owning section's declared order


def _cmp(x: Any, y: Any) -> int:
    return (x > y) - (x < y)


def _mismatched(a: Any, b: Any) -> bool:
    return isinstance(a, ContentRecord) and isinstance(b, ContentRecord) and a.kind != b.kind


def section_segment(record: ContentRecord) -> str:
    """Second path segment of a course record id (``course/<section>/...``)."""
    parts = record.id.split("/")
    return parts[1] if len(parts) > 1 else ""


# ── Comparators ──────────────────────────────────────────────


def by_published_date_descending(a: Any, b: Any) -> int:
    """Newest first. Works on records and on archive/feed items."""
    if _mismatched(a, b):
        return 0
    published_a = getattr(a.data, "published", None)
    published_b = getattr(b.data, "published", None)
    if published_a is None or published_b is None:
        return 0
    return _cmp(published_b, published_a)


def by_explicit_order_ascending(a: ContentRecord, b: ContentRecord) -> int:
    """Ascending ``order``; used for sections and for lessons of one section."""
    if a.kind != b.kind or a.kind not in (ContentKind.SECTION, ContentKind.LESSON):
        return 0
    return _cmp(a.data.order, b.data.order)


def by_global_lesson_order(a: ContentRecord, b: ContentRecord) -> int:
    """Section path segment first, then lesson ``order``."""
    if a.kind != ContentKind.LESSON or b.kind != ContentKind.LESSON:
        return 0
    section_a = section_segment(a)
    section_b = section_segment(b)
    if section_a != section_b:
        return _cmp(section_a, section_b)
    return _cmp(a.data.order, b.data.order)


def by_section_then_lesson_order(section_orders: Mapping[str, int]) -> Comparator:
    """Build a comparator ordering lessons by their section's declared order.

    ``section_orders`` maps section slug to its ``order``. Lessons whose
    section is unknown sort after known ones, then fall back to
    :func:`by_global_lesson_order`.
    """

    def compare(a: ContentRecord, b: ContentRecord) -> int:
        if a.kind != ContentKind.LESSON or b.kind != ContentKind.LESSON:
            return 0
        order_a = section_orders.get(a.section_id or "", float("inf"))
        order_b = section_orders.get(b.section_id or "", float("inf"))
        if order_a != order_b:
            return _cmp(order_a, order_b)
        return by_global_lesson_order(a, b)

    return compare


def by_title(a: Any, b: Any) -> int:
    return _cmp(a.data.title.lower(), b.data.title.lower())


# ── Sorting ──────────────────────────────────────────────────


def merge_sort(items: list[T], compare: Callable[[T, T], int]) -> list[T]:
    """Stable top-down merge sort."""
    if len(items) <= 1:
        return items
    mid = len(items) // 2
    return _merge(merge_sort(items[:mid], compare), merge_sort(items[mid:], compare), compare)


def _merge(left: list[T], right: list[T], compare: Callable[[T, T], int]) -> list[T]:
    result: list[T] = []
    i = j = 0
    while i < len(left) and j < len(right):
        # <= keeps the left element first on ties
        if compare(left[i], right[j]) <= 0:
            result.append(left[i])
            i += 1
        else:
            result.append(right[j])
            j += 1
    result.extend(left[i:])
    result.extend(right[j:])
    return result


def sort_records(items: Sequence[T], compare: Callable[[T, T], int]) -> list[T]:
    """Return a new, stably sorted list.

    Inputs larger than MERGE_SORT_THRESHOLD go through merge_sort; output
    is identical either way.
    """
    if len(items) > MERGE_SORT_THRESHOLD:
        return merge_sort(list(items), compare)
    return sorted(items, key=cmp_to_key(compare))
