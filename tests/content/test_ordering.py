"""Tests for comparators and stable sorting."""

import random
from datetime import date, datetime
from functools import cmp_to_key

from coursesite.content.models import (
    ContentKind,
    ContentRecord,
    LessonData,
    PostData,
    SectionData,
)
from coursesite.content.ordering import (
    MERGE_SORT_THRESHOLD,
    by_explicit_order_ascending,
    by_global_lesson_order,
    by_published_date_descending,
    by_section_then_lesson_order,
    by_title,
    merge_sort,
    section_segment,
    sort_records,
)


def _post(slug: str, published: date) -> ContentRecord:
    return ContentRecord(
        id=f"{slug}.md",
        slug=slug,
        kind=ContentKind.POST,
        data=PostData(title=slug.title(), published=published),
    )


def _section(course: str, name: str, order: int) -> ContentRecord:
    return ContentRecord(
        id=f"{course}/{name}/index.md",
        slug=f"{course}/{name}",
        kind=ContentKind.SECTION,
        data=SectionData(title=name, order=order),
        course_id=course,
    )


def _lesson(course: str, section: str, name: str, order: int) -> ContentRecord:
    return ContentRecord(
        id=f"{course}/{section}/{name}.md",
        slug=f"{course}/{section}/{name}",
        kind=ContentKind.LESSON,
        data=LessonData(title=name, order=order, published=date(2024, 1, 1)),
        course_id=course,
        section_id=f"{course}/{section}",
    )


class TestPublishedDateDescending:
    def test_newest_first(self):
        old = _post("old", date(2023, 1, 1))
        new = _post("new", date(2024, 1, 1))
        assert by_published_date_descending(new, old) < 0
        assert by_published_date_descending(old, new) > 0
        assert by_published_date_descending(old, old) == 0

    def test_mismatched_kinds_equal(self):
        post = _post("p", date(2024, 1, 1))
        section = _section("c", "01-s", 1)
        assert by_published_date_descending(post, section) == 0

    def test_sorts_posts(self):
        posts = [
            _post("a", date(2023, 5, 1)),
            _post("b", date(2024, 5, 1)),
            _post("c", date(2022, 5, 1)),
        ]
        result = sort_records(posts, by_published_date_descending)
        assert [p.slug for p in result] == ["b", "a", "c"]

    def test_ties_keep_input_order(self):
        same = datetime(2024, 1, 1)
        posts = [_post(name, same) for name in ("x", "y", "z")]
        result = sort_records(posts, by_published_date_descending)
        assert [p.slug for p in result] == ["x", "y", "z"]


class TestExplicitOrder:
    def test_sections_ascending(self):
        sections = [_section("c", "b", 2), _section("c", "a", 3), _section("c", "z", 1)]
        result = sort_records(sections, by_explicit_order_ascending)
        assert [s.data.order for s in result] == [1, 2, 3]

    def test_mixed_kinds_equal(self):
        assert by_explicit_order_ascending(_section("c", "s", 1), _post("p", date(2024, 1, 1))) == 0


class TestGlobalLessonOrder:
    def test_section_segment(self):
        assert section_segment(_lesson("c", "02-adv", "state", 1)) == "02-adv"

    def test_segment_then_order(self):
        lessons = [
            _lesson("c", "02-adv", "release", 3),
            _lesson("c", "01-intro", "setup", 2),
            _lesson("c", "02-adv", "state", 1),
            _lesson("c", "01-intro", "overview", 1),
        ]
        result = sort_records(lessons, by_global_lesson_order)
        assert [l.slug for l in result] == [
            "c/01-intro/overview",
            "c/01-intro/setup",
            "c/02-adv/state",
            "c/02-adv/release",
        ]

    def test_segments_compare_lexicographically(self):
        lessons = [_lesson("c", "9-x", "a", 1), _lesson("c", "10-y", "b", 1)]
        result = sort_records(lessons, by_global_lesson_order)
        assert [section_segment(l) for l in result] == ["10-y", "9-x"]


class TestSectionThenLessonOrder:
    def test_uses_declared_section_order(self):
        compare = by_section_then_lesson_order({"c/9-x": 1, "c/10-y": 2})
        lessons = [_lesson("c", "10-y", "b", 1), _lesson("c", "9-x", "a", 2)]
        result = sort_records(lessons, compare)
        assert [section_segment(l) for l in result] == ["9-x", "10-y"]

    def test_unknown_sections_last(self):
        compare = by_section_then_lesson_order({"c/02-b": 1})
        lessons = [_lesson("c", "01-a", "x", 1), _lesson("c", "02-b", "y", 1)]
        result = sort_records(lessons, compare)
        assert [l.slug for l in result] == ["c/02-b/y", "c/01-a/x"]


class TestByTitle:
    def test_case_insensitive(self):
        a = _post("apple", date(2024, 1, 1))
        b = _post("Banana", date(2024, 1, 1))
        assert by_title(a, b) < 0


class TestMergeSort:
    def test_empty_and_single(self):
        assert merge_sort([], by_title) == []
        one = [_post("a", date(2024, 1, 1))]
        assert merge_sort(one, by_title) == one

    def test_large_input_matches_builtin_sort(self):
        rng = random.Random(7)
        posts = [
            _post(f"p{i:03d}", date(2024, 1, rng.randint(1, 5)))
            for i in range(MERGE_SORT_THRESHOLD * 3)
        ]
        expected = sorted(posts, key=cmp_to_key(by_published_date_descending))
        result = sort_records(posts, by_published_date_descending)
        assert [p.slug for p in result] == [p.slug for p in expected]

    def test_does_not_mutate_input(self):
        posts = [_post(f"p{i}", date(2024, 1, 1 + i % 28)) for i in range(60)]
        before = list(posts)
        sort_records(posts, by_published_date_descending)
        assert posts == before
