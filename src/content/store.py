"""Filesystem-backed content store.

Reads Markdown files with YAML front matter from two collections under
the content directory::

    posts/<slug>.md
    courses/<course>/index.md                      type: course
    courses/<course>/<section>/index.md            type: section
    courses/<course>/<section>/<lesson>.md         type: lesson

Everything is loaded once into an arena (one id -> record map per
collection, parent -> children) and served from memory. Ids are relative
to their collection, so ``posts/flutter/index.md`` and
``courses/flutter/index.md`` are distinct records. Files that fail
validation are skipped and reported; read failures raise ContentLoadError.
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Callable
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from coursesite.content.models import (
    SCHEMAS,
    ContentKind,
    ContentRecord,
    LoadReport,
    SkippedRecord,
)
from coursesite.errors import ContentLoadError, ContentValidationError

logger = logging.getLogger(__name__)

POSTS_DIR = "posts"
COURSES_DIR = "courses"
MARKDOWN_SUFFIXES = (".md", ".mdx")

_COURSE_TYPES = {
    "course": ContentKind.COURSE,
    "section": ContentKind.SECTION,
    "lesson": ContentKind.LESSON,
}

Predicate = Callable[[ContentRecord], bool]

_FRONT_MATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(.*?)(?:\r?\n)?^---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)


def split_front_matter(text: str) -> tuple[dict[str, Any], str]:
    """Split a Markdown document into its YAML front matter and body.

    The block is delimited by ``---`` lines; a ``---`` inside a value does
    not close it. Documents without a leading block have empty front matter.
    Raises ContentValidationError when the block is not a YAML mapping.
    """
    match = _FRONT_MATTER_RE.match(text)
    if match is None:
        return {}, text

    try:
        front = yaml.safe_load(match.group(1))
    except yaml.YAMLError as exc:
        raise ContentValidationError("", f"invalid YAML front matter: {exc}") from exc

    if front is None:
        front = {}
    if not isinstance(front, dict):
        raise ContentValidationError("", "front matter is not a mapping")
    return front, text[match.end() :].lstrip("\n")


def slug_from_id(record_id: str) -> str:
    """``flutter-ship/01-intro/index.md`` -> ``flutter-ship/01-intro``."""
    stem = record_id
    for suffix in MARKDOWN_SUFFIXES:
        if stem.endswith(suffix):
            stem = stem[: -len(suffix)]
            break
    if stem == "index":
        return ""
    return stem.removesuffix("/index")


def _format_errors(exc: ValidationError) -> str:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "front matter"
        messages.append(f"{location}: {error['msg']}")
    return "; ".join(messages)


def collection_of(kind: ContentKind) -> str:
    """Collection directory a record kind is loaded from."""
    return POSTS_DIR if kind == ContentKind.POST else COURSES_DIR


class ContentStore:
    """Read-only store over a content directory.

    The directory is scanned on the first query; call :meth:`reload` to
    pick up file changes.
    """

    def __init__(self, content_dir: Path) -> None:
        self._root = Path(content_dir)
        self._collections: dict[str, dict[str, ContentRecord]] | None = None
        self._children: dict[str, list[str]] = {}
        self._report = LoadReport()
        self.query_count = 0

    @property
    def root(self) -> Path:
        return self._root

    # ── Loading ──────────────────────────────────────────────────

    def load(self) -> LoadReport:
        """Scan the content directory and rebuild the arena."""
        if not self._root.is_dir():
            raise ContentLoadError(f"Content directory not found: {self._root}")

        report = LoadReport()
        for kind_dir in (POSTS_DIR, COURSES_DIR):
            collection = self._root / kind_dir
            if not collection.is_dir():
                continue
            for path in sorted(collection.rglob("*")):
                if path.suffix not in MARKDOWN_SUFFIXES or not path.is_file():
                    continue
                record_id = path.relative_to(collection).as_posix()
                try:
                    report.records.append(self._parse_file(path, kind_dir, record_id))
                except ContentValidationError as exc:
                    slug = slug_from_id(record_id)
                    logger.warning("Skipping invalid content %s: %s", slug, exc.reason)
                    report.skipped.append(
                        SkippedRecord(path=str(path), slug=slug, reason=exc.reason)
                    )

        self._index(report.records)
        self._report = report
        logger.debug(
            "Loaded %d content records from %s (%d skipped)",
            len(report.records),
            self._root,
            len(report.skipped),
        )
        return report

    def reload(self) -> None:
        """Discard the arena so the next query rescans the directory."""
        self._collections = None
        self._children = {}

    def report(self) -> LoadReport:
        return self._report

    def _parse_file(self, path: Path, kind_dir: str, record_id: str) -> ContentRecord:
        slug = slug_from_id(record_id)
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise ContentValidationError(slug, f"file is not valid UTF-8: {exc}") from exc
        except OSError as exc:
            raise ContentLoadError(f"Could not read content file {path}: {exc}") from exc

        try:
            front, body = split_front_matter(text)
        except ContentValidationError as exc:
            raise ContentValidationError(slug, exc.reason) from exc

        if kind_dir == POSTS_DIR:
            kind = ContentKind.POST
        else:
            raw_type = front.pop("type", None)
            if raw_type not in _COURSE_TYPES:
                raise ContentValidationError(slug, f"unknown course content type: {raw_type!r}")
            kind = _COURSE_TYPES[raw_type]

        try:
            data = SCHEMAS[kind].model_validate(front)
        except ValidationError as exc:
            raise ContentValidationError(slug, _format_errors(exc)) from exc

        course_id, section_id = self._parents(kind, slug)
        return ContentRecord(
            id=record_id,
            slug=slug,
            kind=kind,
            data=data,
            body=body,
            course_id=course_id,
            section_id=section_id,
        )

    @staticmethod
    def _parents(kind: ContentKind, slug: str) -> tuple[str | None, str | None]:
        if kind in (ContentKind.POST, ContentKind.COURSE):
            return None, None
        parts = slug.split("/")
        course_id = parts[0]
        if kind == ContentKind.LESSON and len(parts) > 2:
            return course_id, "/".join(parts[:2])
        return course_id, None

    def _index(self, records: list[ContentRecord]) -> None:
        # Built aside and swapped in; concurrent queries may load in parallel threads
        collections: dict[str, dict[str, ContentRecord]] = {POSTS_DIR: {}, COURSES_DIR: {}}
        children: dict[str, list[str]] = {}
        for record in records:
            collections[collection_of(record.kind)][record.id] = record
            parent = record.section_id or record.course_id
            if parent is not None:
                children.setdefault(parent, []).append(record.id)
        self._children = children
        self._collections = collections

    def _ensure_loaded(self) -> dict[str, dict[str, ContentRecord]]:
        if self._collections is None:
            self.load()
        return self._collections or {}

    # ── Read operations ──────────────────────────────────────────

    async def query(
        self,
        kind: ContentKind,
        predicate: Predicate | None = None,
    ) -> list[ContentRecord]:
        """Return records of ``kind`` matching ``predicate``, in path order."""
        self.query_count += 1
        if self._collections is None:
            await asyncio.to_thread(self.load)
        records = self._ensure_loaded().get(collection_of(kind), {}).values()
        return [
            r for r in records if r.kind == kind and (predicate is None or predicate(r))
        ]

    def get(self, collection: str, record_id: str) -> ContentRecord | None:
        """Return a record by collection (``posts``/``courses``) and id, or None."""
        return self._ensure_loaded().get(collection, {}).get(record_id)

    def list_children(self, parent_slug: str) -> list[ContentRecord]:
        """Direct children of a course (sections) or a section (lessons)."""
        courses = self._ensure_loaded().get(COURSES_DIR, {})
        return [courses[child_id] for child_id in self._children.get(parent_slug, [])]
