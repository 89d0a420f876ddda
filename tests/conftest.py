"""Shared fixtures: a small on-disk site with posts and two published courses."""

from collections.abc import Callable
from datetime import date
from pathlib import Path

import pytest
import yaml


def _write_md(root: Path, rel: str, front: dict, body: str = "") -> Path:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    text = "---\n" + yaml.safe_dump(front, sort_keys=False) + "---\n" + body
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def write_md() -> Callable[..., Path]:
    """Write a Markdown file with YAML front matter under a root directory."""
    return _write_md


def _lesson(title: str, order: int, published: date, **extra: object) -> dict:
    return {"type": "lesson", "title": title, "order": order, "published": published, **extra}


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
    """Content directory with three posts and three courses.

    flutter-ship: 2 sections, 5 published lessons plus 1 draft lesson
    rust-basics:  1 section, 1 lesson
    secret-course: draft course
    """
    root = tmp_path / "content"

    _write_md(root, "posts/hello-world.md", {
        "title": "Hello World",
        "published": date(2024, 1, 10),
        "tags": ["Python", "astro"],
        "category": "Guides",
    }, "First post.\n")
    _write_md(root, "posts/second-post.md", {
        "title": "Second Post",
        "published": date(2024, 3, 5),
        "tags": ["python", "Testing"],
        "category": "",
    })
    _write_md(root, "posts/draft-post.md", {
        "title": "Draft Post",
        "published": date(2024, 4, 1),
        "draft": True,
        "tags": ["astro"],
        "category": "Guides",
    })

    course = "courses/flutter-ship"
    _write_md(root, f"{course}/index.md", {
        "type": "course",
        "title": "Flutter Ship",
        "description": "Ship a Flutter app",
        "level": "Beginner",
        "category": "Mobile",
        "published": date(2024, 2, 1),
    })
    _write_md(root, f"{course}/01-intro/index.md", {
        "type": "section", "title": "Introduction", "order": 1,
    })
    _write_md(root, f"{course}/01-intro/01-overview.md", _lesson("Overview", 1, date(2024, 2, 2)))
    _write_md(root, f"{course}/01-intro/02-setup.md", _lesson("Setup", 2, date(2024, 2, 3)))
    _write_md(root, f"{course}/02-advanced/index.md", {
        "type": "section", "title": "Advanced", "order": 2,
    })
    # Path order release, state, testing gives orders [3, 1, 2]
    _write_md(root, f"{course}/02-advanced/release.md", _lesson("Release", 3, date(2024, 2, 6)))
    _write_md(root, f"{course}/02-advanced/state.md", _lesson("State", 1, date(2024, 2, 4)))
    _write_md(root, f"{course}/02-advanced/testing.md", _lesson("Testing", 2, date(2024, 2, 5)))
    _write_md(
        root,
        f"{course}/02-advanced/zz-extras.md",
        _lesson("Extras", 4, date(2024, 2, 7), draft=True),
    )

    _write_md(root, "courses/rust-basics/index.md", {
        "type": "course",
        "title": "Rust Basics",
        "description": "Learn Rust",
        "level": "Intermediate",
        "category": "systems",
        "published": date(2023, 11, 1),
    })
    _write_md(root, "courses/rust-basics/01-start/index.md", {
        "type": "section", "title": "Start", "order": 1,
    })
    _write_md(
        root,
        "courses/rust-basics/01-start/01-hello.md",
        _lesson("Hello Rust", 1, date(2023, 11, 2)),
    )

    _write_md(root, "courses/secret-course/index.md", {
        "type": "course",
        "title": "Secret Course",
        "description": "Not ready yet",
        "level": "Advanced",
        "category": "Mobile",
        "published": date(2024, 5, 1),
        "draft": True,
    })

    return root
