"""CLI interface for coursesite."""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from coursesite.config import SiteConfig, load_config, merge_cli_overrides
from coursesite.content import (
    ArchiveIndex,
    ContentCache,
    ContentStore,
    CourseIndex,
    PostIndex,
    ProgressStore,
)
from coursesite.errors import ConfigError, ContentLoadError

app = typer.Typer(
    name="coursesite",
    help="Inspect the posts and courses of a content directory.",
)

console = Console()
err_console = Console(stderr=True)

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to a .coursesite.toml file."),
]
ContentOption = Annotated[
    Optional[Path],
    typer.Option("--content", "-d", help="Content directory (overrides config)."),
]
ModeOption = Annotated[
    Optional[str],
    typer.Option("--mode", "-m", help="Build mode: production or development."),
]


class _Site:
    """Indexes wired to one shared store and cache."""

    def __init__(self, config: SiteConfig) -> None:
        mode = config.to_build_mode()
        self.store = ContentStore(config.content_dir)
        self.cache = ContentCache(is_production=lambda: mode.is_production)
        self.courses = CourseIndex(
            self.store, self.cache, mode=mode, lesson_order=config.ordering.lesson_order
        )
        self.posts = PostIndex(self.store, self.cache, mode=mode)
        self.archive = ArchiveIndex(self.courses, self.posts, pinned=config.pinned_course)
        self.progress_dir = Path(config.progress.directory).expanduser()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from coursesite import __version__

        console.print(f"coursesite {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log store warnings and debug output."),
    ] = False,
) -> None:
    """coursesite - content indexing for a blog and course website."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _open_site(config_path: Path | None, content: Path | None, mode: str | None) -> _Site:
    try:
        config = merge_cli_overrides(
            load_config(config_path),
            content_directory=str(content) if content is not None else None,
            build_mode=mode,
        )
    except ConfigError as exc:
        err_console.print(f"[red]Error:[/red] Invalid configuration: {exc}")
        raise typer.Exit(1)
    return _Site(config)


def _run(coro):
    try:
        return asyncio.run(coro)
    except ContentLoadError as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1)


def _date(value) -> str:
    return value.date().isoformat() if value is not None else ""


@app.command()
def courses(
    config: ConfigOption = None, content: ContentOption = None, mode: ModeOption = None
) -> None:
    """List visible courses, newest first, with lesson counts."""
    site = _open_site(config, content, mode)

    async def collect():
        found = await site.courses.list_courses()
        counts = await asyncio.gather(*(site.courses.get_lesson_count(c.slug) for c in found))
        return list(zip(found, counts))

    rows = _run(collect())
    if not rows:
        console.print("[yellow]No courses found.[/yellow]")
        raise typer.Exit(0)

    table = Table(title="Courses")
    table.add_column("Slug")
    table.add_column("Title")
    table.add_column("Level")
    table.add_column("Category")
    table.add_column("Published")
    table.add_column("Lessons", justify="right")
    for course, count in rows:
        table.add_row(
            course.slug,
            course.data.title,
            str(course.data.level),
            course.data.category,
            _date(course.data.published),
            str(count),
        )
    console.print(table)


@app.command()
def lessons(
    course_slug: Annotated[str, typer.Argument(help="Course slug.")],
    config: ConfigOption = None,
    content: ContentOption = None,
    mode: ModeOption = None,
) -> None:
    """Show a course outline: sections and their lessons in order."""
    site = _open_site(config, content, mode)
    bundle = _run(site.courses.get_course_bundle(course_slug))
    if bundle is None:
        console.print(f"[red]Error:[/red] Course not found: {course_slug}")
        raise typer.Exit(1)

    console.print(f"[bold]{bundle.course.data.title}[/bold] ({len(bundle.lessons)} lessons)")
    section_slugs = {s.slug for s in bundle.sections}
    for section in bundle.sections:
        console.print(f"  {section.data.order}. {section.data.title}")
        for lesson in bundle.lessons:
            if lesson.section_id == section.slug:
                console.print(
                    f"      {lesson.data.order}. {lesson.data.title}  [dim]{lesson.slug}[/dim]"
                )
    for lesson in bundle.lessons:
        if lesson.section_id not in section_slugs:
            console.print(f"  - {lesson.data.title}  [dim]{lesson.slug}[/dim]")


@app.command()
def nav(
    course_slug: Annotated[str, typer.Argument(help="Course slug.")],
    lesson_slug: Annotated[str, typer.Argument(help="Full lesson slug.")],
    config: ConfigOption = None,
    content: ContentOption = None,
    mode: ModeOption = None,
) -> None:
    """Show previous/next lessons around a lesson."""
    site = _open_site(config, content, mode)
    result = _run(site.courses.get_lesson_navigation(course_slug, lesson_slug))
    if result is None:
        console.print(f"[red]Error:[/red] Lesson not found: {lesson_slug}")
        raise typer.Exit(1)

    position = f"{result.current_index + 1}/{result.total_lessons}"
    console.print(f"[bold]{result.current_lesson.data.title}[/bold] ({position})")
    previous = result.previous_lesson.slug if result.previous_lesson else "-"
    following = result.next_lesson.slug if result.next_lesson else "-"
    console.print(f"  previous: {previous}")
    console.print(f"  next:     {following}")


@app.command()
def archive(
    config: ConfigOption = None, content: ContentOption = None, mode: ModeOption = None
) -> None:
    """Print the combined post/course/lesson timeline."""
    site = _open_site(config, content, mode)
    items = _run(site.archive.get_combined_archive())

    table = Table(title="Archive")
    table.add_column("Published")
    table.add_column("Type")
    table.add_column("Title")
    table.add_column("Slug")
    for item in items:
        table.add_row(_date(item.data.published), item.type, item.data.title, item.slug)
    console.print(table)


@app.command()
def feed(
    config: ConfigOption = None,
    content: ContentOption = None,
    mode: ModeOption = None,
    pin: Annotated[
        Optional[str],
        typer.Option("--pin", help="Pin this course slug above the posts."),
    ] = None,
) -> None:
    """Print the home feed: the pinned course, then posts."""
    site = _open_site(config, content, mode)
    if pin is not None:
        site.archive.pinned = site.archive.pinned.model_copy(
            update={"enable": True, "course_slug": pin}
        )
    items = _run(site.archive.get_feed_with_pinned_course())

    for item in items:
        if item.type == "course":
            console.print(
                f"[bold magenta]pinned[/bold magenta] {item.data.title} "
                f"({item.data.total_lessons} lessons)  [dim]{item.slug}[/dim]"
            )
        else:
            published = _date(item.data.published)
            console.print(f"{published}  {item.data.title}  [dim]{item.slug}[/dim]")


@app.command()
def tags(
    config: ConfigOption = None, content: ContentOption = None, mode: ModeOption = None
) -> None:
    """Print post tags with usage counts."""
    site = _open_site(config, content, mode)
    for tag in _run(site.posts.get_tag_list()):
        console.print(f"{tag.name} ({tag.count})")


@app.command()
def categories(
    config: ConfigOption = None,
    content: ContentOption = None,
    mode: ModeOption = None,
    course_facets: Annotated[
        bool,
        typer.Option("--courses", help="Show course categories and levels instead of posts."),
    ] = False,
) -> None:
    """Print post (or course) categories with counts and URLs."""
    site = _open_site(config, content, mode)

    async def collect():
        if course_facets:
            return (
                await site.courses.get_course_category_list()
                + await site.courses.get_course_level_list()
            )
        return await site.posts.get_category_list()

    for category in _run(collect()):
        console.print(f"{category.name} ({category.count})  [dim]{category.url}[/dim]")


@app.command()
def validate(
    config: ConfigOption = None, content: ContentOption = None, mode: ModeOption = None
) -> None:
    """Load every content file and report the ones that were skipped."""
    site = _open_site(config, content, mode)
    try:
        report = site.store.load()
    except ContentLoadError as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1)

    console.print(f"[green]Loaded {len(report.records)} record(s)[/green]")
    if not report.skipped:
        return

    table = Table(title="Skipped")
    table.add_column("Slug")
    table.add_column("Reason")
    for skipped in report.skipped:
        table.add_row(skipped.slug, skipped.reason)
    console.print(table)
    raise typer.Exit(1)


@app.command()
def progress(
    course_slug: Annotated[str, typer.Argument(help="Course slug.")],
    complete: Annotated[
        Optional[str],
        typer.Option("--complete", help="Mark this full lesson slug as completed."),
    ] = None,
    reset: Annotated[
        bool,
        typer.Option("--reset", help="Forget all progress for the course."),
    ] = False,
    config: ConfigOption = None,
    content: ContentOption = None,
    mode: ModeOption = None,
) -> None:
    """Show (or update) lesson completion for a course."""
    site = _open_site(config, content, mode)
    bundle = _run(site.courses.get_course_bundle(course_slug))
    if bundle is None:
        console.print(f"[red]Error:[/red] Course not found: {course_slug}")
        raise typer.Exit(1)

    store = ProgressStore(site.progress_dir)
    if reset:
        store.reset(course_slug)
    if complete is not None:
        if complete not in {lesson.slug for lesson in bundle.lessons}:
            console.print(f"[red]Error:[/red] Lesson not found: {complete}")
            raise typer.Exit(1)
        store.mark_completed(course_slug, complete)

    total = len(bundle.lessons)
    percentage = store.completion_percentage(course_slug, total)
    console.print(f"[bold]{bundle.course.data.title}[/bold]: {percentage}% complete")
    for lesson in bundle.lessons:
        done = store.is_completed(course_slug, lesson.slug)
        mark = "[green]done[/green]" if done else "[dim]todo[/dim]"
        console.print(f"  {mark}  {lesson.data.title}  [dim]{lesson.slug}[/dim]")
    last = store.last_viewed(course_slug)
    if last:
        console.print(f"  last viewed: {last}")
