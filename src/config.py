"""Unified configuration loaded from .coursesite.toml, env vars, and CLI flags.

Loading order: defaults → TOML file → env vars → CLI flags.
"""

from __future__ import annotations

import logging
import os
import tomllib
from enum import StrEnum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from coursesite.content.models import PinnedCourseConfig
from coursesite.content.ordering import LessonOrder
from coursesite.content.visibility import DEBUG_ENV, MODE_ENV, BuildMode
from coursesite.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".coursesite.toml"
CONFIG_SEARCH_PATHS = [
    Path("."),
    Path.home() / ".config" / "coursesite",
]


class ContentConfig(BaseModel):
    """[content] section."""

    directory: str = "./src/content"


class SiteMode(StrEnum):
    """Accepted values of ``[build] mode``."""

    PRODUCTION = "production"
    DEVELOPMENT = "development"


class BuildConfig(BaseModel):
    """[build] section."""

    mode: SiteMode = SiteMode.DEVELOPMENT
    debug: bool = False

    @field_validator("mode", mode="before")
    @classmethod
    def _normalize_mode(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value

    def to_build_mode(self) -> BuildMode:
        return BuildMode(production=self.mode == SiteMode.PRODUCTION, debug=self.debug)


class OrderingConfig(BaseModel):
    """[ordering] section."""

    lesson_order: LessonOrder = LessonOrder.PATH


class ProgressConfig(BaseModel):
    """[progress] section."""

    directory: str = "./.coursesite"


class SiteConfig(BaseModel):
    """Top-level configuration model."""

    content: ContentConfig = Field(default_factory=ContentConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)
    pinned_course: PinnedCourseConfig = Field(default_factory=PinnedCourseConfig)
    ordering: OrderingConfig = Field(default_factory=OrderingConfig)
    progress: ProgressConfig = Field(default_factory=ProgressConfig)

    @property
    def content_dir(self) -> Path:
        return Path(self.content.directory).expanduser()

    def to_build_mode(self) -> BuildMode:
        return self.build.to_build_mode()


def load_config(path: str | Path | None = None) -> SiteConfig:
    """Load configuration from a TOML file.

    Search order:
    1. Explicit path (if provided)
    2. .coursesite.toml in CWD
    3. ~/.config/coursesite/config.toml

    Then overlay environment variables.

    Args:
        path: Explicit path to a TOML file.

    Returns:
        Merged SiteConfig.

    Raises:
        ConfigError: An environment override holds an invalid value.
    """
    data: dict[str, object] = {}

    if path is not None:
        toml_path = Path(path)
        if toml_path.exists():
            data = _load_toml(toml_path)
        else:
            logger.warning("Config file not found: %s", toml_path)
    else:
        for search_dir in CONFIG_SEARCH_PATHS:
            candidate = search_dir / CONFIG_FILENAME
            if candidate.exists():
                data = _load_toml(candidate)
                logger.info("Loaded config from %s", candidate)
                break
        global_config = Path.home() / ".config" / "coursesite" / "config.toml"
        if not data and global_config.exists():
            data = _load_toml(global_config)
            logger.info("Loaded config from %s", global_config)

    try:
        config = SiteConfig.model_validate(data) if data else SiteConfig()
    except ValidationError as exc:
        logger.warning("Invalid config values, using defaults: %s", exc)
        config = SiteConfig()

    return _apply_env_vars(config)


def merge_cli_overrides(config: SiteConfig, **cli_kwargs: object) -> SiteConfig:
    """Overlay explicitly-set CLI flags onto the config.

    Only overrides values where the CLI flag was explicitly provided
    (i.e., not None).

    Args:
        config: Base config.
        **cli_kwargs: CLI flag values, keyed by section and field joined
            with an underscore (e.g. ``content_directory``, ``build_mode``).

    Returns:
        Updated config with CLI overrides applied.
    """
    data = config.model_dump()

    mapping: dict[str, tuple[str, str]] = {
        "content_directory": ("content", "directory"),
        "build_mode": ("build", "mode"),
        "build_debug": ("build", "debug"),
        "pinned_course": ("pinned_course", "course_slug"),
        "lesson_order": ("ordering", "lesson_order"),
    }

    for key, value in cli_kwargs.items():
        if value is None or key not in mapping:
            continue
        section, field = mapping[key]
        data[section][field] = value
        if key == "pinned_course":
            data["pinned_course"]["enable"] = True

    return _validate(data)


def _load_toml(path: Path) -> dict[str, object]:
    """Load a TOML file and return the data dict."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}


def _validate(data: dict[str, object]) -> SiteConfig:
    try:
        return SiteConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc


def _apply_env_vars(config: SiteConfig) -> SiteConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    env_mapping: dict[str, tuple[str, str]] = {
        "COURSESITE_CONTENT_DIR": ("content", "directory"),
        MODE_ENV: ("build", "mode"),
        "COURSESITE_LESSON_ORDER": ("ordering", "lesson_order"),
        "COURSESITE_PROGRESS_DIR": ("progress", "directory"),
    }

    for env_var, (section, field) in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            data[section][field] = value

    debug_raw = os.environ.get(DEBUG_ENV)
    if debug_raw is not None:
        data["build"]["debug"] = debug_raw.lower() in ("true", "1", "yes")

    pinned_raw = os.environ.get("COURSESITE_PINNED_COURSE")
    if pinned_raw is not None:
        data["pinned_course"]["course_slug"] = pinned_raw.strip()
        data["pinned_course"]["enable"] = bool(pinned_raw.strip())

    return _validate(data)
