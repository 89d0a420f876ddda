"""Draft visibility rules and the build-mode signal.

Build mode is read from the environment on every call so a long-running
dev server picks up changes without a restart:

- ``COURSESITE_MODE``: ``production`` or ``development``
- ``COURSESITE_DEBUG``: ``true`` shows drafts even in production
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel

from coursesite.content.models import ContentRecord

MODE_ENV = "COURSESITE_MODE"
DEBUG_ENV = "COURSESITE_DEBUG"

_TRUTHY = ("true", "1", "yes")


class BuildMode(BaseModel):
    """Snapshot of the build-mode signal.

    ``production`` is ``None`` when the environment does not say.
    """

    production: bool | None = None
    debug: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> BuildMode:
        env = os.environ if environ is None else environ
        raw_mode = env.get(MODE_ENV, "").strip().lower()
        production: bool | None = None
        if raw_mode == "production":
            production = True
        elif raw_mode:
            production = False
        debug = env.get(DEBUG_ENV, "").strip().lower() in _TRUTHY
        return cls(production=production, debug=debug)

    @property
    def is_production(self) -> bool:
        return self.production is True


def is_debug_mode(mode: BuildMode | None = None) -> bool:
    """Return True when draft content should be shown.

    The explicit debug flag wins, then the inverse of the production flag.
    An undetermined mode shows drafts.
    """
    mode = mode or BuildMode.from_env()
    if mode.debug:
        return True
    if mode.production is not None:
        return not mode.production
    return True


def should_include_draft(has_draft: bool, is_draft: bool, mode: BuildMode | None = None) -> bool:
    if not has_draft:
        return True
    if not is_draft:
        return True
    return is_debug_mode(mode)


def should_include(record: ContentRecord, mode: BuildMode | None = None) -> bool:
    """Visibility filter for a single record."""
    return should_include_draft(record.has_draft_field, record.is_draft, mode)
