"""Exception taxonomy for coursesite.

Lookups that find nothing return ``None`` rather than raising. Store I/O
failures raise :class:`ContentLoadError` and propagate to the caller.
Per-record validation failures are captured as skipped records instead
of being raised out of a listing.
"""


class CoursesiteError(Exception):
    """Base error for coursesite."""


class ContentLoadError(CoursesiteError):
    """The content store could not read its backing files."""


class ContentValidationError(CoursesiteError):
    """A single content file failed front matter validation."""

    def __init__(self, slug: str, reason: str) -> None:
        super().__init__(f"{slug}: {reason}")
        self.slug = slug
        self.reason = reason


class ConfigError(CoursesiteError):
    """Configuration values could not be applied."""
