"""coursesite: content indexing for a blog and course website."""

__version__ = "0.1.0"
