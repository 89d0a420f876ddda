"""Tests for draft visibility rules."""

from datetime import date

import pytest

from coursesite.content.models import (
    ContentKind,
    ContentRecord,
    PostData,
    SectionData,
)
from coursesite.content.visibility import (
    DEBUG_ENV,
    MODE_ENV,
    BuildMode,
    is_debug_mode,
    should_include,
    should_include_draft,
)

PROD = BuildMode(production=True)
DEV = BuildMode(production=False)
UNKNOWN = BuildMode()


class TestBuildModeFromEnv:
    def test_production(self):
        mode = BuildMode.from_env({MODE_ENV: "production"})
        assert mode.production is True
        assert mode.is_production is True

    def test_case_insensitive(self):
        assert BuildMode.from_env({MODE_ENV: " Production "}).production is True

    def test_other_value_is_development(self):
        assert BuildMode.from_env({MODE_ENV: "development"}).production is False
        assert BuildMode.from_env({MODE_ENV: "staging"}).production is False

    def test_unset_is_unknown(self):
        mode = BuildMode.from_env({})
        assert mode.production is None
        assert mode.is_production is False

    @pytest.mark.parametrize("value", ["true", "1", "YES"])
    def test_debug_flag(self, value):
        assert BuildMode.from_env({DEBUG_ENV: value}).debug is True

    def test_debug_off_by_default(self):
        assert BuildMode.from_env({DEBUG_ENV: "no"}).debug is False

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv(MODE_ENV, "production")
        monkeypatch.delenv(DEBUG_ENV, raising=False)
        assert BuildMode.from_env().is_production is True


class TestIsDebugMode:
    def test_production_hides_drafts(self):
        assert is_debug_mode(PROD) is False

    def test_development_shows_drafts(self):
        assert is_debug_mode(DEV) is True

    def test_debug_flag_wins_over_production(self):
        assert is_debug_mode(BuildMode(production=True, debug=True)) is True

    def test_unknown_mode_shows_drafts(self):
        assert is_debug_mode(UNKNOWN) is True

    def test_defaults_to_environment(self, monkeypatch):
        monkeypatch.setenv(MODE_ENV, "production")
        monkeypatch.delenv(DEBUG_ENV, raising=False)
        assert is_debug_mode() is False


class TestShouldIncludeDraft:
    def test_no_draft_field_always_included(self):
        assert should_include_draft(False, False, PROD) is True

    def test_published_always_included(self):
        assert should_include_draft(True, False, PROD) is True

    def test_draft_hidden_in_production(self):
        assert should_include_draft(True, True, PROD) is False

    def test_draft_shown_in_development(self):
        assert should_include_draft(True, True, DEV) is True


class TestShouldInclude:
    def test_draft_post(self):
        record = ContentRecord(
            id="p.md",
            slug="p",
            kind=ContentKind.POST,
            data=PostData(title="P", published=date(2024, 1, 1), draft=True),
        )
        assert should_include(record, PROD) is False
        assert should_include(record, DEV) is True

    def test_section_without_draft_field(self):
        record = ContentRecord(
            id="c/01-s/index.md",
            slug="c/01-s",
            kind=ContentKind.SECTION,
            data=SectionData(title="S", order=1),
            course_id="c",
        )
        assert should_include(record, PROD) is True
