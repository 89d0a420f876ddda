"""Tests for the course progress store."""

from pathlib import Path

from coursesite.content.progress import PROGRESS_FILENAME, ProgressStore


class TestProgressStore:
    def test_empty(self, tmp_path: Path):
        store = ProgressStore(tmp_path)
        assert store.all() == {}
        assert store.get("flutter-ship").completed_lessons == []
        assert store.is_started("flutter-ship") is False
        assert store.last_viewed("flutter-ship") is None

    def test_mark_completed(self, tmp_path: Path):
        store = ProgressStore(tmp_path)
        store.mark_completed("flutter-ship", "flutter-ship/01-intro/01-overview")
        store.mark_completed("flutter-ship", "flutter-ship/01-intro/01-overview")
        store.mark_completed("flutter-ship", "flutter-ship/01-intro/02-setup")

        progress = store.get("flutter-ship")
        assert progress.completed_lessons == [
            "flutter-ship/01-intro/01-overview",
            "flutter-ship/01-intro/02-setup",
        ]
        assert store.last_viewed("flutter-ship") == "flutter-ship/01-intro/02-setup"
        assert store.is_completed("flutter-ship", "flutter-ship/01-intro/01-overview")
        assert store.is_started("flutter-ship")

    def test_persists_across_instances(self, tmp_path: Path):
        ProgressStore(tmp_path).mark_completed("rust-basics", "rust-basics/01-start/01-hello")
        assert (tmp_path / PROGRESS_FILENAME).exists()

        reloaded = ProgressStore(tmp_path)
        assert reloaded.is_completed("rust-basics", "rust-basics/01-start/01-hello")

    def test_creates_missing_directory(self, tmp_path: Path):
        target = tmp_path / "nested" / "dir"
        ProgressStore(target).mark_completed("c", "c/s/l")
        assert (target / PROGRESS_FILENAME).exists()

    def test_reset(self, tmp_path: Path):
        store = ProgressStore(tmp_path)
        store.mark_completed("c", "c/s/l")
        store.reset("c")
        store.reset("unknown")
        assert store.is_started("c") is False
        assert ProgressStore(tmp_path).all() == {}

    def test_corrupt_file_starts_fresh(self, tmp_path: Path, caplog):
        (tmp_path / PROGRESS_FILENAME).write_text("{not json", encoding="utf-8")
        store = ProgressStore(tmp_path)
        assert store.all() == {}
        assert "Corrupt progress file" in caplog.text


class TestCompletion:
    def test_percentage_rounds_half_up(self, tmp_path: Path):
        store = ProgressStore(tmp_path)
        store.mark_completed("c", "c/s/a")
        assert store.completion_percentage("c", 8) == 13  # 12.5
        assert store.completion_percentage("c", 3) == 33

    def test_percentage_empty_course(self, tmp_path: Path):
        assert ProgressStore(tmp_path).completion_percentage("c", 0) == 0

    def test_course_completed(self, tmp_path: Path):
        store = ProgressStore(tmp_path)
        store.mark_completed("c", "c/s/a")
        assert store.is_course_completed("c", 2) is False
        store.mark_completed("c", "c/s/b")
        assert store.is_course_completed("c", 2) is True
        assert store.is_course_completed("c", 0) is False
