"""Tests for models module."""

import pytest
import time
from pathlib import Path

from src.workspace_watcher.models import (
    EventCategory,
    WatchEvent,
    WatchedRoot,
    RawFSEvent,
    WorkspacePaths,
)


class TestEventCategory:
    """Tests for EventCategory enum."""

    def test_category_values(self):
        assert EventCategory.PROBLEM_CHANGED.value == "problem-changed"
        assert EventCategory.TEMPLATE_CHANGED.value == "template-changed"
        assert EventCategory.ALL.value == "all"

    def test_category_from_value(self):
        assert EventCategory("problem-changed") == EventCategory.PROBLEM_CHANGED
        assert EventCategory("template-changed") == EventCategory.TEMPLATE_CHANGED
        assert EventCategory("all") == EventCategory.ALL

    def test_category_compares_to_string(self):
        assert EventCategory.PROBLEM_CHANGED == "problem-changed"

    def test_coerce(self):
        assert EventCategory.coerce("all") is EventCategory.ALL
        assert EventCategory.coerce(EventCategory.TEMPLATE_CHANGED) is EventCategory.TEMPLATE_CHANGED

    def test_coerce_unknown_raises(self):
        with pytest.raises(ValueError):
            EventCategory.coerce("other")


class TestWatchEvent:
    """Tests for WatchEvent dataclass."""

    def test_create_watch_event(self, tmp_path):
        event = WatchEvent(
            category=EventCategory.PROBLEM_CHANGED,
            path=tmp_path / "x.txt",
        )
        assert event.category == EventCategory.PROBLEM_CHANGED
        assert event.path == tmp_path / "x.txt"
        assert event.timestamp <= time.time()

    def test_relative_path_raises(self):
        with pytest.raises(ValueError, match="absolute"):
            WatchEvent(category=EventCategory.PROBLEM_CHANGED, path=Path("relative/x.txt"))

    def test_all_category_raises(self, tmp_path):
        with pytest.raises(ValueError):
            WatchEvent(category=EventCategory.ALL, path=tmp_path / "x.txt")

    def test_frozen(self, tmp_path):
        event = WatchEvent(category=EventCategory.PROBLEM_CHANGED, path=tmp_path / "x.txt")
        with pytest.raises(AttributeError):
            event.path = tmp_path / "y.txt"

    def test_to_dict(self, tmp_path):
        event = WatchEvent(
            category=EventCategory.TEMPLATE_CHANGED,
            path=tmp_path / "custom.tpl",
            timestamp=1234567890.0,
        )
        assert event.to_dict() == {
            "category": "template-changed",
            "path": str(tmp_path / "custom.tpl"),
            "timestamp": 1234567890.0,
        }


class TestWatchedRoot:
    """Tests for WatchedRoot dataclass."""

    def test_path_is_resolved(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        root = WatchedRoot(Path("problems"), EventCategory.PROBLEM_CHANGED)
        assert root.path.is_absolute()
        assert root.path == (tmp_path / "problems").resolve()

    def test_category_string_coerced(self, tmp_path):
        root = WatchedRoot(tmp_path, "template-changed")
        assert root.category is EventCategory.TEMPLATE_CHANGED

    def test_all_category_rejected(self, tmp_path):
        with pytest.raises(ValueError):
            WatchedRoot(tmp_path, EventCategory.ALL)

    def test_contains(self, tmp_path):
        root = WatchedRoot(tmp_path / "problems", EventCategory.PROBLEM_CHANGED)
        base = root.path
        assert root.contains(base)
        assert root.contains(base / "two-sum" / "solution.py")
        assert not root.contains(base.parent / "templates" / "x.tpl")
        assert not root.contains(base.parent / "problems-old" / "x.py")


class TestRawFSEvent:
    """Tests for RawFSEvent dataclass."""

    def test_create_raw_event(self, tmp_path):
        event = RawFSEvent(
            event_type="created",
            src_path=tmp_path / "test.txt",
        )
        assert event.event_type == "created"
        assert event.dest_path is None
        assert event.is_directory is False

    def test_paths_single(self, tmp_path):
        event = RawFSEvent(event_type="modified", src_path=tmp_path / "a.txt")
        assert event.paths() == [tmp_path / "a.txt"]

    def test_paths_move(self, tmp_path):
        event = RawFSEvent(
            event_type="moved",
            src_path=tmp_path / "old.txt",
            dest_path=tmp_path / "new.txt",
        )
        assert event.paths() == [tmp_path / "old.txt", tmp_path / "new.txt"]


class TestWorkspacePaths:
    """Tests for WorkspacePaths."""

    def test_for_root(self, tmp_path):
        paths = WorkspacePaths.for_root(tmp_path)
        root = tmp_path.resolve()

        assert paths.root == root
        assert paths.problems == root / "problems"
        assert paths.completed == root / "completed"
        assert paths.templates == root / "templates"
        assert paths.config == root / "config"

    def test_for_root_accepts_string(self, tmp_path):
        paths = WorkspacePaths.for_root(str(tmp_path))
        assert paths.problems == tmp_path.resolve() / "problems"
