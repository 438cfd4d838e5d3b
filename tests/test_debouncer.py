"""Tests for debouncer module."""

import pytest
import threading
import time
from pathlib import Path

from src.workspace_watcher.debouncer import DebounceScheduler


class Recorder:
    """Thread-safe collector for fired paths."""

    def __init__(self):
        self.paths = []
        self._lock = threading.Lock()

    def __call__(self, path):
        with self._lock:
            self.paths.append(path)

    def snapshot(self):
        with self._lock:
            return list(self.paths)


class TestDebounceScheduler:
    """Tests for DebounceScheduler class."""

    def test_invalid_debounce_raises(self):
        with pytest.raises(ValueError):
            DebounceScheduler(0, lambda path: None)

    def test_single_touch_fires_once(self, tmp_path):
        recorder = Recorder()
        scheduler = DebounceScheduler(50, recorder)

        scheduler.touch(tmp_path / "x.txt")
        assert len(scheduler) == 1

        time.sleep(0.3)

        assert recorder.snapshot() == [tmp_path / "x.txt"]
        assert len(scheduler) == 0

    def test_does_not_fire_before_window(self, tmp_path):
        recorder = Recorder()
        scheduler = DebounceScheduler(300, recorder)

        scheduler.touch(tmp_path / "x.txt")
        time.sleep(0.05)

        assert recorder.snapshot() == []
        scheduler.cancel_all()

    def test_burst_collapses_to_one(self, tmp_path):
        recorder = Recorder()
        scheduler = DebounceScheduler(100, recorder)
        path = tmp_path / "x.txt"

        for _ in range(5):
            scheduler.touch(path)
            time.sleep(0.01)

        time.sleep(0.4)

        assert recorder.snapshot() == [path]

    def test_touch_resets_window(self, tmp_path):
        recorder = Recorder()
        scheduler = DebounceScheduler(200, recorder)
        path = tmp_path / "x.txt"

        scheduler.touch(path)
        time.sleep(0.12)
        scheduler.touch(path)
        time.sleep(0.12)

        # 240ms since the first touch, but only 120ms since the last
        assert recorder.snapshot() == []

        time.sleep(0.3)
        assert recorder.snapshot() == [path]

    def test_paths_are_independent(self, tmp_path):
        recorder = Recorder()
        scheduler = DebounceScheduler(100, recorder)
        a = tmp_path / "a.txt"
        b = tmp_path / "b.txt"

        scheduler.touch(a)
        scheduler.touch(b)
        assert len(scheduler) == 2

        time.sleep(0.4)

        assert sorted(recorder.snapshot()) == sorted([a, b])

    def test_burst_on_one_path_does_not_delay_another(self, tmp_path):
        recorder = Recorder()
        scheduler = DebounceScheduler(150, recorder)
        a = tmp_path / "a.txt"
        b = tmp_path / "b.txt"

        scheduler.touch(b)
        for _ in range(5):
            scheduler.touch(a)
            time.sleep(0.05)

        # b's window has elapsed while a keeps being reset
        assert recorder.snapshot() == [b]

        time.sleep(0.4)
        assert recorder.snapshot() == [b, a]

    def test_cancel_all_prevents_firing(self, tmp_path):
        recorder = Recorder()
        scheduler = DebounceScheduler(100, recorder)

        scheduler.touch(tmp_path / "a.txt")
        scheduler.touch(tmp_path / "b.txt")

        assert scheduler.cancel_all() == 2
        assert len(scheduler) == 0

        time.sleep(0.3)
        assert recorder.snapshot() == []

    def test_cancel_all_empty(self):
        scheduler = DebounceScheduler(100, lambda path: None)
        assert scheduler.cancel_all() == 0

    def test_cancel_single_path(self, tmp_path):
        recorder = Recorder()
        scheduler = DebounceScheduler(100, recorder)
        a = tmp_path / "a.txt"
        b = tmp_path / "b.txt"

        scheduler.touch(a)
        scheduler.touch(b)

        assert scheduler.cancel(a) is True
        assert scheduler.cancel(a) is False

        time.sleep(0.3)
        assert recorder.snapshot() == [b]

    def test_pending_paths(self, tmp_path):
        scheduler = DebounceScheduler(1000, lambda path: None)
        scheduler.touch(tmp_path / "a.txt")
        scheduler.touch(tmp_path / "a.txt")
        scheduler.touch(tmp_path / "b.txt")

        assert sorted(scheduler.pending_paths()) == sorted([tmp_path / "a.txt", tmp_path / "b.txt"])
        assert tmp_path / "a.txt" in scheduler

        scheduler.cancel_all()

    def test_callback_error_does_not_break_scheduler(self, tmp_path):
        recorder = Recorder()
        calls = []

        def on_fire(path):
            calls.append(path)
            if path.name == "bad.txt":
                raise RuntimeError("boom")
            recorder(path)

        scheduler = DebounceScheduler(50, on_fire)
        scheduler.touch(tmp_path / "bad.txt")
        time.sleep(0.2)
        scheduler.touch(tmp_path / "good.txt")
        time.sleep(0.2)

        assert len(calls) == 2
        assert recorder.snapshot() == [tmp_path / "good.txt"]

    def test_touch_again_after_fire(self, tmp_path):
        recorder = Recorder()
        scheduler = DebounceScheduler(50, recorder)
        path = tmp_path / "x.txt"

        scheduler.touch(path)
        time.sleep(0.2)
        scheduler.touch(path)
        time.sleep(0.2)

        assert recorder.snapshot() == [path, path]
