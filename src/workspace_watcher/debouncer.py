"""Per-path debouncing of raw filesystem notifications."""

import logging
import threading
from pathlib import Path
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)


class DebounceScheduler:
    """
    Coalesces bursts of notifications for the same path.

    Each path owns at most one pending timer. A new notification for a
    path cancels its timer and starts a fresh one, so the callback fires
    once, ``debounce_ms`` after the last notification of a burst. Paths
    are independent: a burst on one path never delays another.

    Example:
        x.txt touched at t=0ms
        x.txt touched at t=50ms    } each touch resets the window
        x.txt touched at t=100ms   }
        -> on_fire(x.txt) once at t=400ms with debounce_ms=300
    """

    def __init__(self, debounce_ms: int, on_fire: Callable[[Path], None]):
        """
        Initialize the scheduler.

        Args:
            debounce_ms: Quiet period in milliseconds before a path fires
            on_fire: Called with the path when its window elapses
        """
        if debounce_ms <= 0:
            raise ValueError(f"debounce_ms must be positive, got {debounce_ms}")

        self.debounce_ms = debounce_ms
        self.on_fire = on_fire
        self._timers: Dict[Path, threading.Timer] = {}
        self._lock = threading.Lock()

    def touch(self, path: Path) -> None:
        """
        Record a notification for ``path`` and (re)start its window.

        Args:
            path: The path that changed
        """
        timer = threading.Timer(self.debounce_ms / 1000.0, self._expire)
        timer.daemon = True
        # The timer passes itself so _expire can check it is still current
        timer.args = (path, timer)

        with self._lock:
            existing = self._timers.get(path)
            if existing is not None:
                existing.cancel()
            self._timers[path] = timer
            timer.start()

    def _expire(self, path: Path, timer: threading.Timer) -> None:
        """Timer callback: fire only if this timer still owns the window."""
        with self._lock:
            if self._timers.get(path) is not timer:
                return
            del self._timers[path]

        logger.debug(f"Debounce window elapsed: {path}")
        try:
            self.on_fire(path)
        except Exception as e:
            logger.error(f"Error firing debounced event for {path}: {e}", exc_info=True)

    def cancel(self, path: Path) -> bool:
        """
        Cancel the pending window for one path without firing it.

        Returns:
            True if a window was pending
        """
        with self._lock:
            timer = self._timers.pop(path, None)
        if timer is None:
            return False
        timer.cancel()
        return True

    def cancel_all(self) -> int:
        """
        Cancel every pending window without firing any of them.

        Returns:
            Number of windows cancelled
        """
        with self._lock:
            timers = list(self._timers.values())
            self._timers.clear()

        for timer in timers:
            timer.cancel()
        return len(timers)

    def pending_paths(self) -> List[Path]:
        """Paths with an open debounce window."""
        with self._lock:
            return list(self._timers.keys())

    def __len__(self) -> int:
        """Return the number of open windows."""
        with self._lock:
            return len(self._timers)

    def __contains__(self, path: Path) -> bool:
        with self._lock:
            return path in self._timers
