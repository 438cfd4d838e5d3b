"""File watcher orchestrator: OS notifications in, categorized events out."""

import asyncio
import logging
import threading
from pathlib import Path
from typing import Optional, Tuple

from .categorizer import RootsInput, RootTable
from .config import WatcherConfig
from .debouncer import DebounceScheduler
from .exceptions import (
    WatcherAlreadyRunningError,
    WatcherStartError,
    error_context,
)
from .fs_watcher import FSWatcherPool
from .models import RawFSEvent, WatchedRoot, WatchEvent
from .registry import CategoryKey, Handler, HandlerDispatcher, HandlerRegistry

logger = logging.getLogger(__name__)


class FileWatcher:
    """
    Watches workspace roots and delivers debounced, categorized events.

    Raw notifications from watchdog are debounced per path; when a
    path's window elapses the path is categorized by the root it lives
    under and the resulting WatchEvent is fanned out to every handler
    registered for its category and for ``"all"``.

    Example:
        watcher = FileWatcher({problems_dir: "problem-changed"})
        watcher.on("problem-changed", lambda event: print(event.path))
        watcher.start()
        ...
        watcher.stop()
    """

    def __init__(
        self,
        roots: RootsInput,
        debounce_ms: Optional[int] = None,
        recursive: Optional[bool] = None,
        config: Optional[WatcherConfig] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        """
        Initialize a stopped watcher. Nothing is subscribed until start().

        Args:
            roots: A path, a sequence of paths/WatchedRoots, or a mapping
                of path to category. Unlabeled roots are labeled by
                ``infer_category``.
            debounce_ms: Overrides ``config.debounce_ms`` (default 300)
            recursive: Overrides ``config.recursive`` (default True)
            config: Watcher configuration
            loop: Event loop for async handlers while it is running;
                otherwise they run on a loop thread owned by the watcher
        """
        self.config = (config or WatcherConfig()).with_overrides(
            debounce_ms=debounce_ms,
            recursive=recursive,
        )
        self._root_table = RootTable(roots)
        self._registry = HandlerRegistry()
        self._debouncer = DebounceScheduler(self.config.debounce_ms, self._on_window_elapsed)
        self._fs_watcher_pool = FSWatcherPool(self._on_raw_event, self.config)
        self._loop = loop

        self._dispatcher: Optional[HandlerDispatcher] = None
        self._running = False
        self._lock = threading.RLock()

    @property
    def roots(self) -> Tuple[WatchedRoot, ...]:
        return self._root_table.roots

    def on(self, category: CategoryKey, handler: Handler) -> None:
        """
        Register a handler for a category, or ``"all"`` for every event.

        Handlers may be plain functions or return an awaitable. Allowed in
        any state; applies to windows that have not fired yet.
        """
        self._registry.add(category, handler)

    def off(self, category: CategoryKey, handler: Handler) -> None:
        """Unregister a handler. Unknown handlers are ignored."""
        self._registry.remove(category, handler)

    def start(self) -> None:
        """
        Start watching all roots.

        Raises:
            WatcherAlreadyRunningError: If already running
            WatcherStartError: If a root cannot be watched
        """
        paths = [str(p) for p in self._root_table.paths()]

        with self._lock:
            if self._running:
                raise WatcherAlreadyRunningError(
                    "Watcher is already running",
                    error_context("FileWatcher.start", paths=paths),
                )

            try:
                for root in self._root_table.paths():
                    self._fs_watcher_pool.start_watching(root)
            except Exception as e:
                self._fs_watcher_pool.stop_all()
                raise WatcherStartError(
                    f"Failed to start file watcher: {e}",
                    error_context("FileWatcher.start", paths=paths, error=str(e)),
                ) from e

            self._dispatcher = HandlerDispatcher(self.config.handler_workers, self._loop)
            self._running = True

        logger.info(f"Watching {len(paths)} root(s): {', '.join(paths)}")

    def stop(self) -> None:
        """
        Stop watching and release all resources.

        Pending debounce windows are discarded without firing. Events that
        were already dispatched still reach every one of their handlers;
        stop() does not wait for them. Safe to call at any time, any
        number of times.
        """
        with self._lock:
            if not self._running:
                return

            self._running = False
            cancelled = self._debouncer.cancel_all()
            dispatcher = self._dispatcher
            self._dispatcher = None

        if dispatcher is not None:
            dispatcher.close()

        stopped = self._fs_watcher_pool.stop_all()
        logger.info(f"Watcher stopped ({stopped} observer(s), {cancelled} pending event(s) discarded)")

    def is_running(self) -> bool:
        """Check if the watcher is running."""
        return self._running

    def pending_count(self) -> int:
        """Number of paths waiting for their debounce window to elapse."""
        return len(self._debouncer)

    def _on_raw_event(self, raw_event: RawFSEvent) -> None:
        """Observer callback: open or reset the debounce window of each path."""
        logger.debug(f"Raw event: {raw_event.event_type} - {raw_event.src_path}")

        with self._lock:
            if not self._running:
                return
            for path in raw_event.paths():
                if self.config.should_ignore(path):
                    continue
                self._debouncer.touch(path)

    def _on_window_elapsed(self, path: Path) -> None:
        """Debouncer callback: categorize the path and dispatch one event."""
        category = self._root_table.categorize(path)
        if category is None:
            logger.debug(f"Dropping event outside watched roots: {path}")
            return

        event = WatchEvent(category=category, path=path)

        with self._lock:
            if not self._running or self._dispatcher is None:
                return
            handlers = self._registry.snapshot(category)
            if handlers:
                self._dispatcher.dispatch(event, handlers)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
        return False

    def __repr__(self) -> str:
        state = "running" if self._running else "stopped"
        roots = ", ".join(f"{r.path}={r.category.value}" for r in self.roots)
        return f"<FileWatcher {state} observers={len(self._fs_watcher_pool)} [{roots}]>"
