"""File system watcher using watchdog library."""

import logging
import threading
import time
from pathlib import Path
from typing import Callable, Dict, List, Optional

from watchdog.observers import Observer
from watchdog.events import (
    FileSystemEventHandler,
    DirCreatedEvent,
    DirDeletedEvent,
    DirMovedEvent,
)

from .models import RawFSEvent
from .config import WatcherConfig

logger = logging.getLogger(__name__)


class FSEventHandler(FileSystemEventHandler):
    """
    Handler that converts watchdog events to RawFSEvent.

    Directory "modified" notifications are dropped: they only report
    that a child changed, and the child has its own notification.
    """

    def __init__(
        self,
        callback: Callable[[RawFSEvent], None],
        config: WatcherConfig,
    ):
        super().__init__()
        self.callback = callback
        self.config = config

    def _should_ignore(self, path: Path) -> bool:
        """Check if the path should be ignored."""
        return self.config.should_ignore(path)

    def _emit(self, event_type: str, src_path: Path, dest_path: Optional[Path] = None, is_directory: bool = False):
        """Emit a RawFSEvent to the callback."""
        if self._should_ignore(src_path) and (dest_path is None or self._should_ignore(dest_path)):
            return

        raw_event = RawFSEvent(
            event_type=event_type,
            src_path=src_path,
            dest_path=dest_path,
            is_directory=is_directory,
            timestamp=time.time(),
        )
        try:
            self.callback(raw_event)
        except Exception as e:
            # Raising here would kill the observer's dispatch thread
            logger.error(f"Error handling {event_type} event for {src_path}: {e}", exc_info=True)

    def on_created(self, event):
        is_dir = isinstance(event, DirCreatedEvent)
        self._emit("created", Path(event.src_path), is_directory=is_dir)

    def on_deleted(self, event):
        is_dir = isinstance(event, DirDeletedEvent)
        self._emit("deleted", Path(event.src_path), is_directory=is_dir)

    def on_modified(self, event):
        if event.is_directory:
            return
        self._emit("modified", Path(event.src_path))

    def on_moved(self, event):
        is_dir = isinstance(event, DirMovedEvent)
        self._emit(
            "moved",
            Path(event.src_path),
            Path(event.dest_path),
            is_directory=is_dir,
        )


class FSWatcherPool:
    """
    Manages multiple watchdog observers, one per root.

    Provides a unified interface for starting and stopping
    watchers for multiple root directories. One observer per root
    keeps a vanished root from taking the others down with it.
    """

    def __init__(
        self,
        event_callback: Callable[[RawFSEvent], None],
        config: Optional[WatcherConfig] = None,
    ):
        """
        Initialize the watcher pool.

        Args:
            event_callback: Callback function for raw filesystem events
            config: Watcher configuration
        """
        self.event_callback = event_callback
        self.config = config or WatcherConfig()
        self._observers: Dict[Path, Observer] = {}
        self._lock = threading.Lock()

    def start_watching(self, root: Path) -> bool:
        """
        Start watching a root directory.

        Args:
            root: Path to the root directory

        Returns:
            True if watching started, False if already watching

        Raises:
            OSError: If the OS refuses the watch (missing root, watch limit)
        """
        root = root.resolve()

        with self._lock:
            if root in self._observers:
                return False

            if not root.is_dir():
                raise FileNotFoundError(f"Watched root is not a directory: {root}")

            observer = Observer()
            handler = FSEventHandler(self.event_callback, self.config)

            observer.schedule(
                handler,
                str(root),
                recursive=self.config.recursive,
            )
            observer.start()

            self._observers[root] = observer
            logger.debug(f"Observer started for {root} (recursive={self.config.recursive})")
            return True

    def stop_all(self) -> int:
        """
        Stop all watchers.

        Returns:
            Number of watchers stopped
        """
        with self._lock:
            observers = list(self._observers.values())
            self._observers.clear()

        self._shutdown_observers(observers)
        return len(observers)

    def _shutdown_observers(self, observers: List[Observer]) -> None:
        for observer in observers:
            try:
                observer.stop()
            except Exception as e:
                logger.warning(f"Error stopping observer: {e}")

        current = threading.current_thread()
        for observer in observers:
            # stop() may be reached from an observer's own dispatch thread
            if observer is current:
                continue
            observer.join(timeout=self.config.stop_timeout_s)

    def __len__(self) -> int:
        """Return the number of active watchers."""
        with self._lock:
            return len(self._observers)
