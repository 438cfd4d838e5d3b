"""
Workspace Watcher Package

Monitors an algo-trainer workspace for file changes and delivers
debounced, categorized events to registered handlers.

Features:
- One debounce window per path; bursts collapse to a single event
- Categories derived from the watched root (problems vs templates)
- Handlers per category or for "all" events, sync or async
- Handler failures isolated from each other and from the watcher
- Idempotent stop that discards pending windows
"""

from .models import (
    EventCategory,
    WatchEvent,
    WatchedRoot,
    RawFSEvent,
    WorkspacePaths,
)

from .config import WatcherConfig, DEFAULT_DEBOUNCE_MS

from .exceptions import (
    AlgoTrainerError,
    WorkspaceError,
    WatcherError,
    WatcherAlreadyRunningError,
    WatcherStartError,
    RootError,
    RootAlreadyExistsError,
)

from .categorizer import RootTable, categorize, find_root, infer_category
from .debouncer import DebounceScheduler
from .registry import HandlerRegistry, HandlerDispatcher
from .fs_watcher import FSWatcherPool, FSEventHandler
from .watcher import FileWatcher
from .workspace import create_workspace_watcher


__all__ = [
    # Models
    "EventCategory",
    "WatchEvent",
    "WatchedRoot",
    "RawFSEvent",
    "WorkspacePaths",
    # Config
    "WatcherConfig",
    "DEFAULT_DEBOUNCE_MS",
    # Exceptions
    "AlgoTrainerError",
    "WorkspaceError",
    "WatcherError",
    "WatcherAlreadyRunningError",
    "WatcherStartError",
    "RootError",
    "RootAlreadyExistsError",
    # Components
    "RootTable",
    "categorize",
    "find_root",
    "infer_category",
    "DebounceScheduler",
    "HandlerRegistry",
    "HandlerDispatcher",
    "FSWatcherPool",
    "FSEventHandler",
    # Watcher
    "FileWatcher",
    "create_workspace_watcher",
]

__version__ = "0.1.0"
