"""Configuration for the workspace watcher package."""

import dataclasses
import fnmatch
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


DEFAULT_DEBOUNCE_MS = 300


@dataclass
class WatcherConfig:
    """
    Configuration options for the workspace watcher.

    Attributes:
        debounce_ms: Milliseconds a path must stay quiet before its event fires
        recursive: Whether to watch directories recursively
        ignore_patterns: Glob patterns for files to ignore
        handler_workers: Worker threads for synchronous handlers (awaitables run on an event loop)
        stop_timeout_s: Seconds to wait for each observer thread on stop
    """
    debounce_ms: int = DEFAULT_DEBOUNCE_MS
    recursive: bool = True
    ignore_patterns: List[str] = field(default_factory=lambda: [
        "*.tmp",
        "*.swp",
        "*.swo",
        "*.swx",
        "*~",
        ".#*",
        "4913",
        ".git/*",
        ".git",
        "__pycache__/*",
        "__pycache__",
        "*.pyc",
        ".DS_Store",
        "Thumbs.db",
    ])
    handler_workers: int = 4
    stop_timeout_s: float = 5.0

    def __post_init__(self):
        if self.debounce_ms <= 0:
            raise ValueError(f"debounce_ms must be positive, got {self.debounce_ms}")
        if self.handler_workers < 1:
            raise ValueError(f"handler_workers must be at least 1, got {self.handler_workers}")
        if self.stop_timeout_s < 0:
            raise ValueError(f"stop_timeout_s must not be negative, got {self.stop_timeout_s}")

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000.0

    def with_overrides(
        self,
        debounce_ms: Optional[int] = None,
        recursive: Optional[bool] = None,
    ) -> "WatcherConfig":
        """
        Return a copy with the given options applied.

        ``None`` means "keep the configured value".
        """
        changes = {}
        if debounce_ms is not None:
            changes["debounce_ms"] = debounce_ms
        if recursive is not None:
            changes["recursive"] = recursive
        return dataclasses.replace(self, **changes)

    def should_ignore(self, path: Path) -> bool:
        """
        Check if a path should be ignored based on ignore patterns.

        Args:
            path: Path to check

        Returns:
            True if the path should be ignored
        """
        path_str = str(path)
        name = path.name

        for pattern in self.ignore_patterns:
            if fnmatch.fnmatch(name, pattern):
                return True
            if fnmatch.fnmatch(path_str, f"*/{pattern}"):
                return True
            if fnmatch.fnmatch(path_str, pattern):
                return True

        return False
