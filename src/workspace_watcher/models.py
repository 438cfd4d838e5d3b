"""Data models for the workspace watcher package."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Union
import time


class EventCategory(str, Enum):
    """
    Semantic category of a workspace change.

    ``ALL`` is the wildcard subscription channel: handlers registered
    for it receive every event, but no event is ever labeled ``ALL``.
    """
    PROBLEM_CHANGED = "problem-changed"
    TEMPLATE_CHANGED = "template-changed"
    ALL = "all"

    @classmethod
    def coerce(cls, value: Union["EventCategory", str]) -> "EventCategory":
        """Accept either a member or its string value."""
        if isinstance(value, cls):
            return value
        return cls(value)


@dataclass(frozen=True)
class WatchEvent:
    """
    A debounced workspace change delivered to handlers.

    Attributes:
        category: Which workspace area changed
        path: Absolute path of the changed file or directory
        timestamp: Unix timestamp when the debounce window elapsed
    """
    category: EventCategory
    path: Path
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self):
        if not self.path.is_absolute():
            raise ValueError(f"path must be absolute: {self.path}")
        if self.category is EventCategory.ALL:
            raise ValueError("'all' is a subscription channel, not an event category")

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "category": self.category.value,
            "path": str(self.path),
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class WatchedRoot:
    """
    A directory tree the watcher subscribes to.

    Attributes:
        path: Absolute, resolved directory path
        category: Category assigned to every change under this root
    """
    path: Path
    category: EventCategory

    def __post_init__(self):
        # Frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "path", Path(self.path).expanduser().resolve())
        object.__setattr__(self, "category", EventCategory.coerce(self.category))
        if self.category is EventCategory.ALL:
            raise ValueError(f"root {self.path} cannot be labeled 'all'")

    def contains(self, path: Path) -> bool:
        """True if ``path`` is this root or lies beneath it."""
        try:
            path.relative_to(self.path)
            return True
        except ValueError:
            return False


@dataclass
class RawFSEvent:
    """
    Raw event from the filesystem watcher before debouncing.

    Attributes:
        event_type: Raw event type string (created, deleted, modified, moved)
        src_path: Source path of the event
        dest_path: Destination path (for move events)
        is_directory: Whether this is a directory event
        timestamp: Unix timestamp when the event occurred
    """
    event_type: str
    src_path: Path
    dest_path: Optional[Path] = None
    is_directory: bool = False
    timestamp: float = field(default_factory=time.time)

    def paths(self) -> list:
        """Every path touched by this event; moves touch two."""
        if self.dest_path is not None:
            return [self.src_path, self.dest_path]
        return [self.src_path]


@dataclass(frozen=True)
class WorkspacePaths:
    """Concrete directory layout of an algo-trainer workspace."""
    root: Path
    problems: Path
    completed: Path
    templates: Path
    config: Path

    @classmethod
    def for_root(cls, root: Union[str, Path]) -> "WorkspacePaths":
        """Derive the standard layout under ``root``."""
        root = Path(root).expanduser().resolve()
        return cls(
            root=root,
            problems=root / "problems",
            completed=root / "completed",
            templates=root / "templates",
            config=root / "config",
        )
