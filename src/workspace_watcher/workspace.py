"""Convenience constructor for a watcher over a whole workspace."""

import asyncio
from pathlib import Path
from typing import Optional, Union

from .config import WatcherConfig
from .models import EventCategory, WatchedRoot, WorkspacePaths
from .watcher import FileWatcher


def create_workspace_watcher(
    workspace_root: Union[str, Path],
    debounce_ms: Optional[int] = None,
    recursive: Optional[bool] = None,
    config: Optional[WatcherConfig] = None,
    loop: Optional[asyncio.AbstractEventLoop] = None,
) -> FileWatcher:
    """
    Create a watcher for a workspace's problems and templates directories.

    Changes under ``<root>/problems`` are reported as ``problem-changed``
    and changes under ``<root>/templates`` as ``template-changed``. All
    options are forwarded unchanged to FileWatcher.

    Args:
        workspace_root: The workspace root directory
        debounce_ms: Debounce window in milliseconds
        recursive: Whether to watch subdirectories
        config: Watcher configuration
        loop: Event loop for async handlers

    Returns:
        A stopped FileWatcher
    """
    paths = WorkspacePaths.for_root(workspace_root)
    roots = [
        WatchedRoot(paths.problems, EventCategory.PROBLEM_CHANGED),
        WatchedRoot(paths.templates, EventCategory.TEMPLATE_CHANGED),
    ]
    return FileWatcher(
        roots,
        debounce_ms=debounce_ms,
        recursive=recursive,
        config=config,
        loop=loop,
    )
