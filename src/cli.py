#!/usr/bin/env python3
"""
CLI for watching an algo-trainer workspace.

Usage:
    python -m src.cli watch --workspace ~/algo-workspace
    python -m src.cli watch --workspace . --debounce 500 --no-recursive
"""

import argparse
import logging
import signal
import sys
import time
from pathlib import Path
from typing import List, Optional

from src.workspace_watcher import (
    DEFAULT_DEBOUNCE_MS,
    WatchEvent,
    WatcherError,
    WorkspacePaths,
    create_workspace_watcher,
)


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger("cli")


class GracefulShutdown:
    """Handle graceful shutdown on SIGINT/SIGTERM."""

    def __init__(self):
        self.should_exit = False
        signal.signal(signal.SIGINT, self._handler)
        signal.signal(signal.SIGTERM, self._handler)

    def _handler(self, signum, frame):
        logger.info("Received shutdown signal, stopping...")
        self.should_exit = True


def log_event(event: WatchEvent) -> None:
    """Handler that reports every workspace change."""
    logger.info(f"{event.category.value}: {event.path}")


def cmd_watch(args) -> int:
    """Watch the workspace until interrupted."""
    paths = WorkspacePaths.for_root(args.workspace)

    for directory in (paths.problems, paths.templates):
        if not directory.is_dir():
            logger.error(f"Workspace directory does not exist: {directory}")
            return 1

    watcher = create_workspace_watcher(
        paths.root,
        debounce_ms=args.debounce,
        recursive=args.recursive,
    )
    watcher.on("all", log_event)

    try:
        watcher.start()
    except WatcherError as e:
        logger.error(f"Could not start watcher: {e}")
        return 1

    shutdown = GracefulShutdown()
    logger.info(f"Watching workspace {paths.root} (debounce {watcher.config.debounce_ms}ms)")
    logger.info("Press Ctrl+C to stop")

    with watcher:
        while not shutdown.should_exit:
            time.sleep(0.2)

    logger.info("Watcher stopped")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Workspace tools for algo-trainer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Report every change under problems/ and templates/
  python -m src.cli watch --workspace ~/algo-workspace

  # Slower debounce, top-level files only
  python -m src.cli watch --workspace . --debounce 1000 --no-recursive
        """,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    watch_parser = subparsers.add_parser("watch", help="Watch workspace problems and templates")
    watch_parser.add_argument("--workspace", type=Path, default=Path("."), help="Workspace root directory")
    watch_parser.add_argument("--debounce", type=int, default=DEFAULT_DEBOUNCE_MS, help="Debounce time in ms")
    watch_parser.add_argument(
        "--no-recursive",
        dest="recursive",
        action="store_false",
        help="Only watch the top level of each directory",
    )
    watch_parser.set_defaults(func=cmd_watch)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
