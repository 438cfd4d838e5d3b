#!/usr/bin/env python3
"""
Workspace watcher demo.

This example demonstrates:
1. Creating a watcher over a workspace's problems/ and templates/
2. Per-category handlers plus an "all" handler
3. A burst of writes collapsing into a single event
4. A failing handler that does not affect the others

Usage:
    python -m examples.workspace_watch_demo
"""

import asyncio
import shutil
import tempfile
import time
from pathlib import Path

from src.workspace_watcher import WatchEvent, create_workspace_watcher


def on_problem(event: WatchEvent):
    print(f"[PROBLEM]  {event.path.name}")


async def on_template(event: WatchEvent):
    await asyncio.sleep(0.01)
    print(f"[TEMPLATE] {event.path.name}")


def on_any(event: WatchEvent):
    print(f"[ALL]      {event.category.value}: {event.path}")


def broken_handler(event: WatchEvent):
    raise RuntimeError("this handler always fails")


def main():
    """Run the demo."""
    print("=" * 60)
    print("Workspace Watcher Demo")
    print("=" * 60)

    workspace = Path(tempfile.mkdtemp(prefix="algo_workspace_"))
    problems = workspace / "problems"
    templates = workspace / "templates"
    problems.mkdir()
    templates.mkdir()

    print(f"\nWorkspace: {workspace}\n")

    watcher = create_workspace_watcher(workspace, debounce_ms=300)
    watcher.on("problem-changed", on_problem)
    watcher.on("template-changed", on_template)
    watcher.on("all", on_any)
    watcher.on("all", broken_handler)

    try:
        watcher.start()
        time.sleep(0.5)

        # === Step 1: Create a problem ===
        print("[DEMO] Creating problems/two-sum/solution.py...")
        (problems / "two-sum").mkdir()
        (problems / "two-sum" / "solution.py").write_text("def two_sum(nums, target): ...")
        time.sleep(1)

        # === Step 2: Burst of saves ===
        print("\n[DEMO] Saving solution.py 5 times in quick succession...")
        for i in range(5):
            (problems / "two-sum" / "solution.py").write_text(f"# revision {i}")
            time.sleep(0.05)
        time.sleep(1)

        # === Step 3: Edit a template ===
        print("\n[DEMO] Writing templates/solution.py.tpl...")
        (templates / "solution.py.tpl").write_text("# {{PROBLEM_TITLE}}")
        time.sleep(1)

        # === Step 4: Stop, then write again ===
        print("\n[DEMO] Stopping watcher and writing once more (no events expected)...")
        watcher.stop()
        (templates / "ignored.tpl").write_text("not delivered")
        time.sleep(1)

        print("\n" + "=" * 60)
        print("Demo completed successfully!")
        print("=" * 60)

    except KeyboardInterrupt:
        print("\n\nInterrupted!")

    finally:
        watcher.stop()
        print(f"\nCleaning up workspace: {workspace}")
        shutil.rmtree(workspace, ignore_errors=True)


if __name__ == "__main__":
    main()
