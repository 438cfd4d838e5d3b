"""Mapping of changed paths to workspace event categories."""

from pathlib import Path
from typing import Iterable, Mapping, Optional, Sequence, Tuple, Union

from .exceptions import RootAlreadyExistsError, error_context
from .models import EventCategory, WatchedRoot


PathLike = Union[str, Path]
RootsInput = Union[
    PathLike,
    WatchedRoot,
    Sequence[Union[PathLike, WatchedRoot]],
    Mapping[PathLike, Union[EventCategory, str]],
]

TEMPLATES_DIR_NAME = "templates"


def infer_category(root: Path) -> EventCategory:
    """
    Category for a root that was given without an explicit label.

    A directory named ``templates`` holds templates; every other root is
    treated as problem space.
    """
    if root.name.lower() == TEMPLATES_DIR_NAME:
        return EventCategory.TEMPLATE_CHANGED
    return EventCategory.PROBLEM_CHANGED


def normalize_roots(roots: RootsInput) -> Tuple[WatchedRoot, ...]:
    """
    Turn any accepted ``roots`` argument into a tuple of WatchedRoots.

    Accepts a single path, a sequence of paths and/or WatchedRoots, or a
    mapping of path to category.
    """
    if isinstance(roots, (str, Path, WatchedRoot)):
        roots = [roots]

    if isinstance(roots, Mapping):
        return tuple(WatchedRoot(Path(p), category) for p, category in roots.items())

    normalized = []
    for root in roots:
        if isinstance(root, WatchedRoot):
            normalized.append(root)
        else:
            path = Path(root).expanduser().resolve()
            normalized.append(WatchedRoot(path, infer_category(path)))
    return tuple(normalized)


def _deepest_root(path: Path, roots: Iterable[WatchedRoot]) -> Optional[WatchedRoot]:
    best: Optional[WatchedRoot] = None
    for root in roots:
        if root.contains(path):
            if best is None or len(root.path.parts) > len(best.path.parts):
                best = root
    return best


def find_root(path: Path, roots: Iterable[WatchedRoot]) -> Optional[WatchedRoot]:
    """
    Find the most specific watched root containing ``path``.

    The path is tried as given first, then resolved, so that roots
    reached through a symlink (``/tmp`` on macOS) still match.
    """
    roots = tuple(roots)
    path = Path(path)
    found = _deepest_root(path, roots)
    if found is None:
        found = _deepest_root(path.resolve(), roots)
    return found


def categorize(path: Path, roots: Iterable[WatchedRoot]) -> Optional[EventCategory]:
    """
    Return the category of the root whose subtree contains ``path``.

    Returns None for paths outside every root; the OS only reports paths
    inside watched trees, so callers treat None as a dropped event.
    """
    root = find_root(path, roots)
    return root.category if root is not None else None


class RootTable:
    """
    Immutable table of watched roots and their categories.

    Built once at watcher construction time; provides the lookups the
    watcher needs when a debounce window elapses.
    """

    def __init__(self, roots: RootsInput):
        """
        Initialize the root table.

        Args:
            roots: Paths, WatchedRoots, or a path -> category mapping

        Raises:
            ValueError: If no roots are given
            RootAlreadyExistsError: If the same directory appears twice
        """
        self._roots = normalize_roots(roots)
        if not self._roots:
            raise ValueError("at least one root is required")

        seen = set()
        for root in self._roots:
            if root.path in seen:
                raise RootAlreadyExistsError(
                    f"Root already being watched: {root.path}",
                    error_context("RootTable", path=str(root.path)),
                )
            seen.add(root.path)

    @property
    def roots(self) -> Tuple[WatchedRoot, ...]:
        return self._roots

    def paths(self) -> Tuple[Path, ...]:
        return tuple(root.path for root in self._roots)

    def find_root(self, path: Path) -> Optional[WatchedRoot]:
        return find_root(path, self._roots)

    def categorize(self, path: Path) -> Optional[EventCategory]:
        return categorize(path, self._roots)

    def __len__(self) -> int:
        return len(self._roots)

    def __iter__(self):
        return iter(self._roots)

    def __contains__(self, path: Path) -> bool:
        """Check if a path is one of the watched roots."""
        resolved = Path(path).expanduser().resolve()
        return any(root.path == resolved for root in self._roots)
