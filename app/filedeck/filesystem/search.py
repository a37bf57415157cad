"""Depth- and result-bounded name search over a directory subtree.

Traversal is depth-first pre-order driven by an explicit stack of
pending directory iterators, so the depth bound is enforced
deterministically and deep trees cannot exhaust the interpreter stack.
Both bounds are hard caps that keep the worst case predictable on huge
trees.
"""

import logging
import os
from collections.abc import Iterator

from filedeck.core.errors import (
    NotAccessibleError,
    NotDirectoryError,
    PathNotFoundError,
    PermissionDeniedError,
)
from filedeck.filesystem.metadata import resolve_entry
from filedeck.filesystem.models import FileEntry

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 5
DEFAULT_MAX_RESULTS = 200


def _child_paths(directory: str) -> list[str]:
    """Return the child paths of ``directory`` in case-insensitive name order."""
    with os.scandir(directory) as it:
        children = [(child.name.lower(), child.path) for child in it]
    children.sort()
    return [path for _, path in children]


def search(
    root: str | os.PathLike[str],
    query: str,
    show_hidden: bool = False,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    max_results: int = DEFAULT_MAX_RESULTS,
) -> list[FileEntry]:
    """Find entries whose name contains ``query`` (case-insensitive).

    The root is depth 0. A directory at depth ``d`` is enumerated only
    while ``d <= max_depth``. Matching directories are still descended
    into. Symlinked directories are reported but never followed.

    Unreadable subdirectories and entries that vanish mid-walk are
    skipped; partial results are always returned.

    Args:
        root: Directory to search under.
        query: Substring to look for in entry names.
        show_hidden: Include (and descend into) dot-prefixed entries.
        max_depth: Maximum descent below ``root``.
        max_results: Stop as soon as this many matches are collected.

    Returns:
        Matching entries in traversal order, at most ``max_results``.

    Raises:
        PathNotFoundError: If ``root`` does not exist.
        NotDirectoryError: If ``root`` is not a directory.
        PermissionDeniedError: If ``root`` itself cannot be opened.
    """
    root_path = os.path.abspath(os.fspath(root))
    if not os.path.exists(root_path):
        raise PathNotFoundError(root_path)
    if not os.path.isdir(root_path):
        raise NotDirectoryError(root_path)

    try:
        top_level = _child_paths(root_path)
    except PermissionError as e:
        raise PermissionDeniedError(root_path) from e
    except OSError as e:
        raise NotAccessibleError(root_path, e) from e

    needle = query.lower()
    results: list[FileEntry] = []
    stack: list[tuple[int, Iterator[str]]] = [(0, iter(top_level))]

    while stack and len(results) < max_results:
        depth, pending = stack[-1]
        child_path = next(pending, None)
        if child_path is None:
            stack.pop()
            continue

        try:
            entry = resolve_entry(child_path)
        except NotAccessibleError:
            continue
        if not show_hidden and entry.is_hidden:
            continue

        if needle in entry.name.lower():
            results.append(entry)

        if entry.is_dir and not entry.is_symlink and depth < max_depth:
            try:
                grandchildren = _child_paths(child_path)
            except OSError as e:
                logger.debug("Skipping unreadable directory %s: %s", child_path, e)
                continue
            stack.append((depth + 1, iter(grandchildren)))

    return results
