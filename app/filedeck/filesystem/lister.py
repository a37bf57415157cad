"""Directory listing with hidden-file filtering and stable ordering."""

import logging
import os

from filedeck.core.errors import (
    NotAccessibleError,
    NotDirectoryError,
    PathNotFoundError,
    PermissionDeniedError,
)
from filedeck.filesystem.metadata import resolve_entry
from filedeck.filesystem.models import DirContents, FileEntry, sort_key

logger = logging.getLogger(__name__)


def parent_of(path: str) -> str | None:
    """Return the parent directory of an absolute path, None for a root."""
    parent = os.path.dirname(path)
    if parent == path:
        return None
    return parent


def list_directory(path: str | os.PathLike[str], show_hidden: bool = False) -> DirContents:
    """List the immediate children of a directory.

    Children that vanish or cannot be stat-ed while the listing is built
    are skipped; one bad entry never blanks out the whole view.

    Args:
        path: Directory to list.
        show_hidden: Include dot-prefixed entries.

    Returns:
        DirContents with directories first, then files, each group sorted
        by case-insensitive name.

    Raises:
        PathNotFoundError: If the path does not exist.
        NotDirectoryError: If the path is not a directory.
        PermissionDeniedError: If the directory cannot be opened.
    """
    dir_path = os.path.abspath(os.fspath(path))
    if not os.path.exists(dir_path):
        raise PathNotFoundError(dir_path)
    if not os.path.isdir(dir_path):
        raise NotDirectoryError(dir_path)

    entries: list[FileEntry] = []
    try:
        with os.scandir(dir_path) as it:
            for child in it:
                if not show_hidden and child.name.startswith("."):
                    continue
                try:
                    entries.append(resolve_entry(child.path))
                except NotAccessibleError as e:
                    logger.debug("Skipping unreadable entry: %s", e)
    except PermissionError as e:
        raise PermissionDeniedError(dir_path) from e
    except OSError as e:
        raise NotAccessibleError(dir_path, e) from e

    entries.sort(key=sort_key)
    return DirContents(path=dir_path, entries=tuple(entries), parent=parent_of(dir_path))
