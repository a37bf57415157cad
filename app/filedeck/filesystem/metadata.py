"""Metadata resolution: turn a path into a FileEntry snapshot."""

import logging
import os
import stat
from datetime import UTC, datetime
from pathlib import Path

from filedeck.core.errors import NotAccessibleError
from filedeck.filesystem.models import FileEntry

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_timestamp(seconds: float) -> str:
    """Format a POSIX timestamp with seconds resolution (UTC).

    Returns an empty string for pre-epoch values and values that
    cannot be represented.
    """
    if seconds < 0:
        return ""
    try:
        return datetime.fromtimestamp(int(seconds), tz=UTC).strftime(TIMESTAMP_FORMAT)
    except (OverflowError, OSError, ValueError):
        return ""


def resolve_entry(path: str | os.PathLike[str]) -> FileEntry:
    """Build a FileEntry for ``path``.

    Link metadata is read first so ``is_symlink`` reflects the entry
    itself. For symlinks the target is stat-ed for ``is_dir`` and
    ``size``; a broken link falls back to its own metadata instead of
    failing.

    Args:
        path: Path to resolve. Relative paths are made absolute.

    Returns:
        Immutable snapshot of the entry.

    Raises:
        NotAccessibleError: If the path itself cannot be stat-ed.
    """
    abs_path = os.path.abspath(os.fspath(path))
    try:
        link_stat = os.lstat(abs_path)
    except OSError as e:
        raise NotAccessibleError(abs_path, e) from e

    is_symlink = stat.S_ISLNK(link_stat.st_mode)
    real_stat = link_stat
    if is_symlink:
        try:
            real_stat = os.stat(abs_path)
        except OSError:
            logger.debug("Broken symlink, using link metadata: %s", abs_path)

    name = Path(abs_path).name
    is_dir = stat.S_ISDIR(real_stat.st_mode)

    return FileEntry(
        name=name,
        path=abs_path,
        is_dir=is_dir,
        is_symlink=is_symlink,
        is_hidden=name.startswith("."),
        size=0 if is_dir else real_stat.st_size,
        modified=format_timestamp(link_stat.st_mtime),
        extension="" if is_dir else Path(name).suffix[1:],
    )
