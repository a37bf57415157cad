"""On-demand reads: recursive directory size and bounded text preview."""

import logging
import os

from filedeck.core.errors import NotDirectoryError, PathNotFoundError, from_os_error

logger = logging.getLogger(__name__)

# Default preview limit (2 MiB)
DEFAULT_READ_MAX_BYTES = 2 * 1024 * 1024


def calculate_dir_size(path: str | os.PathLike[str]) -> int:
    """Sum the sizes of all files below ``path``.

    Symlinked directories are not followed; symlinks to files count
    their target's size. Unreadable subdirectories are skipped.

    Raises:
        NotDirectoryError: If ``path`` is not a directory.
    """
    root = os.path.abspath(os.fspath(path))
    if not os.path.isdir(root):
        raise NotDirectoryError(root)

    total = 0
    pending = [root]
    while pending:
        directory = pending.pop()
        try:
            with os.scandir(directory) as it:
                children = list(it)
        except OSError as e:
            logger.debug("Skipping unreadable directory %s: %s", directory, e)
            continue

        for child in children:
            try:
                if child.is_dir(follow_symlinks=False):
                    pending.append(child.path)
                elif child.is_file():
                    total += child.stat().st_size
            except OSError:
                continue
    return total


def read_text(path: str | os.PathLike[str], max_bytes: int = DEFAULT_READ_MAX_BYTES) -> str:
    """Read up to ``max_bytes`` of a file as text.

    Invalid UTF-8 (including a sequence cut by the limit) is replaced
    rather than rejected.

    Raises:
        PathNotFoundError: If ``path`` does not exist.
        FileDeckError: If the file cannot be read.
    """
    file_path = os.path.abspath(os.fspath(path))
    if not os.path.exists(file_path):
        raise PathNotFoundError(file_path)
    try:
        with open(file_path, "rb") as f:
            data = f.read(max_bytes)
    except OSError as e:
        raise from_os_error(file_path, e) from e
    return data.decode("utf-8", errors="replace")
