"""Trash capability used by delete operations.

The engine itself never branches on platform. Where deleted items go
is decided by the TrashBackend chosen at startup; the default backend
delegates to Send2Trash, which implements the freedesktop, macOS and
Windows recycle-bin conventions.
"""

import logging
from typing import Protocol

from send2trash import send2trash

logger = logging.getLogger(__name__)


class TrashBackend(Protocol):
    """Moves a path to the platform trash instead of deleting it."""

    def send(self, path: str) -> None:
        """Move ``path`` to the trash.

        Raises:
            OSError: If the item could not be trashed.
        """
        ...


class Send2TrashBackend:
    """TrashBackend backed by the Send2Trash library."""

    def send(self, path: str) -> None:
        logger.debug("Moving to trash: %s", path)
        send2trash(path)
