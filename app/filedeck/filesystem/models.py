"""Filesystem domain models for listing and search.

This module defines the immutable snapshots returned by the metadata
resolver, the directory lister and the search engine.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class FileEntry:
    """Snapshot of one filesystem object.

    Entries are rebuilt on every listing and never mutated; equal ``path``
    values refer to the same object observed at different times.

    Attributes:
        name: Final path component.
        path: Absolute path, used as the stable identity of the entry.
        is_dir: Whether the entry (or a symlink's target) is a directory.
        is_symlink: Whether the entry itself is a symbolic link.
        is_hidden: True iff the name starts with a dot.
        size: Size in bytes, always 0 for directories.
        modified: Modification time as "YYYY-MM-DD HH:MM:SS", or "".
        extension: Trailing extension without the dot, "" for directories.
    """

    name: str
    path: str
    is_dir: bool
    is_symlink: bool
    is_hidden: bool
    size: int
    modified: str
    extension: str

    def __post_init__(self) -> None:
        """Validate entry invariants after initialization."""
        if not self.path:
            msg = "Path cannot be empty"
            raise ValueError(msg)
        if self.is_dir and (self.size != 0 or self.extension):
            msg = f"Directory entry must have zero size and no extension: {self.path}"
            raise ValueError(msg)
        if self.is_hidden != self.name.startswith("."):
            msg = f"is_hidden does not match name: {self.name!r}"
            raise ValueError(msg)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON output.

        Returns:
            Dictionary representation of the entry.
        """
        return {
            "name": self.name,
            "path": self.path,
            "is_dir": self.is_dir,
            "is_symlink": self.is_symlink,
            "is_hidden": self.is_hidden,
            "size": self.size,
            "modified": self.modified,
            "extension": self.extension,
        }


@dataclass(frozen=True, slots=True)
class DirContents:
    """Immediate children of one directory.

    Attributes:
        path: The listed directory.
        entries: Directories first, then files, each group ordered by
            case-insensitive name.
        parent: Parent directory, None only for a filesystem root.
    """

    path: str
    entries: tuple[FileEntry, ...]
    parent: str | None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON output."""
        return {
            "path": self.path,
            "parent": self.parent,
            "entries": [entry.to_dict() for entry in self.entries],
        }


def sort_key(entry: FileEntry) -> tuple[bool, str]:
    """Sort key placing directories first, then by case-insensitive name."""
    return (not entry.is_dir, entry.name.lower())
