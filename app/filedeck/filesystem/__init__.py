"""Filesystem operation engine.

This module provides metadata resolution, directory listing, bounded
search, tree copy/move with retry, and the single-slot change watcher.
"""

from filedeck.filesystem.lister import list_directory
from filedeck.filesystem.metadata import format_timestamp, resolve_entry
from filedeck.filesystem.models import DirContents, FileEntry
from filedeck.filesystem.operator import FileOperator, duplicate_name, validate_name
from filedeck.filesystem.reader import calculate_dir_size, read_text
from filedeck.filesystem.retry import RetryPolicy
from filedeck.filesystem.search import search
from filedeck.filesystem.trash import Send2TrashBackend, TrashBackend
from filedeck.filesystem.watcher import DirectoryChanged, DirectoryWatcher

__all__ = [
    "DirContents",
    "DirectoryChanged",
    "DirectoryWatcher",
    "FileEntry",
    "FileOperator",
    "RetryPolicy",
    "Send2TrashBackend",
    "TrashBackend",
    "calculate_dir_size",
    "duplicate_name",
    "format_timestamp",
    "list_directory",
    "read_text",
    "resolve_entry",
    "search",
    "validate_name",
]
