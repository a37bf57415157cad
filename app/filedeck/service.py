"""Async front end for the filesystem engine.

Cheap metadata and listing calls run inline. Calls that can be
unboundedly slow on a large tree (copy, move, delete, search, directory
size) are offloaded to worker threads and awaited, so blocking I/O never
stalls the event loop. No lock is held across an ``await``.

Within one batch call sources are processed sequentially in the order
given. Separate concurrent calls are not serialized against each other;
two moves touching overlapping paths can race. Operations cannot be
cancelled mid-flight and have no timeout beyond the retry delays.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Sequence

from filedeck.core.config import EngineConfig
from filedeck.filesystem.lister import list_directory
from filedeck.filesystem.metadata import resolve_entry
from filedeck.filesystem.models import DirContents, FileEntry
from filedeck.filesystem.operator import FileOperator
from filedeck.filesystem.reader import calculate_dir_size, read_text
from filedeck.filesystem.search import search
from filedeck.filesystem.watcher import DirectoryChanged, DirectoryWatcher

logger = logging.getLogger(__name__)


class FileService:
    """Operation surface consumed by a UI shell.

    Args:
        config: Engine configuration. Defaults to EngineConfig().
        operator: Mutation operator. Built from ``config`` when omitted.
        watcher: Change watcher owned by this service. A fresh one is
            created when omitted.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        operator: FileOperator | None = None,
        watcher: DirectoryWatcher | None = None,
    ) -> None:
        self._config = config or EngineConfig()
        self._operator = operator or FileOperator(retry_policy=self._config.retry_policy())
        self._watcher = watcher or DirectoryWatcher()

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def watcher(self) -> DirectoryWatcher:
        return self._watcher

    # === Inline operations ===

    def list_directory(self, path: str, show_hidden: bool | None = None) -> DirContents:
        if show_hidden is None:
            show_hidden = self._config.show_hidden
        return list_directory(path, show_hidden)

    def get_file_details(self, path: str) -> FileEntry:
        return resolve_entry(path)

    def rename(self, path: str, new_name: str) -> str:
        return self._operator.rename(path, new_name)

    def batch_rename(
        self, paths: Sequence[str], pattern: str, replacement: str, use_regex: bool = False
    ) -> list[tuple[str, str]]:
        return self._operator.batch_rename(paths, pattern, replacement, use_regex)

    def create_directory(self, parent: str, name: str) -> str:
        return self._operator.create_directory(parent, name)

    def create_file(self, parent: str, name: str, content: str = "") -> str:
        return self._operator.create_file(parent, name, content)

    def duplicate(self, path: str) -> str:
        return self._operator.duplicate(path)

    def read_text(self, path: str) -> str:
        return read_text(path, self._config.read_max_bytes)

    def watch(self, path: str) -> None:
        self._watcher.watch(path)

    def unwatch(self) -> None:
        self._watcher.unwatch()

    # === Offloaded operations ===

    async def search(
        self, root: str, query: str, show_hidden: bool | None = None
    ) -> list[FileEntry]:
        if show_hidden is None:
            show_hidden = self._config.show_hidden
        return await asyncio.to_thread(
            search,
            root,
            query,
            show_hidden,
            max_depth=self._config.search_max_depth,
            max_results=self._config.search_max_results,
        )

    async def copy(self, sources: Sequence[str], destination: str) -> None:
        await asyncio.to_thread(self._operator.copy, list(sources), destination)

    async def move(self, sources: Sequence[str], destination: str) -> None:
        await asyncio.to_thread(self._operator.move, list(sources), destination)

    async def delete(self, paths: Sequence[str], use_trash: bool | None = None) -> None:
        if use_trash is None:
            use_trash = self._config.use_trash
        await asyncio.to_thread(self._operator.delete, list(paths), use_trash)

    async def calculate_dir_size(self, path: str) -> int:
        return await asyncio.to_thread(calculate_dir_size, path)

    # === Push notifications ===

    async def changes(self) -> AsyncIterator[DirectoryChanged]:
        """Yield DirectoryChanged notifications on the running loop.

        Watcher callbacks arrive on the observer thread and are handed
        to the loop with ``call_soon_threadsafe``. The subscription is
        removed when the iterator is closed.
        """
        loop = asyncio.get_running_loop()
        queue: asyncio.Queue[DirectoryChanged] = asyncio.Queue()

        def forward(change: DirectoryChanged) -> None:
            try:
                loop.call_soon_threadsafe(queue.put_nowait, change)
            except RuntimeError:
                logger.debug("Event loop closed, dropping change for %s", change.path)

        unsubscribe = self._watcher.subscribe(forward)
        try:
            while True:
                yield await queue.get()
        finally:
            unsubscribe()

    def close(self) -> None:
        """Stop any active watch."""
        self._watcher.unwatch()
