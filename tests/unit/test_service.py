"""Unit tests for FileService.

Async operations are driven with asyncio.run so no event-loop plugin is
needed.
"""

import asyncio
import threading
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from filedeck.core.config import EngineConfig
from filedeck.core.errors import NotDirectoryError, SourceMissingError
from filedeck.filesystem.operator import FileOperator
from filedeck.filesystem.watcher import DirectoryChanged, DirectoryWatcher
from filedeck.service import FileService


class TestFileServiceInline:
    """Tests for operations executed on the calling thread."""

    def test_list_directory_uses_config_default(self, sample_tree: Path) -> None:
        """show_hidden falls back to the configured value."""
        service = FileService(EngineConfig(show_hidden=True))

        names = [e.name for e in service.list_directory(str(sample_tree)).entries]

        assert ".env" in names

    def test_list_directory_explicit_override(self, sample_tree: Path) -> None:
        """An explicit show_hidden wins over the config."""
        service = FileService(EngineConfig(show_hidden=True))

        names = [e.name for e in service.list_directory(str(sample_tree), False).entries]

        assert ".env" not in names

    def test_get_file_details(self, sample_tree: Path) -> None:
        """Details resolve a single entry."""
        entry = FileService().get_file_details(str(sample_tree / "alpha.txt"))
        assert entry.size == 5

    def test_read_text_respects_limit(self, tmp_path: Path) -> None:
        """Preview size comes from the config."""
        path = tmp_path / "long.txt"
        path.write_text("0123456789")
        service = FileService(EngineConfig(read_max_bytes=3))

        assert service.read_text(str(path)) == "012"

    def test_operator_built_from_config(self) -> None:
        """The default operator uses the configured retry budget."""
        service = FileService(EngineConfig(retry_attempts=5, retry_delay_ms=0))

        policy = service._operator.retry_policy  # pyright: ignore[reportPrivateUsage]
        assert policy.max_attempts == 5
        assert policy.delay == 0

    def test_delegates_mutations_to_operator(self, tmp_path: Path) -> None:
        """Rename, create and duplicate go through the operator."""
        operator = MagicMock(spec=FileOperator)
        operator.rename.return_value = "/x/new"
        service = FileService(operator=operator)

        assert service.rename("/x/old", "new") == "/x/new"
        service.create_directory("/x", "d")
        service.create_file("/x", "f", "c")
        service.duplicate("/x/old")
        service.batch_rename(["/x/a"], "a", "b", True)

        operator.rename.assert_called_once_with("/x/old", "new")
        operator.create_directory.assert_called_once_with("/x", "d")
        operator.create_file.assert_called_once_with("/x", "f", "c")
        operator.duplicate.assert_called_once_with("/x/old")
        operator.batch_rename.assert_called_once_with(["/x/a"], "a", "b", True)


class TestFileServiceAsync:
    """Tests for operations offloaded to worker threads."""

    def test_search_uses_configured_bounds(self, tmp_path: Path) -> None:
        """search() applies max_results from the config."""
        for i in range(5):
            (tmp_path / f"hit{i}.txt").write_text("")
        service = FileService(EngineConfig(search_max_results=2))

        results = asyncio.run(service.search(str(tmp_path), "hit"))

        assert [e.name for e in results] == ["hit0.txt", "hit1.txt"]

    def test_copy_and_move(self, tmp_path: Path) -> None:
        """copy() and move() complete on a worker thread."""
        source = tmp_path / "a.txt"
        source.write_text("x")
        copies = tmp_path / "copies"
        moved = tmp_path / "moved"
        copies.mkdir()
        moved.mkdir()
        service = FileService()

        async def run() -> None:
            await service.copy([str(source)], str(copies))
            await service.move([str(source)], str(moved))

        asyncio.run(run())

        assert (copies / "a.txt").read_text() == "x"
        assert (moved / "a.txt").read_text() == "x"
        assert not source.exists()

    def test_errors_propagate_from_worker(self, tmp_path: Path) -> None:
        """Engine errors raised in the worker reach the awaiting caller."""
        service = FileService()

        with pytest.raises(SourceMissingError):
            asyncio.run(service.copy([str(tmp_path / "missing")], str(tmp_path)))

    def test_delete_uses_configured_trash_default(self, tmp_path: Path) -> None:
        """use_trash defaults to the config value."""
        operator = MagicMock(spec=FileOperator)
        service = FileService(EngineConfig(use_trash=False), operator=operator)

        asyncio.run(service.delete(["/x/a"]))

        operator.delete.assert_called_once_with(["/x/a"], False)

    def test_calculate_dir_size(self, sample_tree: Path) -> None:
        """Directory size is computed off the loop."""
        assert asyncio.run(FileService().calculate_dir_size(str(sample_tree))) == 31

    def test_calculate_dir_size_not_directory(self, sample_tree: Path) -> None:
        """Errors surface to the caller."""
        with pytest.raises(NotDirectoryError):
            asyncio.run(FileService().calculate_dir_size(str(sample_tree / "alpha.txt")))


class TestFileServiceChanges:
    """Tests for the async change stream."""

    def test_changes_yield_watcher_notifications(self, tmp_path: Path) -> None:
        """Callbacks from another thread arrive on the event loop."""
        watcher = DirectoryWatcher()
        service = FileService(watcher=watcher)

        async def first_change() -> DirectoryChanged:
            stream = service.changes()
            pending = asyncio.ensure_future(stream.__anext__())
            # Let the generator subscribe before publishing
            await asyncio.sleep(0)
            threading.Thread(
                target=watcher._publish,  # pyright: ignore[reportPrivateUsage]
                args=(str(tmp_path), watcher._generation),  # pyright: ignore[reportPrivateUsage]
            ).start()
            change = await asyncio.wait_for(pending, timeout=5)
            await stream.aclose()
            return change

        change = asyncio.run(first_change())

        assert change == DirectoryChanged(path=str(tmp_path))

    def test_closing_stream_unsubscribes(self) -> None:
        """aclose() removes the subscription."""
        watcher = DirectoryWatcher()
        service = FileService(watcher=watcher)

        async def open_and_close() -> None:
            stream = service.changes()
            pending = asyncio.ensure_future(stream.__anext__())
            await asyncio.sleep(0)
            pending.cancel()
            with pytest.raises(asyncio.CancelledError):
                await pending
            await stream.aclose()

        asyncio.run(open_and_close())

        assert watcher._subscribers == []  # pyright: ignore[reportPrivateUsage]

    def test_close_stops_watch(self, tmp_path: Path) -> None:
        """close() unwatches."""
        watcher = MagicMock(spec=DirectoryWatcher)
        service = FileService(watcher=watcher)

        service.watch(str(tmp_path))
        service.close()

        watcher.watch.assert_called_once_with(str(tmp_path))
        watcher.unwatch.assert_called_once_with()
