"""Single-slot directory change watcher built on watchdog.

A DirectoryWatcher observes at most one directory at a time,
non-recursively. Watching a new directory replaces (and stops) the
previous observer. Every native event is collapsed into one generic
DirectoryChanged signal carrying the watched path; subscribers are
expected to re-list the directory rather than apply a diff, because
precise event semantics differ too much between platforms.

The one-directory limit is deliberate. Components that need to start or
stop watching receive the DirectoryWatcher instance explicitly; there is
no process-wide watcher.
"""

import logging
import os
import threading
from collections.abc import Callable
from dataclasses import dataclass
from types import TracebackType

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

from filedeck.core.errors import NotDirectoryError, from_os_error

logger = logging.getLogger(__name__)

# Pure access notifications; nothing in the directory changed
_ACCESS_ONLY_EVENTS: frozenset[str] = frozenset({"opened", "closed_no_write"})


@dataclass(frozen=True, slots=True)
class DirectoryChanged:
    """Coalesced notification that something in ``path`` changed.

    Attributes:
        path: The directory being watched when the event arrived.
    """

    path: str


ChangeCallback = Callable[[DirectoryChanged], None]


class _ChangeHandler(FileSystemEventHandler):
    """Forwards every watchdog event of one registration to the watcher."""

    def __init__(self, watcher: "DirectoryWatcher", path: str, generation: int) -> None:
        super().__init__()
        self._watcher = watcher
        self._path = path
        self._generation = generation

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.event_type in _ACCESS_ONLY_EVENTS:
            return
        self._watcher._publish(self._path, self._generation)


class DirectoryWatcher:
    """Watches one directory and republishes changes to subscribers.

    States are Idle (no observer) and Watching(path). The lock guards
    only the observer/path swap; observers are started and stopped
    outside it.

    Args:
        observer_factory: Creates the native observer. Defaults to
            watchdog's platform Observer.
    """

    def __init__(self, observer_factory: Callable[[], BaseObserver] = Observer) -> None:
        self._observer_factory = observer_factory
        self._lock = threading.Lock()
        self._observer: BaseObserver | None = None
        self._watched_path: str | None = None
        self._generation = 0
        self._issued = 0
        self._subscribers: list[ChangeCallback] = []

    @property
    def watched_path(self) -> str | None:
        """Directory currently watched, or None when idle."""
        with self._lock:
            return self._watched_path

    @property
    def is_watching(self) -> bool:
        """Whether an observer is active."""
        with self._lock:
            return self._observer is not None

    def subscribe(self, callback: ChangeCallback) -> Callable[[], None]:
        """Register ``callback`` for DirectoryChanged notifications.

        Callbacks run on the observer thread.

        Returns:
            A function that removes the subscription.
        """
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def watch(self, path: str | os.PathLike[str]) -> None:
        """Start watching ``path``, replacing any previous watch.

        Watching the directory that is already watched is a no-op. If
        ``path`` is not a directory, or the native watch cannot be
        registered, the current watch is left untouched.

        Raises:
            NotDirectoryError: If ``path`` is not a directory.
            FileDeckError: If the native watch cannot be registered.
        """
        dir_path = os.path.abspath(os.fspath(path))
        with self._lock:
            if self._observer is not None and self._watched_path == dir_path:
                return
        if not os.path.isdir(dir_path):
            raise NotDirectoryError(dir_path)

        with self._lock:
            self._issued += 1
            generation = self._issued

        observer = self._observer_factory()
        try:
            observer.schedule(_ChangeHandler(self, dir_path, generation), dir_path, recursive=False)
            observer.start()
        except OSError as e:
            # The current watch, if any, stays active
            observer.stop()
            raise from_os_error(dir_path, e) from e

        with self._lock:
            if generation == self._issued:
                self._generation = generation
                stale = self._observer
                self._observer = observer
                self._watched_path = dir_path
            else:
                # A later watch() or unwatch() won the race
                stale = observer

        self._stop(stale)
        logger.debug("Watching %s", dir_path)

    def unwatch(self) -> None:
        """Stop watching. Safe to call when idle."""
        with self._lock:
            self._issued += 1
            self._generation = self._issued
            stale = self._observer
            self._observer = None
            self._watched_path = None
        self._stop(stale)

    def _publish(self, path: str, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            subscribers = list(self._subscribers)

        change = DirectoryChanged(path=path)
        for callback in subscribers:
            try:
                callback(change)
            except Exception:
                logger.exception("Change subscriber failed for %s", path)

    @staticmethod
    def _stop(observer: BaseObserver | None) -> None:
        if observer is None:
            return
        observer.stop()
        # A subscriber may call unwatch() from the observer thread itself
        if observer is not threading.current_thread():
            observer.join()

    def __enter__(self) -> "DirectoryWatcher":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.unwatch()
