"""Filesystem mutation operator.

Copies, moves, deletes, duplicates and renames entries. Batches are
processed strictly in the order given and the first unrecoverable
error aborts the remaining items; items already handled stay as they
are (there is no rollback). Single-file copies and renames go through a
RetryPolicy so short-lived failures never reach the caller.
"""

import logging
import os
import re
import shutil
from collections.abc import Sequence
from pathlib import Path

from filedeck.core.errors import (
    CopyFailedError,
    DeleteFailedError,
    DestinationInvalidError,
    InvalidNameError,
    MoveFailedError,
    NotDirectoryError,
    PathNotFoundError,
    PatternError,
    RetryExhaustedError,
    SourceMissingError,
    TargetExistsError,
    from_os_error,
)
from filedeck.filesystem.retry import RetryPolicy
from filedeck.filesystem.trash import Send2TrashBackend, TrashBackend

logger = logging.getLogger(__name__)


def validate_name(name: str) -> None:
    """Reject names that are not a single usable path component.

    Raises:
        InvalidNameError: If the name is empty, "." or "..", or contains
            a path separator or NUL byte.
    """
    if not name or not name.strip():
        raise InvalidNameError(name, "name is empty")
    if name in (".", ".."):
        raise InvalidNameError(name, "reserved name")
    separators = {"/", os.sep, "\0"}
    if os.altsep:
        separators.add(os.altsep)
    if any(sep in name for sep in separators):
        raise InvalidNameError(name, "name contains a path separator")


def duplicate_name(path: Path) -> Path:
    """Return the first unused "<stem> - Copy<ext>" sibling of ``path``.

    Tries "report - Copy.txt", then "report - Copy (2).txt", "(3)" and
    so on. Directories keep their full name as the stem. Terminates
    because each candidate is distinct and the directory is finite.
    """
    if path.is_dir():
        stem, ext = path.name, ""
    else:
        stem, ext = path.stem, path.suffix

    candidate = path.with_name(f"{stem} - Copy{ext}")
    counter = 2
    while os.path.lexists(candidate):
        candidate = path.with_name(f"{stem} - Copy ({counter}){ext}")
        counter += 1
    return candidate


def _canonical(path: Path) -> str:
    return os.path.normcase(os.path.realpath(path))


def _same_entry(a: Path, b: Path) -> bool:
    """Check whether two paths name the same directory entry (no link following)."""
    try:
        sa, sb = os.lstat(a), os.lstat(b)
    except OSError:
        return False
    return (sa.st_dev, sa.st_ino) == (sb.st_dev, sb.st_ino)


def _is_real_dir(path: Path) -> bool:
    return path.is_dir() and not path.is_symlink()


class FileOperator:
    """Executes copy, move, delete and rename operations.

    Attributes:
        _retry: Policy applied to single-file copies and renames.
        _trash: Backend used when deleting to the trash.
    """

    def __init__(
        self,
        retry_policy: RetryPolicy | None = None,
        trash: TrashBackend | None = None,
    ) -> None:
        """Initialize the FileOperator.

        Args:
            retry_policy: Retry configuration. Defaults to 3 attempts, 100 ms apart.
            trash: Trash backend. Defaults to Send2Trash.
        """
        self._retry = retry_policy or RetryPolicy()
        self._trash = trash or Send2TrashBackend()

    @property
    def retry_policy(self) -> RetryPolicy:
        """Retry policy used for fallible primitives."""
        return self._retry

    # === Copy ===

    def copy(self, sources: Sequence[str], destination: str) -> None:
        """Copy files and directory trees into ``destination``.

        For each source the target is ``destination / source.name``. A
        source whose target is itself is skipped. Existing directory
        targets are removed before the tree is copied; file targets are
        overwritten.

        Args:
            sources: Paths to copy, processed in order.
            destination: Existing directory receiving the copies.

        Raises:
            DestinationInvalidError: If ``destination`` is not a directory,
                or a directory would be copied into itself.
            SourceMissingError: If a source does not exist. Later sources
                are not processed.
            InvalidNameError: If a source has no final path component.
            CopyFailedError: If a file copy still fails after all retries.
        """
        dest = self._validate_destination(destination)
        for raw in sources:
            source = self._validate_source(raw)
            target = dest / source.name

            if _canonical(source) == _canonical(target):
                logger.debug("Skipping copy onto itself: %s", source)
                continue

            if source.is_dir():
                if _canonical(target).startswith(_canonical(source) + os.sep):
                    raise DestinationInvalidError(
                        str(dest), f"cannot copy {source} into its own subtree"
                    )
                self._remove_existing(target)
                self._copy_tree(source, target)
            else:
                self._copy_file(source, target)
            logger.info("Copied %s -> %s", source, target)

    def _copy_file(self, source: Path, target: Path, follow_symlinks: bool = True) -> None:
        """Copy one file (or recreate one symlink) through the retry policy."""

        def attempt() -> None:
            shutil.copyfile(source, target, follow_symlinks=follow_symlinks)
            shutil.copystat(source, target, follow_symlinks=follow_symlinks)

        try:
            self._retry.run(attempt, description=f"Copy {source}")
        except RetryExhaustedError as e:
            raise CopyFailedError(str(source), e.attempts, e.cause) from e

    def _copy_tree(self, source: Path, target: Path) -> None:
        """Copy a directory tree using an explicit work-list.

        Symlinks inside the tree are recreated as symlinks, never
        followed, so link cycles cannot cause unbounded work.
        """
        pending: list[tuple[Path, Path]] = [(source, target)]
        while pending:
            src_dir, dst_dir = pending.pop()
            try:
                dst_dir.mkdir(parents=True, exist_ok=True)
                with os.scandir(src_dir) as it:
                    children = list(it)
            except OSError as e:
                raise CopyFailedError(str(src_dir), 1, e) from e

            for child in children:
                child_src = Path(child.path)
                child_dst = dst_dir / child.name
                if child.is_symlink():
                    self._copy_file(child_src, child_dst, follow_symlinks=False)
                elif child.is_dir():
                    pending.append((child_src, child_dst))
                else:
                    self._copy_file(child_src, child_dst)

    # === Move ===

    def move(self, sources: Sequence[str], destination: str) -> None:
        """Move entries into ``destination`` by renaming them.

        Rename is atomic on a single volume. When it fails and a stale
        file occupies the target, that file is removed and the rename is
        tried once more; after that the retry policy takes over. Moves
        across volumes are not turned into copy+delete: they surface as
        MoveFailedError.

        Args:
            sources: Paths to move, processed in order.
            destination: Existing directory receiving the entries.

        Raises:
            DestinationInvalidError: If ``destination`` is not a directory.
            SourceMissingError: If a source does not exist. Later sources
                are not processed.
            InvalidNameError: If a source has no final path component.
            MoveFailedError: If the rename still fails after all retries.
        """
        dest = self._validate_destination(destination)
        for raw in sources:
            source = self._validate_source(raw)
            target = dest / source.name

            if _canonical(source) == _canonical(target):
                logger.debug("Skipping move onto itself: %s", source)
                continue

            self._rename(source, target)
            logger.info("Moved %s -> %s", source, target)

    def _rename(self, source: Path, target: Path) -> None:
        try:
            os.rename(source, target)
            return
        except OSError as e:
            logger.debug("Rename %s -> %s failed: %s", source, target, e)

        if os.path.lexists(target) and not _is_real_dir(target):
            try:
                target.unlink()
                os.rename(source, target)
                return
            except OSError as e:
                logger.debug("Rename after removing stale target failed: %s", e)

        try:
            self._retry.run(lambda: os.rename(source, target), description=f"Move {source}")
        except RetryExhaustedError as e:
            raise MoveFailedError(str(source), e.attempts, e.cause) from e

    # === Delete ===

    def delete(self, paths: Sequence[str], use_trash: bool = False) -> None:
        """Delete entries permanently or move them to the trash.

        Paths that do not exist are skipped. Directories are removed
        recursively; symlinks are removed without touching their target.

        Args:
            paths: Paths to delete, processed in order.
            use_trash: Send entries to the trash instead of deleting.

        Raises:
            DeleteFailedError: On the first failure. Later paths are not
                processed.
        """
        for raw in paths:
            path = Path(os.path.abspath(raw))
            if not os.path.lexists(path):
                logger.debug("Skipping delete of missing path: %s", path)
                continue
            try:
                if use_trash:
                    self._trash.send(str(path))
                elif _is_real_dir(path):
                    shutil.rmtree(path)
                else:
                    path.unlink()
            except OSError as e:
                raise DeleteFailedError(str(path), e) from e
            logger.info("%s %s", "Trashed" if use_trash else "Deleted", path)

    # === Duplicate / rename / create ===

    def duplicate(self, path: str) -> str:
        """Copy an entry next to itself under a free "- Copy" name.

        Args:
            path: File or directory to duplicate.

        Returns:
            Path of the new copy.

        Raises:
            SourceMissingError: If ``path`` does not exist.
            CopyFailedError: If copying fails after all retries.
        """
        source = self._validate_source(path)
        target = duplicate_name(source)
        if source.is_symlink():
            self._copy_file(source, target, follow_symlinks=False)
        elif source.is_dir():
            self._copy_tree(source, target)
        else:
            self._copy_file(source, target)
        logger.info("Duplicated %s -> %s", source, target)
        return str(target)

    def rename(self, path: str, new_name: str) -> str:
        """Rename an entry within its parent directory.

        A case-only rename of the same entry is allowed on
        case-insensitive filesystems.

        Args:
            path: Entry to rename.
            new_name: New final path component.

        Returns:
            The new path.

        Raises:
            SourceMissingError: If ``path`` does not exist.
            InvalidNameError: If ``new_name`` is not a single component.
            TargetExistsError: If another entry already has ``new_name``.
            MoveFailedError: If the rename fails after all retries.
        """
        source = self._validate_source(path)
        validate_name(new_name)
        target = source.with_name(new_name)
        if target == source:
            return str(source)
        if os.path.lexists(target) and not _same_entry(source, target):
            raise TargetExistsError(str(target))

        try:
            self._retry.run(lambda: os.rename(source, target), description=f"Rename {source}")
        except RetryExhaustedError as e:
            raise MoveFailedError(str(source), e.attempts, e.cause) from e
        logger.info("Renamed %s -> %s", source, target)
        return str(target)

    def batch_rename(
        self,
        paths: Sequence[str],
        pattern: str,
        replacement: str,
        use_regex: bool = False,
    ) -> list[tuple[str, str]]:
        """Rename several entries by replacing ``pattern`` in their names.

        All new names are computed and validated before anything is
        renamed, so a bad pattern never leaves a half-renamed batch.
        Names the pattern does not change are skipped.

        Args:
            paths: Entries to rename, processed in order.
            pattern: Literal substring, or a regular expression when
                ``use_regex`` is set.
            replacement: Replacement text (``\\1`` style group references
                in regex mode).
            use_regex: Interpret ``pattern`` as a regular expression.

        Returns:
            (old_path, new_path) pairs for every entry actually renamed.

        Raises:
            PatternError: If the pattern is empty or not a valid regex.
            InvalidNameError: If a computed name is not a valid component.
            SourceMissingError, TargetExistsError, MoveFailedError: From
                the individual renames; later entries are not processed.
        """
        if not pattern:
            raise PatternError(pattern, "pattern is empty")

        if use_regex:
            try:
                regex = re.compile(pattern)
            except re.error as e:
                raise PatternError(pattern, str(e)) from e

            def transform(name: str) -> str:
                return regex.sub(replacement, name)
        else:

            def transform(name: str) -> str:
                return name.replace(pattern, replacement)

        plan: list[tuple[str, str]] = []
        for raw in paths:
            old_name = Path(raw).name
            try:
                new_name = transform(old_name)
            except (re.error, IndexError) as e:
                raise PatternError(pattern, f"bad replacement {replacement!r}: {e}") from e
            if new_name == old_name:
                continue
            validate_name(new_name)
            plan.append((raw, new_name))

        return [(raw, self.rename(raw, new_name)) for raw, new_name in plan]

    def create_directory(self, parent: str, name: str) -> str:
        """Create a directory ``name`` inside ``parent``.

        Succeeds without change when the directory already exists.

        Returns:
            Path of the directory.
        """
        base = self._require_directory(parent)
        validate_name(name)
        new_path = base / name
        try:
            new_path.mkdir(exist_ok=True)
        except OSError as e:
            raise from_os_error(str(new_path), e) from e
        logger.info("Created directory %s", new_path)
        return str(new_path)

    def create_file(self, parent: str, name: str, content: str = "") -> str:
        """Create a new file ``name`` inside ``parent`` with ``content``.

        Returns:
            Path of the new file.

        Raises:
            TargetExistsError: If an entry with that name already exists.
        """
        base = self._require_directory(parent)
        validate_name(name)
        new_path = base / name
        try:
            with open(new_path, "x", encoding="utf-8") as f:
                f.write(content)
        except OSError as e:
            raise from_os_error(str(new_path), e) from e
        logger.info("Created file %s", new_path)
        return str(new_path)

    # === Validation helpers ===

    def _validate_destination(self, destination: str) -> Path:
        dest = Path(os.path.abspath(destination))
        if not dest.exists():
            raise DestinationInvalidError(str(dest), "destination does not exist")
        if not dest.is_dir():
            raise DestinationInvalidError(str(dest))
        return dest

    def _validate_source(self, raw: str) -> Path:
        source = Path(os.path.abspath(raw))
        if not os.path.lexists(source):
            raise SourceMissingError(str(source))
        if not source.name:
            raise InvalidNameError(str(source), "path has no file name component")
        return source

    def _require_directory(self, raw: str) -> Path:
        path = Path(os.path.abspath(raw))
        if not path.exists():
            raise PathNotFoundError(str(path))
        if not path.is_dir():
            raise NotDirectoryError(str(path))
        return path

    def _remove_existing(self, target: Path) -> None:
        """Remove whatever occupies ``target`` before a tree copy."""
        try:
            if _is_real_dir(target):
                shutil.rmtree(target)
            elif os.path.lexists(target):
                target.unlink()
        except OSError as e:
            raise CopyFailedError(str(target), 1, e) from e
