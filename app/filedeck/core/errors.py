"""Exception hierarchy for filedeck.

Every error names the offending path and the underlying cause so the
CLI can show it as a one-line message. Listing and search swallow
per-child failures; batch mutations raise the first unrecoverable error
and leave earlier items applied.
"""


class FileDeckError(Exception):
    """Base exception for all filedeck errors.

    Attributes:
        path: Path the error refers to (empty when not path-specific).
    """

    def __init__(self, message: str, path: str = "") -> None:
        super().__init__(message)
        self.path = path


class PathNotFoundError(FileDeckError):
    """Raised when a path does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Path does not exist: {path}", path)


class NotDirectoryError(FileDeckError):
    """Raised when a path exists but is not a directory."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Path is not a directory: {path}", path)


class NotAccessibleError(FileDeckError):
    """Raised when a path cannot be stat-ed."""

    def __init__(self, path: str, cause: OSError) -> None:
        super().__init__(f"Cannot read metadata for {path}: {cause.strerror or cause}", path)
        self.cause = cause


class PermissionDeniedError(FileDeckError):
    """Raised when the OS refuses access to a path."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Permission denied: {path}", path)


class DestinationInvalidError(FileDeckError):
    """Raised when a copy/move destination is unusable."""

    def __init__(self, path: str, reason: str = "destination is not a directory") -> None:
        super().__init__(f"Invalid destination {path}: {reason}", path)


class SourceMissingError(FileDeckError):
    """Raised when a batch source does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Source does not exist: {path}", path)


class TargetExistsError(FileDeckError):
    """Raised when a create or rename would overwrite an existing entry."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Target already exists: {path}", path)


class InvalidNameError(FileDeckError):
    """Raised when a name or path has no usable final component."""

    def __init__(self, name: str, reason: str = "invalid file name") -> None:
        super().__init__(f"Invalid name {name!r}: {reason}", name)


class PatternError(FileDeckError):
    """Raised for malformed search or rename patterns."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"Invalid pattern {pattern!r}: {reason}", "")
        self.pattern = pattern


class RetryExhaustedError(FileDeckError):
    """Raised when a transient I/O failure persists past the retry budget.

    Attributes:
        attempts: Number of attempts made before giving up.
        cause: The last OSError observed.
    """

    def __init__(self, description: str, attempts: int, cause: OSError) -> None:
        super().__init__(f"{description} failed after {attempts} attempt(s): {cause}", "")
        self.attempts = attempts
        self.cause = cause


class CopyFailedError(FileDeckError):
    """Raised when copying a file fails after all retries."""

    def __init__(self, path: str, attempts: int, cause: OSError) -> None:
        super().__init__(f"Failed to copy {path} after {attempts} attempt(s): {cause}", path)
        self.attempts = attempts
        self.cause = cause


class MoveFailedError(FileDeckError):
    """Raised when moving an entry fails after all retries."""

    def __init__(self, path: str, attempts: int, cause: OSError) -> None:
        super().__init__(f"Failed to move {path} after {attempts} attempt(s): {cause}", path)
        self.attempts = attempts
        self.cause = cause


class DeleteFailedError(FileDeckError):
    """Raised when deleting (or trashing) an entry fails."""

    def __init__(self, path: str, cause: Exception) -> None:
        super().__init__(f"Failed to delete {path}: {cause}", path)
        self.cause = cause


class ConfigError(FileDeckError):
    """Base exception for configuration errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "")


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def from_os_error(path: str, error: OSError) -> FileDeckError:
    """Translate an OSError into the matching FileDeckError."""
    if isinstance(error, PermissionError):
        return PermissionDeniedError(path)
    if isinstance(error, FileNotFoundError):
        return PathNotFoundError(path)
    if isinstance(error, FileExistsError):
        return TargetExistsError(path)
    if isinstance(error, NotADirectoryError):
        return NotDirectoryError(path)
    return FileDeckError(f"{path}: {error.strerror or error}", path)
