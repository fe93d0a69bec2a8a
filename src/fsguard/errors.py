"""Error hierarchy for fsguard.

Every failure surfaces as an ``FsError`` subclass. Precondition errors are
raised before any OS call is made; ``FsIOError`` wraps a failed OS call and
chains the original ``OSError``.
"""

from __future__ import annotations

__all__ = [
    "AlreadyExistsError",
    "FsError",
    "FsIOError",
    "InvalidArgumentError",
    "LockError",
    "NotOpenError",
    "NotReadableError",
    "NotSeekableError",
    "NotWritableError",
    "OpenError",
    "PathNotDirectoryError",
    "PathNotFileError",
    "PathNotFoundError",
    "PreconditionError",
    "StreamStateError",
    "TargetParentMissingError",
]


class FsError(Exception):
    """Base class for all fsguard errors.

    Attributes:
        message: Human-readable description.
        path: Offending path, if any.
    """

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path


class PreconditionError(FsError):
    """A check failed before any OS call was attempted."""


class PathNotFoundError(PreconditionError):
    """The path must exist."""


class AlreadyExistsError(PreconditionError):
    """The path must not exist."""


class PathNotDirectoryError(PreconditionError):
    """The path must be a directory."""


class PathNotFileError(PreconditionError):
    """The path must be a regular file."""


class TargetParentMissingError(PreconditionError):
    """The parent directory of the target path must exist."""


class InvalidArgumentError(PreconditionError, ValueError):
    """An argument is out of range."""


class StreamStateError(PreconditionError):
    """The stream lacks the state or capability an operation requires."""


class NotOpenError(StreamStateError):
    """The stream must be open."""


class NotReadableError(StreamStateError):
    """The stream must be readable."""


class NotWritableError(StreamStateError):
    """The stream must be writable."""


class NotSeekableError(StreamStateError):
    """The stream must be seekable."""


class FsIOError(FsError):
    """An OS call failed."""


class OpenError(FsIOError):
    """The OS refused to open a file."""


class LockError(FsIOError):
    """An advisory lock could not be acquired or released."""
