"""Shared data types for fsguard."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

__all__ = ["Mode", "PathInfo", "Whence"]


class Mode(Enum):
    """Open intent of a stream.

    The mode is fixed for the lifetime of a stream and decides which
    capabilities it grants.

    Attributes:
        READ: Existing file, read-only.
        WRITE: Create or truncate, read and write.
        APPEND: Create or open without truncating, writes go to the end.
    """

    READ = "read"
    WRITE = "write"
    APPEND = "append"


class Whence(Enum):
    """Origin of a seek offset."""

    START = "start"
    CURRENT = "current"
    END = "end"


@dataclass(frozen=True)
class PathInfo:
    """Metadata snapshot of a file or directory.

    Attributes:
        path: The inspected path.
        is_directory: True for directories.
        size: Byte length for files, recursive total for directories.
        mode: Permission bits (0 to 0o777).
        modified_at: Modification time in epoch seconds.
        accessed_at: Access time in epoch seconds.
    """

    path: str
    is_directory: bool
    size: int
    mode: int
    modified_at: float
    accessed_at: float

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.size < 0:
            raise ValueError("size cannot be negative")
        if not 0 <= self.mode <= 0o777:
            raise ValueError("mode must be between 0 and 0o777")
