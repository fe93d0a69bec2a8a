"""Structural interfaces for fsguard's layers.

``FileSystem`` is the raw OS layer the stream, the traversal and the
service call into. ``ByteStream`` and ``FsOperations`` describe what the
stream and the service offer to callers. Implementations never inherit
from these protocols; matching the methods is enough.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import AbstractContextManager
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from fsguard.types import Mode, PathInfo, Whence

if TYPE_CHECKING:
    from fsguard.stream import Stream


@runtime_checkable
class FileSystem(Protocol):
    """Protocol for raw filesystem primitives.

    Each method is a thin call into the operating system. Implementations
    raise ``OSError`` on failure and never validate preconditions; that is
    the job of the stream and service layers.
    """

    def exists(self, path: str) -> bool:
        """Check if a path exists.

        Args:
            path: Path to check.

        Returns:
            True if path exists, False otherwise.
        """
        ...

    def is_dir(self, path: str) -> bool:
        """Check if a path is a directory.

        Args:
            path: Path to check.

        Returns:
            True if path is a directory, False otherwise.
        """
        ...

    def is_file(self, path: str) -> bool:
        """Check if a path is a regular file.

        Args:
            path: Path to check.

        Returns:
            True if path is a regular file, False otherwise.
        """
        ...

    def is_symlink(self, path: str) -> bool:
        """Check if a path is a symbolic link.

        Args:
            path: Path to check.

        Returns:
            True if path is a symbolic link, False otherwise.
        """
        ...

    def mkdir(self, path: str, mode: int, parents: bool = False) -> None:
        """Create a directory.

        Args:
            path: Path to create.
            mode: Permission bits, subject to the process umask.
            parents: Create missing intermediate directories with the same mode.
        """
        ...

    def scandir(self, path: str) -> Iterator[str]:
        """Enumerate the entry names of a directory lazily.

        Args:
            path: Directory to enumerate.

        Returns:
            Iterator over names, excluding ``.`` and ``..``.
        """
        ...

    def rmdir(self, path: str) -> None:
        """Remove an empty directory.

        Args:
            path: Directory to remove.
        """
        ...

    def unlink(self, path: str) -> None:
        """Remove a file.

        Args:
            path: File to remove.
        """
        ...

    def rename(self, src: str, dst: str) -> None:
        """Rename a file or directory atomically.

        Args:
            src: Source path.
            dst: Destination path.
        """
        ...

    def stat(self, path: str) -> os.stat_result:
        """Get path metadata.

        Args:
            path: Path to inspect.

        Returns:
            The OS stat record.
        """
        ...

    def chmod(self, path: str, mode: int) -> None:
        """Change permission bits.

        Args:
            path: Path to change.
            mode: New permission bits.
        """
        ...

    def utime(self, path: str, times: tuple[float, float] | None) -> None:
        """Set access and modification times.

        Args:
            path: Path to change.
            times: ``(atime, mtime)`` or None for the current time.
        """
        ...

    def touch(self, path: str) -> None:
        """Create an empty file if it does not exist.

        Args:
            path: File to create.
        """
        ...

    def umask(self, mask: int) -> AbstractContextManager[int]:
        """Temporarily replace the process umask.

        Args:
            mask: Umask to apply inside the block.

        Returns:
            Context manager yielding the previous umask and restoring it on exit.
        """
        ...

    def open(self, path: str, flags: int, mode: int = 0o666) -> int:
        """Open a file descriptor.

        Args:
            path: File to open.
            flags: ``os.O_*`` flags.
            mode: Permission bits for newly created files.

        Returns:
            The descriptor.
        """
        ...

    def read(self, fd: int, size: int) -> bytes:
        """Read at most ``size`` bytes from a descriptor.

        Args:
            fd: Descriptor.
            size: Upper bound on bytes returned.

        Returns:
            The bytes read; empty at end of file.
        """
        ...

    def write(self, fd: int, data: bytes) -> int:
        """Write bytes to a descriptor.

        Args:
            fd: Descriptor.
            data: Bytes to write.

        Returns:
            Number of bytes actually written.
        """
        ...

    def seek(self, fd: int, offset: int, whence: int) -> int:
        """Move the descriptor position.

        Args:
            fd: Descriptor.
            offset: Offset relative to ``whence``.
            whence: ``os.SEEK_SET``, ``os.SEEK_CUR`` or ``os.SEEK_END``.

        Returns:
            The new absolute position.
        """
        ...

    def fstat(self, fd: int) -> os.stat_result:
        """Get metadata of an open descriptor.

        Args:
            fd: Descriptor.

        Returns:
            The OS stat record.
        """
        ...

    def flock(self, fd: int, operation: int) -> None:
        """Apply or remove an advisory lock.

        Args:
            fd: Descriptor.
            operation: ``fcntl.LOCK_*`` flags.
        """
        ...

    def close(self, fd: int) -> None:
        """Close a descriptor.

        Args:
            fd: Descriptor.
        """
        ...

    def is_seekable(self, fd: int) -> bool:
        """Check whether a descriptor supports seeking.

        Args:
            fd: Descriptor.

        Returns:
            True for regular files, False for pipes and sockets.
        """
        ...


@runtime_checkable
class ByteStream(Protocol):
    """Protocol for mode-gated access to one open file."""

    @property
    def path(self) -> str:
        """Path the stream was opened on."""
        ...

    @property
    def mode(self) -> Mode:
        """Mode the stream was opened with."""
        ...

    def is_open(self) -> bool:
        """Check if the stream is still open."""
        ...

    def is_readable(self) -> bool:
        """Check if the stream can be read."""
        ...

    def is_writable(self) -> bool:
        """Check if the stream can be written."""
        ...

    def is_seekable(self) -> bool:
        """Check if the stream supports seeking."""
        ...

    def read(self, length: int | None = None) -> bytes:
        """Read ``length`` bytes at most, or everything up to end of file."""
        ...

    def write(self, data: bytes) -> int:
        """Write bytes and return how many were written."""
        ...

    def seek(self, offset: int, whence: Whence = Whence.START) -> None:
        """Move the position."""
        ...

    def tell(self) -> int:
        """Return the position."""
        ...

    def eof(self) -> bool:
        """Return the end-of-file indicator."""
        ...

    def rewind(self) -> None:
        """Move to the start and clear the end-of-file indicator."""
        ...

    def get_size(self) -> int:
        """Return the on-disk byte length."""
        ...

    def lock(self, block: bool = True) -> None:
        """Acquire an advisory lock."""
        ...

    def unlock(self) -> None:
        """Release the advisory lock."""
        ...

    def close(self) -> None:
        """Release the descriptor."""
        ...


@runtime_checkable
class FsOperations(Protocol):
    """Protocol for the validated filesystem service.

    Implementations check preconditions, then delegate to a ``FileSystem``.
    """

    def list(self, path: str, recursive: bool = False) -> Iterator[str]:
        """List entries relative to ``path``.

        Args:
            path: Directory to list.
            recursive: Descend into subdirectories.

        Returns:
            Lazy iterator over relative paths.
        """
        ...

    def exists(self, path: str) -> bool:
        """Check if a file or directory exists."""
        ...

    def is_directory(self, path: str) -> bool:
        """Check if a path is a directory."""
        ...

    def is_file(self, path: str) -> bool:
        """Check if a path is a file."""
        ...

    def make_directory(self, path: str, mode: int | None = None) -> None:
        """Create a directory and any missing parents."""
        ...

    def read_file(self, path: str) -> bytes:
        """Read a whole file."""
        ...

    def write_file(self, path: str, data: bytes, mode: int | None = None) -> None:
        """Create a file with the given content."""
        ...

    def touch(
        self,
        path: str,
        modification_time: int | None = None,
        access_time: int | None = None,
    ) -> None:
        """Create a file or update its times."""
        ...

    def remove(self, path: str) -> None:
        """Remove a file or a directory tree."""
        ...

    def copy(self, source_path: str, target_path: str) -> None:
        """Copy a file or a directory tree."""
        ...

    def move(self, source_path: str, target_path: str) -> None:
        """Rename a file or directory."""
        ...

    def get_mime_content_type(self, path: str) -> str:
        """Guess the MIME type of a file."""
        ...

    def get_mode(self, path: str) -> int:
        """Return permission bits."""
        ...

    def change_mode(self, path: str, mode: int) -> None:
        """Set permission bits."""
        ...

    def get_size(self, path: str) -> int:
        """Return the byte size of a file or directory tree."""
        ...

    def stat(self, path: str) -> PathInfo:
        """Return a metadata snapshot."""
        ...

    def open_stream(self, path: str, mode: Mode) -> Stream:
        """Open a stream on a file."""
        ...
