"""Raw filesystem primitives.

This module provides the production implementation of the ``FileSystem``
protocol. Every method is one OS call (or a short fixed sequence of them)
and reports failure by raising ``OSError``. Validation and error wrapping
happen in the stream and service layers.
"""

from __future__ import annotations

import errno
import fcntl
import os
from collections.abc import Iterator
from contextlib import contextmanager


class RealFileSystem:
    """Production filesystem implementation.

    Wraps ``os`` and ``fcntl`` calls.
    Satisfies the FileSystem protocol structurally.
    """

    def exists(self, path: str) -> bool:
        """Check if a path exists."""
        return os.path.exists(path)

    def is_dir(self, path: str) -> bool:
        """Check if a path is a directory."""
        return os.path.isdir(path)

    def is_file(self, path: str) -> bool:
        """Check if a path is a regular file."""
        return os.path.isfile(path)

    def is_symlink(self, path: str) -> bool:
        """Check if a path is a symbolic link."""
        return os.path.islink(path)

    def mkdir(self, path: str, mode: int, parents: bool = False) -> None:
        """Create a directory.

        Unlike ``os.makedirs``, missing intermediate directories receive the
        same ``mode`` as the leaf.
        """
        if parents:
            parent = os.path.dirname(os.path.normpath(path))
            if parent and not os.path.isdir(parent):
                self.mkdir(parent, mode, parents=True)
        os.mkdir(path, mode)

    def scandir(self, path: str) -> Iterator[str]:
        """Yield entry names of a directory one at a time."""
        with os.scandir(path) as entries:
            for entry in entries:
                yield entry.name

    def rmdir(self, path: str) -> None:
        """Remove an empty directory."""
        os.rmdir(path)

    def unlink(self, path: str) -> None:
        """Remove a file."""
        os.unlink(path)

    def rename(self, src: str, dst: str) -> None:
        """Rename a file or directory."""
        os.rename(src, dst)

    def stat(self, path: str) -> os.stat_result:
        """Get path metadata."""
        return os.stat(path)

    def chmod(self, path: str, mode: int) -> None:
        """Change permission bits."""
        os.chmod(path, mode)

    def utime(self, path: str, times: tuple[float, float] | None) -> None:
        """Set access and modification times."""
        os.utime(path, times)

    def touch(self, path: str) -> None:
        """Create an empty file if it does not exist."""
        fd = os.open(path, os.O_WRONLY | os.O_CREAT, 0o666)
        os.close(fd)

    @contextmanager
    def umask(self, mask: int) -> Iterator[int]:
        """Apply ``mask`` as the process umask for the duration of the block."""
        previous = os.umask(mask)
        try:
            yield previous
        finally:
            os.umask(previous)

    def open(self, path: str, flags: int, mode: int = 0o666) -> int:
        """Open a file descriptor."""
        return os.open(path, flags, mode)

    def read(self, fd: int, size: int) -> bytes:
        """Read at most ``size`` bytes."""
        return os.read(fd, size)

    def write(self, fd: int, data: bytes) -> int:
        """Write bytes, returning the count written."""
        return os.write(fd, data)

    def seek(self, fd: int, offset: int, whence: int) -> int:
        """Move the descriptor position."""
        return os.lseek(fd, offset, whence)

    def fstat(self, fd: int) -> os.stat_result:
        """Get descriptor metadata."""
        return os.fstat(fd)

    def flock(self, fd: int, operation: int) -> None:
        """Apply or remove an advisory lock."""
        fcntl.flock(fd, operation)

    def close(self, fd: int) -> None:
        """Close a descriptor."""
        os.close(fd)

    def is_seekable(self, fd: int) -> bool:
        """Probe the descriptor with a zero-offset seek."""
        try:
            os.lseek(fd, 0, os.SEEK_CUR)
        except OSError as e:
            if e.errno == errno.ESPIPE:
                return False
            raise
        return True
