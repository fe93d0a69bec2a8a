"""Byte stream over a single OS file descriptor."""

from __future__ import annotations

import fcntl
import logging
import os
from types import TracebackType

from fsguard.errors import (
    FsIOError,
    InvalidArgumentError,
    LockError,
    NotOpenError,
    NotReadableError,
    NotSeekableError,
    NotWritableError,
    OpenError,
)
from fsguard.filesystem import RealFileSystem
from fsguard.protocols import FileSystem
from fsguard.types import Mode, Whence

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 8192

_OPEN_FLAGS = {
    Mode.READ: os.O_RDONLY,
    Mode.WRITE: os.O_RDWR | os.O_CREAT | os.O_TRUNC,
    Mode.APPEND: os.O_RDWR | os.O_CREAT | os.O_APPEND,
}

_READABLE = {
    Mode.READ: True,
    Mode.WRITE: True,
    Mode.APPEND: True,
}

_WRITABLE = {
    Mode.READ: False,
    Mode.WRITE: True,
    Mode.APPEND: True,
}

_LOCK_OPERATIONS = {
    Mode.READ: fcntl.LOCK_SH,
    Mode.WRITE: fcntl.LOCK_EX,
    Mode.APPEND: fcntl.LOCK_EX,
}

_SEEK_ORIGINS = {
    Whence.START: os.SEEK_SET,
    Whence.CURRENT: os.SEEK_CUR,
    Whence.END: os.SEEK_END,
}


class Stream:
    """Mode-gated access to one open file.

    The stream owns its descriptor exclusively. Use it as a context manager
    so the descriptor is released on every exit path::

        with Stream("/tmp/data.bin", Mode.WRITE) as stream:
            stream.write(b"abc")

    A stream that is discarded while still open closes itself.

    The end-of-file indicator follows OS semantics: it is set only by a read
    that returned no bytes, and cleared by ``seek`` and ``rewind``. Reading
    exactly up to the last byte leaves it False until the next read.
    """

    def __init__(
        self,
        path: str,
        mode: Mode,
        filesystem: FileSystem | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        """Open ``path`` with the flags derived from ``mode``.

        Args:
            path: File to open.
            mode: Open intent, fixed for the stream's lifetime.
            filesystem: Raw primitives (defaults to RealFileSystem).
            chunk_size: Chunk length used by unbounded reads.

        Raises:
            InvalidArgumentError: If chunk_size is not positive.
            OpenError: If the OS cannot open the path or the path is invalid.
        """
        self._is_open = False
        if chunk_size < 1:
            raise InvalidArgumentError(
                f"The chunk size {chunk_size} must be greater than or equal to 1."
            )
        self._path = path
        self._mode = mode
        self._fs = filesystem or RealFileSystem()
        self._chunk_size = chunk_size
        self._eof = False

        try:
            self._fd = self._fs.open(path, _OPEN_FLAGS[mode])
        except (OSError, ValueError) as e:
            raise OpenError(f"Failed to open the file {path}.", path) from e

        self._is_open = True
        logger.debug("Opened %s in %s mode", path, mode.value)

    def __enter__(self) -> Stream:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def __del__(self) -> None:
        if getattr(self, "_is_open", False):
            self.close()

    def __repr__(self) -> str:
        state = "open" if self._is_open else "closed"
        return f"Stream(path={self._path!r}, mode={self._mode.name}, {state})"

    @property
    def path(self) -> str:
        """Path the stream was opened on."""
        return self._path

    @property
    def mode(self) -> Mode:
        """Mode the stream was opened with."""
        return self._mode

    def is_open(self) -> bool:
        """Check if the stream is still open."""
        return self._is_open

    def is_readable(self) -> bool:
        """Check if the stream can be read."""
        if not self._is_open:
            return False
        return _READABLE[self._mode]

    def is_writable(self) -> bool:
        """Check if the stream can be written."""
        if not self._is_open:
            return False
        return _WRITABLE[self._mode]

    def is_seekable(self) -> bool:
        """Check if the descriptor supports seeking."""
        if not self._is_open:
            return False
        return self._fs.is_seekable(self._fd)

    def read(self, length: int | None = None) -> bytes:
        """Read from the current position.

        Without ``length`` the stream is read in chunks until end of file.
        With ``length`` exactly one OS read is issued; it may return fewer
        bytes than requested.

        Args:
            length: Upper bound on bytes returned, or None for everything.

        Returns:
            The bytes read.

        Raises:
            NotReadableError: If the stream is closed.
            InvalidArgumentError: If length is less than 1.
            FsIOError: If the OS read fails.
        """
        if not self.is_readable():
            raise NotReadableError("The stream must be readable.", self._path)

        if length is not None and length < 1:
            raise InvalidArgumentError(
                f"The length {length} must be greater than or equal to 1.", self._path
            )

        if length is not None:
            return self._read_chunk(length)

        chunks = []
        while True:
            chunk = self._read_chunk(self._chunk_size)
            if not chunk:
                break
            chunks.append(chunk)
        return b"".join(chunks)

    def write(self, data: bytes) -> int:
        """Write bytes at the current position (at the end in APPEND mode).

        Args:
            data: Bytes to write.

        Returns:
            Number of bytes written, possibly fewer than ``len(data)``.

        Raises:
            NotWritableError: If the stream is closed or opened for reading.
            FsIOError: If the OS write fails.
        """
        if not self.is_writable():
            raise NotWritableError("The stream must be writable.", self._path)

        try:
            return self._fs.write(self._fd, data)
        except OSError as e:
            raise FsIOError("Failed to write the data to the stream.", self._path) from e

    def seek(self, offset: int, whence: Whence = Whence.START) -> None:
        """Move the position and clear the end-of-file indicator.

        Raises:
            NotSeekableError: If the stream is closed or not seekable.
            FsIOError: If the OS seek fails.
        """
        if not self.is_seekable():
            raise NotSeekableError("The stream must be seekable.", self._path)

        try:
            self._fs.seek(self._fd, offset, _SEEK_ORIGINS[whence])
        except OSError as e:
            raise FsIOError(
                "Failed to set the position of the pointer on the stream.", self._path
            ) from e
        self._eof = False

    def tell(self) -> int:
        """Return the current position."""
        self._ensure_open()
        try:
            return self._fs.seek(self._fd, 0, os.SEEK_CUR)
        except OSError as e:
            raise FsIOError(
                "Failed to get the position of the pointer of the stream.", self._path
            ) from e

    def eof(self) -> bool:
        """Return the end-of-file indicator set by the last read."""
        self._ensure_open()
        return self._eof

    def rewind(self) -> None:
        """Move to the start of the file."""
        self._ensure_open()
        try:
            self._fs.seek(self._fd, 0, os.SEEK_SET)
        except OSError as e:
            raise FsIOError("Failed to rewind the stream.", self._path) from e
        self._eof = False

    def get_size(self) -> int:
        """Return the on-disk byte length."""
        self._ensure_open()
        try:
            return self._fs.fstat(self._fd).st_size
        except OSError as e:
            raise FsIOError("Failed to get the statistics of the stream.", self._path) from e

    def lock(self, block: bool = True) -> None:
        """Acquire an advisory lock.

        READ streams take a shared lock, WRITE and APPEND streams an
        exclusive one.

        Args:
            block: Wait for the lock. When False, fail immediately if it is held.

        Raises:
            NotOpenError: If the stream is closed.
            LockError: If the lock cannot be acquired.
        """
        self._ensure_open()
        operation = _LOCK_OPERATIONS[self._mode]
        if not block:
            operation |= fcntl.LOCK_NB

        try:
            self._fs.flock(self._fd, operation)
        except OSError as e:
            raise LockError("Failed to lock the stream.", self._path) from e

    def unlock(self) -> None:
        """Release the advisory lock."""
        self._ensure_open()
        try:
            self._fs.flock(self._fd, fcntl.LOCK_UN)
        except OSError as e:
            raise LockError("Failed to unlock the stream.", self._path) from e

    def close(self) -> None:
        """Release the descriptor. Calling it on a closed stream does nothing.

        Raises:
            FsIOError: If the OS close fails. The stream is closed regardless.
        """
        if not self._is_open:
            return

        self._is_open = False
        try:
            self._fs.close(self._fd)
        except OSError as e:
            raise FsIOError("Failed to close the stream.", self._path) from e
        logger.debug("Closed %s", self._path)

    def _ensure_open(self) -> None:
        if not self._is_open:
            raise NotOpenError("The stream must be open.", self._path)

    def _read_chunk(self, size: int) -> bytes:
        try:
            chunk = self._fs.read(self._fd, size)
        except OSError as e:
            raise FsIOError("Failed to read a data chunk of the stream.", self._path) from e
        if not chunk:
            self._eof = True
        return chunk
