"""Validated filesystem operations."""

from __future__ import annotations

import codecs
import logging
import mimetypes
import os
from collections.abc import Iterator

from fsguard.config import FsConfig
from fsguard.errors import (
    AlreadyExistsError,
    FsIOError,
    InvalidArgumentError,
    PathNotFileError,
    PathNotFoundError,
    TargetParentMissingError,
)
from fsguard.filesystem import RealFileSystem
from fsguard.protocols import ByteStream, FileSystem
from fsguard.stream import Stream
from fsguard.tree import walk
from fsguard.types import Mode, PathInfo

logger = logging.getLogger(__name__)

# Bytes inspected when the extension does not reveal a MIME type
SNIFF_LENGTH = 512

EMPTY_MIME_TYPE = "application/x-empty"
TEXT_MIME_TYPE = "text/plain"
BINARY_MIME_TYPE = "application/octet-stream"

MAGIC_NUMBERS = [
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"%PDF-", "application/pdf"),
    (b"PK\x03\x04", "application/zip"),
    (b"\x1f\x8b", "application/gzip"),
]


class FsService:
    """Validated, exception-driven filesystem operations.

    Each public method checks its preconditions first and raises a
    ``PreconditionError`` subclass without touching the filesystem when one
    fails. OS failures are re-raised as ``FsIOError`` with the operation's
    context. Recursive operations are not transactional: a failure leaves
    whatever the completed steps produced.

    Follows Separate Use from Creation: constructor requires all dependencies.
    Use factory method `create()` for production instantiation with defaults.
    """

    def __init__(self, filesystem: FileSystem, config: FsConfig) -> None:
        """Initialize the service with required dependencies.

        Args:
            filesystem: Raw primitives (required).
            config: Defaults for modes and chunk size (required).
        """
        self.fs = filesystem
        self.config = config

    @classmethod
    def create(
        cls,
        filesystem: FileSystem | None = None,
        config: FsConfig | None = None,
    ) -> FsService:
        """Factory method for production instantiation.

        Args:
            filesystem: Optional raw primitives (RealFileSystem if not provided).
            config: Optional configuration (defaults if not provided).

        Returns:
            Configured FsService instance.
        """
        return cls(
            filesystem=filesystem or RealFileSystem(),
            config=config or FsConfig(),
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list(self, path: str, recursive: bool = False) -> Iterator[str]:
        """List entries of a directory relative to it.

        Args:
            path: Directory to list.
            recursive: Descend into subdirectories (post-order).

        Returns:
            Lazy, single-pass iterator over relative paths.

        Raises:
            PathNotDirectoryError: If path is not a directory.
            FsIOError: During iteration, if a directory cannot be enumerated.
        """
        return walk(self.fs, path, recursive)

    def exists(self, path: str) -> bool:
        """Check if a file or directory exists."""
        return self.is_directory(path) or self.is_file(path)

    def is_directory(self, path: str) -> bool:
        """Check if a path is a directory."""
        return self.fs.is_dir(path)

    def is_file(self, path: str) -> bool:
        """Check if a path is a regular file."""
        return self.fs.is_file(path)

    def get_mode(self, path: str) -> int:
        """Return the permission bits of a path (0 to 0o777).

        Raises:
            PathNotFoundError: If the path does not exist.
            FsIOError: If the stat call fails.
        """
        self._require_exists(path)
        try:
            return self.fs.stat(path).st_mode & 0o777
        except OSError as e:
            raise FsIOError(f"Failed to get the mode of the {self._kind(path)}.", path) from e

    def get_size(self, path: str) -> int:
        """Return the byte size of a file, or the total of all files under a directory.

        Directories themselves count as zero bytes.

        Raises:
            PathNotFoundError: If the path does not exist.
            FsIOError: If a stat call fails or a directory cannot be enumerated.
        """
        self._require_exists(path)

        if not self.is_directory(path):
            return self._file_size(path)

        size = 0
        for sub_path in walk(self.fs, path, recursive=True):
            sub_path = os.path.join(path, sub_path)
            if self.is_file(sub_path):
                size += self._file_size(sub_path)
        return size

    def stat(self, path: str) -> PathInfo:
        """Return a metadata snapshot of a path.

        Raises:
            PathNotFoundError: If the path does not exist.
            FsIOError: If a stat call fails.
        """
        self._require_exists(path)
        try:
            result = self.fs.stat(path)
        except OSError as e:
            raise FsIOError(f"Failed to get the statistics of the {self._kind(path)}.", path) from e

        return PathInfo(
            path=path,
            is_directory=self.is_directory(path),
            size=self.get_size(path),
            mode=result.st_mode & 0o777,
            modified_at=result.st_mtime,
            accessed_at=result.st_atime,
        )

    def get_mime_content_type(self, path: str) -> str:
        """Guess the MIME type of a file.

        The extension is consulted first; otherwise the leading bytes are
        sniffed for well-known signatures and text.

        Raises:
            PathNotFoundError: If the path does not exist.
            PathNotFileError: If the path is not a file.
            FsIOError: If the file cannot be read.
        """
        self._require_file(path)

        guessed, _ = mimetypes.guess_type(path)
        if guessed:
            return guessed

        with self.open_stream(path, Mode.READ) as stream:
            head = stream.read(SNIFF_LENGTH)
        return _sniff_mime_type(head)

    # ------------------------------------------------------------------
    # Streams and files
    # ------------------------------------------------------------------

    def open_stream(self, path: str, mode: Mode) -> Stream:
        """Open a stream on a file.

        Raises:
            OpenError: If the OS cannot open the path.
        """
        return Stream(path, mode, filesystem=self.fs, chunk_size=self.config.chunk_size)

    def read_file(self, path: str) -> bytes:
        """Read a whole file.

        Raises:
            PathNotFoundError: If the path does not exist.
            PathNotFileError: If the path is not a file.
        """
        self._require_file(path)
        with self.open_stream(path, Mode.READ) as stream:
            return stream.read()

    def write_file(self, path: str, data: bytes, mode: int | None = None) -> None:
        """Create a file holding ``data``.

        Args:
            path: File to create; must not exist.
            data: Content to write.
            mode: Permission bits (defaults to ``config.file_mode``).

        Raises:
            InvalidArgumentError: If mode is out of range.
            AlreadyExistsError: If the path exists.
            TargetParentMissingError: If the parent directory is missing.
        """
        mode = self.config.file_mode if mode is None else mode
        _check_mode(mode)
        self._require_absent(path, "The path already exists.")
        self._require_parent(path, "The parent directory of the path must exist.")

        with self.open_stream(path, Mode.WRITE) as stream:
            _write_all(stream, data)
        self.change_mode(path, mode)
        logger.debug("Wrote %d bytes to %s", len(data), path)

    def touch(
        self,
        path: str,
        modification_time: int | None = None,
        access_time: int | None = None,
    ) -> None:
        """Create a file if missing and set its times.

        Without times both are set to now. An access time requires a
        modification time; when only the modification time is given, the
        access time follows it.

        Raises:
            InvalidArgumentError: If a time is negative, or access_time is given alone.
            TargetParentMissingError: If the parent directory is missing.
            FsIOError: If the OS call fails.
        """
        if modification_time is not None and modification_time < 0:
            raise InvalidArgumentError(
                "The modification time must be greater than or equal to 0.", path
            )
        if access_time is not None and access_time < 0:
            raise InvalidArgumentError("The access time must be greater than or equal to 0.", path)
        if modification_time is None and access_time is not None:
            raise InvalidArgumentError(
                "The modification time is required when the access time is given.", path
            )
        self._require_parent(path, "The parent directory of the path must exist.")

        times = None
        if modification_time is not None:
            atime = modification_time if access_time is None else access_time
            times = (atime, modification_time)

        try:
            if not self.fs.exists(path):
                self.fs.touch(path)
            self.fs.utime(path, times)
        except OSError as e:
            raise FsIOError("Failed to touch the file.", path) from e
        logger.debug("Touched %s", path)

    # ------------------------------------------------------------------
    # Structural mutation
    # ------------------------------------------------------------------

    def make_directory(self, path: str, mode: int | None = None) -> None:
        """Create a directory and any missing parents with the same bits.

        Args:
            path: Directory to create; must not exist.
            mode: Permission bits (defaults to ``config.directory_mode``),
                applied exactly regardless of the process umask.

        Raises:
            InvalidArgumentError: If mode is out of range.
            AlreadyExistsError: If the path exists.
            FsIOError: If the OS call fails.
        """
        mode = self.config.directory_mode if mode is None else mode
        _check_mode(mode)
        self._require_absent(path, "The path already exists.")

        try:
            with self.fs.umask(0):
                self.fs.mkdir(path, mode, parents=True)
        except OSError as e:
            raise FsIOError("Failed to create the directory.", path) from e
        logger.debug("Created directory %s with mode %04o", path, mode)

    def change_mode(self, path: str, mode: int) -> None:
        """Set the permission bits of a path.

        Raises:
            InvalidArgumentError: If mode is out of range.
            PathNotFoundError: If the path does not exist.
            FsIOError: If the chmod call fails.
        """
        _check_mode(mode)
        self._require_exists(path)

        try:
            with self.fs.umask(0):
                self.fs.chmod(path, mode)
        except OSError as e:
            raise FsIOError(f"Failed to change the mode of the {self._kind(path)}.", path) from e
        logger.debug("Changed mode of %s to %04o", path, mode)

    def remove(self, path: str) -> None:
        """Remove a file, or a directory with everything under it.

        Raises:
            PathNotFoundError: If the path does not exist.
            FsIOError: If an unlink or rmdir fails. Entries removed before
                the failure stay removed.
        """
        self._require_exists(path)

        if self._is_real_directory(path):
            self._remove_directory(path)
        else:
            self._remove_file(path)
        logger.debug("Removed %s", path)

    def copy(self, source_path: str, target_path: str) -> None:
        """Copy a file or directory tree, preserving permission bits.

        Raises:
            PathNotFoundError: If the source does not exist.
            AlreadyExistsError: If the target (or a file inside it) exists.
            TargetParentMissingError: If the target's parent is missing.
            InvalidArgumentError: If a directory would be copied into itself.
            FsIOError: If an OS call fails. No rollback is attempted.
        """
        self._require_exists(source_path, "The source path must exist.")
        self._require_absent(target_path, "The target path already exists.")
        self._require_parent(target_path, "The parent directory of the target path must exist.")

        if self.is_directory(source_path):
            source_real = os.path.realpath(source_path)
            target_real = os.path.realpath(target_path)
            if target_real.startswith(source_real + os.sep):
                raise InvalidArgumentError(
                    "The target path must not be inside the source directory.", target_path
                )
            self._copy_directory(source_path, target_path)
        else:
            self._copy_file(source_path, target_path)
        logger.debug("Copied %s to %s", source_path, target_path)

    def move(self, source_path: str, target_path: str) -> None:
        """Move a file or directory with a single rename.

        Raises:
            PathNotFoundError: If the source does not exist.
            AlreadyExistsError: If the target exists.
            TargetParentMissingError: If the target's parent is missing.
            FsIOError: If the rename fails (e.g. across devices).
        """
        self._require_exists(source_path, "The source path must exist.")
        self._require_absent(target_path, "The target path already exists.")
        self._require_parent(target_path, "The parent directory of the target path must exist.")

        kind = self._kind(source_path)
        try:
            self.fs.rename(source_path, target_path)
        except OSError as e:
            raise FsIOError(f"Failed to move the {kind}.", source_path) from e
        logger.debug("Moved %s to %s", source_path, target_path)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _remove_directory(self, path: str) -> None:
        # Post-order walk: a directory is only reached once it is empty
        for sub_path in walk(self.fs, path, recursive=True):
            sub_path = os.path.join(path, sub_path)
            if self._is_real_directory(sub_path):
                self._remove_empty_directory(sub_path)
            else:
                self._remove_file(sub_path)
        self._remove_empty_directory(path)

    def _remove_empty_directory(self, path: str) -> None:
        try:
            self.fs.rmdir(path)
        except OSError as e:
            raise FsIOError("Failed to delete the directory.", path) from e

    def _remove_file(self, path: str) -> None:
        try:
            self.fs.unlink(path)
        except OSError as e:
            raise FsIOError("Failed to remove the file.", path) from e

    def _copy_directory(self, source_path: str, target_path: str) -> None:
        # Directories are created owner-writable so their contents can be
        # copied in; the exact source bits are applied when the walk reaches
        # the directory's own entry, after all of its descendants.
        self._create_directory(target_path, self.get_mode(source_path))

        for sub_path in walk(self.fs, source_path, recursive=True):
            source_sub_path = os.path.join(source_path, sub_path)
            target_sub_path = os.path.join(target_path, sub_path)

            if self._is_real_directory(source_sub_path):
                if not self.is_directory(target_sub_path):
                    self._create_directory(target_sub_path, self.get_mode(source_sub_path))
                self.change_mode(target_sub_path, self.get_mode(source_sub_path))
            elif self.is_file(source_sub_path):
                self._ensure_directory(
                    os.path.dirname(source_sub_path), os.path.dirname(target_sub_path)
                )
                self._copy_file(source_sub_path, target_sub_path)
            else:
                logger.debug("Skipping %s: not a regular file or directory", source_sub_path)

        self.change_mode(target_path, self.get_mode(source_path))

    def _ensure_directory(self, source_directory: str, target_directory: str) -> None:
        if self.is_directory(target_directory):
            return
        self._ensure_directory(
            os.path.dirname(source_directory), os.path.dirname(target_directory)
        )
        self._create_directory(target_directory, self.get_mode(source_directory))

    def _create_directory(self, path: str, mode: int) -> None:
        try:
            with self.fs.umask(0):
                self.fs.mkdir(path, mode | 0o700)
        except OSError as e:
            raise FsIOError("Failed to create the directory.", path) from e

    def _copy_file(self, source_path: str, target_path: str) -> None:
        self._require_absent(target_path, "The target path already exists.")

        with self.open_stream(source_path, Mode.READ) as source, self.open_stream(
            target_path, Mode.WRITE
        ) as target:
            while True:
                chunk = source.read(self.config.chunk_size)
                if not chunk:
                    break
                _write_all(target, chunk)

        self.change_mode(target_path, self.get_mode(source_path))

    def _file_size(self, path: str) -> int:
        try:
            return self.fs.stat(path).st_size
        except OSError as e:
            raise FsIOError("Failed to get the size of the file.", path) from e

    def _is_real_directory(self, path: str) -> bool:
        return self.fs.is_dir(path) and not self.fs.is_symlink(path)

    def _kind(self, path: str) -> str:
        return "directory" if self.is_directory(path) else "file"

    def _require_exists(self, path: str, message: str = "The path must exist.") -> None:
        if not self.exists(path):
            raise PathNotFoundError(message, path)

    def _require_absent(self, path: str, message: str) -> None:
        if self.exists(path):
            raise AlreadyExistsError(message, path)

    def _require_file(self, path: str) -> None:
        self._require_exists(path)
        if not self.is_file(path):
            raise PathNotFileError("The path must be a file.", path)

    def _require_parent(self, path: str, message: str) -> None:
        parent = os.path.dirname(os.path.normpath(path)) or "."
        if not self.is_directory(parent):
            raise TargetParentMissingError(message, path)


def _check_mode(mode: int) -> None:
    if not 0 <= mode <= 0o777:
        raise InvalidArgumentError(f"The mode {mode:o} must be between 0 and 0777.")


def _write_all(stream: ByteStream, data: bytes) -> None:
    offset = 0
    while offset < len(data):
        written = stream.write(data[offset:])
        if written == 0:
            raise FsIOError("Failed to write the data to the stream.", stream.path)
        offset += written


def _sniff_mime_type(head: bytes) -> str:
    """Guess a MIME type from the leading bytes of a file."""
    if not head:
        return EMPTY_MIME_TYPE

    for signature, mime_type in MAGIC_NUMBERS:
        if head.startswith(signature):
            return mime_type

    if b"\x00" in head:
        return BINARY_MIME_TYPE
    try:
        # A multi-byte sequence may be cut at the end of the sample
        codecs.getincrementaldecoder("utf-8")().decode(head, final=False)
    except UnicodeDecodeError:
        return BINARY_MIME_TYPE
    return TEXT_MIME_TYPE
