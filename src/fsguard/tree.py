"""Directory traversal shared by the recursive operations."""

from __future__ import annotations

import os
from collections.abc import Iterator

from fsguard.errors import FsIOError, PathNotDirectoryError
from fsguard.protocols import FileSystem

SEPARATOR = "/"


def walk(filesystem: FileSystem, root: str, recursive: bool = False) -> Iterator[str]:
    """Walk a directory and yield entry paths relative to ``root``.

    Recursive walks are post-order: every descendant of a directory is
    yielded before the directory itself, so a consumer can delete entries
    in the order they arrive. Symbolic links are yielded but not followed.
    Sibling order is whatever the OS enumerates and must not be relied on.

    The directory check happens immediately; enumeration is lazy and reads
    one entry per item produced.

    Args:
        filesystem: Raw primitives used for enumeration.
        root: Directory to walk.
        recursive: Descend into subdirectories.

    Returns:
        Single-pass iterator over relative paths joined with ``/``.

    Raises:
        PathNotDirectoryError: If root is not a directory.
        FsIOError: During iteration, if a directory cannot be enumerated.

    Example:
        >>> sorted(walk(RealFileSystem(), "/data", recursive=True))
        ['a', 'sub', 'sub/b']
    """
    if not filesystem.is_dir(root):
        raise PathNotDirectoryError("The path must be a directory.", root)
    return _walk(filesystem, root, "", recursive)


def _walk(filesystem: FileSystem, directory: str, prefix: str, recursive: bool) -> Iterator[str]:
    try:
        for name in filesystem.scandir(directory):
            relative = f"{prefix}{SEPARATOR}{name}" if prefix else name
            if recursive:
                absolute = os.path.join(directory, name)
                if filesystem.is_dir(absolute) and not filesystem.is_symlink(absolute):
                    yield from _walk(filesystem, absolute, relative, recursive)
            yield relative
    except OSError as e:
        raise FsIOError("Failed to list the directory.", directory) from e
