"""Validated, exception-driven filesystem operations."""

__version__ = "0.1.0"

# Export the public API for type hints and dependency injection
from fsguard.errors import FsError
from fsguard.protocols import ByteStream, FileSystem, FsOperations
from fsguard.service import FsService
from fsguard.stream import Stream
from fsguard.types import Mode, PathInfo, Whence

__all__ = [
    "__version__",
    "ByteStream",
    "FileSystem",
    "FsError",
    "FsOperations",
    "FsService",
    "Mode",
    "PathInfo",
    "Stream",
    "Whence",
]
