"""Wiring of fsguard's runtime dependencies.

CLI commands receive an ``AppContext`` instead of building services
themselves. Fields are typed with the protocols from ``fsguard.protocols``
so tests can pass mocks or a service over a fake filesystem.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from fsguard.config import ConfigManager, FsConfig
from fsguard.protocols import FileSystem, FsOperations


def _real_filesystem() -> FileSystem:
    from fsguard.filesystem import RealFileSystem

    return RealFileSystem()


@dataclass
class AppContext:
    """Everything a command needs: the service, its config and their storage."""

    service: FsOperations
    config_manager: ConfigManager
    config: FsConfig = field(default_factory=FsConfig)
    filesystem: FileSystem = field(default_factory=_real_filesystem)


def create_context(config_dir: Path | None = None) -> AppContext:
    """Build the production context.

    The stored configuration is loaded once and shared by the context and
    the service, which also share a single ``RealFileSystem``.

    Args:
        config_dir: Directory holding ``config.yaml``. When omitted,
            ``FSGUARD_CONFIG_DIR`` or ``~/.fsguard`` is used.

    Returns:
        AppContext backed by the real filesystem.
    """
    from fsguard.service import FsService

    if config_dir:
        config_manager = ConfigManager.create(config_dir)
    else:
        config_manager = ConfigManager.create_default()
    config = config_manager.load()
    filesystem = _real_filesystem()

    return AppContext(
        service=FsService.create(filesystem=filesystem, config=config),
        config_manager=config_manager,
        config=config,
        filesystem=filesystem,
    )
