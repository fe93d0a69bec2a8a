"""Shared test fixtures."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from fsguard.config import ConfigManager, FsConfig
from fsguard.filesystem import RealFileSystem
from fsguard.service import FsService


@pytest.fixture
def real_fs() -> RealFileSystem:
    """Create the production filesystem implementation."""
    return RealFileSystem()


@pytest.fixture
def service() -> FsService:
    """Create a service backed by the real filesystem."""
    return FsService.create()


@pytest.fixture
def temp_config_dir(tmp_path: Path) -> Path:
    """Create a temporary configuration directory."""
    config_dir = tmp_path / ".fsguard"
    config_dir.mkdir(parents=True)
    return config_dir


# ============================================================================
# Directory Tree Fixtures
# ============================================================================


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """Create a small directory tree.

    Layout::

        tree/
        ├── a            (16 bytes, 0640)
        ├── empty/       (0700)
        └── sub/         (0750)
            ├── b        (16 bytes, 0600)
            └── deeper/  (0755)
                └── c    (5 bytes, 0644)
    """
    root = tmp_path / "tree"
    (root / "sub" / "deeper").mkdir(parents=True)
    (root / "empty").mkdir()

    (root / "a").write_bytes(b"0123456789abcdef")
    (root / "sub" / "b").write_bytes(b"fedcba9876543210")
    (root / "sub" / "deeper" / "c").write_bytes(b"hello")

    os.chmod(root / "a", 0o640)
    os.chmod(root / "sub" / "b", 0o600)
    os.chmod(root / "sub" / "deeper" / "c", 0o644)
    os.chmod(root / "empty", 0o700)
    os.chmod(root / "sub" / "deeper", 0o755)
    os.chmod(root / "sub", 0o750)
    os.chmod(root, 0o751)
    return root


@pytest.fixture
def sample_tree_entries() -> set[str]:
    """Relative paths of every entry in sample_tree."""
    return {"a", "empty", "sub", "sub/b", "sub/deeper", "sub/deeper/c"}


# ============================================================================
# Mock Fixtures
# ============================================================================


@pytest.fixture
def mock_filesystem() -> MagicMock:
    """Create a mock FileSystem for testing.

    The mock hands out descriptor 3 and tracks all primitive calls
    without touching real files.
    """
    fs = MagicMock()
    fs.open.return_value = 3
    fs.is_seekable.return_value = True
    fs.exists.return_value = False
    fs.is_dir.return_value = False
    fs.is_file.return_value = False
    fs.is_symlink.return_value = False
    return fs


@pytest.fixture
def mock_app_context(temp_config_dir: Path) -> MagicMock:
    """Create a complete mock AppContext for CLI testing."""
    from fsguard.context import AppContext

    ctx = MagicMock(spec=AppContext)
    ctx.service = MagicMock()
    ctx.filesystem = MagicMock()
    ctx.config = FsConfig()
    ctx.config_manager = ConfigManager(config_dir=temp_config_dir)
    return ctx
