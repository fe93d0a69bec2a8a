"""Tests for filesystem primitives."""

from __future__ import annotations

import fcntl
import os
from pathlib import Path

import pytest

from fsguard.filesystem import RealFileSystem
from fsguard.protocols import FileSystem


class TestRealFileSystem:
    """Tests for RealFileSystem path-level primitives."""

    def test_satisfies_protocol(self) -> None:
        """Test RealFileSystem structurally satisfies FileSystem."""
        assert isinstance(RealFileSystem(), FileSystem)

    def test_exists(self, real_fs: RealFileSystem, tmp_path: Path) -> None:
        """Test exists for files, directories and missing paths."""
        test_file = tmp_path / "exists.txt"
        test_file.touch()

        assert real_fs.exists(str(test_file)) is True
        assert real_fs.exists(str(tmp_path)) is True
        assert real_fs.exists(str(tmp_path / "missing")) is False

    def test_is_dir_and_is_file(self, real_fs: RealFileSystem, tmp_path: Path) -> None:
        """Test type checks distinguish files from directories."""
        test_file = tmp_path / "file.txt"
        test_file.touch()

        assert real_fs.is_dir(str(tmp_path)) is True
        assert real_fs.is_dir(str(test_file)) is False
        assert real_fs.is_file(str(test_file)) is True
        assert real_fs.is_file(str(tmp_path)) is False
        assert real_fs.is_file(str(tmp_path / "missing")) is False

    def test_is_symlink(self, real_fs: RealFileSystem, tmp_path: Path) -> None:
        """Test is_symlink only reports links."""
        target = tmp_path / "target"
        target.mkdir()
        link = tmp_path / "link"
        link.symlink_to(target)

        assert real_fs.is_symlink(str(link)) is True
        assert real_fs.is_symlink(str(target)) is False

    def test_mkdir_simple(self, real_fs: RealFileSystem, tmp_path: Path) -> None:
        """Test creating a single directory."""
        new_dir = tmp_path / "newdir"

        real_fs.mkdir(str(new_dir), 0o755)

        assert new_dir.is_dir()

    def test_mkdir_parents_share_mode(self, real_fs: RealFileSystem, tmp_path: Path) -> None:
        """Test intermediate directories receive the leaf's mode."""
        nested = tmp_path / "a" / "b" / "c"

        with real_fs.umask(0):
            real_fs.mkdir(str(nested), 0o750, parents=True)

        for path in (tmp_path / "a", tmp_path / "a" / "b", nested):
            assert path.stat().st_mode & 0o777 == 0o750

    def test_mkdir_without_parents_raises(self, real_fs: RealFileSystem, tmp_path: Path) -> None:
        """Test mkdir fails when the parent is missing."""
        with pytest.raises(FileNotFoundError):
            real_fs.mkdir(str(tmp_path / "x" / "y"), 0o755)

    def test_scandir(self, real_fs: RealFileSystem, tmp_path: Path) -> None:
        """Test scandir yields names without dot entries."""
        (tmp_path / "one").touch()
        (tmp_path / "two").mkdir()

        names = set(real_fs.scandir(str(tmp_path)))

        assert names == {"one", "two"}

    def test_rmdir_and_unlink(self, real_fs: RealFileSystem, tmp_path: Path) -> None:
        """Test removing an empty directory and a file."""
        empty = tmp_path / "empty"
        empty.mkdir()
        test_file = tmp_path / "file"
        test_file.touch()

        real_fs.rmdir(str(empty))
        real_fs.unlink(str(test_file))

        assert not empty.exists()
        assert not test_file.exists()

    def test_rmdir_non_empty_raises(self, real_fs: RealFileSystem, tmp_path: Path) -> None:
        """Test rmdir refuses non-empty directories."""
        (tmp_path / "full").mkdir()
        (tmp_path / "full" / "file").touch()

        with pytest.raises(OSError):
            real_fs.rmdir(str(tmp_path / "full"))

    def test_rename(self, real_fs: RealFileSystem, tmp_path: Path) -> None:
        """Test renaming a file."""
        src = tmp_path / "src"
        src.write_text("data")

        real_fs.rename(str(src), str(tmp_path / "dst"))

        assert not src.exists()
        assert (tmp_path / "dst").read_text() == "data"

    def test_chmod_and_stat(self, real_fs: RealFileSystem, tmp_path: Path) -> None:
        """Test chmod changes the bits reported by stat."""
        test_file = tmp_path / "file"
        test_file.write_bytes(b"1234")

        real_fs.chmod(str(test_file), 0o600)
        result = real_fs.stat(str(test_file))

        assert result.st_mode & 0o777 == 0o600
        assert result.st_size == 4

    def test_touch_and_utime(self, real_fs: RealFileSystem, tmp_path: Path) -> None:
        """Test touch creates a file and utime sets its times."""
        test_file = tmp_path / "touched"

        real_fs.touch(str(test_file))
        real_fs.utime(str(test_file), (1000, 2000))

        assert test_file.is_file()
        assert test_file.stat().st_atime == 1000
        assert test_file.stat().st_mtime == 2000

    def test_umask_restored_after_error(self, real_fs: RealFileSystem) -> None:
        """Test the previous umask is restored when the block raises."""
        original = os.umask(0o022)
        try:
            with pytest.raises(RuntimeError):
                with real_fs.umask(0o077) as previous:
                    assert previous == 0o022
                    raise RuntimeError("boom")
            assert os.umask(0o022) == 0o022
        finally:
            os.umask(original)


class TestDescriptorPrimitives:
    """Tests for RealFileSystem descriptor-level primitives."""

    def test_read_write_seek(self, real_fs: RealFileSystem, tmp_path: Path) -> None:
        """Test a write, seek and read cycle on one descriptor."""
        path = str(tmp_path / "data")
        fd = real_fs.open(path, os.O_RDWR | os.O_CREAT)
        try:
            assert real_fs.write(fd, b"abcdef") == 6
            assert real_fs.seek(fd, 2, os.SEEK_SET) == 2
            assert real_fs.read(fd, 3) == b"cde"
            assert real_fs.fstat(fd).st_size == 6
        finally:
            real_fs.close(fd)

    def test_open_missing_raises(self, real_fs: RealFileSystem, tmp_path: Path) -> None:
        """Test opening a missing file read-only fails."""
        with pytest.raises(FileNotFoundError):
            real_fs.open(str(tmp_path / "missing"), os.O_RDONLY)

    def test_flock_conflict(self, real_fs: RealFileSystem, tmp_path: Path) -> None:
        """Test a non-blocking exclusive lock fails while another is held."""
        path = str(tmp_path / "locked")
        first = real_fs.open(path, os.O_RDWR | os.O_CREAT)
        second = real_fs.open(path, os.O_RDWR)
        try:
            real_fs.flock(first, fcntl.LOCK_EX)
            with pytest.raises(OSError):
                real_fs.flock(second, fcntl.LOCK_EX | fcntl.LOCK_NB)
            real_fs.flock(first, fcntl.LOCK_UN)
            real_fs.flock(second, fcntl.LOCK_EX | fcntl.LOCK_NB)
        finally:
            real_fs.close(first)
            real_fs.close(second)

    def test_is_seekable(self, real_fs: RealFileSystem, tmp_path: Path) -> None:
        """Test regular files are seekable and pipes are not."""
        fd = real_fs.open(str(tmp_path / "file"), os.O_RDWR | os.O_CREAT)
        read_end, write_end = os.pipe()
        try:
            assert real_fs.is_seekable(fd) is True
            assert real_fs.is_seekable(read_end) is False
        finally:
            real_fs.close(fd)
            os.close(read_end)
            os.close(write_end)
