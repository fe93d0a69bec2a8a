"""Tests for CLI commands using context injection.

Commands accept a _context parameter for dependency injection, enabling unit
tests with mock services as well as end-to-end runs against tmp_path.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest
import typer

from fsguard import cli
from fsguard.context import AppContext, create_context
from fsguard.errors import AlreadyExistsError, PathNotFoundError
from fsguard.types import PathInfo


@pytest.fixture
def real_context(temp_config_dir: Path) -> AppContext:
    """Create a production context with a temporary config directory."""
    return create_context(config_dir=temp_config_dir)


class TestQueryCommands:
    """Tests for ls, cat, du and stat."""

    def test_ls_sorted(
        self, mock_app_context: MagicMock, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test entries are printed sorted."""
        mock_app_context.service.list.return_value = iter(["b", "a", "c"])

        cli.list_command(path="/data", recursive=True, _context=mock_app_context)

        mock_app_context.service.list.assert_called_once_with("/data", True)
        assert capsys.readouterr().out.split() == ["a", "b", "c"]

    def test_ls_not_a_directory(self, mock_app_context: MagicMock) -> None:
        """Test listing errors exit with code 1."""
        mock_app_context.service.list.side_effect = PathNotFoundError("The path must exist.")

        with pytest.raises(typer.Exit) as exc_info:
            cli.list_command(path="/missing", _context=mock_app_context)
        assert exc_info.value.exit_code == 1

    def test_cat(self, mock_app_context: MagicMock, capsys: pytest.CaptureFixture[str]) -> None:
        """Test file content is written to stdout."""
        mock_app_context.service.read_file.return_value = b"hello"

        cli.cat(path="/data/file", _context=mock_app_context)

        assert capsys.readouterr().out == "hello"

    @pytest.mark.parametrize(("human", "expected"), [(False, "2048"), (True, "2.0 KiB")])
    def test_du(
        self,
        mock_app_context: MagicMock,
        capsys: pytest.CaptureFixture[str],
        human: bool,
        expected: str,
    ) -> None:
        """Test sizes are printed raw or with units."""
        mock_app_context.service.get_size.return_value = 2048

        cli.disk_usage(path="/data", human=human, _context=mock_app_context)

        assert capsys.readouterr().out.startswith(expected)

    def test_stat_file(
        self, mock_app_context: MagicMock, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test metadata and MIME type are shown for files."""
        mock_app_context.service.stat.return_value = PathInfo(
            path="/data/a.txt",
            is_directory=False,
            size=16,
            mode=0o640,
            modified_at=0.0,
            accessed_at=0.0,
        )
        mock_app_context.service.get_mime_content_type.return_value = "text/plain"

        cli.stat(path="/data/a.txt", _context=mock_app_context)

        out = capsys.readouterr().out
        assert "0640" in out
        assert "rw-r-----" in out
        assert "text/plain" in out

    def test_stat_directory_skips_mime(self, mock_app_context: MagicMock) -> None:
        """Test no MIME lookup happens for directories."""
        mock_app_context.service.stat.return_value = PathInfo(
            path="/data",
            is_directory=True,
            size=0,
            mode=0o755,
            modified_at=0.0,
            accessed_at=0.0,
        )

        cli.stat(path="/data", _context=mock_app_context)

        mock_app_context.service.get_mime_content_type.assert_not_called()


class TestMutationCommands:
    """Tests for put, mkdir, cp, mv, rm, chmod and touch."""

    def test_put_with_mode(self, mock_app_context: MagicMock) -> None:
        """Test text is encoded and the octal mode parsed."""
        cli.put(path="/data/f", text="hi", mode="0600", _context=mock_app_context)

        mock_app_context.service.write_file.assert_called_once_with("/data/f", b"hi", 0o600)

    def test_mkdir_default_mode(self, mock_app_context: MagicMock) -> None:
        """Test mkdir leaves the mode to configuration."""
        cli.mkdir(path="/data/d", _context=mock_app_context)

        mock_app_context.service.make_directory.assert_called_once_with("/data/d", None)

    def test_invalid_octal_mode(self, mock_app_context: MagicMock) -> None:
        """Test a non-octal mode exits before calling the service."""
        with pytest.raises(typer.Exit) as exc_info:
            cli.chmod(mode="0999", path="/data/f", _context=mock_app_context)

        assert exc_info.value.exit_code == 1
        mock_app_context.service.change_mode.assert_not_called()

    def test_chmod(self, mock_app_context: MagicMock) -> None:
        """Test chmod forwards the parsed mode."""
        cli.chmod(mode="755", path="/data/d", _context=mock_app_context)

        mock_app_context.service.change_mode.assert_called_once_with("/data/d", 0o755)

    def test_cp_target_exists(self, mock_app_context: MagicMock) -> None:
        """Test copy errors exit with code 1."""
        mock_app_context.service.copy.side_effect = AlreadyExistsError(
            "The target path already exists."
        )

        with pytest.raises(typer.Exit) as exc_info:
            cli.copy(source="/a", target="/b", _context=mock_app_context)
        assert exc_info.value.exit_code == 1

    def test_touch_times(self, mock_app_context: MagicMock) -> None:
        """Test touch forwards both times."""
        cli.touch(path="/data/f", mtime=10, atime=20, _context=mock_app_context)

        mock_app_context.service.touch.assert_called_once_with("/data/f", 10, 20)

    def test_end_to_end(self, real_context: AppContext, tmp_path: Path) -> None:
        """Test commands against the real filesystem."""
        work = tmp_path / "work"

        cli.mkdir(path=str(work / "src"), mode="0750", _context=real_context)
        cli.put(path=str(work / "src" / "f.txt"), text="data", _context=real_context)
        cli.copy(source=str(work / "src"), target=str(work / "dst"), _context=real_context)
        cli.move(source=str(work / "dst"), target=str(work / "moved"), _context=real_context)
        cli.remove(path=str(work / "src"), _context=real_context)

        assert not (work / "src").exists()
        assert not (work / "dst").exists()
        assert (work / "moved" / "f.txt").read_text() == "data"
        assert (work / "moved").stat().st_mode & 0o777 == 0o750

    def test_rm_missing(self, real_context: AppContext, tmp_path: Path) -> None:
        """Test removing a missing path exits with code 1."""
        with pytest.raises(typer.Exit) as exc_info:
            cli.remove(path=str(tmp_path / "missing"), _context=real_context)
        assert exc_info.value.exit_code == 1


class TestConfigCommands:
    """Tests for config show and set."""

    def test_config_show(
        self, mock_app_context: MagicMock, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test the active values are printed."""
        cli.config_show(_context=mock_app_context)

        out = capsys.readouterr().out
        assert "8192" in out
        assert "0775" in out
        assert "0664" in out

    def test_config_set(self, mock_app_context: MagicMock) -> None:
        """Test a value is persisted through the config manager."""
        cli.config_set(key="file-mode", value="0600", _context=mock_app_context)

        assert mock_app_context.config_manager.load().file_mode == 0o600

    def test_config_set_unknown_key(self, mock_app_context: MagicMock) -> None:
        """Test unknown keys exit with code 1."""
        with pytest.raises(typer.Exit) as exc_info:
            cli.config_set(key="color", value="blue", _context=mock_app_context)
        assert exc_info.value.exit_code == 1


class TestVersion:
    """Tests for the version callback."""

    def test_version_exits(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test --version prints and exits."""
        with pytest.raises(typer.Exit):
            cli.version_callback(True)

        assert "fsguard v" in capsys.readouterr().out

    def test_version_noop(self) -> None:
        """Test the callback does nothing when the flag is unset."""
        cli.version_callback(False)
