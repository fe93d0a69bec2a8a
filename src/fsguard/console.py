"""Rich output helpers for the command line."""

from __future__ import annotations

from datetime import datetime, timezone

from rich.console import Console
from rich.table import Table

from fsguard.config import FsConfig
from fsguard.types import PathInfo

_UNITS = ["B", "KiB", "MiB", "GiB", "TiB"]


def format_size(size: int) -> str:
    """Format a byte count with binary units.

    Args:
        size: Byte count.

    Returns:
        Human-readable size, e.g. ``"1.5 KiB"``.

    Example:
        >>> format_size(1536)
        '1.5 KiB'
    """
    value = float(size)
    for unit in _UNITS:
        if value < 1024 or unit == _UNITS[-1]:
            if unit == "B":
                return f"{int(value)} B"
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{size} B"


def format_mode(mode: int) -> str:
    """Format permission bits as ``rwxr-xr-x``."""
    flags = "rwxrwxrwx"
    return "".join(flag if mode & (1 << (8 - i)) else "-" for i, flag in enumerate(flags))


class Output:
    """Console output for fsguard commands."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize output.

        Args:
            console: Rich console to print to (stdout console if not provided).
        """
        self.console = console or Console()

    def show_success(self, message: str) -> None:
        """Show success message."""
        self.console.print(f"[green]✓[/green] {message}")

    def show_error(self, message: str) -> None:
        """Show error message."""
        self.console.print(f"[red]✗[/red] {message}")

    def show_listing(self, entries: list[str]) -> None:
        """Print one entry per line."""
        for entry in entries:
            self.console.print(entry, highlight=False, markup=False)

    def show_info(self, info: PathInfo, mime_type: str | None) -> None:
        """Display a metadata table for a path.

        Args:
            info: Metadata snapshot.
            mime_type: MIME type for files, None for directories.
        """
        table = Table(title=info.path, show_header=False)
        table.add_column("Field", style="bold")
        table.add_column("Value")

        table.add_row("Type", "directory" if info.is_directory else "file")
        table.add_row("Size", f"{info.size} ({format_size(info.size)})")
        table.add_row("Mode", f"{info.mode:04o} ({format_mode(info.mode)})")
        table.add_row("Modified", _format_time(info.modified_at))
        table.add_row("Accessed", _format_time(info.accessed_at))
        if mime_type is not None:
            table.add_row("MIME type", mime_type)

        self.console.print(table)

    def show_config(self, config: FsConfig, location: str) -> None:
        """Display the active configuration."""
        self.console.print("\n[bold]Configuration[/bold]")
        self.console.print(f"  Config file: {location}")
        self.console.print(f"  Chunk size: {config.chunk_size}")
        self.console.print(f"  Directory mode: {config.directory_mode:04o}")
        self.console.print(f"  File mode: {config.file_mode:04o}")


def _format_time(timestamp: float) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat(timespec="seconds")
