"""CLI commands using Typer."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Annotated

if TYPE_CHECKING:
    from fsguard.context import AppContext

import typer
from rich.logging import RichHandler

from fsguard import __version__
from fsguard.console import Output, format_size
from fsguard.context import create_context
from fsguard.errors import FsError

app = typer.Typer(
    name="fsguard",
    help="Validated filesystem operations with explicit errors",
    no_args_is_help=True,
)

config_app = typer.Typer(help="Configuration commands")

app.add_typer(config_app, name="config")

output = Output()


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        output.console.print(f"fsguard v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", help="Log every filesystem operation")
    ] = False,
) -> None:
    """Validated filesystem operations with explicit errors."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=output.console, show_path=False)],
        )


def _fail(error: Exception) -> typer.Exit:
    """Report an error and build the exit to raise."""
    output.show_error(str(error))
    return typer.Exit(1)


def _parse_mode(value: str) -> int:
    """Parse an octal permission string such as ``0755``.

    Raises:
        typer.Exit: If the value is not octal.
    """
    try:
        return int(value, 8)
    except ValueError as e:
        raise _fail(ValueError(f"Invalid octal mode: {value}")) from e


# ============================================================================
# Query Commands
# ============================================================================


@app.command("ls")
def list_command(
    path: Annotated[str, typer.Argument(help="Directory to list")] = ".",
    recursive: Annotated[
        bool, typer.Option("--recursive", "-r", help="Include all descendants")
    ] = False,
    _context=None,
) -> None:
    """List a directory."""
    ctx: AppContext = _context or create_context()
    try:
        entries = sorted(ctx.service.list(path, recursive))
    except FsError as e:
        raise _fail(e) from e
    output.show_listing(entries)


@app.command("cat")
def cat(
    path: Annotated[str, typer.Argument(help="File to print")],
    _context=None,
) -> None:
    """Print a file's content."""
    ctx: AppContext = _context or create_context()
    try:
        data = ctx.service.read_file(path)
    except FsError as e:
        raise _fail(e) from e
    typer.echo(data, nl=False)


@app.command("du")
def disk_usage(
    path: Annotated[str, typer.Argument(help="File or directory")],
    human: Annotated[
        bool, typer.Option("--human-readable", "-h", help="Use binary units")
    ] = False,
    _context=None,
) -> None:
    """Show the total size of a file or directory tree."""
    ctx: AppContext = _context or create_context()
    try:
        size = ctx.service.get_size(path)
    except FsError as e:
        raise _fail(e) from e
    shown = format_size(size) if human else str(size)
    output.console.print(f"{shown}\t{path}", highlight=False, markup=False)


@app.command("stat")
def stat(
    path: Annotated[str, typer.Argument(help="File or directory")],
    _context=None,
) -> None:
    """Show metadata of a path."""
    ctx: AppContext = _context or create_context()
    try:
        info = ctx.service.stat(path)
        mime_type = None if info.is_directory else ctx.service.get_mime_content_type(path)
    except FsError as e:
        raise _fail(e) from e
    output.show_info(info, mime_type)


# ============================================================================
# Mutation Commands
# ============================================================================


@app.command("put")
def put(
    path: Annotated[str, typer.Argument(help="File to create")],
    text: Annotated[str, typer.Argument(help="Content to write")],
    mode: Annotated[
        str | None, typer.Option("--mode", "-m", help="Octal permission bits")
    ] = None,
    _context=None,
) -> None:
    """Create a new file with the given text."""
    ctx: AppContext = _context or create_context()
    bits = _parse_mode(mode) if mode is not None else None
    try:
        ctx.service.write_file(path, text.encode(), bits)
    except FsError as e:
        raise _fail(e) from e
    output.show_success(f"Wrote {path}")


@app.command("mkdir")
def mkdir(
    path: Annotated[str, typer.Argument(help="Directory to create")],
    mode: Annotated[
        str | None, typer.Option("--mode", "-m", help="Octal permission bits")
    ] = None,
    _context=None,
) -> None:
    """Create a directory and any missing parents."""
    ctx: AppContext = _context or create_context()
    bits = _parse_mode(mode) if mode is not None else None
    try:
        ctx.service.make_directory(path, bits)
    except FsError as e:
        raise _fail(e) from e
    output.show_success(f"Created {path}")


@app.command("cp")
def copy(
    source: Annotated[str, typer.Argument(help="Source path")],
    target: Annotated[str, typer.Argument(help="Target path (must not exist)")],
    _context=None,
) -> None:
    """Copy a file or directory tree."""
    ctx: AppContext = _context or create_context()
    try:
        ctx.service.copy(source, target)
    except FsError as e:
        raise _fail(e) from e
    output.show_success(f"Copied {source} to {target}")


@app.command("mv")
def move(
    source: Annotated[str, typer.Argument(help="Source path")],
    target: Annotated[str, typer.Argument(help="Target path (must not exist)")],
    _context=None,
) -> None:
    """Move a file or directory."""
    ctx: AppContext = _context or create_context()
    try:
        ctx.service.move(source, target)
    except FsError as e:
        raise _fail(e) from e
    output.show_success(f"Moved {source} to {target}")


@app.command("rm")
def remove(
    path: Annotated[str, typer.Argument(help="File or directory to remove")],
    _context=None,
) -> None:
    """Remove a file or directory tree."""
    ctx: AppContext = _context or create_context()
    try:
        ctx.service.remove(path)
    except FsError as e:
        raise _fail(e) from e
    output.show_success(f"Removed {path}")


@app.command("chmod")
def chmod(
    mode: Annotated[str, typer.Argument(help="Octal permission bits, e.g. 0644")],
    path: Annotated[str, typer.Argument(help="File or directory")],
    _context=None,
) -> None:
    """Change permission bits."""
    ctx: AppContext = _context or create_context()
    bits = _parse_mode(mode)
    try:
        ctx.service.change_mode(path, bits)
    except FsError as e:
        raise _fail(e) from e
    output.show_success(f"Changed mode of {path} to {bits:04o}")


@app.command("touch")
def touch(
    path: Annotated[str, typer.Argument(help="File to create or update")],
    mtime: Annotated[
        int | None, typer.Option("--mtime", help="Modification time (epoch seconds)")
    ] = None,
    atime: Annotated[
        int | None, typer.Option("--atime", help="Access time (epoch seconds)")
    ] = None,
    _context=None,
) -> None:
    """Create a file or update its times."""
    ctx: AppContext = _context or create_context()
    try:
        ctx.service.touch(path, mtime, atime)
    except FsError as e:
        raise _fail(e) from e
    output.show_success(f"Touched {path}")


# ============================================================================
# Config Commands
# ============================================================================


@config_app.command("show")
def config_show(
    _context=None,
) -> None:
    """Show current configuration."""
    ctx: AppContext = _context or create_context()
    output.show_config(ctx.config, str(ctx.config_manager.config_file))


@config_app.command("set")
def config_set(
    key: Annotated[str, typer.Argument(help="chunk-size, directory-mode or file-mode")],
    value: Annotated[str, typer.Argument(help="Configuration value")],
    _context=None,
) -> None:
    """Set a configuration value."""
    ctx: AppContext = _context or create_context()
    try:
        ctx.config = ctx.config_manager.set_value(key, value)
    except ValueError as e:
        raise _fail(e) from e
    output.show_success(f"Set {key} to {value}")


if __name__ == "__main__":
    app()
