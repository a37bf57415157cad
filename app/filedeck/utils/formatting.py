"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

import sys

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from filedeck.core.theme import get_theme
from filedeck.filesystem.models import FileEntry


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def format_size(size_bytes: int | None) -> str:
    """Format byte count as human-readable string."""
    if not size_bytes:
        return "0 B"
    size = float(size_bytes)
    for unit in ("B", "KB", "MB", "GB"):
        if abs(size) < 1024:
            return f"{size:.1f} {unit}" if unit != "B" else f"{int(size)} B"
        size /= 1024
    return f"{size:.1f} TB"


def create_entry_table(title: str) -> Table:
    """Create a pre-configured table for displaying file entries.

    Args:
        title: Table title.

    Returns:
        Rich Table configured for entry display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Name", no_wrap=True)
    table.add_column("Size", style="info", justify="right")
    table.add_column("Modified", style="muted")
    table.add_column("Path", style="dim", overflow="fold")
    return table


def format_entry_row(entry: FileEntry) -> tuple[str, str, str, str]:
    """Format an entry as a table row with styling by kind.

    Directories get a trailing slash and no size; symlinks are marked
    with an arrow.

    Returns:
        Tuple of (name, size, modified, path) with Rich markup.
    """
    if entry.is_dir:
        style, label = "directory", f"{entry.name}/"
        size = "-"
    else:
        style, label = "file", entry.name
        size = format_size(entry.size)
    if entry.is_symlink:
        style, label = "symlink", f"{label} →"
    if entry.is_hidden:
        style = "hidden"

    name = f"[{style}]{escape(label)}[/]"
    return (name, size, entry.modified or "-", escape(entry.path))


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{escape(message)}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {escape(message)}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {escape(message)}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{escape(message)}[/]")
