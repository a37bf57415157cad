"""Read-only filesystem commands.

Provides listing, search, entry details, directory size, text preview
and directory watching.
"""

import asyncio
import json
from typing import Annotated

import typer
from rich.markup import escape

from filedeck.cli.types import OutputFormat, get_config
from filedeck.core.errors import FileDeckError
from filedeck.filesystem.models import FileEntry
from filedeck.service import FileService
from filedeck.utils.formatting import (
    console,
    create_entry_table,
    format_entry_row,
    format_size,
    print_error,
    print_info,
    print_success,
)

app = typer.Typer(
    help="List, search and watch directories.",
    invoke_without_command=True,
    no_args_is_help=True,
)


@app.command("ls")
def list_cmd(
    path: Annotated[str, typer.Argument(help="Directory to list.")] = ".",
    show_all: Annotated[
        bool,
        typer.Option("--all", "-a", help="Include hidden entries."),
    ] = False,
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format.", case_sensitive=False),
    ] = OutputFormat.TABLE,
) -> None:
    """List the contents of a directory (directories first)."""
    service = FileService(get_config())
    try:
        contents = service.list_directory(path, show_all or None)
    except FileDeckError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(contents.to_dict()))
        return

    _print_entries(contents.entries, title=contents.path)
    dirs = sum(1 for e in contents.entries if e.is_dir)
    console.print(f"\n[dim]{dirs} directories, {len(contents.entries) - dirs} files[/dim]")


@app.command("search")
def search_cmd(
    root: Annotated[str, typer.Argument(help="Directory to search under.")],
    query: Annotated[str, typer.Argument(help="Case-insensitive name substring.")],
    show_all: Annotated[
        bool,
        typer.Option("--all", "-a", help="Include hidden entries."),
    ] = False,
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format.", case_sensitive=False),
    ] = OutputFormat.TABLE,
) -> None:
    """Search entry names below a directory (bounded depth and results)."""
    config = get_config()
    service = FileService(config)
    try:
        results = asyncio.run(service.search(root, query, show_all or None))
    except FileDeckError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps([entry.to_dict() for entry in results]))
        return

    if not results:
        print_info(f"No entries matching '{query}'.")
        return

    _print_entries(results, title=f"Search results for '{query}'")
    console.print(f"\n[dim]Found {len(results)} entries[/dim]")
    if len(results) >= config.search_max_results:
        console.print(f"[dim](limited to {config.search_max_results} results)[/dim]")


@app.command("info")
def info_cmd(
    path: Annotated[str, typer.Argument(help="Entry to inspect.")],
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format.", case_sensitive=False),
    ] = OutputFormat.TABLE,
) -> None:
    """Show metadata for a single entry."""
    service = FileService(get_config())
    try:
        entry = service.get_file_details(path)
    except FileDeckError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(entry.to_dict()))
        return

    for key, value in entry.to_dict().items():
        console.print(f"[header]{key:>10}[/]  {escape(str(value))}")


@app.command("du")
def du_cmd(
    path: Annotated[str, typer.Argument(help="Directory to measure.")] = ".",
) -> None:
    """Compute the total size of a directory tree."""
    service = FileService(get_config())
    try:
        total = asyncio.run(service.calculate_dir_size(path))
    except FileDeckError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    console.print(f"{format_size(total)} ({total} bytes)")


@app.command("cat")
def cat_cmd(
    path: Annotated[str, typer.Argument(help="File to preview.")],
) -> None:
    """Print the beginning of a text file (size-limited)."""
    service = FileService(get_config())
    try:
        text = service.read_text(path)
    except FileDeckError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    console.print(text, markup=False, highlight=False, end="")


@app.command("watch")
def watch_cmd(
    path: Annotated[str, typer.Argument(help="Directory to watch.")] = ".",
    count: Annotated[
        int | None,
        typer.Option("--count", "-n", help="Exit after this many change notifications."),
    ] = None,
) -> None:
    """Print a line each time the directory changes (Ctrl+C to stop)."""
    service = FileService(get_config())
    try:
        service.watch(path)
    except FileDeckError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_info(f"Watching {service.watcher.watched_path}")
    try:
        asyncio.run(_print_changes(service, count))
    except KeyboardInterrupt:
        pass
    finally:
        service.close()
    print_success("Stopped watching.")


async def _print_changes(service: FileService, count: int | None) -> None:
    """Print change notifications until ``count`` have been seen."""
    seen = 0
    async for change in service.changes():
        console.print(f"[info]changed[/] {escape(change.path)}")
        seen += 1
        if count is not None and seen >= count:
            break


# === Private helper functions ===


def _print_entries(entries: tuple[FileEntry, ...] | list[FileEntry], title: str) -> None:
    """Display entries as a Rich table."""
    table = create_entry_table(escape(title))
    for entry in entries:
        table.add_row(*format_entry_row(entry))
    console.print(table)
