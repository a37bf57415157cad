"""Mutating filesystem commands.

Copy, move, delete, duplicate, rename and create entries. Every command
reports engine errors and exits with code 1.
"""

import asyncio
from typing import Annotated

import typer
from rich.markup import escape

from filedeck.cli.types import get_config
from filedeck.core.errors import FileDeckError
from filedeck.service import FileService
from filedeck.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Copy, move, delete and rename entries.",
    invoke_without_command=True,
    no_args_is_help=True,
)


@app.command("cp")
def copy_cmd(
    sources: Annotated[list[str], typer.Argument(help="Entries to copy.")],
    destination: Annotated[
        str,
        typer.Option("--to", "-t", help="Destination directory."),
    ],
) -> None:
    """Copy files or directory trees into a destination directory.

    An existing target of the same name is replaced.
    """
    service = FileService(get_config())
    try:
        asyncio.run(service.copy(sources, destination))
    except FileDeckError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    print_success(f"Copied {len(sources)} item(s) to {destination}")


@app.command("mv")
def move_cmd(
    sources: Annotated[list[str], typer.Argument(help="Entries to move.")],
    destination: Annotated[
        str,
        typer.Option("--to", "-t", help="Destination directory."),
    ],
) -> None:
    """Move entries into a destination directory (rename-based)."""
    service = FileService(get_config())
    try:
        asyncio.run(service.move(sources, destination))
    except FileDeckError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    print_success(f"Moved {len(sources)} item(s) to {destination}")


@app.command("rm")
def delete_cmd(
    paths: Annotated[list[str], typer.Argument(help="Entries to delete.")],
    trash: Annotated[
        bool | None,
        typer.Option("--trash/--no-trash", help="Send to trash instead of deleting."),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Delete entries, to the trash or permanently."""
    config = get_config()
    use_trash = config.use_trash if trash is None else trash

    if not use_trash and not yes:
        for path in paths:
            console.print(f"  [error]-[/] {escape(path)}")
        if not typer.confirm(f"Permanently delete {len(paths)} item(s)?", default=False):
            print_info("Aborted.")
            raise typer.Exit(code=0)

    service = FileService(config)
    try:
        asyncio.run(service.delete(paths, use_trash))
    except FileDeckError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    verb = "Trashed" if use_trash else "Deleted"
    print_success(f"{verb} {len(paths)} item(s)")


@app.command("dup")
def duplicate_cmd(
    path: Annotated[str, typer.Argument(help="Entry to duplicate.")],
) -> None:
    """Copy an entry next to itself under a free ' - Copy' name."""
    service = FileService(get_config())
    try:
        new_path = service.duplicate(path)
    except FileDeckError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    print_success(f"Created {new_path}")


@app.command("rename")
def rename_cmd(
    path: Annotated[str, typer.Argument(help="Entry to rename.")],
    new_name: Annotated[str, typer.Argument(help="New name (no path separators).")],
) -> None:
    """Rename an entry within its directory."""
    service = FileService(get_config())
    try:
        new_path = service.rename(path, new_name)
    except FileDeckError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    print_success(f"Renamed to {new_path}")


@app.command("batch-rename")
def batch_rename_cmd(
    paths: Annotated[list[str], typer.Argument(help="Entries to rename.")],
    find: Annotated[str, typer.Option("--find", help="Text or pattern to replace.")],
    replace: Annotated[str, typer.Option("--replace", help="Replacement text.")] = "",
    regex: Annotated[
        bool,
        typer.Option("--regex", "-r", help="Treat --find as a regular expression."),
    ] = False,
) -> None:
    """Rename several entries by substituting text in their names.

    Examples:
        filedeck ops batch-rename *.jpeg --find .jpeg --replace .jpg
        filedeck ops batch-rename img_* --find '^img_(\\d+)' --replace 'photo_\\1' --regex
    """
    service = FileService(get_config())
    try:
        renamed = service.batch_rename(paths, find, replace, regex)
    except FileDeckError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if not renamed:
        print_info("No names changed.")
        return
    for old, new in renamed:
        console.print(f"  {escape(old)} [muted]->[/] {escape(new)}")
    print_success(f"Renamed {len(renamed)} item(s)")


@app.command("mkdir")
def mkdir_cmd(
    parent: Annotated[str, typer.Argument(help="Directory to create in.")],
    name: Annotated[str, typer.Argument(help="New directory name.")],
) -> None:
    """Create a directory inside ``parent``."""
    service = FileService(get_config())
    try:
        new_path = service.create_directory(parent, name)
    except FileDeckError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    print_success(f"Created {new_path}")


@app.command("touch")
def touch_cmd(
    parent: Annotated[str, typer.Argument(help="Directory to create in.")],
    name: Annotated[str, typer.Argument(help="New file name.")],
    content: Annotated[
        str,
        typer.Option("--content", "-c", help="Initial file content."),
    ] = "",
) -> None:
    """Create a new file inside ``parent``. Existing files are never overwritten."""
    service = FileService(get_config())
    try:
        new_path = service.create_file(parent, name, content)
    except FileDeckError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    print_success(f"Created {new_path}")
