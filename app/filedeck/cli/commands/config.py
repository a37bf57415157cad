"""Configuration commands.

Show the effective engine configuration and write a default config file.
"""

import json
from typing import Annotated

import typer
from rich.table import Table

from filedeck.cli.types import OutputFormat, get_config
from filedeck.core.config import EngineConfig, save_config
from filedeck.core.errors import ConfigError
from filedeck.core.paths import ensure_config_dir, get_config_path
from filedeck.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show or initialize the engine configuration.",
    invoke_without_command=True,
    no_args_is_help=True,
)


@app.command()
def show(
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format.", case_sensitive=False),
    ] = OutputFormat.TABLE,
) -> None:
    """Show the effective configuration (defaults merged with the config file)."""
    config = get_config()

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(config.model_dump()))
        return

    table = Table(
        title=str(get_config_path()),
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Setting", style="bold")
    table.add_column("Value")
    table.add_column("Description", style="muted")
    for name, field in EngineConfig.model_fields.items():
        table.add_row(name, str(getattr(config, name)), field.description or "")
    console.print(table)


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a config file with default settings."""
    path = get_config_path()
    if path.exists() and not force:
        print_info(f"Config already exists at {path}. Use --force to overwrite.")
        raise typer.Exit(code=0)

    try:
        ensure_config_dir()
        saved = save_config(EngineConfig(), path)
    except (ConfigError, RuntimeError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    print_success(f"Wrote default config to {saved}")
