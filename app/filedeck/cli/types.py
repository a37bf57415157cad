"""Shared CLI types and helpers."""

from enum import Enum

import typer

from filedeck.core.config import EngineConfig, load_config
from filedeck.core.errors import ConfigError
from filedeck.utils.formatting import print_error


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


def get_config() -> EngineConfig:
    """Load the engine configuration or exit with an error message.

    Raises:
        typer.Exit: If the config file is invalid.
    """
    try:
        return load_config()
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
