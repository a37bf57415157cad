"""Engine configuration and settings.

This module provides the configuration model and I/O functions for the
filesystem engine: listing defaults, search bounds, retry behaviour and
preview limits.

Configuration is stored in ~/.config/filedeck/config.toml
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from filedeck.core.errors import ConfigError, ConfigParseError
from filedeck.core.paths import get_config_path
from filedeck.filesystem.reader import DEFAULT_READ_MAX_BYTES
from filedeck.filesystem.retry import RetryPolicy
from filedeck.filesystem.search import DEFAULT_MAX_DEPTH, DEFAULT_MAX_RESULTS

logger = logging.getLogger(__name__)


class EngineConfig(BaseModel):
    """Configuration for the filesystem engine.

    Attributes:
        show_hidden: Include dot-prefixed entries in listings and search.
        use_trash: Send deleted items to the trash by default.
        retry_attempts: Attempts per fallible copy/rename (including the first).
        retry_delay_ms: Fixed delay between attempts in milliseconds.
        search_max_depth: Maximum descent below the search root.
        search_max_results: Hard cap on search matches.
        read_max_bytes: Maximum bytes returned by a text preview.
    """

    model_config = ConfigDict(extra="forbid")

    show_hidden: Annotated[
        bool,
        Field(description="Show dot-prefixed entries"),
    ] = False
    use_trash: Annotated[
        bool,
        Field(description="Delete to trash instead of permanently"),
    ] = True
    retry_attempts: Annotated[
        int,
        Field(ge=1, le=10, description="Attempts per fallible operation (1-10)"),
    ] = 3
    retry_delay_ms: Annotated[
        int,
        Field(ge=0, le=5000, description="Delay between attempts in ms (0-5000)"),
    ] = 100
    search_max_depth: Annotated[
        int,
        Field(ge=0, le=32, description="Maximum search depth (0-32)"),
    ] = DEFAULT_MAX_DEPTH
    search_max_results: Annotated[
        int,
        Field(ge=1, le=10000, description="Maximum search results (1-10000)"),
    ] = DEFAULT_MAX_RESULTS
    read_max_bytes: Annotated[
        int,
        Field(ge=1, description="Maximum bytes read for a text preview"),
    ] = DEFAULT_READ_MAX_BYTES

    def retry_policy(self) -> RetryPolicy:
        """Build the RetryPolicy described by this configuration."""
        return RetryPolicy(max_attempts=self.retry_attempts, delay=self.retry_delay_ms / 1000)


def load_config(path: Path | None = None) -> EngineConfig:
    """Load engine configuration from a TOML file.

    A missing file is not an error: defaults are returned.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated EngineConfig object.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the file cannot be read or the content doesn't
            match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        logger.debug("No config at %s, using defaults", config_path)
        return EngineConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config {config_path}: {e}") from e

    try:
        return EngineConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid config content in {config_path}: {e}") from e


def save_config(config: EngineConfig, path: Path | None = None) -> Path:
    """Save engine configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The EngineConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(config.model_dump(), f)
        # os.replace() is atomic on POSIX
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config {config_path}: {e}") from e

    return config_path
