"""CLI commands for filedeck.

This package contains all subcommand implementations.
"""

from filedeck.cli.commands import config, fs, ops

__all__ = ["config", "fs", "ops"]
