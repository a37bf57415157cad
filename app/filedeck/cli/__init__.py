"""CLI package for filedeck.

This package contains the Typer application and all subcommands.
"""

from filedeck.cli.main import app

__all__ = ["app"]
