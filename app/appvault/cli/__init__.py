"""CLI package for appvault.

This package contains the Typer application and all subcommands.
"""

from appvault.cli.main import app

__all__ = ["app"]
