"""CLI commands for appvault.

This package contains all subcommand implementations.
"""

from appvault.cli.commands import catalog, config, credential, import_app, libraries

__all__ = ["catalog", "config", "credential", "import_app", "libraries"]
