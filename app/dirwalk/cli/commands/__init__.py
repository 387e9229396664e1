"""CLI commands for dirwalk.

This package contains all subcommand implementations.
"""

from dirwalk.cli.commands import browse, config, history, scan

__all__ = ["browse", "config", "history", "scan"]
