"""Command-line interface for WeTwo.

Session commands (start, login, logout), mood logging and the weekly and
monthly summaries.
"""

from wetwo.cli.main import cli, main

__all__ = ["cli", "main"]
