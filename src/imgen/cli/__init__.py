"""
Command-line interface for imgen.

This package contains the CLI implementation using Click.
"""

from imgen.cli.commands import cli, main

__all__ = ["cli", "main"]
