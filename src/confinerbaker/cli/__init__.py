"""Command-line interface for confinerbaker.

This module provides the CLI using Typer with rich output for
user-friendly feedback.

Key features:
- Bake contour files into state files
- Print the confiner path for a frustum height
- Point containment checks
"""

from confinerbaker.cli.app import cli, main

__all__ = ["cli", "main"]
