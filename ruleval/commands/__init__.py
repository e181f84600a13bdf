"""Command implementations for the ruleval CLI."""

from __future__ import annotations

import json

from rich.console import Console


def report_error(console: Console, error: Exception, *, output_json: bool, context: str = "") -> None:
    """Print an error as JSON on stdout, or as rich text on the console."""
    if output_json:
        print(json.dumps({"error": type(error).__name__, "message": str(error)}, indent=2))
    else:
        console.print(f"{context}{type(error).__name__}: {error}", style="bold red")
