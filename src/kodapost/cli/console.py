"""Rich console singleton for CLI output."""

import sys

from rich.console import Console

# Windows cp1252 cannot draw Unicode box characters
console = Console(safe_box=sys.platform == "win32")


def print_error(message: str, details: dict | None = None) -> None:
    """Print an error message, with optional key/value details."""
    console.print(f"[red]Error: {message}[/red]")
    if details:
        for key, value in details.items():
            console.print(f"  [dim]{key}:[/dim] [yellow]{value}[/yellow]")

