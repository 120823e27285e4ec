"""
User Interface Utilities.
Rich console output and logging setup for the CLI.
File: src/w3clog/utils/ui.py
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

# Diagnostics go to stderr so stdout stays a clean W3C stream.
console = Console(stderr=True)


def setup_logging(level: str = "WARNING") -> None:
    """Route library logging through rich."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
        force=True,
    )


def print_header(title: str, subtitle: str = ""):
    """Prints a styled header."""
    console.rule(f"[bold blue]{title}")
    if subtitle:
        console.print(f"[dim]{subtitle}[/dim]", justify="center")
    console.print()
