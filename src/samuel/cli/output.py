"""User-facing output helpers.

Diagnostics go to stderr through user_output so stdout stays clean for
listings that may be piped.
"""

from typing import Any

import click


def user_output(message: Any = "", *, nl: bool = True) -> None:
    """Print a status or error message for the user (stderr)."""
    click.echo(message, err=True, nl=nl)


def format_error(message: str) -> str:
    return click.style("Error: ", fg="red") + message
