"""Restore a file from the backup taken before a forced overwrite."""

import click

from samuel.cli.ensure import Ensure
from samuel.cli.output import user_output
from samuel.core.context import SamuelContext


@click.command("restore")
@click.argument("path")
@click.pass_obj
def restore_cmd(ctx: SamuelContext, path: str) -> None:
    """Put back the most recent backup of PATH (relative to the project)."""
    backup = Ensure.succeeds(lambda: ctx.extractor().restore(path))
    user_output(click.style("✓ ", fg="green") + f"Restored {path} from {backup.name}")
