import click

from samuel.cli.output import user_output
from samuel.core.context import SamuelContext


@click.command("clear")
@click.pass_obj
def clear_cmd(ctx: SamuelContext) -> None:
    """Delete every cached version."""
    removed = ctx.downloader().clear_cache()
    user_output(click.style("✓ ", fg="green") + f"Removed {removed} cache item(s)")
