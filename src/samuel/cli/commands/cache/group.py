"""Cache command group."""

import click

from samuel.cli.commands.cache.clear import clear_cmd
from samuel.cli.commands.cache.info import info_cmd


@click.group("cache")
def cache_group() -> None:
    """Inspect or clear the local download cache."""
    pass


cache_group.add_command(info_cmd)
cache_group.add_command(clear_cmd)
