import logging

import click

from samuel.cli.commands.add import add_cmd
from samuel.cli.commands.cache.group import cache_group
from samuel.cli.commands.diff import diff_cmd
from samuel.cli.commands.doctor import doctor_cmd
from samuel.cli.commands.init import init_cmd
from samuel.cli.commands.list_cmd import list_cmd
from samuel.cli.commands.remove import remove_cmd
from samuel.cli.commands.restore import restore_cmd
from samuel.cli.commands.update import update_cmd
from samuel.cli.ensure import Ensure
from samuel.core.context import create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="samuel")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """Keep AI guides, skills and workflows in sync with the samuel templates."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s - %(levelname)s - %(message)s")

    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = Ensure.succeeds(create_context)


cli.add_command(init_cmd)
cli.add_command(add_cmd)
cli.add_command(remove_cmd)
cli.add_command(update_cmd)
cli.add_command(diff_cmd)
cli.add_command(doctor_cmd)
cli.add_command(list_cmd)
cli.add_command(restore_cmd)
cli.add_command(cache_group)
