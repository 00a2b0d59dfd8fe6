"""Remove an installed component."""

import click

from samuel.cli.ensure import Ensure
from samuel.cli.output import user_output
from samuel.cli.report import print_removal_result
from samuel.core.context import SamuelContext


@click.command("remove")
@click.argument("component_type")
@click.argument("name")
@click.pass_obj
def remove_cmd(ctx: SamuelContext, component_type: str, name: str) -> None:
    """Delete a component's files and drop it from samuel.toml.

    If some files cannot be deleted the component stays recorded so that
    `samuel doctor` can report it.

    Examples:

    \b
      samuel remove language python
    """
    component = Ensure.component(ctx.registry, component_type, name)
    tracker = ctx.tracker()
    config = Ensure.initialized(tracker)

    report = Ensure.succeeds(lambda: tracker.record_remove(config, component))
    print_removal_result(report.removal)

    if not report.removed_from_config:
        user_output(
            click.style("Error: ", fg="red")
            + f"Some files of {component.key} could not be removed; it remains installed"
        )
        raise SystemExit(1)
    count = len(report.removal.removed_paths)
    user_output(
        click.style("✓ ", fg="green") + f"Removed {component.key} ({count} files deleted)"
    )
