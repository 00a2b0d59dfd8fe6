"""Add a single component to an initialized project."""

import click

from samuel.cli.ensure import Ensure
from samuel.cli.output import user_output
from samuel.cli.report import print_extraction_result
from samuel.core.context import SamuelContext


@click.command("add")
@click.argument("component_type")
@click.argument("name")
@click.option("--version", "version_spec", help="Version to take the component from")
@click.option("--force", is_flag=True, help="Overwrite locally modified files (with backup)")
@click.pass_obj
def add_cmd(
    ctx: SamuelContext, component_type: str, name: str, version_spec: str | None, force: bool
) -> None:
    """Add a language guide, framework skill or workflow.

    The component is taken from the installed version unless --version is
    given. The project's recorded version never changes here; use
    `samuel update` for that.

    Examples:

    \b
      samuel add language go
      samuel add fw fastapi
    """
    component = Ensure.component(ctx.registry, component_type, name)
    tracker = ctx.tracker()
    config = Ensure.initialized(tracker)
    version = version_spec or config.installed_version

    report = Ensure.succeeds(
        lambda: tracker.install(
            config, [component], version=version, force=force, bump_version=False
        )
    )
    print_extraction_result(report.result)

    if not report.result.component_succeeded(component.key):
        user_output(click.style(f"Failed to add {component.key}", fg="red"))
        raise SystemExit(1)
    user_output(click.style("✓ ", fg="green") + f"Added {component.key}")
    if version != config.installed_version:
        user_output(f"Project version stays at {config.installed_version}")
