"""Consistency check between samuel.toml and the project directory."""

import click

from samuel.cli.ensure import Ensure
from samuel.core.context import SamuelContext


@click.command("doctor")
@click.pass_obj
def doctor_cmd(ctx: SamuelContext) -> None:
    """Report installed components whose files are missing.

    Nothing is repaired. Re-run `samuel add` or `samuel update` to restore
    missing files.
    """
    tracker = ctx.tracker()
    config = Ensure.initialized(tracker)

    click.echo(click.style("Checking installation...", bold=True))
    click.echo(f"Installed version: {config.installed_version}")
    click.echo(f"Installed components: {len(config.installed_components)}")
    click.echo("")

    issues = tracker.check_consistency(config)
    if not issues:
        click.echo(click.style("✅ ", fg="green") + "All tracked files are present")
        return

    for issue in issues:
        click.echo(click.style("❌ ", fg="red") + issue.message)
    click.echo("")
    click.echo(click.style(f"⚠️  {len(issues)} issue(s) found", fg="yellow", bold=True))
    raise SystemExit(1)
