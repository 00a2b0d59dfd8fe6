"""Update installed components to a newer version."""

import click

from samuel.cli.ensure import Ensure
from samuel.cli.output import user_output
from samuel.cli.report import print_diff_report, print_extraction_result
from samuel.core.context import SamuelContext
from samuel.core.downloader import LATEST


@click.command("update")
@click.option("--check", "check_only", is_flag=True, help="Only report whether an update exists")
@click.option("--diff", "show_diff", is_flag=True, help="Preview changes without applying them")
@click.option("--force", is_flag=True, help="Overwrite locally modified files (with backup)")
@click.option("--version", "version_spec", default=LATEST, help="Target version, tag or branch")
@click.pass_obj
def update_cmd(
    ctx: SamuelContext, check_only: bool, show_diff: bool, force: bool, version_spec: str
) -> None:
    """Re-apply core files and installed components from a version.

    Locally modified files are skipped unless --force is given, in which
    case the local copy is backed up first. While any file is skipped the
    recorded version stays put.

    Examples:

    \b
      # Is there a newer release?
      samuel update --check

    \b
      # Preview, then apply
      samuel update --diff
      samuel update
    """
    tracker = ctx.tracker()
    config = Ensure.initialized(tracker)

    if check_only:
        info = Ensure.succeeds(lambda: ctx.downloader().check_for_update(config.installed_version))
        if info.latest is None:
            user_output("No releases published")
        elif info.update_available:
            user_output(f"Update available: {info.current} -> {info.latest}")
        else:
            user_output(f"Up to date ({info.current})")
        return

    if show_diff:
        report = Ensure.succeeds(lambda: tracker.diff_against(config, version_spec))
        print_diff_report(report)
        return

    selection = tracker.installed_selection(config)
    user_output(f"Updating {len(selection)} components from {version_spec}...")
    report = Ensure.succeeds(
        lambda: tracker.install(config, selection, version=version_spec, force=force)
    )
    print_extraction_result(report.result)

    if report.result.with_status("skipped"):
        user_output("Some files have local modifications. Re-run with --force to overwrite.")
    if report.result.had_failures:
        user_output(
            click.style("Update finished with errors; ", fg="red")
            + f"version stays at {report.config.installed_version}"
        )
        raise SystemExit(1)
    if report.version_updated:
        user_output(
            click.style("✓ ", fg="green")
            + f"Updated {config.installed_version} -> {report.config.installed_version}"
        )
    elif not report.result.fully_applied:
        user_output(
            click.style("Not all files were updated; ", fg="yellow")
            + f"version stays at {report.config.installed_version}"
        )
    else:
        user_output(
            click.style("✓ ", fg="green") + f"Up to date ({report.config.installed_version})"
        )
