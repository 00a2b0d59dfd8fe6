"""Show drift between the project and a version, or between two versions."""

import click

from samuel.cli.ensure import Ensure
from samuel.cli.report import print_diff_report
from samuel.core.context import SamuelContext
from samuel.core.diff import DiffReport, collect_files, compute_diff
from samuel.core.downloader import LATEST


def _diff_versions(ctx: SamuelContext, from_spec: str, to_spec: str) -> DiffReport:
    downloader = ctx.downloader()
    source_entry = downloader.ensure(from_spec)
    target_entry = downloader.ensure(to_spec)
    return compute_diff(
        collect_files(ctx.fs, source_entry.template_root),
        collect_files(ctx.fs, target_entry.template_root),
        from_label=source_entry.version_label,
        to_label=target_entry.version_label,
        registry=ctx.registry,
    )


@click.command("diff")
@click.argument("versions", nargs=-1)
@click.option("--components", "by_component", is_flag=True, help="Group changes by component")
@click.pass_obj
def diff_cmd(ctx: SamuelContext, versions: tuple[str, ...], by_component: bool) -> None:
    """Compare files by content.

    With no arguments, compares the project's tracked files with the latest
    release. With one version, compares them with that version. With two
    versions, compares the two template trees.

    Examples:

    \b
      samuel diff
      samuel diff v1.5.0 v1.6.0 --components
    """
    Ensure.invariant(len(versions) <= 2, "diff takes at most two versions")

    if len(versions) == 2:
        report = Ensure.succeeds(lambda: _diff_versions(ctx, versions[0], versions[1]))
    else:
        tracker = ctx.tracker()
        config = Ensure.initialized(tracker)
        target = versions[0] if versions else LATEST
        report = Ensure.succeeds(lambda: tracker.diff_against(config, target))

    print_diff_report(report, by_component=by_component)
