"""Initialize a project with core files and a component selection."""

import click

from samuel.cli.ensure import Ensure
from samuel.cli.output import user_output
from samuel.cli.report import print_extraction_result
from samuel.core.context import SamuelContext
from samuel.core.downloader import LATEST
from samuel.core.models import Component

DEFAULT_PRESET = "starter"


def _split_names(value: str | None) -> list[str]:
    if not value:
        return []
    return [name.strip() for name in value.split(",") if name.strip()]


def _build_selection(
    ctx: SamuelContext,
    preset_name: str | None,
    languages: list[str],
    frameworks: list[str],
) -> list[Component]:
    registry = ctx.registry
    if preset_name is None and (languages or frameworks):
        selection = registry.core_templates()
        selection.extend(Ensure.component(registry, "language", name) for name in languages)
        selection.extend(Ensure.component(registry, "framework", name) for name in frameworks)
        selection.extend(registry.list_components("workflow"))
        return selection

    preset = registry.preset(preset_name or DEFAULT_PRESET)
    if preset is None:
        available = ", ".join(p.name for p in registry.presets)
        Ensure.fail(f"Unknown preset '{preset_name}' (available: {available})")
    selection = registry.select_preset(preset)
    keys = {component.key for component in selection}
    for name in languages:
        component = Ensure.component(registry, "language", name)
        if component.key not in keys:
            selection.append(component)
    for name in frameworks:
        component = Ensure.component(registry, "framework", name)
        if component.key not in keys:
            selection.append(component)
    return selection


@click.command("init")
@click.option("--preset", "preset_name", help="Selection preset: full, starter or minimal")
@click.option("--languages", help="Comma-separated language guides to install")
@click.option("--frameworks", help="Comma-separated framework skills to install")
@click.option("--version", "version_spec", default=LATEST, help="Version, tag or branch")
@click.option("--force", is_flag=True, help="Overwrite locally modified files (with backup)")
@click.pass_obj
def init_cmd(
    ctx: SamuelContext,
    preset_name: str | None,
    languages: str | None,
    frameworks: str | None,
    version_spec: str,
    force: bool,
) -> None:
    """Install core files and guides into the current project.

    Re-running init is safe: unchanged files are left alone and locally
    modified files are skipped unless --force is given.

    Examples:

    \b
      # Starter preset from the latest release
      samuel init

    \b
      # Only the guides you need
      samuel init --languages python,go --frameworks fastapi
    """
    selection = _build_selection(
        ctx, preset_name, _split_names(languages), _split_names(frameworks)
    )
    tracker = ctx.tracker()
    config = Ensure.succeeds(tracker.load)

    user_output(f"Installing {len(selection)} components from {version_spec}...")
    report = Ensure.succeeds(
        lambda: tracker.install(config, selection, version=version_spec, force=force)
    )
    print_extraction_result(report.result)

    if report.result.with_status("skipped"):
        user_output("Some files have local modifications. Re-run with --force to overwrite.")
    if report.result.had_failures:
        user_output(click.style("Initialization finished with errors", fg="red"))
        raise SystemExit(1)
    user_output(
        click.style("✓ ", fg="green") + f"Initialized at {report.config.installed_version}"
    )
