"""List available or installed components."""

import click

from samuel.cli.ensure import Ensure
from samuel.core.context import SamuelContext
from samuel.core.models import COMPONENT_TYPES, ComponentKey, canonical_type


@click.command("list")
@click.option("--type", "type_filter", help="Filter by component type (or alias)")
@click.option("--installed", "installed_only", is_flag=True, help="Only installed components")
@click.pass_obj
def list_cmd(ctx: SamuelContext, type_filter: str | None, installed_only: bool) -> None:
    """List components known to samuel.

    Examples:

    \b
      samuel list --type lang
      samuel list --installed
    """
    if type_filter is not None:
        Ensure.invariant(
            canonical_type(type_filter) is not None, f"Unknown component type '{type_filter}'"
        )

    installed: set[ComponentKey] = set()
    config = Ensure.succeeds(ctx.tracker().load)
    if config is not None:
        installed = set(config.installed_components)
    elif installed_only:
        Ensure.fail("No samuel installation found. Run 'samuel init' first.")

    components = ctx.registry.list_components(type_filter)
    if installed_only:
        components = [c for c in components if c.key in installed]
    if not components:
        click.echo("No components found")
        return

    # Group by type for display, in canonical type order
    for component_type in COMPONENT_TYPES:
        group = [c for c in components if c.type == component_type]
        if not group:
            continue
        click.echo(click.style(f"{component_type.upper()}S:", bold=True))
        for component in group:
            marker = click.style("✓", fg="green") if component.key in installed else " "
            click.echo(f"  {marker} {component.name:<22} {component.description}")
        click.echo("")
