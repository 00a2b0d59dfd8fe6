import click

from samuel.core.context import SamuelContext


def _format_size(size: float) -> str:
    for unit in ("B", "KB", "MB"):
        if size < 1024:
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} GB"


@click.command("info")
@click.pass_obj
def info_cmd(ctx: SamuelContext) -> None:
    """Show the cache location, entries and size."""
    downloader = ctx.downloader()
    entries = downloader.list_entries()
    click.echo(f"Location: {downloader.cache_root}")
    click.echo(f"Size: {_format_size(downloader.cache_size())}")
    if not entries:
        click.echo("No cached versions")
        return
    click.echo("Cached versions:")
    for entry in entries:
        click.echo(f"  {entry.version_label} ({entry.kind})")
