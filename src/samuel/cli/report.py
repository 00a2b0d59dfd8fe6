"""Rendering of extraction, removal and diff results."""

import click

from samuel.cli.output import user_output
from samuel.core.diff import DiffReport, DiffStatus
from samuel.core.extractor import ExtractionResult, OutcomeStatus, RemovalResult

_OUTCOME_STYLES: dict[OutcomeStatus, tuple[str, str]] = {
    "created": ("+", "green"),
    "overwritten": ("~", "yellow"),
    "skipped": ("!", "yellow"),
    "backed-up": ("x", "red"),
    "failed": ("x", "red"),
}

_DIFF_STYLES: dict[DiffStatus, tuple[str, str]] = {
    "added": ("+", "green"),
    "removed": ("-", "red"),
    "modified": ("~", "yellow"),
}


def print_extraction_result(result: ExtractionResult) -> None:
    """Print one line per changed or problematic file, then a count summary."""
    for outcome in result.outcomes:
        if outcome.status == "unchanged":
            continue
        marker, color = _OUTCOME_STYLES.get(outcome.status, ("=", "white"))
        line = click.style(f"  {marker} ", fg=color) + outcome.item.dest_path
        if outcome.reason:
            line += click.style(f" ({outcome.reason})", dim=True)
        elif outcome.backup_path is not None:
            line += click.style(f" (backup: {outcome.backup_path.name})", dim=True)
        user_output(line)

    counts = result.counts()
    parts = [f"{count} {status}" for status, count in counts.items()]
    user_output(", ".join(parts) if parts else "Nothing to do")


def print_removal_result(result: RemovalResult) -> None:
    for outcome in result.outcomes:
        if outcome.status == "removed":
            user_output(click.style("  - ", fg="red") + outcome.path)
        elif outcome.status == "failed":
            user_output(click.style("  x ", fg="red") + f"{outcome.path} ({outcome.reason})")
        elif outcome.status == "kept":
            user_output(click.style("  = ", dim=True) + f"{outcome.path} (kept: {outcome.reason})")


def print_diff_report(report: DiffReport, *, by_component: bool = False) -> None:
    """Print added, removed and modified paths (stdout)."""
    click.echo(click.style(f"Comparing {report.from_label} -> {report.to_label}", bold=True))
    if not report.has_changes:
        click.echo("No differences")
        return

    if by_component:
        for key, entries in sorted(
            report.by_component().items(), key=lambda item: str(item[0] or "")
        ):
            changed = [e for e in entries if e.status != "unchanged"]
            if not changed:
                continue
            click.echo(click.style(str(key) if key is not None else "(untracked)", bold=True))
            for entry in changed:
                _print_diff_line(entry.status, entry.path)
    else:
        for entry in report.entries:
            if entry.status != "unchanged":
                _print_diff_line(entry.status, entry.path)

    click.echo(
        f"{len(report.added)} added, {len(report.removed)} removed, "
        f"{len(report.modified)} modified, {len(report.unchanged)} unchanged"
    )


def _print_diff_line(status: DiffStatus, path: str) -> None:
    marker, color = _DIFF_STYLES[status]
    click.echo(click.style(f"  {marker} ", fg=color) + path)
