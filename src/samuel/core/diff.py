"""Content-hash based drift classification between two file sets.

A file set maps a project-relative POSIX path to its bytes. Classification
depends only on content, so diff(a, b) and diff(b, a) are mirror images.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from samuel.core.backup import is_backup_path
from samuel.core.content_hash import compute_content_hash
from samuel.core.models import ComponentKey
from samuel.core.registry import Registry
from samuel.gateway.filesystem.abc import FileSystem

DiffStatus = Literal["added", "removed", "modified", "unchanged"]

# Root-level files that belong to the tool, not to the template tree
_ROOT_SKIP_FILES = frozenset(["samuel.toml", ".samuel.toml"])
_SKIP_DIRS = frozenset([".git", ".github", "node_modules"])


@dataclass(frozen=True)
class DiffEntry:
    path: str
    status: DiffStatus
    component: ComponentKey | None = None


@dataclass(frozen=True)
class DiffReport:
    """Every classified path for one comparison, sorted by path."""

    from_label: str
    to_label: str
    entries: tuple[DiffEntry, ...]

    def with_status(self, status: DiffStatus) -> list[DiffEntry]:
        return [entry for entry in self.entries if entry.status == status]

    @property
    def added(self) -> list[DiffEntry]:
        return self.with_status("added")

    @property
    def removed(self) -> list[DiffEntry]:
        return self.with_status("removed")

    @property
    def modified(self) -> list[DiffEntry]:
        return self.with_status("modified")

    @property
    def unchanged(self) -> list[DiffEntry]:
        return self.with_status("unchanged")

    @property
    def has_changes(self) -> bool:
        return any(entry.status != "unchanged" for entry in self.entries)

    def by_component(self) -> dict[ComponentKey | None, list[DiffEntry]]:
        """Group entries by owning component; unowned paths group under None."""
        groups: dict[ComponentKey | None, list[DiffEntry]] = {}
        for entry in self.entries:
            groups.setdefault(entry.component, []).append(entry)
        return groups


def _classify(source_hash: str | None, target_hash: str | None) -> DiffStatus:
    if source_hash is None:
        return "added"
    if target_hash is None:
        return "removed"
    if source_hash != target_hash:
        return "modified"
    return "unchanged"


def compute_diff(
    source: Mapping[str, bytes],
    target: Mapping[str, bytes],
    *,
    from_label: str,
    to_label: str,
    registry: Registry | None = None,
) -> DiffReport:
    """Classify every path in the union of source and target.

    Args:
        source: File set on the "from" side (older version or live project)
        target: File set on the "to" side
        from_label: Display label for source
        to_label: Display label for target
        registry: If given, attach the owning component to each entry

    Returns:
        DiffReport with entries sorted by path
    """
    entries: list[DiffEntry] = []
    for path in sorted(set(source) | set(target)):
        source_hash = compute_content_hash(source[path]) if path in source else None
        target_hash = compute_content_hash(target[path]) if path in target else None
        owner = registry.owner_of(path) if registry is not None else None
        entries.append(
            DiffEntry(
                path=path,
                status=_classify(source_hash, target_hash),
                component=owner.key if owner is not None else None,
            )
        )
    return DiffReport(from_label=from_label, to_label=to_label, entries=tuple(entries))


def should_skip(relative_path: str) -> bool:
    """Check whether a path is excluded from file sets.

    Excludes VCS metadata, node_modules, backup files and the project config.
    """
    parts = relative_path.split("/")
    if any(part in _SKIP_DIRS for part in parts):
        return True
    if is_backup_path(relative_path):
        return True
    return len(parts) == 1 and parts[0] in _ROOT_SKIP_FILES


def collect_files(
    fs: FileSystem,
    root: Path,
    *,
    scope: Mapping[str, bool] | None = None,
) -> dict[str, bytes]:
    """Read a directory tree into a file set.

    Args:
        fs: Filesystem gateway
        root: Directory to read
        scope: If given, only collect these destination paths. A True value
            marks a directory whose contents are collected recursively.

    Returns:
        Mapping of POSIX relative path to content
    """
    files: dict[str, bytes] = {}
    if scope is None:
        candidates = [relative.as_posix() for relative in fs.list_files(root)]
    else:
        candidates = []
        for dest_path, is_directory in scope.items():
            if is_directory:
                candidates.extend(
                    f"{dest_path}/{relative.as_posix()}"
                    for relative in fs.list_files(root / dest_path)
                )
            else:
                candidates.append(dest_path)

    for relative_path in candidates:
        if relative_path in files or should_skip(relative_path):
            continue
        path = root / relative_path
        file_stat = fs.stat(path)
        if file_stat is None or file_stat.is_dir:
            continue
        files[relative_path] = fs.read_bytes(path)
    return files
