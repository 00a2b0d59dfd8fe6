"""Conflict-aware application of component files to a project directory.

Each planned file is decided independently:

    destination absent               -> created
    destination identical to source  -> unchanged (no write)
    destination differs, force off   -> skipped
    destination differs, force on    -> backed up, then overwritten

Per-file I/O failures are recorded and never abort the rest of the plan.
"""

import logging
from collections.abc import Collection, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from samuel.core.backup import BackupStore, is_backup_path
from samuel.core.content_hash import same_content
from samuel.core.errors import FileConflictError, PathOutsideProjectError
from samuel.core.models import Component, ComponentKey
from samuel.gateway.filesystem.abc import FileSystem

logger = logging.getLogger(__name__)

OutcomeStatus = Literal["created", "unchanged", "skipped", "overwritten", "backed-up", "failed"]

# "backed-up" means the backup was captured but the overwrite itself failed
FAILURE_STATUSES: frozenset[OutcomeStatus] = frozenset(["failed", "backed-up"])


@dataclass(frozen=True)
class PlannedFile:
    """One source-to-destination copy.

    source_path is absolute (inside a cache snapshot); dest_path is relative
    to the project directory.
    """

    source_path: Path
    dest_path: str
    component: Component | None


@dataclass(frozen=True)
class ExtractionPlan:
    """Ordered file copies with no duplicate destinations."""

    items: tuple[PlannedFile, ...]

    @classmethod
    def build(
        cls,
        *,
        fs: FileSystem,
        snapshot_root: Path,
        components: Sequence[Component],
    ) -> "ExtractionPlan":
        """Derive a plan from a cache snapshot and a component selection.

        Directory components expand to one item per contained file. A missing
        source still yields an item so the extractor reports it as failed.
        """
        items: list[PlannedFile] = []
        seen: set[str] = set()

        def add(item: PlannedFile) -> None:
            if item.dest_path in seen:
                return
            seen.add(item.dest_path)
            items.append(item)

        for component in components:
            source = snapshot_root / component.source_path
            source_stat = fs.stat(source)
            if source_stat is not None and source_stat.is_dir:
                for relative in fs.list_files(source):
                    add(
                        PlannedFile(
                            source_path=source / relative,
                            dest_path=f"{component.dest_path}/{relative.as_posix()}",
                            component=component,
                        )
                    )
            else:
                add(
                    PlannedFile(
                        source_path=source, dest_path=component.dest_path, component=component
                    )
                )
        return cls(items=tuple(items))

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class FileOutcome:
    item: PlannedFile
    status: OutcomeStatus
    reason: str | None = None
    backup_path: Path | None = None

    @property
    def is_failure(self) -> bool:
        return self.status in FAILURE_STATUSES


@dataclass(frozen=True)
class ExtractionResult:
    """One outcome per planned file, in plan order."""

    outcomes: tuple[FileOutcome, ...]

    @property
    def had_failures(self) -> bool:
        return any(outcome.is_failure for outcome in self.outcomes)

    @property
    def fully_applied(self) -> bool:
        """No failures and no files left behind as local conflicts."""
        return not self.had_failures and not self.with_status("skipped")

    def with_status(self, status: OutcomeStatus) -> list[FileOutcome]:
        return [outcome for outcome in self.outcomes if outcome.status == status]

    def counts(self) -> dict[OutcomeStatus, int]:
        counts: dict[OutcomeStatus, int] = {}
        for outcome in self.outcomes:
            counts[outcome.status] = counts.get(outcome.status, 0) + 1
        return counts

    def component_succeeded(self, key: ComponentKey) -> bool:
        """Check that a component had files in the plan and none of them failed."""
        owned = [
            outcome
            for outcome in self.outcomes
            if outcome.item.component is not None and outcome.item.component.key == key
        ]
        return bool(owned) and not any(outcome.is_failure for outcome in owned)


RemovalStatus = Literal["removed", "missing", "kept", "failed"]


@dataclass(frozen=True)
class RemovalOutcome:
    path: str
    status: RemovalStatus
    reason: str | None = None


@dataclass(frozen=True)
class RemovalResult:
    outcomes: tuple[RemovalOutcome, ...]

    @property
    def had_failures(self) -> bool:
        return any(outcome.status == "failed" for outcome in self.outcomes)

    @property
    def removed_paths(self) -> list[str]:
        return [outcome.path for outcome in self.outcomes if outcome.status == "removed"]


def _is_within(path: str, parent: str) -> bool:
    return path == parent or path.startswith(parent + "/")


class Extractor:
    """Applies extraction plans and removals under the project directory."""

    def __init__(
        self,
        *,
        fs: FileSystem,
        project_dir: Path,
        backups: BackupStore | None = None,
    ) -> None:
        self._fs = fs
        self._project_dir = project_dir
        self._backups = backups if backups is not None else BackupStore(fs)

    @property
    def project_dir(self) -> Path:
        return self._project_dir

    def apply(self, plan: ExtractionPlan, *, force: bool) -> ExtractionResult:
        """Apply every planned file, collecting one outcome per file."""
        outcomes = tuple(self._apply_file(item, force=force) for item in plan.items)
        result = ExtractionResult(outcomes=outcomes)
        logger.debug("Extraction finished: %s", result.counts())
        return result

    def restore(self, dest_path: str) -> Path:
        """Restore the newest backup of a project file.

        Returns:
            Path of the backup that was consumed

        Raises:
            PathOutsideProjectError: If dest_path resolves outside the project
            NoBackupError: If the file has no backup
        """
        target = self._project_dir / dest_path
        root = self._project_dir.resolve()
        resolved = target.resolve()
        if resolved != root and root not in resolved.parents:
            raise PathOutsideProjectError(dest_path, self._project_dir)
        return self._backups.restore(target)

    def remove(
        self, dest_paths: Sequence[str], *, protected: Collection[str] = ()
    ) -> RemovalResult:
        """Delete destination paths, recursing into directories.

        Files at or beneath a protected path are kept. Backup files inside a
        removed directory are user data and are kept as well.
        """
        outcomes: list[RemovalOutcome] = []
        for dest_path in dest_paths:
            target = self._project_dir / dest_path
            try:
                target_stat = self._fs.stat(target)
                is_dir = target_stat is not None and target_stat.is_dir
                contained = self._fs.list_files(target) if is_dir else []
            except OSError as e:
                logger.warning("Cannot inspect %s: %s", dest_path, e)
                outcomes.append(RemovalOutcome(path=dest_path, status="failed", reason=str(e)))
                continue
            if target_stat is None:
                outcomes.append(RemovalOutcome(path=dest_path, status="missing"))
                continue

            if not target_stat.is_dir:
                outcomes.append(self._remove_file(dest_path, protected))
                continue

            for relative in contained:
                file_path = f"{dest_path}/{relative.as_posix()}"
                if is_backup_path(file_path):
                    outcomes.append(RemovalOutcome(path=file_path, status="kept", reason="backup"))
                    continue
                outcomes.append(self._remove_file(file_path, protected))
            outcomes.extend(self._prune_empty_dirs(target, contained, dest_path))
        return RemovalResult(outcomes=tuple(outcomes))

    def _remove_file(self, dest_path: str, protected: Collection[str]) -> RemovalOutcome:
        if any(_is_within(dest_path, p) for p in protected):
            return RemovalOutcome(
                path=dest_path, status="kept", reason="owned by another component"
            )
        try:
            self._fs.remove_file(self._project_dir / dest_path)
        except OSError as e:
            logger.warning("Failed to remove %s: %s", dest_path, e)
            return RemovalOutcome(path=dest_path, status="failed", reason=str(e))
        logger.debug("Removed %s", dest_path)
        return RemovalOutcome(path=dest_path, status="removed")

    def _prune_empty_dirs(
        self, root: Path, contained: Sequence[Path], dest_path: str
    ) -> list[RemovalOutcome]:
        directories = {root}
        for relative in contained:
            directories.update((root / relative).parents)
        failures: list[RemovalOutcome] = []
        # Deepest first so parents are empty by the time they are visited
        for directory in sorted(directories, key=lambda p: len(p.parts), reverse=True):
            if directory != root and root not in directory.parents:
                continue
            try:
                self._fs.remove_dir_if_empty(directory)
            except OSError as e:
                relative = directory.relative_to(root).as_posix()
                path = dest_path if relative == "." else f"{dest_path}/{relative}"
                logger.warning("Failed to remove directory %s: %s", path, e)
                failures.append(RemovalOutcome(path=path, status="failed", reason=str(e)))
        return failures

    def _apply_file(self, item: PlannedFile, *, force: bool) -> FileOutcome:
        target = self._project_dir / item.dest_path
        try:
            content = self._fs.read_bytes(item.source_path)
            source_stat = self._fs.stat(item.source_path)
        except FileNotFoundError:
            return FileOutcome(item=item, status="failed", reason="source not found")
        except OSError as e:
            return FileOutcome(item=item, status="failed", reason=f"cannot read source: {e}")
        mode = source_stat.mode if source_stat is not None else None

        try:
            existing = self._fs.stat(target)
            if existing is None:
                self._fs.make_dirs(target.parent)
                self._fs.write_bytes(target, content, mode=mode)
                logger.debug("Created %s", item.dest_path)
                return FileOutcome(item=item, status="created")
            if existing.is_dir:
                return FileOutcome(item=item, status="failed", reason="destination is a directory")
            if same_content(self._fs.read_bytes(target), content):
                return FileOutcome(item=item, status="unchanged")
        except OSError as e:
            logger.warning("Failed to write %s: %s", item.dest_path, e)
            return FileOutcome(item=item, status="failed", reason=str(e))

        if not force:
            logger.debug("Skipping locally modified %s", item.dest_path)
            conflict = FileConflictError(item.dest_path)
            return FileOutcome(item=item, status="skipped", reason=str(conflict))

        try:
            backup = self._backups.create(target)
        except OSError as e:
            logger.warning("Failed to back up %s: %s", item.dest_path, e)
            return FileOutcome(item=item, status="failed", reason=f"backup failed: {e}")

        try:
            self._fs.write_bytes(target, content, mode=mode)
        except OSError as e:
            logger.warning("Failed to overwrite %s after backup: %s", item.dest_path, e)
            return FileOutcome(item=item, status="backed-up", reason=str(e), backup_path=backup)
        logger.debug("Overwrote %s (backup at %s)", item.dest_path, backup)
        return FileOutcome(item=item, status="overwritten", backup_path=backup)
