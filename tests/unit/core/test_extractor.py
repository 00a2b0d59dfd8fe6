"""Tests for the extractor's per-file conflict policy, using an in-memory filesystem."""

from pathlib import Path

import pytest

from samuel.core.errors import NoBackupError, PathOutsideProjectError
from samuel.core.extractor import ExtractionPlan, Extractor, PlannedFile
from samuel.core.models import Component
from samuel.gateway.filesystem.fake import FakeFileSystem

SNAPSHOT = Path("/cache/tags/v1.6.0")
PROJECT = Path("/project")

GO = Component(
    type="language",
    name="go",
    source_path="template/.agent/language-guides/go.md",
    dest_path=".agent/language-guides/go.md",
    description="Go",
)
FASTAPI = Component(
    type="framework",
    name="fastapi",
    source_path="template/.agent/skills/fastapi",
    dest_path=".agent/skills/fastapi",
    description="FastAPI",
    is_directory=True,
)

GO_SOURCE = SNAPSHOT / GO.source_path
GO_DEST = PROJECT / GO.dest_path
SKILL_SOURCE = SNAPSHOT / FASTAPI.source_path


def _snapshot_files(go: bytes = b"# Go\n") -> dict[Path, bytes]:
    return {
        GO_SOURCE: go,
        SKILL_SOURCE / "SKILL.md": b"# FastAPI\n",
        SKILL_SOURCE / "references" / "routing.md": b"# Routing\n",
    }


def _plan(fs: FakeFileSystem, *components: Component) -> ExtractionPlan:
    return ExtractionPlan.build(fs=fs, snapshot_root=SNAPSHOT, components=list(components))


class TestExtractionPlan:
    def test_directory_component_expands_to_files(self) -> None:
        """A directory component yields one item per contained file."""
        fs = FakeFileSystem(files=_snapshot_files(), dirs=[PROJECT])

        plan = _plan(fs, FASTAPI)

        assert [item.dest_path for item in plan.items] == [
            ".agent/skills/fastapi/SKILL.md",
            ".agent/skills/fastapi/references/routing.md",
        ]

    def test_no_duplicate_destinations(self) -> None:
        """Selecting the same component twice plans each file once."""
        fs = FakeFileSystem(files=_snapshot_files(), dirs=[PROJECT])

        plan = _plan(fs, GO, GO)

        assert len(plan) == 1

    def test_missing_source_still_planned(self) -> None:
        """A source absent from the snapshot is kept so it can fail visibly."""
        fs = FakeFileSystem(dirs=[PROJECT])

        plan = _plan(fs, GO)

        assert [item.dest_path for item in plan.items] == [GO.dest_path]


class TestApply:
    def test_creates_absent_files_with_parents(self) -> None:
        """Absent destinations are created, parents included."""
        fs = FakeFileSystem(files=_snapshot_files(), dirs=[PROJECT])
        extractor = Extractor(fs=fs, project_dir=PROJECT)

        result = extractor.apply(_plan(fs, GO, FASTAPI), force=False)

        assert [o.status for o in result.outcomes] == ["created", "created", "created"]
        assert fs.files[GO_DEST] == b"# Go\n"
        assert fs.files[PROJECT / ".agent/skills/fastapi/references/routing.md"] == b"# Routing\n"
        assert result.had_failures is False

    def test_copies_permission_bits(self) -> None:
        """The source mode is applied to created files."""
        fs = FakeFileSystem(files=_snapshot_files(), modes={GO_SOURCE: 0o755}, dirs=[PROJECT])

        Extractor(fs=fs, project_dir=PROJECT).apply(_plan(fs, GO), force=False)

        assert fs.mode_of(GO_DEST) == 0o755

    def test_second_apply_is_noop(self) -> None:
        """Re-applying the same plan classifies everything unchanged and writes nothing."""
        fs = FakeFileSystem(files=_snapshot_files(), dirs=[PROJECT])
        extractor = Extractor(fs=fs, project_dir=PROJECT)
        plan = _plan(fs, GO, FASTAPI)
        extractor.apply(plan, force=False)
        writes_after_first = len(fs.written_paths)

        second = extractor.apply(plan, force=False)

        assert {o.status for o in second.outcomes} == {"unchanged"}
        assert len(fs.written_paths) == writes_after_first

    def test_modified_file_skipped_without_force(self) -> None:
        """Local edits are skipped, reported, and left untouched."""
        fs = FakeFileSystem(files={**_snapshot_files(), GO_DEST: b"my notes\n"})
        extractor = Extractor(fs=fs, project_dir=PROJECT)

        result = extractor.apply(_plan(fs, GO), force=False)

        outcome = result.outcomes[0]
        assert outcome.status == "skipped"
        assert outcome.reason is not None and "--force" in outcome.reason
        assert fs.files[GO_DEST] == b"my notes\n"
        assert result.had_failures is False

    def test_force_backs_up_then_overwrites(self) -> None:
        """A forced overwrite captures the exact prior bytes and mode first."""
        fs = FakeFileSystem(
            files={**_snapshot_files(), GO_DEST: b"my notes\n"}, modes={GO_DEST: 0o600}
        )
        extractor = Extractor(fs=fs, project_dir=PROJECT)

        result = extractor.apply(_plan(fs, GO), force=True)

        outcome = result.outcomes[0]
        assert outcome.status == "overwritten"
        assert outcome.backup_path == PROJECT / ".agent/language-guides/go.md.samuel-backup"
        assert fs.files[outcome.backup_path] == b"my notes\n"
        assert fs.mode_of(outcome.backup_path) == 0o600
        assert fs.files[GO_DEST] == b"# Go\n"
        assert fs.written_paths.index(outcome.backup_path) < fs.written_paths.index(GO_DEST)

    def test_repeated_force_keeps_older_backups(self) -> None:
        """A second forced overwrite with different local bytes gets a new backup."""
        fs = FakeFileSystem(
            files={
                **_snapshot_files(),
                GO_DEST: b"second edit\n",
                PROJECT / ".agent/language-guides/go.md.samuel-backup": b"first edit\n",
            }
        )

        result = Extractor(fs=fs, project_dir=PROJECT).apply(_plan(fs, GO), force=True)

        backup = result.outcomes[0].backup_path
        assert backup is not None
        assert backup.name == "go.md.samuel-backup.1"
        assert fs.files[PROJECT / ".agent/language-guides/go.md.samuel-backup"] == b"first edit\n"
        assert fs.files[backup] == b"second edit\n"

    def test_write_failure_does_not_abort_plan(self) -> None:
        """A denied write fails one file and the rest still apply."""
        skill_dest = PROJECT / ".agent/skills/fastapi/SKILL.md"
        fs = FakeFileSystem(files=_snapshot_files(), dirs=[PROJECT], failing_writes=[skill_dest])

        result = Extractor(fs=fs, project_dir=PROJECT).apply(_plan(fs, GO, FASTAPI), force=False)

        statuses = {o.item.dest_path: o.status for o in result.outcomes}
        assert statuses[".agent/skills/fastapi/SKILL.md"] == "failed"
        assert statuses[GO.dest_path] == "created"
        assert statuses[".agent/skills/fastapi/references/routing.md"] == "created"
        assert result.had_failures is True
        assert result.component_succeeded(GO.key) is True
        assert result.component_succeeded(FASTAPI.key) is False

    def test_overwrite_failure_after_backup(self) -> None:
        """If the overwrite fails after the backup, the outcome is backed-up and a failure."""
        fs = FakeFileSystem(
            files={**_snapshot_files(), GO_DEST: b"mine\n"}, failing_writes=[GO_DEST]
        )

        result = Extractor(fs=fs, project_dir=PROJECT).apply(_plan(fs, GO), force=True)

        outcome = result.outcomes[0]
        assert outcome.status == "backed-up"
        assert outcome.is_failure is True
        assert outcome.backup_path is not None
        assert fs.files[outcome.backup_path] == b"mine\n"
        assert fs.files[GO_DEST] == b"mine\n"

    def test_missing_source_fails(self) -> None:
        """A planned file with no source in the snapshot fails."""
        fs = FakeFileSystem(dirs=[PROJECT])

        result = Extractor(fs=fs, project_dir=PROJECT).apply(_plan(fs, GO), force=False)

        assert result.outcomes[0].status == "failed"
        assert result.outcomes[0].reason == "source not found"
        assert result.component_succeeded(GO.key) is False

    def test_destination_directory_fails(self) -> None:
        """A directory sitting at a file destination is a failure, not an overwrite."""
        fs = FakeFileSystem(files=_snapshot_files(), dirs=[GO_DEST])

        result = Extractor(fs=fs, project_dir=PROJECT).apply(_plan(fs, GO), force=True)

        assert result.outcomes[0].status == "failed"

    def test_counts(self) -> None:
        """counts() tallies outcomes by status."""
        fs = FakeFileSystem(files={**_snapshot_files(), GO_DEST: b"# Go\n"})

        result = Extractor(fs=fs, project_dir=PROJECT).apply(_plan(fs, GO, FASTAPI), force=False)

        assert result.counts() == {"unchanged": 1, "created": 2}


class TestRemove:
    def test_removes_directory_contents_and_empty_dirs(self) -> None:
        """Removing a directory component deletes its files and prunes empty dirs."""
        skill_dir = PROJECT / ".agent/skills/fastapi"
        fs = FakeFileSystem(
            files={
                skill_dir / "SKILL.md": b"a",
                skill_dir / "references" / "routing.md": b"b",
                PROJECT / ".agent/skills/react/SKILL.md": b"c",
            }
        )

        result = Extractor(fs=fs, project_dir=PROJECT).remove([FASTAPI.dest_path])

        assert sorted(result.removed_paths) == [
            ".agent/skills/fastapi/SKILL.md",
            ".agent/skills/fastapi/references/routing.md",
        ]
        assert fs.stat(skill_dir) is None
        assert fs.stat(PROJECT / ".agent/skills/react/SKILL.md") is not None

    def test_missing_path_reported(self) -> None:
        """Absent destinations are reported as missing, not failed."""
        fs = FakeFileSystem(dirs=[PROJECT])

        result = Extractor(fs=fs, project_dir=PROJECT).remove([GO.dest_path])

        assert result.outcomes[0].status == "missing"
        assert result.had_failures is False

    def test_protected_paths_kept(self) -> None:
        """Files under a protected path survive."""
        fs = FakeFileSystem(files={GO_DEST: b"go"})

        result = Extractor(fs=fs, project_dir=PROJECT).remove(
            [GO.dest_path], protected=[GO.dest_path]
        )

        assert result.outcomes[0].status == "kept"
        assert GO_DEST in fs.files

    def test_backups_inside_directory_kept(self) -> None:
        """User backups are not deleted with the component."""
        skill_dir = PROJECT / ".agent/skills/fastapi"
        backup = skill_dir / "SKILL.md.samuel-backup"
        fs = FakeFileSystem(files={skill_dir / "SKILL.md": b"a", backup: b"mine"})

        Extractor(fs=fs, project_dir=PROJECT).remove([FASTAPI.dest_path])

        assert fs.files[backup] == b"mine"

    def test_remove_failure_reported(self) -> None:
        """A denied delete is a failure outcome."""
        fs = FakeFileSystem(files={GO_DEST: b"go"}, failing_removes=[GO_DEST])

        result = Extractor(fs=fs, project_dir=PROJECT).remove([GO.dest_path])

        assert result.had_failures is True
        assert GO_DEST in fs.files

    def test_prune_failure_reported_after_files_removed(self) -> None:
        """A directory that cannot be pruned is a failure outcome, not an exception."""
        skill_dir = PROJECT / ".agent/skills/fastapi"
        fs = FakeFileSystem(
            files={skill_dir / "SKILL.md": b"a", skill_dir / "references" / "routing.md": b"b"},
            failing_dir_removes=[skill_dir / "references"],
        )

        result = Extractor(fs=fs, project_dir=PROJECT).remove([FASTAPI.dest_path])

        assert len(result.removed_paths) == 2
        failed = [o.path for o in result.outcomes if o.status == "failed"]
        assert failed == [".agent/skills/fastapi/references"]
        assert result.had_failures is True


class TestRestore:
    def test_restore_round_trip(self) -> None:
        """Restoring after a forced overwrite brings back the user's bytes and clears the backup."""
        fs = FakeFileSystem(
            files={**_snapshot_files(), GO_DEST: b"my notes\n"}, modes={GO_DEST: 0o600}
        )
        extractor = Extractor(fs=fs, project_dir=PROJECT)
        overwritten = extractor.apply(_plan(fs, GO), force=True).outcomes[0]

        consumed = extractor.restore(GO.dest_path)

        assert consumed == overwritten.backup_path
        assert fs.files[GO_DEST] == b"my notes\n"
        assert fs.mode_of(GO_DEST) == 0o600
        assert consumed not in fs.files

    @pytest.mark.parametrize("dest_path", ["../outside.md", "/etc/hosts", "a/../../x"])
    def test_restore_rejects_paths_outside_project(self, dest_path: str) -> None:
        """Paths that resolve outside the project are refused before any backup lookup."""
        fs = FakeFileSystem(files={Path("/outside.md.samuel-backup"): b"x"})

        with pytest.raises(PathOutsideProjectError):
            Extractor(fs=fs, project_dir=PROJECT).restore(dest_path)

        assert fs.files == {Path("/outside.md.samuel-backup"): b"x"}

    def test_restore_without_backup(self) -> None:
        """Restoring a file that was never backed up raises NoBackupError."""
        fs = FakeFileSystem(files={GO_DEST: b"go"})

        with pytest.raises(NoBackupError):
            Extractor(fs=fs, project_dir=PROJECT).restore(GO.dest_path)


def test_planned_file_without_component() -> None:
    """Items without an owning component apply but belong to no component."""
    fs = FakeFileSystem(files={Path("/src/x.md"): b"x"}, dirs=[PROJECT])
    plan = ExtractionPlan(
        items=(PlannedFile(source_path=Path("/src/x.md"), dest_path="x.md", component=None),)
    )

    result = Extractor(fs=fs, project_dir=PROJECT).apply(plan, force=False)

    assert result.outcomes[0].status == "created"
    assert result.component_succeeded(GO.key) is False
