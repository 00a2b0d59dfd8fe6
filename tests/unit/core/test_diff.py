"""Tests for content-hash drift classification."""

from pathlib import Path

from samuel.core.catalog import build_default_registry
from samuel.core.diff import collect_files, compute_diff, should_skip
from samuel.core.models import ComponentKey
from samuel.gateway.filesystem.fake import FakeFileSystem

OLD = {
    "CLAUDE.md": b"# v1\n",
    ".agent/language-guides/go.md": b"# Go\n",
    ".agent/workflows/code-review.md": b"# Review v1\n",
}
NEW = {
    "CLAUDE.md": b"# v1\n",
    ".agent/workflows/code-review.md": b"# Review v2\n",
    ".agent/skills/fastapi/SKILL.md": b"# FastAPI\n",
}


def _paths(entries) -> set[str]:
    return {entry.path for entry in entries}


def test_classification() -> None:
    """Each path is classified by presence and content."""
    report = compute_diff(OLD, NEW, from_label="v1", to_label="v2")

    assert _paths(report.added) == {".agent/skills/fastapi/SKILL.md"}
    assert _paths(report.removed) == {".agent/language-guides/go.md"}
    assert _paths(report.modified) == {".agent/workflows/code-review.md"}
    assert _paths(report.unchanged) == {"CLAUDE.md"}
    assert report.has_changes is True


def test_diff_is_mirror_image() -> None:
    """Swapping sides swaps added and removed and keeps the rest."""
    forward = compute_diff(OLD, NEW, from_label="a", to_label="b")
    backward = compute_diff(NEW, OLD, from_label="b", to_label="a")

    assert _paths(forward.added) == _paths(backward.removed)
    assert _paths(forward.removed) == _paths(backward.added)
    assert _paths(forward.modified) == _paths(backward.modified)
    assert _paths(forward.unchanged) == _paths(backward.unchanged)


def test_insertion_order_irrelevant() -> None:
    """Mapping order does not change the report."""
    shuffled = dict(reversed(list(NEW.items())))

    assert compute_diff(OLD, NEW, from_label="a", to_label="b").entries == compute_diff(
        OLD, shuffled, from_label="a", to_label="b"
    ).entries


def test_identical_sets_have_no_changes() -> None:
    """Comparing a set with itself reports only unchanged entries."""
    report = compute_diff(OLD, dict(OLD), from_label="a", to_label="a")

    assert report.has_changes is False
    assert len(report.unchanged) == len(OLD)


def test_group_by_component() -> None:
    """With a registry, entries carry their owning component."""
    report = compute_diff(
        OLD, NEW, from_label="a", to_label="b", registry=build_default_registry()
    )

    groups = report.by_component()

    fastapi = ComponentKey(type="framework", name="fastapi")
    assert _paths(groups[fastapi]) == {".agent/skills/fastapi/SKILL.md"}
    assert _paths(groups[ComponentKey(type="template", name="CLAUDE.md")]) == {"CLAUDE.md"}


def test_should_skip() -> None:
    """VCS metadata, dependencies, backups and the config are excluded."""
    assert should_skip(".git/config")
    assert should_skip(".github/workflows/ci.yml")
    assert should_skip("web/node_modules/x.js")
    assert should_skip("CLAUDE.md.samuel-backup")
    assert should_skip("CLAUDE.md.samuel-backup.2")
    assert should_skip("samuel.toml")
    assert not should_skip("docs/samuel.toml")
    assert not should_skip(".agent/README.md")
    assert not should_skip(".agent/memory/.gitkeep")


class TestCollectFiles:
    def test_collects_whole_tree(self) -> None:
        """Without a scope every non-skipped file is read."""
        root = Path("/project")
        fs = FakeFileSystem(
            files={
                root / "CLAUDE.md": b"a",
                root / "samuel.toml": b"b",
                root / ".git" / "HEAD": b"c",
                root / "CLAUDE.md.samuel-backup": b"d",
            }
        )

        assert collect_files(fs, root) == {"CLAUDE.md": b"a"}

    def test_scope_limits_to_destinations(self) -> None:
        """A scope restricts collection to tracked files and directories."""
        root = Path("/project")
        fs = FakeFileSystem(
            files={
                root / "CLAUDE.md": b"a",
                root / "notes.md": b"b",
                root / ".agent/skills/fastapi/SKILL.md": b"c",
            }
        )

        files = collect_files(
            fs,
            root,
            scope={"CLAUDE.md": False, ".agent/skills/fastapi": True, "AI_INSTRUCTIONS.md": False},
        )

        assert files == {"CLAUDE.md": b"a", ".agent/skills/fastapi/SKILL.md": b"c"}
