"""Tests for `samuel init`."""

from pathlib import Path

from click.testing import CliRunner

from samuel.cli.cli import cli
from samuel.core.models import ComponentKey
from samuel.core.project_config import load_project_config
from samuel.gateway.filesystem.real import RealFileSystem
from tests.test_utils.context_builders import build_context, build_remote


def test_init_minimal_preset(tmp_path: Path) -> None:
    """The minimal preset installs core files and workflows from the latest release."""
    ctx = build_context(tmp_path)

    result = CliRunner().invoke(cli, ["init", "--preset", "minimal"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Initialized at v1.6.0" in result.output
    project = ctx.project_dir
    assert (project / "CLAUDE.md").exists()
    assert (project / ".agent/workflows/code-review.md").exists()
    assert not (project / ".agent/language-guides/go.md").exists()
    config = load_project_config(RealFileSystem(), project)
    assert config is not None
    assert config.installed_components == (ComponentKey(type="workflow", name="code-review"),)


def test_init_with_languages(tmp_path: Path) -> None:
    """Explicit languages are installed alongside core files."""
    ctx = build_context(tmp_path)

    result = CliRunner().invoke(
        cli, ["init", "--languages", "go", "--frameworks", "fastapi", "--version", "1.5.0"], obj=ctx
    )

    assert result.exit_code == 0, result.output
    project = ctx.project_dir
    assert (project / ".agent/language-guides/go.md").read_text(encoding="utf-8") == "# Go 1.5\n"
    assert (project / ".agent/skills/fastapi/references/routing.md").exists()


def test_init_rerun_is_idempotent(tmp_path: Path) -> None:
    """Running init twice leaves every file unchanged."""
    ctx = build_context(tmp_path)
    runner = CliRunner()
    runner.invoke(cli, ["init", "--preset", "minimal"], obj=ctx)

    result = runner.invoke(cli, ["init", "--preset", "minimal"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "created" not in result.output
    assert "unchanged" in result.output


def test_init_keeps_local_edit_without_force(tmp_path: Path) -> None:
    """A modified file is skipped and the user is told about --force."""
    ctx = build_context(tmp_path)
    (ctx.project_dir / "CLAUDE.md").write_text("my rules\n", encoding="utf-8")

    result = CliRunner().invoke(cli, ["init", "--preset", "minimal"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "--force" in result.output
    assert (ctx.project_dir / "CLAUDE.md").read_text(encoding="utf-8") == "my rules\n"


def test_init_unknown_language(tmp_path: Path) -> None:
    """Unknown names fail before anything is fetched."""
    remote = build_remote()
    ctx = build_context(tmp_path, remote)

    result = CliRunner().invoke(cli, ["init", "--languages", "cobol"], obj=ctx)

    assert result.exit_code == 1
    assert "Unknown language: cobol" in result.output
    assert remote.fetches == []


def test_init_unknown_preset(tmp_path: Path) -> None:
    """Unknown presets list the available ones."""
    ctx = build_context(tmp_path)

    result = CliRunner().invoke(cli, ["init", "--preset", "huge"], obj=ctx)

    assert result.exit_code == 1
    assert "available: minimal" in result.output


def test_init_network_failure(tmp_path: Path) -> None:
    """A failed download aborts with exit code 1 and writes no config."""
    ctx = build_context(tmp_path, build_remote(failing_refs=["v1.6.0"]))

    result = CliRunner().invoke(cli, ["init", "--preset", "minimal"], obj=ctx)

    assert result.exit_code == 1
    assert "connection reset" in result.output
    assert not (ctx.project_dir / "samuel.toml").exists()
