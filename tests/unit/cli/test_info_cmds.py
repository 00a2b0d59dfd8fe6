"""Tests for `samuel doctor`, `samuel list` and `samuel cache`."""

import shutil
from pathlib import Path

from click.testing import CliRunner

from samuel.cli.cli import cli
from samuel.core.context import SamuelContext
from tests.test_utils.context_builders import build_context


def _initialized(tmp_path: Path) -> SamuelContext:
    ctx = build_context(tmp_path)
    result = CliRunner().invoke(cli, ["init", "--languages", "go"], obj=ctx)
    assert result.exit_code == 0, result.output
    return ctx


class TestDoctor:
    def test_healthy(self, tmp_path: Path) -> None:
        """A fresh install passes."""
        ctx = _initialized(tmp_path)

        result = CliRunner().invoke(cli, ["doctor"], obj=ctx)

        assert result.exit_code == 0, result.output
        assert "All tracked files are present" in result.output

    def test_missing_files_reported(self, tmp_path: Path) -> None:
        """Deleted guide files are reported and not recreated."""
        ctx = _initialized(tmp_path)
        go_md = ctx.project_dir / ".agent/language-guides/go.md"
        go_md.unlink()

        result = CliRunner().invoke(cli, ["doctor"], obj=ctx)

        assert result.exit_code == 1
        assert "language/go is recorded but" in result.output
        assert not go_md.exists()

    def test_directory_replaced_by_file_reported(self, tmp_path: Path) -> None:
        """A tracked directory turned into a regular file is an issue, not a crash."""
        ctx = _initialized(tmp_path)
        skills = ctx.project_dir / ".agent/skills"
        shutil.rmtree(skills)
        skills.write_text("oops\n", encoding="utf-8")

        result = CliRunner().invoke(cli, ["doctor"], obj=ctx)

        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert ".agent/skills/README.md" in result.output


class TestList:
    def test_list_all_marks_installed(self, tmp_path: Path) -> None:
        """Installed components are marked."""
        ctx = _initialized(tmp_path)

        result = CliRunner().invoke(cli, ["list"], obj=ctx)

        assert result.exit_code == 0, result.output
        assert "LANGUAGES:" in result.output
        assert "✓ go" in result.output
        assert "✓ python" not in result.output

    def test_list_installed_only(self, tmp_path: Path) -> None:
        """--installed hides components that are not installed."""
        ctx = _initialized(tmp_path)

        result = CliRunner().invoke(cli, ["list", "--installed", "--type", "lang"], obj=ctx)

        assert result.exit_code == 0, result.output
        assert "go" in result.output
        assert "python" not in result.output

    def test_list_without_project(self, tmp_path: Path) -> None:
        """Listing works before init."""
        result = CliRunner().invoke(cli, ["list", "--type", "fw"], obj=build_context(tmp_path))

        assert result.exit_code == 0, result.output
        assert "fastapi" in result.output

    def test_list_unknown_type(self, tmp_path: Path) -> None:
        """An unknown type filter is an error."""
        result = CliRunner().invoke(cli, ["list", "--type", "x"], obj=build_context(tmp_path))

        assert result.exit_code == 1


class TestCache:
    def test_info_and_clear(self, tmp_path: Path) -> None:
        """cache info lists entries; cache clear removes them."""
        ctx = _initialized(tmp_path)
        runner = CliRunner()

        info = runner.invoke(cli, ["cache", "info"], obj=ctx)
        assert info.exit_code == 0, info.output
        assert "v1.6.0 (tag)" in info.output

        cleared = runner.invoke(cli, ["cache", "clear"], obj=ctx)
        assert cleared.exit_code == 0, cleared.output

        after = runner.invoke(cli, ["cache", "info"], obj=ctx)
        assert "No cached versions" in after.output
