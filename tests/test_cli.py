from __future__ import annotations

import sys
import shutil
import logging
import subprocess
from pathlib import Path
from typing import Generator, List
from unittest.mock import patch

import pytest
from click.testing import CliRunner, Result

from verkeeper.__version__ import __version__
from verkeeper.cli import cli, main
from verkeeper.commands._display import display_occurrences
from verkeeper.exceptions import VersionUnset
from verkeeper.models import VersionOccurrence
from verkeeper.utils.console import reconfigure_console

KOTLIN_SOURCE = 'object Library {\n    const val version = "2.4"\n}\n'
BUILD_FILE = 'plugins {\n    kotlin("jvm") version "1.9.0"\n}\n\nversion = "2.4"\n'


@pytest.fixture(autouse=True)
def reset_output_state() -> Generator[None, None, None]:
    """Drop handlers and the console bound to the runner's streams."""
    reconfigure_console()
    yield
    logging.getLogger("verkeeper").handlers.clear()
    reconfigure_console()


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "Library.kt").write_text(KOTLIN_SOURCE)
    (tmp_path / "build.gradle.kts").write_text(BUILD_FILE)
    return tmp_path


def _invoke(project_dir: Path, *args: str, input: str = None) -> Result:
    return CliRunner().invoke(
        cli,
        ["--no-color", "-C", str(project_dir), *args],
        input=input,
    )


@pytest.mark.unit
class TestGroup:
    def test_version(self) -> None:
        result = CliRunner().invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert f"verkeeper {__version__}" in result.output

    def test_help_lists_commands(self) -> None:
        result = CliRunner().invoke(cli, ["--help"])

        assert result.exit_code == 0
        for command in ("get", "bump", "tag"):
            assert command in result.output

    def test_invalid_config(self, project_dir: Path) -> None:
        config = project_dir / "broken.toml"
        config.write_text("[verkeeper\n")

        result = _invoke(project_dir, "--config", str(config), "get")

        assert result.exit_code == 1
        assert "Invalid TOML" in result.output

    def test_config_from_environment(self, tmp_path: Path) -> None:
        (tmp_path / "build.gradle").write_text("plugins {}\n")
        config = tmp_path / "custom.toml"
        config.write_text('[verkeeper]\nversion = "9.9"\n')

        result = CliRunner().invoke(
            cli,
            ["--no-color", "-C", str(tmp_path), "get"],
            env={"VERKEEPER_CONFIG": str(config)},
        )

        assert result.exit_code == 1
        assert "none were found" in result.output

    def test_configured_version_must_match_files(self, project_dir: Path) -> None:
        config = project_dir / "custom.toml"
        config.write_text('[verkeeper]\nversion = "9.9"\n')

        result = _invoke(project_dir, "--config", str(config), "get")

        assert result.exit_code == 1
        assert "expected 9.9, got 2.4" in result.output

    def test_project_dir_must_exist(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(cli, ["-C", str(tmp_path / "missing"), "get"])

        assert result.exit_code == 2


@pytest.mark.unit
class TestGetCommand:
    def test_reports_version(self, project_dir: Path) -> None:
        result = _invoke(project_dir, "get")

        assert result.exit_code == 0
        assert "[OK] Version 2.4 declared in 2 place(s)" in result.output

    def test_quiet(self, project_dir: Path) -> None:
        result = _invoke(project_dir, "get", "--quiet")

        assert result.exit_code == 0
        assert result.output.strip() == "2.4"

    def test_mismatch(self, project_dir: Path) -> None:
        (project_dir / "src" / "Library.kt").write_text(KOTLIN_SOURCE.replace("2.4", "2.3"))

        result = _invoke(project_dir, "get")

        assert result.exit_code == 1
        assert "[ERROR] Version information mismatch, expected 2.4, got 2.3" in result.output

    def test_unset(self, tmp_path: Path) -> None:
        (tmp_path / "build.gradle").write_text("plugins {}\n")

        result = _invoke(tmp_path, "get")

        assert result.exit_code == 1
        assert "Project version information is unset" in result.output

    def test_no_build_file(self, tmp_path: Path) -> None:
        result = _invoke(tmp_path, "get")

        assert result.exit_code == 1
        assert "No build file found" in result.output


@pytest.mark.unit
class TestBumpCommand:
    def test_dry_run(self, project_dir: Path) -> None:
        result = _invoke(project_dir, "bump", "patch", "--dry-run")

        assert result.exit_code == 0
        assert "Dry run mode - no changes applied" in result.output
        assert (project_dir / "build.gradle.kts").read_text() == BUILD_FILE

    def test_bump_with_yes(self, project_dir: Path) -> None:
        result = _invoke(project_dir, "bump", "minor", "-y")

        assert result.exit_code == 0
        assert "[OK] Version 2.4 -> 2.5 (2 file(s) updated)" in result.output
        assert 'const val version = "2.5"' in (project_dir / "src" / "Library.kt").read_text()
        assert 'kotlin("jvm") version "1.9.0"' in (project_dir / "build.gradle.kts").read_text()

    def test_confirmation_declined(self, project_dir: Path) -> None:
        result = _invoke(project_dir, "bump", "major", input="n\n")

        assert result.exit_code == 0
        assert (project_dir / "src" / "Library.kt").read_text() == KOTLIN_SOURCE

    def test_confirmation_accepted(self, project_dir: Path) -> None:
        result = _invoke(project_dir, "bump", "major", input="y\n")

        assert result.exit_code == 0
        assert 'version = "3.0"' in (project_dir / "build.gradle.kts").read_text()

    def test_part_is_case_insensitive(self, project_dir: Path) -> None:
        result = _invoke(project_dir, "bump", "PATCH", "-y")

        assert result.exit_code == 0
        assert "2.4 -> 2.5" in result.output

    def test_unknown_part(self, project_dir: Path) -> None:
        result = _invoke(project_dir, "bump", "build")

        assert result.exit_code == 2

    def test_mismatch_changes_nothing(self, project_dir: Path) -> None:
        (project_dir / "src" / "Library.kt").write_text(KOTLIN_SOURCE.replace("2.4", "2.3"))

        result = _invoke(project_dir, "bump", "patch", "-y")

        assert result.exit_code == 1
        assert (project_dir / "build.gradle.kts").read_text() == BUILD_FILE

    def test_rewrite_failure_lists_files(self, project_dir: Path) -> None:
        from verkeeper.exceptions import FileOperationError
        from verkeeper.utils.filesystem import replace_lines as real_replace

        def fail_on_build(path: Path, replacements: dict, *, terminator: str) -> None:
            if Path(path).name == "build.gradle.kts":
                raise FileOperationError("swap failed", file_path=str(path))
            real_replace(path, replacements, terminator=terminator)

        with patch("verkeeper.core.rewriter.replace_lines", side_effect=fail_on_build):
            result = _invoke(project_dir, "bump", "patch", "-y")

        assert result.exit_code == 1
        assert "updated: src/Library.kt" in result.output
        assert "NOT updated: build.gradle.kts" in result.output


@pytest.mark.unit
class TestTagCommand:
    def test_repository_not_found(self, project_dir: Path) -> None:
        with patch("verkeeper.core.git.REPOSITORY_MARKER", ".verkeeper-no-such-marker"):
            result = _invoke(project_dir, "tag")

        assert result.exit_code == 1
        assert "Cannot find '.git' directory" in result.output


def _git(root: Path, *args: str) -> str:
    return subprocess.run(
        ["git", *args],
        cwd=str(root),
        check=True,
        capture_output=True,
        encoding="utf-8",
    ).stdout


@pytest.mark.integration
@pytest.mark.skipif(shutil.which("git") is None, reason="git executable not available")
class TestTagCommandWithGit:
    @pytest.fixture
    def repo(self, project_dir: Path) -> Path:
        for args in (
            ["init", "-q"],
            ["config", "user.email", "dev@example.com"],
            ["config", "user.name", "Dev"],
            ["config", "commit.gpgsign", "false"],
            ["config", "tag.gpgsign", "false"],
            ["add", "-A"],
            ["commit", "-q", "-m", "initial"],
        ):
            _git(project_dir, *args)
        return project_dir

    def test_bump_then_tag(self, repo: Path) -> None:
        assert _invoke(repo, "bump", "patch", "-y").exit_code == 0

        result = _invoke(repo, "tag")

        assert result.exit_code == 0
        assert "[OK] Created tag Version_2.5" in result.output
        assert _git(repo, "tag", "--list").split() == ["Version_2.5"]

    def test_uncommitted_files_listed(self, repo: Path) -> None:
        (repo / "src" / "Other.kt").write_text("object Other\n")
        _git(repo, "add", "src/Other.kt")

        result = _invoke(repo, "tag")

        assert result.exit_code == 1
        assert "Please commit or stash: src/Other.kt" in result.output

    def test_no_commit_leaves_version_files(self, repo: Path) -> None:
        _invoke(repo, "bump", "patch", "-y")

        result = _invoke(repo, "tag", "--no-commit")

        assert result.exit_code == 0
        assert "build.gradle.kts" in _git(repo, "status", "--porcelain")


@pytest.mark.unit
class TestMain:
    """Tests for the exit codes of main()."""

    def _run(self, monkeypatch: pytest.MonkeyPatch, args: List[str]) -> int:
        monkeypatch.setattr(sys, "argv", ["verkeeper", *args])
        return main()

    def test_success(self, monkeypatch: pytest.MonkeyPatch, project_dir: Path) -> None:
        assert self._run(monkeypatch, ["-C", str(project_dir), "get", "-q"]) == 0

    def test_version_flag(self, monkeypatch: pytest.MonkeyPatch) -> None:
        assert self._run(monkeypatch, ["--version"]) == 0

    def test_usage_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        assert self._run(monkeypatch, ["bump"]) == 2

    def test_command_error_exits_one(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        with pytest.raises(SystemExit) as exc_info:
            self._run(monkeypatch, ["-C", str(tmp_path), "get"])

        assert exc_info.value.code == 1

    def test_verkeeper_error(self) -> None:
        with patch("verkeeper.cli.cli", side_effect=VersionUnset()):
            assert main() == 1

    def test_keyboard_interrupt(self) -> None:
        with patch("verkeeper.cli.cli", side_effect=KeyboardInterrupt):
            assert main() == 130

    def test_unexpected_error(self) -> None:
        with patch("verkeeper.cli.cli", side_effect=RuntimeError("boom")):
            assert main() == 1


@pytest.mark.unit
class TestDisplayOccurrences:
    def test_brackets_in_path_printed_literally(
        self, tmp_path: Path, capsys: pytest.CaptureFixture
    ) -> None:
        occurrence = VersionOccurrence(
            file=tmp_path / "lib[/]" / "A.kt",
            line=3,
            version="2.4",
            replacement='const val version = "2.4"',
        )

        display_occurrences([occurrence], tmp_path, title="Version 2.4")

        assert "lib[/]/A.kt" in capsys.readouterr().out

    def test_brackets_in_replacement_printed_literally(
        self, tmp_path: Path, capsys: pytest.CaptureFixture
    ) -> None:
        occurrence = VersionOccurrence(
            file=tmp_path / "A.kt",
            line=1,
            version="2.4",
            replacement='val v = "2.5" // [b]x[/]',
        )

        display_occurrences(
            [occurrence], tmp_path, title="Plan", new_version="2.5"
        )

        assert "[b]x[/]" in capsys.readouterr().out
