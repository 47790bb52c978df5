from __future__ import annotations

from pathlib import Path

import pytest

from verkeeper.config import VerKeeperConfig
from verkeeper.core.patterns import Dialect
from verkeeper.core.project import Project, load_project, read_declared_version
from verkeeper.exceptions import ConfigError


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A small Gradle project with Java, Kotlin and a README."""
    (tmp_path / "src" / "dorkbox").mkdir(parents=True)
    (tmp_path / "test").mkdir()
    (tmp_path / "build.gradle.kts").write_text(
        'plugins {\n    id("x") version "1.0"\n}\n\nversion = "2.4"\n'
    )
    (tmp_path / "src" / "dorkbox" / "Library.java").write_text("class Library {}\n")
    (tmp_path / "src" / "dorkbox" / "Util.kt").write_text("object Util\n")
    (tmp_path / "test" / "LibraryTest.kt").write_text("class LibraryTest\n")
    (tmp_path / "README.md").write_text("# Library\n")
    return tmp_path


@pytest.mark.unit
class TestLoadProject:
    def test_defaults(self, project_dir: Path) -> None:
        project = load_project(project_dir, VerKeeperConfig())

        assert project.directory == project_dir.resolve()
        assert project.version == "2.4"
        assert project.build_file.name == "build.gradle.kts"
        assert project.source_dirs[Dialect.JAVA] == (
            project.directory / "src",
            project.directory / "test",
        )
        assert project.scan_readme is True
        assert project.commit_on_tag is True

    def test_configured_version_wins(self, project_dir: Path) -> None:
        project = load_project(project_dir, VerKeeperConfig(version="9.9.9"))

        assert project.version == "9.9.9"

    def test_groovy_build_file(self, tmp_path: Path) -> None:
        (tmp_path / "build.gradle").write_text("version = '1.0.0'\n")

        project = load_project(tmp_path, VerKeeperConfig())

        assert project.build_file.name == "build.gradle"
        assert project.version == "1.0.0"

    def test_kotlin_script_preferred(self, tmp_path: Path) -> None:
        (tmp_path / "build.gradle").write_text("version = '1.0.0'\n")
        (tmp_path / "build.gradle.kts").write_text('version = "2.0.0"\n')

        assert load_project(tmp_path, VerKeeperConfig()).version == "2.0.0"

    def test_configured_build_file(self, tmp_path: Path) -> None:
        (tmp_path / "gradle").mkdir()
        (tmp_path / "gradle" / "versions.gradle").write_text('version = "3.1"\n')

        project = load_project(
            tmp_path, VerKeeperConfig(build_file="gradle/versions.gradle")
        )

        assert project.build_file == (tmp_path / "gradle" / "versions.gradle").resolve()
        assert project.version == "3.1"

    def test_configured_build_file_missing(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_project(tmp_path, VerKeeperConfig(build_file="nope.gradle"))

        assert exc_info.value.option == "build_file"

    def test_no_build_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="No build file found"):
            load_project(tmp_path, VerKeeperConfig())

    def test_missing_directory(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Project directory not found"):
            load_project(tmp_path / "missing", VerKeeperConfig())

    def test_discovers_config(self, project_dir: Path) -> None:
        (project_dir / "verkeeper.toml").write_text(
            '[verkeeper]\nkotlin_source_dirs = ["src/main/kotlin"]\nscan_readme = false\n'
        )

        project = load_project(project_dir)

        assert project.source_dirs[Dialect.KOTLIN] == (
            project.directory / "src" / "main" / "kotlin",
        )
        assert project.scan_readme is False


@pytest.mark.unit
class TestReadDeclaredVersion:
    def test_unspecified_when_absent(self, tmp_path: Path) -> None:
        build = tmp_path / "build.gradle"
        build.write_text("plugins {}\n")

        assert read_declared_version(build) == "unspecified"

    def test_ignores_comments_and_plugin_versions(self, tmp_path: Path) -> None:
        build = tmp_path / "build.gradle.kts"
        build.write_text(
            '// version = "0.1"\nid("a") version "0.2"\nproject.version = "0.3"\n'
        )

        assert read_declared_version(build) == "0.3"


@pytest.mark.unit
class TestCandidateFiles:
    def test_order_and_content(self, project_dir: Path) -> None:
        project = load_project(project_dir, VerKeeperConfig())
        root = project.directory

        assert project.candidate_files() == [
            root / "src" / "dorkbox" / "Library.java",
            root / "src" / "dorkbox" / "Util.kt",
            root / "test" / "LibraryTest.kt",
            root / "build.gradle.kts",
            root / "README.md",
        ]

    def test_no_duplicates_for_overlapping_dirs(self, project_dir: Path) -> None:
        config = VerKeeperConfig(
            java_source_dirs=["src", "src/dorkbox"],
            kotlin_source_dirs=[],
        )

        candidates = load_project(project_dir, config).candidate_files()

        assert len(candidates) == len(set(candidates))
        assert [p.name for p in candidates] == [
            "Library.java",
            "build.gradle.kts",
            "README.md",
        ]

    def test_readme_can_be_skipped(self, project_dir: Path) -> None:
        config = VerKeeperConfig(scan_readme=False)

        candidates = load_project(project_dir, config).candidate_files()

        assert all(p.name != "README.md" for p in candidates)

    def test_missing_source_dirs_skipped(self, tmp_path: Path) -> None:
        (tmp_path / "build.gradle").write_text("version = '1.0'\n")
        project = Project(
            directory=tmp_path,
            version="1.0",
            build_file=tmp_path / "build.gradle",
            source_dirs={Dialect.JAVA: (tmp_path / "missing",)},
        )

        assert project.candidate_files() == [(tmp_path / "build.gradle").resolve()]
