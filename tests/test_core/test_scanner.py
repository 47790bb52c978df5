from __future__ import annotations

from pathlib import Path

import pytest

from verkeeper.core.scanner import VersionScanner
from verkeeper.models import SemanticVersion

V24 = SemanticVersion.parse("2.4")
V25 = SemanticVersion.parse("2.5")

JAVA_SOURCE = """\
package dorkbox;

public class Library {
    // return "9.9";
    public static String getVersion() {
        return "2.4";
    }
}
"""

KOTLIN_SOURCE = """\
package dorkbox

object Library {
    const val version = "2.4"
}
"""

README = """\
# Library

Maven Info
---------
```
<dependency>
    <groupId>com.example</groupId>
    <artifactId>artifact</artifactId>
    <version>2.4</version>
</dependency>
```

Gradle Info
---------
```
dependencies {
    compile 'com.example:artifact:2.4'
}
```

Other dependencies
```
compile 'com.other:thing:2.4'
```
"""


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(text.encode("utf-8"))
    return path


@pytest.mark.unit
class TestSourceFiles:
    """Tests for the getVersion()/inline state machine."""

    def test_java_method(self, tmp_path: Path) -> None:
        source = _write(tmp_path / "Library.java", JAVA_SOURCE)

        occurrences = VersionScanner().scan([source], V24, V25)

        assert len(occurrences) == 1
        assert occurrences[0].line == 6
        assert occurrences[0].version == "2.4"
        assert occurrences[0].replacement == '        return "2.5";'

    def test_kotlin_inline(self, tmp_path: Path) -> None:
        source = _write(tmp_path / "Library.kt", KOTLIN_SOURCE)

        occurrences = VersionScanner().scan([source], V24, V25)

        assert [(o.line, o.replacement) for o in occurrences] == [
            (4, '    const val version = "2.5"')
        ]

    def test_kotlin_method(self, tmp_path: Path) -> None:
        source = _write(
            tmp_path / "Library.kt",
            'object Library {\n    fun getVersion(): String {\n        return "2.4"\n    }\n}\n',
        )

        occurrences = VersionScanner().scan([source], V24, V25)

        assert [o.line for o in occurrences] == [3]

    def test_header_and_value_on_one_line(self, tmp_path: Path) -> None:
        source = _write(
            tmp_path / "Library.java",
            'class A { public String getVersion() { return "2.4"; } }\n',
        )

        occurrences = VersionScanner().scan([source], V24, V25)

        assert occurrences[0].replacement == (
            'class A { public String getVersion() { return "2.5"; } }'
        )

    def test_return_before_header_is_ignored(self, tmp_path: Path) -> None:
        source = _write(
            tmp_path / "Library.java",
            'class A {\n    String name() {\n        return "2.4";\n    }\n}\n',
        )

        assert VersionScanner().scan([source], V24, V25) == []

    def test_non_literal_return_disarms(self, tmp_path: Path) -> None:
        source = _write(
            tmp_path / "Library.java",
            "class A {\n"
            "    public static String getVersion() {\n"
            "        return VERSION;\n"
            "    }\n"
            "    String other() {\n"
            '        return "2.4";\n'
            "    }\n"
            "}\n",
        )

        assert VersionScanner().scan([source], V24, V25) == []

    def test_commented_out_declaration_is_never_reported(self, tmp_path: Path) -> None:
        source = _write(
            tmp_path / "Library.kt",
            '// const val version = "2.4"\n'
            "object A {\n"
            '    //    fun getVersion(): String = "2.4"\n'
            "}\n",
        )

        report = VersionScanner().scan_report([source], V24, V25)

        assert report.occurrences == []
        assert report.discrepancies == []

    def test_only_first_declaration_counts(self, tmp_path: Path) -> None:
        source = _write(
            tmp_path / "Library.kt",
            'const val version = "2.4"\nconst val VERSION = "2.4"\n',
        )

        assert [o.line for o in VersionScanner().scan([source], V24, V25)] == [1]

    def test_other_version_is_discrepancy(self, tmp_path: Path) -> None:
        source = _write(tmp_path / "Library.kt", 'const val version = "2.3"\n')

        report = VersionScanner().scan_report([source], V24, V25)

        assert report.occurrences == []
        assert len(report.discrepancies) == 1
        discrepancy = report.discrepancies[0]
        assert (discrepancy.line, discrepancy.expected, discrepancy.found) == (
            1,
            "2.4",
            "2.3",
        )

    def test_unknown_extension_skipped(self, tmp_path: Path) -> None:
        notes = _write(tmp_path / "notes.txt", 'version = "2.4"\n')

        assert VersionScanner().scan([notes], V24, V25) == []

    def test_new_version_defaults_to_old(self, tmp_path: Path) -> None:
        source = _write(tmp_path / "Library.kt", KOTLIN_SOURCE)

        occurrences = VersionScanner().scan([source], V24)

        assert occurrences[0].replacement == '    const val version = "2.4"'


@pytest.mark.unit
class TestBuildFile:
    def test_first_whole_line_assignment(self, tmp_path: Path) -> None:
        build = _write(
            tmp_path / "build.gradle.kts",
            "plugins {\n"
            '    id("com.dorkbox.VersionUpdate") version "2.4"\n'
            "}\n"
            "\n"
            'version = "2.4"\n',
        )

        occurrences = VersionScanner(build_file=build).scan([build], V24, V25)

        assert [(o.line, o.replacement) for o in occurrences] == [(5, 'version = "2.5"')]

    def test_build_file_detected_by_name(self, tmp_path: Path) -> None:
        build = _write(tmp_path / "build.gradle", "version = '2.4'\n")

        occurrences = VersionScanner().scan([build], V24, V25)

        assert occurrences[0].replacement == "version = '2.5'"

    def test_configured_build_file_only(self, tmp_path: Path) -> None:
        build = _write(tmp_path / "versions.gradle", 'version = "2.4"\n')
        other = _write(tmp_path / "sub" / "build.gradle", 'version = "2.4"\n')

        occurrences = VersionScanner(build_file=build).scan([build, other], V24, V25)

        assert [o.file for o in occurrences] == [build]

    def test_commented_assignment_ignored(self, tmp_path: Path) -> None:
        build = _write(tmp_path / "build.gradle", '// version = "2.4"\n')

        assert VersionScanner().scan([build], V24, V25) == []


@pytest.mark.unit
class TestReadme:
    def test_both_sections_found(self, tmp_path: Path) -> None:
        readme = _write(tmp_path / "README.md", README)

        occurrences = VersionScanner().scan([readme], V24, V25)

        assert [(o.line, o.replacement) for o in occurrences] == [
            (9, "    <version>2.5</version>"),
            (17, "    compile 'com.example:artifact:2.5'"),
        ]

    def test_value_outside_block_ignored(self, tmp_path: Path) -> None:
        readme = _write(
            tmp_path / "readme.md",
            "Maven Info\n<version>2.4</version>\n```\n<version>2.4</version>\n```\n",
        )

        assert [o.line for o in VersionScanner().scan([readme], V24, V25)] == [4]

    def test_block_closed_without_value(self, tmp_path: Path) -> None:
        readme = _write(
            tmp_path / "README.md",
            "Maven Info\n```\nnothing here\n```\n"
            "Gradle Info\n```\ncompile 'a:b:2.4'\n```\n",
        )

        report = VersionScanner().scan_report([readme], V24, V25)

        assert [o.line for o in report.occurrences] == [7]
        assert report.discrepancies == []

    def test_other_dependency_before_project_coordinate(self, tmp_path: Path) -> None:
        readme = _write(
            tmp_path / "README.md",
            "Gradle Info\n```\ndependencies {\n"
            "    compile 'org.slf4j:slf4j-api:1.7.30'\n"
            "    compile 'com.example:artifact:2.4'\n"
            "}\n```\n",
        )

        report = VersionScanner().scan_report([readme], V24, V25)

        assert [(o.line, o.replacement) for o in report.occurrences] == [
            (5, "    compile 'com.example:artifact:2.5'"),
        ]
        assert report.discrepancies == []

    def test_other_maven_version_skipped(self, tmp_path: Path) -> None:
        readme = _write(
            tmp_path / "README.md",
            "Maven Info\n```\n<version>1.7.30</version>\n<version>2.4</version>\n```\n",
        )

        report = VersionScanner().scan_report([readme], V24, V25)

        assert [o.line for o in report.occurrences] == [4]
        assert report.discrepancies == []

    def test_block_without_project_version(self, tmp_path: Path) -> None:
        readme = _write(
            tmp_path / "README.md",
            "Gradle Info\n```\ncompile 'org.slf4j:slf4j-api:1.7.30'\n```\n",
        )

        report = VersionScanner().scan_report([readme], V24, V25)

        assert report.occurrences == []
        assert report.discrepancies == []

    def test_no_sections(self, tmp_path: Path) -> None:
        readme = _write(tmp_path / "README.md", "# Title\n```\n<version>2.4</version>\n```\n")

        assert VersionScanner().scan([readme], V24, V25) == []


@pytest.mark.unit
class TestMultipleFiles:
    def test_order_follows_candidates(self, tmp_path: Path) -> None:
        kotlin = _write(tmp_path / "src" / "Library.kt", KOTLIN_SOURCE)
        build = _write(tmp_path / "build.gradle.kts", 'version = "2.4"\n')
        readme = _write(tmp_path / "README.md", README)

        report = VersionScanner(build_file=build).scan_report(
            [kotlin, build, readme], V24, V25
        )

        assert report.files == [kotlin, build, readme]
        assert len(report.occurrences) == 4

    def test_scan_is_repeatable(self, tmp_path: Path) -> None:
        kotlin = _write(tmp_path / "Library.kt", KOTLIN_SOURCE)
        scanner = VersionScanner()

        assert scanner.scan([kotlin], V24, V25) == scanner.scan([kotlin], V24, V25)
