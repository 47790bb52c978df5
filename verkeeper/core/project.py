"""Project metadata provider.

A :class:`Project` answers the three questions the versioning engine asks
about the build it runs in: which version is declared, where the build
descriptor lives, and which source directories hold which dialect.

:func:`load_project` builds one from a directory and a
:class:`~verkeeper.config.VerKeeperConfig`. Without an explicit ``version``
in the configuration, the declared version is the first whole-line version
assignment of the build descriptor, exactly as the scanner sees it.
"""

from __future__ import annotations

from pathlib import Path
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple, Union

from verkeeper.core.patterns import Dialect, match_build_line
from verkeeper.exceptions import ConfigError
from verkeeper.config import VerKeeperConfig, load_config
from verkeeper.constants import (
    BUILD_FILE_NAMES,
    DEFAULT_COMMIT_ON_TAG,
    DEFAULT_PROJECT_VERSION,
    DEFAULT_SCAN_README,
)
from verkeeper.utils import (
    find_files,
    find_readme,
    get_logger,
    read_lines,
    strip_terminator,
)

logger = get_logger("project")

PathLike = Union[str, Path]

_SOURCE_DIR_OPTIONS: Mapping[Dialect, str] = {
    Dialect.JAVA: "java_source_dirs",
    Dialect.KOTLIN: "kotlin_source_dirs",
}


@dataclass(frozen=True)
class Project:
    """Build metadata consumed by the versioning engine.

    Attributes:
        directory: Project root directory.
        version: Declared version text; may be blank or the
            ``"unspecified"`` placeholder.
        build_file: Primary build descriptor.
        source_dirs: Source directories per dialect.
        scan_readme: Whether the README next to the build file is scanned.
        commit_on_tag: Whether ``tag`` commits dirty version files first.
    """

    directory: Path
    version: str
    build_file: Path
    source_dirs: Mapping[Dialect, Tuple[Path, ...]] = field(default_factory=dict)
    scan_readme: bool = DEFAULT_SCAN_README
    commit_on_tag: bool = DEFAULT_COMMIT_ON_TAG

    def candidate_files(self) -> List[Path]:
        """Return the deduplicated set of files to scan, in a stable order.

        Source files of each dialect come first, then the build descriptor,
        then the README found next to it. The set is recomputed on every
        call since sources can change between invocations.
        """
        candidates: Dict[Path, None] = {}

        for dialect, directories in self.source_dirs.items():
            for directory in directories:
                for path in find_files(directory, dialect.extensions):
                    candidates.setdefault(path.resolve(), None)

        candidates.setdefault(self.build_file.resolve(), None)

        if self.scan_readme:
            readme = find_readme(self.build_file.parent)
            if readme is not None:
                candidates.setdefault(readme.resolve(), None)

        return list(candidates)


def load_project(
    directory: PathLike = ".",
    config: Optional[VerKeeperConfig] = None,
) -> Project:
    """Build a :class:`Project` for ``directory``.

    Args:
        directory: Project root.
        config: Configuration to use; discovered in ``directory`` if omitted.

    Raises:
        ConfigError: The directory or the build descriptor does not exist.
    """
    root = Path(directory).resolve()
    if not root.is_dir():
        raise ConfigError(f"Project directory not found: {directory}")

    if config is None:
        config = load_config(directory=root)

    build_file = _resolve_build_file(root, config.build_file)

    if config.version is not None:
        version = config.version
        logger.debug("Using configured version %s", version)
    else:
        version = read_declared_version(build_file)

    source_dirs = {
        dialect: tuple(root / d for d in getattr(config, option))
        for dialect, option in _SOURCE_DIR_OPTIONS.items()
    }

    return Project(
        directory=root,
        version=version,
        build_file=build_file,
        source_dirs=source_dirs,
        scan_readme=config.scan_readme,
        commit_on_tag=config.commit_on_tag,
    )


def read_declared_version(build_file: PathLike) -> str:
    """Return the version assigned in a build descriptor.

    Returns:
        The first whole-line ``version = "X"`` value, or the
        ``"unspecified"`` placeholder when there is none.
    """
    for raw in read_lines(build_file):
        found = match_build_line(strip_terminator(raw))
        if found is not None:
            logger.debug("Declared version %s read from %s", found.version, build_file)
            return found.version

    logger.debug("No version declared in %s", build_file)
    return DEFAULT_PROJECT_VERSION


def _resolve_build_file(root: Path, configured: Optional[str]) -> Path:
    if configured is not None:
        path = (root / configured).resolve()
        if not path.is_file():
            raise ConfigError(
                f"Build file not found: {configured}",
                option="build_file",
            )
        return path

    for name in BUILD_FILE_NAMES:
        path = root / name
        if path.is_file():
            return path

    raise ConfigError(
        f"No build file found in {root} (looked for {', '.join(BUILD_FILE_NAMES)})"
    )
