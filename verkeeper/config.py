"""Configuration file loader for verkeeper.

Handles discovery, loading, parsing, and validation of configuration files.
Supports two formats:

- ``verkeeper.toml`` — settings under a ``[verkeeper]`` table
- ``pyproject.toml`` — settings under a ``[tool.verkeeper]`` table

Discovery order:

1. Explicit path from ``--config`` or ``VERKEEPER_CONFIG``
2. ``verkeeper.toml`` in the project directory
3. ``pyproject.toml`` with a ``[tool.verkeeper]`` section in the project
   directory

Configuration precedence: defaults < config file < CLI args.

Example (``verkeeper.toml``)::

    [verkeeper]
    build_file = "build.gradle.kts"
    java_source_dirs = ["src/main/java"]
    kotlin_source_dirs = ["src/main/kotlin"]
    scan_readme = true
    commit_on_tag = true
"""

from __future__ import annotations

import tomli as tomllib
from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from verkeeper.exceptions import ConfigError
from verkeeper.utils.logger import get_logger
from verkeeper.constants import (
    DEFAULT_COMMIT_ON_TAG,
    DEFAULT_SCAN_README,
    DEFAULT_SOURCE_DIRS,
)

logger = get_logger("config")

CONFIG_FILE_NAME = "verkeeper.toml"
PYPROJECT_FILE_NAME = "pyproject.toml"


@dataclass
class VerKeeperConfig:
    """Parsed and validated verkeeper configuration.

    All fields have defaults, so empty config files are valid.

    Attributes:
        version: Declared project version. When ``None`` the version is read
            from the build descriptor.
        build_file: Build descriptor path, relative to the project directory.
            When ``None`` the first of ``build.gradle.kts`` / ``build.gradle``
            found is used.
        java_source_dirs: Directories searched for ``.java`` files.
        kotlin_source_dirs: Directories searched for ``.kt`` files.
        scan_readme: Scan the ``README.md`` next to the build descriptor.
        commit_on_tag: Commit modified version files before tagging.
        source_path: Path to loaded config file, or ``None`` if using defaults.
    """

    version: Optional[str] = None
    build_file: Optional[str] = None
    java_source_dirs: List[str] = field(default_factory=lambda: list(DEFAULT_SOURCE_DIRS))
    kotlin_source_dirs: List[str] = field(default_factory=lambda: list(DEFAULT_SOURCE_DIRS))
    scan_readme: bool = DEFAULT_SCAN_README
    commit_on_tag: bool = DEFAULT_COMMIT_ON_TAG

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return configuration as dictionary for debug logging."""
        return {
            "version": self.version,
            "build_file": self.build_file,
            "java_source_dirs": list(self.java_source_dirs),
            "kotlin_source_dirs": list(self.kotlin_source_dirs),
            "scan_readme": self.scan_readme,
            "commit_on_tag": self.commit_on_tag,
        }


def discover_config_file(
    explicit_path: Optional[Path] = None,
    directory: Optional[Path] = None,
) -> Optional[Path]:
    """Find the configuration file to load.

    Args:
        explicit_path: Explicit config path. If provided, must exist.
        directory: Project directory searched for config files; defaults to
            the current working directory.

    Returns:
        Resolved path to config file, or ``None`` if not found.

    Raises:
        ConfigError: Explicit path provided but does not exist.
    """
    if explicit_path is not None:
        resolved = Path(explicit_path).resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    root = Path(directory) if directory is not None else Path.cwd()

    candidate = root / CONFIG_FILE_NAME
    if candidate.is_file():
        logger.debug("Found %s: %s", CONFIG_FILE_NAME, candidate)
        return candidate

    pyproject = root / PYPROJECT_FILE_NAME
    if pyproject.is_file() and _pyproject_has_verkeeper_section(pyproject):
        logger.debug("Found [tool.verkeeper] in pyproject.toml: %s", pyproject)
        return pyproject

    logger.debug("No configuration file found in %s", root)
    return None


def _pyproject_has_verkeeper_section(path: Path) -> bool:
    """Check whether ``pyproject.toml`` has a ``[tool.verkeeper]`` table.

    Parse errors count as "no section" so a broken unrelated
    ``pyproject.toml`` does not stop discovery.
    """
    try:
        raw = _read_toml(path)
    except ConfigError:
        return False
    return "verkeeper" in raw.get("tool", {})


def load_config(
    config_path: Optional[Path] = None,
    directory: Optional[Path] = None,
) -> VerKeeperConfig:
    """Load and validate verkeeper configuration.

    Args:
        config_path: Explicit path to config file. If ``None``, uses
            auto-discovery (see :func:`discover_config_file`).
        directory: Project directory used for auto-discovery.

    Returns:
        Validated :class:`VerKeeperConfig` with values from file or defaults.

    Raises:
        ConfigError: File cannot be parsed, has unknown keys, or invalid values.
    """
    resolved = discover_config_file(config_path, directory)

    if resolved is None:
        logger.debug("No config file found, using defaults")
        return VerKeeperConfig()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    if resolved.name == PYPROJECT_FILE_NAME:
        section = raw.get("tool", {}).get("verkeeper", {})
    else:
        section = raw.get("verkeeper", {})

    if not section:
        logger.debug("Config file found but no verkeeper section, using defaults")
        return VerKeeperConfig(source_path=resolved)

    config = _parse_section(section, config_path=str(resolved))
    config.source_path = resolved

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigError: File cannot be read or is not valid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


_STRING_OPTIONS = ("version", "build_file")
_LIST_OPTIONS = ("java_source_dirs", "kotlin_source_dirs")
_BOOL_OPTIONS = ("scan_readme", "commit_on_tag")


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> VerKeeperConfig:
    """Parse and validate a ``[verkeeper]`` / ``[tool.verkeeper]`` table.

    Raises:
        ConfigError: Unknown keys or values of the wrong type.
    """
    config = VerKeeperConfig()

    known = set(_STRING_OPTIONS) | set(_LIST_OPTIONS) | set(_BOOL_OPTIONS)
    unknown = set(section.keys()) - known
    if unknown:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown))}",
            config_path=config_path,
        )

    for option in _STRING_OPTIONS:
        if option in section:
            value = section[option]
            if not isinstance(value, str):
                raise ConfigError(
                    f"{option} must be a string, got {type(value).__name__}",
                    config_path=config_path,
                    option=option,
                )
            setattr(config, option, value)

    for option in _LIST_OPTIONS:
        if option in section:
            value = section[option]
            if not isinstance(value, list) or not all(
                isinstance(item, str) for item in value
            ):
                raise ConfigError(
                    f"{option} must be a list of strings",
                    config_path=config_path,
                    option=option,
                )
            setattr(config, option, list(value))

    for option in _BOOL_OPTIONS:
        if option in section:
            value = section[option]
            if not isinstance(value, bool):
                raise ConfigError(
                    f"{option} must be a boolean, got {type(value).__name__}",
                    config_path=config_path,
                    option=option,
                )
            setattr(config, option, value)

    return config
