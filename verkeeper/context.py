"""
Shared context object for verkeeper CLI commands.

This module defines the global Click context used to share configuration
and runtime options across CLI subcommands.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from verkeeper.config import VerKeeperConfig
from verkeeper.core.project import Project, load_project


class VerKeeperContext:
    """Global context object for verkeeper CLI commands.

    An instance of this class is created once per CLI invocation and
    passed to commands using Click's context mechanism.

    Attributes:
        config_path: Path to the verkeeper configuration file, if provided.
        project_dir: Directory holding the build file.
        verbose: Verbosity level (0=WARNING, 1=INFO, 2+=DEBUG).
        color: Whether colored terminal output is enabled.
        config: Loaded configuration, or ``None`` before the group ran.
    """

    __slots__ = ("config_path", "project_dir", "verbose", "color", "config")

    def __init__(self) -> None:
        self.config_path: Optional[Path] = None
        self.project_dir: Path = Path(".")
        self.verbose: int = 0
        self.color: bool = True
        self.config: Optional[VerKeeperConfig] = None

    def load_project(self) -> Project:
        """Build the :class:`Project` for this invocation.

        Raises:
            ConfigError: The project directory or build file is missing.
        """
        return load_project(self.project_dir, self.config)


#: Click decorator for injecting :class:`VerKeeperContext` into commands.
pass_context = click.make_pass_decorator(VerKeeperContext, ensure=True)
