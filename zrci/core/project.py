"""Project root detection.

The project is the cargo checkout the pipeline builds. It is identified by
a ``Cargo.toml`` at its root.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .result import Err, Ok, Result

__all__ = [
    "Project",
    "ProjectError",
    "detect_project",
    "find_project_upward",
    "is_project_root",
    "PROJECT_ENV_VAR",
]

PROJECT_ENV_VAR = "ZRCI_PROJECT_ROOT"


@dataclass(frozen=True)
class ProjectError:
    """Error when the project root cannot be detected."""

    message: str
    searched_from: Path | None = None


@dataclass(frozen=True, slots=True)
class Project:
    """A detected cargo project."""

    root: Path

    @property
    def config_path(self) -> Path:
        """Path to zrci.toml."""
        return self.root / "zrci.toml"

    @property
    def manifest_path(self) -> Path:
        return self.root / "Cargo.toml"

    @property
    def target_dir(self) -> Path:
        """Cargo build output directory."""
        return self.root / "target"

    def __str__(self) -> str:
        return str(self.root)


def is_project_root(path: Path) -> bool:
    return (path / "Cargo.toml").is_file()


def find_project_upward(start: Path) -> Path | None:
    """Search upward from start for the nearest directory holding Cargo.toml."""
    for parent in (start, *start.parents):
        if is_project_root(parent):
            return parent
    return None


def detect_project(
    *,
    start_dir: Path | None = None,
    env_var: str = PROJECT_ENV_VAR,
) -> Result[Project, ProjectError]:
    """Detect the project root.

    Detection order:
    1. ``ZRCI_PROJECT_ROOT`` environment variable (if set it must be valid)
    2. Search upward from start_dir (or cwd)
    """
    env_value = os.environ.get(env_var)
    if env_value:
        env_path = Path(env_value).expanduser().resolve()
        if env_path.is_dir() and is_project_root(env_path):
            return Ok(Project(root=env_path))
        return Err(
            ProjectError(
                message=f"${env_var} is set to '{env_value}' but it holds no Cargo.toml",
                searched_from=env_path if env_path.is_dir() else None,
            )
        )

    search_start = (start_dir or Path.cwd()).resolve()
    found = find_project_upward(search_start)
    if found is None:
        return Err(
            ProjectError(
                message="Could not find project (Cargo.toml not found)",
                searched_from=search_start,
            )
        )
    return Ok(Project(root=found))
