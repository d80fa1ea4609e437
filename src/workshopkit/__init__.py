"""workshopkit: controller for exercise-based command-line workshops."""

from __future__ import annotations

import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from .config import Command, WorkshopOptions
from .exercise import FAIL, PASS, BaseExercise, Exercise
from .workshop import Workshop

__all__ = [
    "FAIL",
    "PASS",
    "BaseExercise",
    "Command",
    "Exercise",
    "Workshop",
    "WorkshopOptions",
    "__version__",
]


def _version_from_pyproject() -> str | None:
    """Best-effort version lookup from the source checkout's pyproject.toml."""
    for base in Path(__file__).resolve().parents:
        pyproject = base / "pyproject.toml"
        if not pyproject.exists():
            continue
        project = tomllib.loads(pyproject.read_text(encoding="utf-8")).get("project", {})
        if project.get("name") != "workshopkit":
            return None
        return str(project.get("version")) if project.get("version") else None
    return None


_project_version = _version_from_pyproject()
if _project_version is not None:
    __version__ = _project_version
else:
    try:
        __version__ = version("workshopkit")
    except PackageNotFoundError:
        __version__ = "0+unknown"
