"""Capability contract for exercise modules and a convenience base class."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .workshop import Workshop

PASS = "pass"
FAIL = "fail"

Report = Callable[[str, str], None]


class Exercise(Protocol):
    """What the workshop expects from a loaded `exercise.py`.

    `run` and `verify` call `report(PASS | FAIL, message)` for each individual
    check, then return whether the submission passed overall. Optional
    attributes `hide_solutions` (default False) and `require_submission`
    (default True) are read with `getattr`.
    """

    name: str
    number: int

    def init(self, workshop: Workshop, id: str, name: str, directory: Path, number: int) -> None: ...

    async def prepare(self) -> None: ...

    async def get_exercise_text(self) -> tuple[str, str]: ...

    async def run(self, args: list[str], report: Report) -> bool: ...

    async def verify(self, args: list[str], report: Report) -> bool: ...

    async def end(self, mode: str, passed: bool) -> None: ...

    async def get_solution_files(self) -> list[Path]: ...


class BaseExercise:
    """Exercise with file-based defaults; subclasses implement `verify` (and `run`)."""

    hide_solutions = False
    require_submission = True

    def __init__(self) -> None:
        """Start with no workshop attached; `init` fills in the rest."""
        self.workshop: Workshop | None = None
        self.id = ""
        self.name = ""
        self.directory = Path()
        self.number = 0

    def init(self, workshop: Workshop, id: str, name: str, directory: Path, number: int) -> None:
        """Store exercise metadata."""
        self.workshop = workshop
        self.id = id
        self.name = name
        self.directory = Path(directory)
        self.number = number

    @property
    def lang(self) -> str:
        """Active workshop language."""
        return self.workshop.lang if self.workshop is not None else "en"

    async def prepare(self) -> None:
        """Nothing to set up by default."""
        return None

    async def get_exercise_text(self) -> tuple[str, str]:
        """Read `problem.<lang>.md`, `problem.md` or a plain-text variant."""
        candidates = (f"problem.{self.lang}.md", "problem.md", f"problem.{self.lang}.txt", "problem.txt")
        for candidate in candidates:
            path = self.directory / candidate
            if path.is_file():
                text = await asyncio.to_thread(path.read_text, encoding="utf-8")
                return ("md" if path.suffix == ".md" else "txt", text)
        raise FileNotFoundError(f"No problem file found in {self.directory}")

    async def run(self, args: list[str], report: Report) -> bool:
        """Run a submission without judging it."""
        raise NotImplementedError(f"Exercise '{self.name}' does not support run mode.")

    async def verify(self, args: list[str], report: Report) -> bool:
        """Check a submission; True means the exercise passed."""
        raise NotImplementedError(f"Exercise '{self.name}' does not support verify mode.")

    async def end(self, mode: str, passed: bool) -> None:
        """Nothing to clean up by default."""
        return None

    async def get_solution_files(self) -> list[Path]:
        """List files in `solution_<lang>/` or `solution/`, sorted by name."""
        for candidate in (f"solution_{self.lang}", "solution"):
            folder = self.directory / candidate
            if folder.is_dir():
                return sorted(path for path in folder.iterdir() if path.is_file())
        return []
