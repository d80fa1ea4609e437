from __future__ import annotations

import io
import json
import shutil
import sys
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any
from uuid import uuid4

import pytest
from rich.console import Console

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from workshopkit import Workshop, WorkshopOptions  # noqa: E402
from workshopkit.loader import id_from_name  # noqa: E402

EXERCISE_TEMPLATE = '''
from workshopkit import FAIL, PASS, BaseExercise


class SampleExercise(BaseExercise):
    hide_solutions = __HIDE_SOLUTIONS__
    require_submission = __REQUIRE_SUBMISSION__
    raise_in = __RAISE_IN__

    def _log(self, entry):
        with open(self.directory / "calls.log", "a", encoding="utf-8") as handle:
            handle.write(entry + "\\n")

    async def prepare(self):
        self._log("prepare")
        if self.raise_in == "prepare":
            raise RuntimeError("prepare exploded")

    async def verify(self, args, report):
        self._log("verify " + " ".join(args))
        if self.raise_in == "verify":
            raise RuntimeError("verify exploded")
        if args and args[0] == "good":
            report(PASS, "output matches")
            return True
        report(FAIL, "output differs")
        return False

    async def run(self, args, report):
        self._log("run " + " ".join(args))
        if self.raise_in == "run":
            raise RuntimeError("run exploded")
        report(PASS, "program ran")
        return False

    async def end(self, mode, passed):
        self._log("end " + mode + " " + str(passed))
        if self.raise_in == "end":
            raise RuntimeError("end exploded")


exercise = SampleExercise
'''


def exercise_source(
    *, hide_solutions: bool = False, require_submission: bool = True, raise_in: str | None = None
) -> str:
    """Render the sample exercise module with the given behavior switches."""
    return (
        EXERCISE_TEMPLATE.replace("__HIDE_SOLUTIONS__", repr(hide_solutions))
        .replace("__REQUIRE_SUBMISSION__", repr(require_submission))
        .replace("__RAISE_IN__", repr(raise_in))
    )


def write_workshop(
    root: Path,
    names: list[str],
    *,
    sources: dict[str, str] | None = None,
    solutions: dict[str, dict[str, str]] | None = None,
) -> Path:
    """Create a workshop directory with one sample exercise per name."""
    app_dir = root / "app"
    exercise_dir = app_dir / "exercises"
    exercise_dir.mkdir(parents=True, exist_ok=True)
    (exercise_dir / "menu.json").write_text(json.dumps(names), encoding="utf-8")
    for name in names:
        directory = exercise_dir / id_from_name(name)
        directory.mkdir(parents=True, exist_ok=True)
        source = (sources or {}).get(name, exercise_source())
        (directory / "exercise.py").write_text(source, encoding="utf-8")
        (directory / "problem.md").write_text(f"# {name}\n\nWrite a program for {name}.\n", encoding="utf-8")
        files = (solutions or {}).get(name, {"solution.py": f"print('{name} solved')\n"})
        if files:
            solution_dir = directory / "solution"
            solution_dir.mkdir(exist_ok=True)
            for file_name, content in files.items():
                (solution_dir / file_name).write_text(content, encoding="utf-8")
    return app_dir


def calls(app_dir: Path, name: str) -> list[str]:
    """Return the capability calls logged by a sample exercise."""
    log = app_dir / "exercises" / id_from_name(name) / "calls.log"
    if not log.exists():
        return []
    return log.read_text(encoding="utf-8").splitlines()


def recording_console() -> Console:
    return Console(file=io.StringIO(), width=100, color_system=None, force_terminal=False)


def output_of(workshop: Workshop) -> str:
    file = workshop.console.file
    assert isinstance(file, io.StringIO)
    return file.getvalue()


@pytest.fixture(name="tmp_path")
def workshop_root() -> Iterator[Path]:
    """Give each test its own workshop root under `.tmp_pytest/` in the repo."""
    base = ROOT / ".tmp_pytest"
    root = base / uuid4().hex
    root.mkdir(parents=True)
    yield root
    shutil.rmtree(root, ignore_errors=True)
    if base.is_dir() and not any(base.iterdir()):
        base.rmdir()


@pytest.fixture
def make_workshop(tmp_path: Path) -> Callable[..., Workshop]:
    """Build a workshop over a fresh app directory and data directory."""

    def factory(
        names: list[str],
        *,
        sources: dict[str, str] | None = None,
        solutions: dict[str, dict[str, str]] | None = None,
        inputs: list[str] | None = None,
        **options: Any,
    ) -> Workshop:
        app_dir = tmp_path / "app"
        if not app_dir.exists():
            write_workshop(tmp_path, names, sources=sources, solutions=solutions)
        answers = iter(inputs or [])
        return Workshop(
            WorkshopOptions(name="learnyou", app_dir=app_dir, data_dir=tmp_path / "data", **options),
            console=recording_console(),
            input_fn=lambda _: next(answers),
        )

    return factory
