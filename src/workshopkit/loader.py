"""Resolve exercise names and load their `exercise.py` entry points."""

from __future__ import annotations

import importlib.util
import json
import logging
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import TYPE_CHECKING, Any, cast
from uuid import uuid4

from .errors import ExerciseInitError, MissingEntryFileError, NotAWorkshopperError
from .exercise import Exercise
from .i18n import Translator

if TYPE_CHECKING:
    from .workshop import Workshop

logger = logging.getLogger(__name__)

ENTRY_FILE_NAME = "exercise.py"
COMMENT_PREFIX = "//"


@dataclass(frozen=True)
class ExerciseMeta:
    """Resolved location and ordinal of one exercise."""

    name: str
    number: int
    directory: Path
    id: str
    exercise_file: Path


def id_from_name(name: str) -> str:
    """Derive the exercise id (and directory name) from its display name."""
    return re.sub(r"[^\w]", "", re.sub(r"\s", "_", name.lower()))


def load_menu(path: Path) -> list[str]:
    """Load the ordered exercise list, skipping `//` comment entries."""
    raw: object = json.loads(path.read_text(encoding="utf-8-sig"))
    if not isinstance(raw, list):
        raise ValueError(f"Exercise menu {path} must be a JSON array.")

    names: list[str] = []
    seen: dict[str, str] = {}
    for entry in raw:
        if not isinstance(entry, str):
            raise ValueError(f"Exercise menu entries must be strings, got {entry!r}.")
        if entry.startswith(COMMENT_PREFIX):
            continue
        name = entry.strip()
        if not name:
            continue
        key = name.lower()
        if key in seen:
            raise ValueError(f"Duplicate exercise name: {name} (also listed as {seen[key]})")
        seen[key] = name
        names.append(name)
    return names


class ExerciseLoader:
    """Maps names from the exercise list onto exercise directories."""

    def __init__(self, exercises: list[str], exercise_dir: Path, translator: Translator) -> None:
        """Create a loader over the ordered exercise names."""
        self.exercises = exercises
        self.exercise_dir = Path(exercise_dir)
        self.translator = translator

    def dir_from_name(self, name: str) -> Path:
        """Return the directory an exercise name maps to."""
        return self.exercise_dir / id_from_name(name)

    def get_exercise_meta(self, name: str) -> ExerciseMeta | None:
        """Resolve `name` case-insensitively; None when not in the list."""
        wanted = name.lower().strip()
        for index, candidate in enumerate(self.exercises, start=1):
            if candidate.lower().strip() != wanted:
                continue
            directory = self.dir_from_name(candidate)
            return ExerciseMeta(
                name=candidate,
                number=index,
                directory=directory,
                id=id_from_name(candidate),
                exercise_file=directory / ENTRY_FILE_NAME,
            )
        return None

    def load_exercise(self, name: str, workshop: Workshop) -> Exercise | None:
        """Load and initialize a fresh exercise instance, or None if unknown."""
        meta = self.get_exercise_meta(name)
        if meta is None:
            return None

        if not meta.exercise_file.is_file():
            raise MissingEntryFileError(
                self.translator.translate("error.exercise.missing_file", exercise_file=meta.exercise_file)
            )

        not_a_workshopper = NotAWorkshopperError(
            self.translator.translate("error.exercise.not_a_workshopper", exercise_file=meta.exercise_file)
        )
        try:
            module = _import_entry(meta.exercise_file, meta.id)
        except Exception as exc:
            logger.exception("Could not import %s", meta.exercise_file)
            raise not_a_workshopper from exc

        exercise = _exercise_from_module(module)
        if exercise is None or not callable(getattr(exercise, "init", None)):
            raise not_a_workshopper

        try:
            exercise.init(workshop, meta.id, meta.name, meta.directory, meta.number)
        except Exception as exc:
            logger.exception("Could not initialize %s", meta.name)
            raise ExerciseInitError(self.translator.translate("error.exercise.init", name=meta.name, err=exc)) from exc
        logger.debug("Loaded exercise %s (#%d) from %s", meta.name, meta.number, meta.exercise_file)
        return cast(Exercise, exercise)


def _import_entry(path: Path, exercise_id: str) -> ModuleType:
    """Execute an entry file as a new module object on every call."""
    module_name = f"_workshopkit_exercise_{exercise_id}_{uuid4().hex}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    finally:
        sys.modules.pop(module_name, None)
    return module


def _exercise_from_module(module: ModuleType) -> Any:
    """Pick the exercise object: `exercise`, `create_exercise()` or the module."""
    exercise = getattr(module, "exercise", None)
    if isinstance(exercise, type):
        return exercise()
    if exercise is not None:
        return exercise
    factory = getattr(module, "create_exercise", None)
    if callable(factory):
        return factory()
    return module
