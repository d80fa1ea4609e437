"""Errors that end a workshop invocation with a non-zero exit code."""

from __future__ import annotations


class WorkshopError(Exception):
    """Base class for fatal, user-facing workshop errors.

    The message is already localized; the CLI prints it highlighted and exits 1.
    """

    exit_code = 1


class ExerciseMissingError(WorkshopError):
    """Requested exercise name does not resolve against the exercise list."""


class NoActiveExerciseError(WorkshopError):
    """`run`/`verify` invoked before any exercise was selected."""


class MissingEntryFileError(WorkshopError):
    """Exercise directory has no `exercise.py` regular file."""


class NotAWorkshopperError(WorkshopError):
    """Exercise module does not expose a callable `init`."""


class PrepareError(WorkshopError):
    """Exercise `prepare` failed."""


class TextLoadError(WorkshopError):
    """Exercise instructions could not be loaded."""


class UnexpectedExecutionError(WorkshopError):
    """Exercise `verify` raised instead of returning a result."""


class CleanupError(WorkshopError):
    """Exercise `end` failed."""


class SolutionLoadError(WorkshopError):
    """Solution file list or one of the solution files could not be read."""


class UsageError(WorkshopError):
    """A submission argument is required but none was given."""


class ExerciseInitError(WorkshopError):
    """Exercise `init` raised while the exercise was being loaded."""
