"""Exercise lifecycle controller: selection, mode dispatch and pass/fail handling."""

from __future__ import annotations

import asyncio
import logging
import sys
from functools import partial
from importlib import resources
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as distribution_version
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from . import cli
from .config import Command, WorkshopOptions
from .errors import (
    CleanupError,
    ExerciseMissingError,
    NoActiveExerciseError,
    PrepareError,
    TextLoadError,
    UnexpectedExecutionError,
    UsageError,
    WorkshopError,
)
from .exercise import FAIL, PASS, Exercise
from .i18n import DEFAULT_LANG, Translator
from .loader import ExerciseLoader, load_menu
from .menu import EXIT, EXTRA_PREFIX, HELP, LANGUAGE, SELECT, InputFn, PrintFn, show_language_menu, show_menu
from .printer import TextPrinter
from .progress import ProgressStore
from .solutions import SolutionPresenter

logger = logging.getLogger(__name__)

CONTENT_PACKAGE = "workshopkit.content"
RULE_CHAR = "─"


class Workshop:
    """One workshop invocation.

    Each CLI run builds a Workshop, dispatches a single mode and returns the
    process exit code. The selected exercise is kept on the instance and
    mirrored to the progress store.
    """

    def __init__(
        self,
        options: WorkshopOptions,
        console: Console | None = None,
        input_fn: InputFn = input,
        print_fn: PrintFn | None = None,
    ) -> None:
        """Resolve options and wire the loader, store, printer and presenter."""
        self.options = options.resolve()
        self.app_name = self.options.name
        self.width = self.options.width
        self.exercises = load_menu(self.options.menu_json)
        self.commands: tuple[Command, ...] = self.options.commands
        self.on_complete = self.options.on_complete

        self.i18n = Translator(self.app_name, self.options.languages, self._strings())
        self.console = console or Console()
        self.input_fn = input_fn
        self.print_fn = print_fn or self._print_plain
        self.printer = TextPrinter(self.app_name, self.options.app_dir, self.width, self.console)
        self.store = ProgressStore(self.options.data_dir)
        self.loader = ExerciseLoader(self.exercises, self.options.exercise_dir, self.i18n)
        self.solutions = SolutionPresenter(self.console, self.i18n, self.width)
        self.current = self.store.current()

    def _strings(self) -> dict[str, dict[str, str]]:
        """Merge the title and subtitle options into the English overrides."""
        strings = {lang: dict(table) for lang, table in self.options.strings.items()}
        overrides = strings.setdefault(DEFAULT_LANG, {})
        if self.options.title:
            overrides.setdefault("title", self.options.title)
        if self.options.subtitle:
            overrides.setdefault("subtitle", self.options.subtitle)
        return strings

    @property
    def lang(self) -> str:
        """Active language code."""
        return self.i18n.lang

    @property
    def version(self) -> str:
        """Configured version, else the installed distribution version."""
        if self.options.version:
            return self.options.version
        try:
            return distribution_version(self.app_name)
        except PackageNotFoundError:
            return "0+unknown"

    def translate(self, key: str, **values: object) -> str:
        """Translate `key` in the active language."""
        return self.i18n.translate(key, **values)

    def _print_plain(self, text: str) -> None:
        """Print `text` without markup or highlighting."""
        self.console.print(text, markup=False, highlight=False)

    def error(self, message: str) -> None:
        """Print a fatal message highlighted."""
        self.console.print(f"[bold red]{escape(message)}[/bold red]")

    # Dispatch

    def run(self, argv: list[str] | None = None) -> int:
        """Parse argv and run one mode; returns the exit code."""
        invocation = cli.parse_invocation(sys.argv[1:] if argv is None else argv, prog=self.app_name)
        return self.dispatch(invocation)

    def dispatch(self, invocation: cli.Invocation) -> int:
        """Run the requested mode, turning workshop errors into exit code 1."""
        try:
            return self._dispatch(invocation)
        except WorkshopError as exc:
            logger.debug("Invocation failed: %r", exc)
            self.error(str(exc))
            return exc.exit_code

    def _dispatch(self, invocation: cli.Invocation) -> int:
        """Route one invocation to its mode handler."""
        mode = invocation.mode
        logger.debug("Dispatching mode=%s args=%s", mode, invocation.args)

        if invocation.version or mode == cli.VERSION:
            self.print_fn(f"{self.app_name}@{self.version}")
            return 0
        if invocation.help or mode == cli.HELP:
            self.print_help()
            return 0

        for command in self.commands:
            if mode == command.name or command.name in invocation.flags or (
                command.short is not None and command.short in invocation.flags
            ):
                command.handler(self)
                return 0

        if mode == cli.LIST:
            for name in self.exercises:
                self.print_fn(name)
            return 0
        if mode == cli.CURRENT:
            self.print_fn(self.current or "")
            return 0
        if mode in (cli.SELECT, cli.PRINT):
            return self.select(" ".join(invocation.args) if invocation.args else self.current)
        if mode in (cli.VERIFY, cli.RUN):
            return self.execute_current(mode, list(invocation.args))
        if mode == cli.RESET:
            self.reset()
            self.print_fn(self.translate("progress.reset", title=self.translate("title")))
            return 0
        return self.print_menu()

    # Selection

    def select(self, name: str | None) -> int:
        """Make `name` the current exercise and print its instructions."""
        exercise = self.loader.load_exercise(name, self) if name else None
        if exercise is None:
            raise ExerciseMissingError(self.translate("error.exercise.missing", name=name))

        self._print_banner(exercise)
        self.current = exercise.name
        self.store.set_current(exercise.name)
        return asyncio.run(self._show_exercise(exercise))

    def _print_banner(self, exercise: Exercise) -> None:
        """Print the workshop title and the exercise position."""
        title = self.translate("title")
        state = self.translate("progress.state", count=exercise.number, amount=len(self.exercises))
        self.console.print(
            f"\n [bold green]{escape(title)}[/bold green]"
            f"\n[bold green]{RULE_CHAR * (len(title) + 2)}[/bold green]"
            f"\n [bold yellow]{escape(self.translate('exercise.' + exercise.name))}[/bold yellow]"
            f"\n [italic yellow]{escape(state)}[/italic yellow]\n"
        )

    async def _show_exercise(self, exercise: Exercise) -> int:
        """Prepare the exercise, then print its text and the footer."""
        try:
            await exercise.prepare()
        except Exception as exc:
            raise PrepareError(self.translate("error.exercise.preparing", err=exc)) from exc
        try:
            content_type, text = await exercise.get_exercise_text()
        except Exception as exc:
            raise TextLoadError(self.translate("error.exercise.loading", err=exc)) from exc

        self.printer.print_text(content_type, text)
        footer = self._footer()
        if footer is not None:
            self.printer.print_text(*footer)
        return 0

    # Execution

    def execute_current(self, mode: str, args: list[str]) -> int:
        """Run or verify the current exercise with the submitted arguments."""
        if not self.current:
            raise NoActiveExerciseError(self.translate("error.exercise.none_active"))
        exercise = self.loader.load_exercise(self.current, self)
        if exercise is None:
            raise ExerciseMissingError(self.translate("error.exercise.missing", name=self.current))
        if getattr(exercise, "require_submission", True) is not False and not args:
            raise UsageError(self.translate("ui.usage", mode=mode))
        return asyncio.run(self.execute(exercise, mode, args))

    def _report(self, kind: str, message: str) -> None:
        """Print a pass or fail notification from an exercise."""
        if kind == PASS:
            self.console.print(f"[bold green]✓ [/bold green]{escape(message)}")
        elif kind == FAIL:
            self.console.print(f"[bold red]✗ [/bold red]{escape(message)}")
        else:
            logger.warning("Ignoring unknown report kind %r: %s", kind, message)

    async def execute(self, exercise: Exercise, mode: str, args: list[str]) -> int:
        """Invoke `run` or `verify` and route the outcome."""
        capability = exercise.run if mode == cli.RUN else exercise.verify
        try:
            passed = await capability(args, self._report)
        except Exception as exc:
            if mode == cli.RUN:
                # run mode never fails
                logger.warning("Exercise %s raised in run mode: %s", exercise.name, exc)
                return await self.end(mode, True, exercise)
            await self.end(mode, True, exercise)
            raise UnexpectedExecutionError(
                self.translate("error.exercise.unexpected_error", mode=mode, err=exc)
            ) from exc

        if mode == cli.RUN:
            return await self.end(mode, True, exercise)
        if not passed:
            return await self.exercise_fail(mode, exercise)
        return await self.exercise_pass(mode, exercise)

    async def end(self, mode: str, passed: bool, exercise: Exercise) -> int:
        """Clean up the exercise and produce the exit code."""
        try:
            await exercise.end(mode, passed)
        except Exception as exc:
            raise CleanupError(self.translate("error.cleanup", err=exc)) from exc
        return 0 if passed else 1

    async def exercise_fail(self, mode: str, exercise: Exercise) -> int:
        """Announce the failure and clean up with a failing exit code."""
        self.console.print(f"\n[bold red]# {escape(self.translate('solution.fail.title'))}[/bold red]\n")
        self.console.print(self.translate("solution.fail.message", name=exercise.name), markup=False)
        return await self.end(mode, False, exercise)

    async def exercise_pass(self, mode: str, exercise: Exercise) -> int:
        """Announce the pass, show solutions, then record progress."""
        self.console.print(f"\n[bold green]# {escape(self.translate('solution.pass.title'))}[/bold green]\n")
        self.console.print(f"[bold]{escape(self.translate('solution.pass.message', name=exercise.name))}[/bold]\n")

        if not getattr(exercise, "hide_solutions", False):
            await self.solutions.present(exercise)
        return await self._record_pass(mode, exercise)

    async def _record_pass(self, mode: str, exercise: Exercise) -> int:
        """Mark the exercise completed and print what is left."""
        if exercise.name in self.exercises:
            completed = self.store.mark_completed(exercise.name)
        else:
            logger.warning("Not recording %s: not in the exercise list", exercise.name)
            completed = self.store.completed()

        remaining = len([name for name in self.exercises if name not in completed])
        logger.debug("%s passed; %d exercise(s) remaining", exercise.name, remaining)
        if remaining == 0:
            if self.on_complete is not None:
                return await self.on_complete(partial(self.end, mode, True, exercise))
            self.print_fn(self.translate("progress.finished"))
        else:
            self.print_fn(self.i18n.translate_plural("progress.remaining", remaining))
            self.print_fn(self.translate("ui.return"))
        return await self.end(mode, True, exercise)

    # Progress

    def reset(self) -> None:
        """Forget the current exercise and all completions."""
        self.store.reset()
        self.current = None

    def completed(self) -> list[str]:
        """Names of completed exercises."""
        return self.store.completed()

    # Menu and help

    def print_menu(self) -> int:
        """Show the interactive menu until it produces an outcome."""
        extras = [command.name.lower() for command in self.commands if command.menu]
        while True:
            choice = show_menu(self.i18n, self.exercises, self.completed(), extras, self.input_fn, self.print_fn)
            if choice.event == SELECT:
                return self.select(choice.name)
            if choice.event == EXIT:
                self.print_fn("")
                return 0
            if choice.event == HELP:
                self.print_fn("")
                self.print_help()
                return 0
            if choice.event == LANGUAGE:
                lang = show_language_menu(self.i18n, self.input_fn, self.print_fn)
                if lang is not None:
                    self.select_language(lang)
                continue
            if choice.event.startswith(EXTRA_PREFIX):
                for command in self.commands:
                    if command.name.lower() == choice.name:
                        command.handler(self)
                        return 0
            logger.warning("Unhandled menu event %s", choice.event)
            return 0

    def select_language(self, lang: str) -> None:
        """Switch the active language."""
        self.i18n.change_lang(lang)
        logger.debug("Language changed to %s", lang)

    def print_help(self) -> None:
        """Print the bundled usage text and the workshop's own help file."""
        self.printer.print_text("txt", _bundled_text("usage", self.lang, "txt"))
        help_file = self._localized_path(self.options.help_file)
        if help_file is not None:
            self.printer.print_file(help_file)

    def _footer(self) -> tuple[str, str] | None:
        """Return the footer as `(content_type, text)`, or None when disabled."""
        footer_file = self.options.footer_file
        if footer_file is False:
            return None
        if isinstance(footer_file, str):
            path = self._localized_path(footer_file)
            if path is not None:
                return ("md" if path.suffix.lower() == ".md" else "txt", path.read_text(encoding="utf-8"))
        return ("md", _bundled_text("footer", self.lang, "md"))

    def _localized_path(self, pattern: str | None) -> Path | None:
        """Expand `{lang}` in `pattern`; None when the file does not exist."""
        if not pattern:
            return None
        path = Path(pattern.replace("{lang}", self.lang))
        return path if path.is_file() else None


def _bundled_text(stem: str, lang: str, suffix: str) -> str:
    """Read a bundled text in `lang`, falling back to English."""
    package = resources.files(CONTENT_PACKAGE)
    entry = package / f"{stem}.{lang}.{suffix}"
    if not entry.is_file():
        entry = package / f"{stem}.{DEFAULT_LANG}.{suffix}"
    return entry.read_text(encoding="utf-8")
