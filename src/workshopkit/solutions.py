"""Show reference solutions after an exercise passes."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape

from .errors import SolutionLoadError
from .exercise import Exercise
from .i18n import Translator

logger = logging.getLogger(__name__)

RULE_CHAR = "─"
FENCE_LANGUAGES = {
    ".py": "python",
    ".js": "javascript",
    ".mjs": "javascript",
    ".ts": "typescript",
    ".sh": "bash",
    ".json": "json",
    ".html": "html",
    ".css": "css",
    ".sql": "sql",
    ".rb": "ruby",
    ".go": "go",
    ".rs": "rust",
}


@dataclass(frozen=True)
class SolutionFile:
    """One solution file ready for rendering."""

    name: str
    content: str


def fence(content: str, language: str) -> str:
    """Wrap source in a fenced block so markdown renders it as code."""
    return f"```{language}\n{content}\n```"


def language_for(path: Path) -> str:
    """Return the fence language for a file suffix, or an empty string."""
    return FENCE_LANGUAGES.get(path.suffix.lower(), "")


async def read_solution(path: Path) -> str:
    """Read one solution file off the event loop; undecodable bytes are replaced."""
    return await asyncio.to_thread(path.read_text, encoding="utf-8", errors="replace")


async def _load_one(path: Path) -> SolutionFile:
    """Read one file and wrap it as a fenced solution."""
    content = await read_solution(path)
    return SolutionFile(name=path.name, content=fence(content, language_for(path)))


async def load_solution_files(files: Sequence[Path | str]) -> list[SolutionFile]:
    """Read all files concurrently; results keep the order of `files`.

    The first read error propagates and the whole load fails.
    """
    return list(await asyncio.gather(*(_load_one(Path(item)) for item in files)))


class SolutionPresenter:
    """Loads an exercise's solution files and prints them in listed order."""

    def __init__(self, console: Console, translator: Translator, width: int) -> None:
        """Create a presenter writing to `console` at `width` columns."""
        self.console = console
        self.translator = translator
        self.width = width

    def _load_error(self, exc: BaseException) -> SolutionLoadError:
        """Wrap `exc` in a localized SolutionLoadError."""
        return SolutionLoadError(self.translator.translate("solution.notes.load_error", err=exc))

    async def present(self, exercise: Exercise) -> None:
        """Print the solutions of `exercise`; raises SolutionLoadError on any failure."""
        try:
            files = await exercise.get_solution_files()
        except Exception as exc:
            raise self._load_error(exc) from exc
        if not files:
            return

        self.console.print(self.translator.translate("solution.notes.compare"), markup=False, highlight=False)
        try:
            solutions = await load_solution_files(files)
        except Exception as exc:
            raise self._load_error(exc) from exc

        logger.debug("Rendering %d solution file(s) for %s", len(solutions), exercise.name)
        self.print_solutions(solutions)

    def print_solutions(self, solutions: Sequence[SolutionFile]) -> None:
        """Print each solution between rules, with a name header when there are several."""
        rule = f"[yellow]{RULE_CHAR * self.width}[/yellow]"
        for index, solution in enumerate(solutions):
            self.console.print(rule)
            if len(solutions) > 1:
                self.console.print(f"[bold yellow]{escape(solution.name)}:[/bold yellow]\n")
            self.console.print(Markdown(solution.content), width=self.width)
            if index == len(solutions) - 1:
                self.console.print(rule + "\n")
