"""Console script: run the workshop found in a directory."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .cli import parse_invocation
from .config import WorkshopOptions
from .workshop import Workshop

APP_DIR_ENV = "WORKSHOPKIT_APP_DIR"

console = Console()


def setup_logging(debug: bool = False) -> None:
    """Send log records to stderr through rich; warnings only unless debugging."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=debug)],
    )


def _workshop_dir(explicit: Path | None) -> Path:
    """Pick the workshop directory from the flag, the environment or the cwd."""
    if explicit is not None:
        return explicit
    override = os.environ.get(APP_DIR_ENV)
    return Path(override) if override else Path.cwd()


def run(argv: list[str] | None = None) -> int:
    """Run one CLI invocation and return its exit code."""
    invocation = parse_invocation(sys.argv[1:] if argv is None else argv)
    setup_logging(invocation.debug)
    try:
        options = WorkshopOptions.from_app_dir(_workshop_dir(invocation.workshop))
        workshop = Workshop(options, console=console)
    except (OSError, TypeError, ValueError) as exc:
        console.print(f"[bold red]{escape(str(exc))}[/bold red]")
        return 1
    return workshop.dispatch(invocation)


def main_entry() -> None:
    """Console script entrypoint."""
    raise SystemExit(run())


if __name__ == "__main__":  # pragma: no cover
    main_entry()
