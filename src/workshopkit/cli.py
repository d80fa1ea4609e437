"""Command-line parsing shared by the console script and embedded workshops."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path

VERSION = "version"
HELP = "help"
LIST = "list"
CURRENT = "current"
SELECT = "select"
PRINT = "print"
VERIFY = "verify"
RUN = "run"
RESET = "reset"

MODES = (VERSION, HELP, LIST, CURRENT, SELECT, PRINT, VERIFY, RUN, RESET)


@dataclass(frozen=True)
class Invocation:
    """Parsed command line: a mode, its arguments and global flags."""

    mode: str | None
    args: tuple[str, ...] = ()
    version: bool = False
    help: bool = False
    debug: bool = False
    workshop: Path | None = None
    flags: frozenset[str] = frozenset()


def build_parser(prog: str) -> argparse.ArgumentParser:
    """Create the argument parser; `-h` is handled by the workshop, not argparse."""
    parser = argparse.ArgumentParser(
        prog=prog, add_help=False, allow_abbrev=False, description="Exercise-based workshop"
    )
    parser.add_argument("-v", "--version", action="store_true")
    parser.add_argument("-h", "--help", action="store_true")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--workshop", type=Path, default=None, help="Workshop directory (default: cwd)")
    parser.add_argument("words", nargs=argparse.REMAINDER)
    return parser


def parse_invocation(argv: list[str], prog: str = "workshopkit") -> Invocation:
    """Split argv into mode, mode arguments and flags.

    Unknown leading flags are kept (without dashes) so workshop commands can
    be triggered with `--name` or `-short`.
    """
    namespace, unknown = build_parser(prog).parse_known_args(argv)
    words = [str(word) for word in namespace.words]
    flags = frozenset(flag.lstrip("-") for flag in unknown if flag.startswith("-"))
    return Invocation(
        mode=words[0] if words else None,
        args=tuple(words[1:]),
        version=bool(namespace.version),
        help=bool(namespace.help),
        debug=bool(namespace.debug),
        workshop=namespace.workshop,
        flags=flags,
    )
