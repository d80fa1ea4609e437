"""Workshop configuration options and their validation."""

from __future__ import annotations

import json
import os
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .workshop import Workshop

DEFAULT_WIDTH = 65
CONFIG_FILE_NAME = "workshop.json"
DATA_DIR_ENV = "WORKSHOPKIT_DATA_DIR"

Finalizer = Callable[[], Awaitable[int]]
OnComplete = Callable[[Finalizer], Awaitable[int]]


@dataclass(frozen=True)
class Command:
    """Workshop-defined extra command, reachable from the CLI and the menu."""

    name: str
    handler: Callable[[Workshop], object]
    short: str | None = None
    menu: bool = True


@dataclass(frozen=True)
class WorkshopOptions:
    """Options a tutorial author passes to build a workshop.

    `help_file` and `footer_file` may contain a `{lang}` placeholder which is
    replaced by the active language when the file is printed. `footer_file`
    defaults to the bundled footer; pass `False` to disable it.

    `on_complete` is awaited once every exercise has passed. It receives the
    finalizer that ends the run and must await it, returning its exit code.
    """

    name: str
    app_dir: Path
    exercise_dir: Path | None = None
    menu_json: Path | None = None
    data_dir: Path | None = None
    help_file: str | None = None
    footer_file: str | bool | None = None
    width: int = DEFAULT_WIDTH
    title: str | None = None
    subtitle: str | None = None
    version: str | None = None
    languages: tuple[str, ...] = ("en",)
    strings: dict[str, dict[str, str]] = field(default_factory=dict)
    commands: tuple[Command, ...] = ()
    on_complete: OnComplete | None = None

    @classmethod
    def from_app_dir(cls, app_dir: Path | str) -> WorkshopOptions:
        """Build options for a workshop directory and its optional `workshop.json`."""
        root = Path(app_dir).resolve()
        raw: dict[str, Any] = {}
        config_file = root / CONFIG_FILE_NAME
        if config_file.exists():
            loaded: object = json.loads(config_file.read_text(encoding="utf-8-sig"))
            if not isinstance(loaded, dict):
                raise ValueError(f"{CONFIG_FILE_NAME} root must be a JSON object.")
            raw = loaded

        footer_raw = raw.get("footer_file")
        footer_file: str | bool | None
        if footer_raw is False:
            footer_file = False
        elif footer_raw:
            footer_file = str(root / str(footer_raw))
        else:
            footer_file = None

        help_raw = raw.get("help_file")
        languages = tuple(str(item) for item in raw.get("languages", ["en"]))
        return cls(
            name=str(raw.get("name") or root.name),
            app_dir=root,
            help_file=str(root / str(help_raw)) if help_raw else None,
            footer_file=footer_file,
            width=int(raw.get("width", DEFAULT_WIDTH)),
            title=_optional_str(raw.get("title")),
            subtitle=_optional_str(raw.get("subtitle")),
            version=_optional_str(raw.get("version")),
            languages=languages,
        )

    def resolve(self) -> WorkshopOptions:
        """Validate options and fill in derived directories."""
        if not isinstance(self.name, str) or not self.name.strip():
            raise TypeError("need to provide a `name` string option")
        app_dir = _require_dir(self.app_dir, "app_dir")
        exercise_dir = _require_dir(self.exercise_dir or app_dir / "exercises", "exercise_dir")
        menu_json = Path(self.menu_json) if self.menu_json else exercise_dir / "menu.json"
        if not menu_json.is_file():
            raise ValueError(f"menu_json file does not exist: {menu_json}")
        if self.width <= 0:
            raise ValueError(f"width must be positive, got {self.width}")
        if not self.languages:
            raise ValueError("at least one language is required")

        data_dir = Path(self.data_dir) if self.data_dir else default_data_dir(self.name)
        return replace(
            self,
            app_dir=app_dir,
            exercise_dir=exercise_dir,
            menu_json=menu_json,
            data_dir=data_dir,
        )


def default_data_dir(app_name: str) -> Path:
    """Return the per-application progress directory."""
    override = os.environ.get(DATA_DIR_ENV)
    if override:
        return Path(override) / app_name
    return Path.home() / ".config" / app_name


def _require_dir(value: Path | str | None, label: str) -> Path:
    """Resolve `value` to an existing directory or raise ValueError."""
    if value is None:
        raise TypeError(f"need to provide an `{label}` option")
    path = Path(value)
    if not path.is_dir():
        raise ValueError(f"{label} is not a directory: {path}")
    return path


def _optional_str(value: object) -> str | None:
    """Return `value` when it is a non-empty string."""
    if value is None:
        return None
    return str(value)
