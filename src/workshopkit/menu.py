"""Interactive exercise and language menus."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .i18n import Translator

InputFn = Callable[[str], str]
PrintFn = Callable[[str], None]

SELECT = "select"
EXIT = "exit"
HELP = "help"
LANGUAGE = "language"
EXTRA_PREFIX = "extra-"

MENU_QUIT_COMMANDS = {"q", "x"}
MENU_HELP_COMMANDS = {"h", "?"}
MENU_LANGUAGE_COMMANDS = {"l"}
MENU_BACK_COMMANDS = {"b"}


@dataclass(frozen=True)
class MenuChoice:
    """Signal emitted by the menu: `select`, `exit`, `help`, `language` or `extra-<name>`."""

    event: str
    name: str | None = None


def show_menu(
    translator: Translator,
    exercises: list[str],
    completed: list[str],
    extras: list[str],
    input_fn: InputFn,
    print_fn: PrintFn,
) -> MenuChoice:
    """Print the exercise menu and wait for one valid choice."""
    done = {name.lower() for name in completed}
    show_language = len(translator.languages) > 1
    while True:
        title = translator.translate("title")
        print_fn(f"\n=== {title} ===")
        print_fn(translator.translate("subtitle"))
        for idx, name in enumerate(exercises, start=1):
            marker = f"  {translator.translate('menu.completed')}" if name.lower() in done else ""
            print_fn(f"{idx:>2}) {translator.translate('exercise.' + name)}{marker}")
        print_fn("")
        print_fn(f" h) {translator.translate('menu.help')}")
        if show_language:
            print_fn(f" l) {translator.translate('menu.language')}")
        for extra in extras:
            print_fn(f"    {extra.upper()}")
        print_fn(f" q) {translator.translate('menu.exit')}")

        choice = input_fn(translator.translate("menu.prompt")).strip().lower()
        if choice in MENU_QUIT_COMMANDS:
            return MenuChoice(EXIT)
        if choice in MENU_HELP_COMMANDS:
            return MenuChoice(HELP)
        if show_language and choice in MENU_LANGUAGE_COMMANDS:
            return MenuChoice(LANGUAGE)
        if choice in extras:
            return MenuChoice(EXTRA_PREFIX + choice, choice)
        if choice.isdigit():
            index = int(choice) - 1
            if 0 <= index < len(exercises):
                return MenuChoice(SELECT, exercises[index])

        print_fn(translator.translate("menu.invalid"))


def show_language_menu(translator: Translator, input_fn: InputFn, print_fn: PrintFn) -> str | None:
    """Let the learner pick a language; None means cancelled."""
    languages = list(translator.languages)
    while True:
        print_fn(f"\n=== {translator.translate('language.title')} ===")
        for idx, language in enumerate(languages, start=1):
            marker = " *" if language == translator.lang else ""
            print_fn(f"{idx:>2}) {language}{marker}")
        print_fn(f" b) {translator.translate('language.cancel')}")

        choice = input_fn(translator.translate("menu.prompt")).strip().lower()
        if choice in MENU_BACK_COMMANDS:
            return None
        if choice.isdigit():
            index = int(choice) - 1
            if 0 <= index < len(languages):
                return languages[index]
        if choice in languages:
            return choice

        print_fn(translator.translate("menu.invalid"))
