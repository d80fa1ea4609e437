"""Localized user-facing strings."""

from __future__ import annotations

import logging
from collections.abc import Mapping

logger = logging.getLogger(__name__)

DEFAULT_LANG = "en"

EN_STRINGS: dict[str, str] = {
    "title": "{app_name}",
    "subtitle": "Select an exercise and hit Enter to begin",
    "error.exercise.none_active": "No active exercise. Select one from the menu.",
    "error.exercise.missing": "No such exercise: {name}",
    "error.exercise.missing_file": "ERROR: {exercise_file} does not exist!",
    "error.exercise.not_a_workshopper": "ERROR: {exercise_file} is not a workshop exercise",
    "error.exercise.init": "Error initializing {name}: {err}",
    "error.exercise.preparing": "Error preparing exercise: {err}",
    "error.exercise.loading": "Error loading exercise text: {err}",
    "error.exercise.unexpected_error": "Could not {mode}: {err}",
    "error.cleanup": "Error cleaning up: {err}",
    "solution.fail.title": "FAIL",
    "solution.fail.message": "Your solution to {name} didn't pass. Try again!",
    "solution.pass.title": "PASS",
    "solution.pass.message": "Your solution to {name} passed!",
    "solution.notes.compare": "Here's the official solution in case you want to compare notes:\n",
    "solution.notes.load_error": "ERROR: There was a problem printing the solution files: {err}",
    "progress.reset": "{title} progress reset",
    "progress.finished": "You've finished all the challenges! Hooray!\n",
    "progress.remaining#one": "You have one challenge left.",
    "progress.remaining#other": "You have {count} challenges left.",
    "progress.state": "Exercise {count} of {amount}",
    "ui.return": "Type '{app_name}' to show the menu.\n",
    "ui.usage": "Usage: {app_name} {mode} mysubmission.py",
    "menu.completed": "[COMPLETED]",
    "menu.help": "HELP",
    "menu.language": "CHOOSE LANGUAGE",
    "menu.exit": "EXIT",
    "menu.prompt": "Choose: ",
    "menu.invalid": "Invalid choice.",
    "language.title": "Choose language",
    "language.cancel": "CANCEL",
}


class Translator:
    """Looks up strings for the active language, falling back to English.

    Missing keys resolve to the key itself so an absent translation never
    crashes a run.
    """

    def __init__(
        self,
        app_name: str,
        languages: tuple[str, ...] = (DEFAULT_LANG,),
        strings: Mapping[str, Mapping[str, str]] | None = None,
        lang: str = DEFAULT_LANG,
    ) -> None:
        """Create a translator for `app_name` with per-language string overrides."""
        self.app_name = app_name
        self.languages = languages
        self._tables: dict[str, dict[str, str]] = {DEFAULT_LANG: dict(EN_STRINGS)}
        for language, table in (strings or {}).items():
            self._tables.setdefault(language, {}).update(table)
        self.lang = lang if lang in languages else languages[0]

    def change_lang(self, lang: str) -> None:
        """Switch the active language."""
        if lang not in self.languages:
            raise ValueError(f"Unsupported language: {lang}")
        self.lang = lang

    def _lookup(self, key: str) -> str | None:
        """Find `key` in the active language, then in English."""
        for language in (self.lang, DEFAULT_LANG):
            table = self._tables.get(language, {})
            if key in table:
                return table[key]
        return None

    def translate(self, key: str, **values: object) -> str:
        """Return the localized string for `key` with `values` interpolated."""
        template = self._lookup(key)
        if template is None:
            if key.startswith("exercise."):
                template = key[len("exercise.") :]
            else:
                logger.debug("Missing translation for %s (%s)", key, self.lang)
                template = key
        return _interpolate(template, {"app_name": self.app_name, **values})

    def translate_plural(self, key: str, count: int) -> str:
        """Return the `#one` or `#other` variant of `key` for `count`."""
        suffix = "#one" if count == 1 else "#other"
        return self.translate(key + suffix, count=count)


def _interpolate(template: str, values: Mapping[str, object]) -> str:
    """Fill `{name}` placeholders, leaving unknown ones untouched."""
    result = template
    for name, value in values.items():
        result = result.replace("{" + name + "}", str(value))
    return result
