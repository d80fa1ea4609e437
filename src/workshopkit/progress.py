"""JSON document persistence for the current exercise and completed set."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CURRENT = "current"
COMPLETED = "completed"


class ProgressStore:
    """Reads and writes small JSON documents in the workshop data directory.

    Single foreground process; concurrent external writers are not handled.
    """

    def __init__(self, data_dir: Path | str) -> None:
        """Remember the data directory; nothing is created until first write."""
        self.data_dir = Path(data_dir)

    def _path(self, name: str) -> Path:
        """Return the JSON file backing `name`."""
        return self.data_dir / f"{name}.json"

    def get(self, name: str) -> Any:
        """Return the parsed document, or None when missing or unreadable."""
        path = self._path(name)
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as exc:
            logger.debug("Ignoring unreadable progress file %s: %s", path, exc)
            return None

    def update(self, name: str, fn: Callable[[Any], Any]) -> Any:
        """Apply `fn` to the stored value and write the result back."""
        value = fn(self.get(name))
        path = self._path(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(value), encoding="utf-8")
        return value

    def reset(self) -> None:
        """Delete current and completed documents."""
        for name in (COMPLETED, CURRENT):
            self._path(name).unlink(missing_ok=True)

    def current(self) -> str | None:
        """Return the selected exercise name, if any."""
        value = self.get(CURRENT)
        return value if isinstance(value, str) else None

    def set_current(self, name: str) -> None:
        """Persist the selected exercise name."""
        self.update(CURRENT, lambda _: name)

    def completed(self) -> list[str]:
        """Return completed exercise names, ignoring malformed content."""
        value = self.get(COMPLETED)
        if not isinstance(value, list):
            return []
        return [str(item) for item in value if isinstance(item, str)]

    def mark_completed(self, name: str) -> list[str]:
        """Add `name` to the completed set unless already present."""

        def add(value: Any) -> list[str]:
            """Append `name` unless already present."""
            names = [str(item) for item in value if isinstance(item, str)] if isinstance(value, list) else []
            return names if name in names else [*names, name]

        return self.update(COMPLETED, add)
