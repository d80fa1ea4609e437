"""Render markdown or plain text files to the terminal."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markdown import Markdown

MARKDOWN_SUFFIXES = {".md", ".markdown"}


class TextPrinter:
    """Prints workshop text wrapped to the configured width.

    `{appname}` and `{rootdir}` placeholders are replaced before rendering.
    """

    def __init__(self, app_name: str, app_dir: Path, width: int, console: Console | None = None) -> None:
        """Create a printer bound to one workshop and console."""
        self.app_name = app_name
        self.app_dir = Path(app_dir)
        self.width = width
        self.console = console or Console()

    def _substitute(self, text: str) -> str:
        """Fill in `{appname}` and `{rootdir}` placeholders."""
        return text.replace("{appname}", self.app_name).replace("{rootdir}", str(self.app_dir))

    def print_text(self, content_type: str, text: str) -> None:
        """Print `text`; `content_type` "md" renders markdown, anything else is plain."""
        text = self._substitute(text)
        if content_type == "md":
            self.console.print(Markdown(text), width=self.width)
        else:
            self.console.print(text, width=self.width, markup=False, highlight=False)

    def print_file(self, path: Path | str) -> None:
        """Print a file, choosing markdown rendering from its suffix."""
        file_path = Path(path)
        content_type = "md" if file_path.suffix.lower() in MARKDOWN_SUFFIXES else "txt"
        self.print_text(content_type, file_path.read_text(encoding="utf-8"))
