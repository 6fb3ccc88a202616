"""Operator notices: inline warnings and boxed batch results."""

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from numberdesk.utils.console import get_console

# kind -> (colour, icon)
NOTICE_STYLES = {
    "success": ("green", "✓"),
    "error": ("red", "✗"),
    "warning": ("yellow", "⚠"),
}


class Notices:
    """Short feedback printed around a batch run.

    Messages are rendered as plain text, so API error bodies containing
    square brackets are shown verbatim.
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or get_console()

    def inline(self, kind: str, message: str) -> None:
        colour, icon = NOTICE_STYLES[kind]
        self.console.print(Text(f"{icon} {message}", style=colour))

    def boxed(self, kind: str, message: str, title: Optional[str] = None) -> None:
        colour, icon = NOTICE_STYLES[kind]
        self.console.print()
        self.console.print(Panel.fit(
            Text(f"{icon} {message}", style=f"bold {colour}"),
            title=title,
            border_style=colour,
            padding=(1, 2),
        ))
