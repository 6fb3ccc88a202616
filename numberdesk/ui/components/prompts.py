"""Confirmation prompt shown before a batch starts."""

from typing import Optional, Sequence

from rich.console import Console
from rich.prompt import Confirm

from numberdesk.utils.console import get_console


class ConfirmPrompt:
    """Yes/no question; Ctrl-C or end of input counts as "no"."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or get_console()

    def ask(self, question: str, notes: Sequence[str] = (), default: bool = False) -> bool:
        """Print ``notes`` under a blank line, then ask ``question``."""
        if notes:
            self.console.print()
        for note in notes:
            self.console.print(f"  [dim]{note}[/dim]")

        try:
            return Confirm.ask(question, default=default, console=self.console)
        except (KeyboardInterrupt, EOFError):
            self.console.print()
            return False
