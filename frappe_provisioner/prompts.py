"""Interactive operator input.

Every prompt blocks until it gets an acceptable answer; there is no timeout.
``ask`` defaults to ``rich.prompt.Prompt.ask`` and is injectable so tests can
script the operator.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from rich.console import Console
from rich.prompt import Prompt

logger = logging.getLogger(__name__)

YES = frozenset({"yes", "y"})
NO = frozenset({"no", "n"})

Ask = Callable[..., str]


class Prompter:
    def __init__(self, *, console: Optional[Console] = None, ask: Optional[Ask] = None) -> None:
        self.console = console or Console()
        self._ask = ask or Prompt.ask

    def _read(self, prompt: str, *, password: bool = False) -> str:
        value = self._ask(prompt, console=self.console, password=password)
        return "" if value is None else str(value)

    def collect_confirmed(self, prompt: str, is_secret: bool = False) -> str:
        """Read a value twice until both entries are identical."""

        confirm = "Confirm password" if is_secret else "Confirm input"
        while True:
            first = self._read(prompt, password=is_secret)
            second = self._read(confirm, password=is_secret)
            if first == second:
                self.console.print("[green]Input confirmed.[/]")
                return first
            self.console.print("[red]Inputs do not match. Please try again.[/]")

    def ask_yes_no(self, question: str) -> bool:
        while True:
            answer = self._read(f"[bold blue]{question}[/] (yes/no)").strip().lower()
            if answer in YES:
                return True
            if answer in NO:
                return False
            self.console.print("[red]Invalid response. Please answer with 'yes' or 'no'.[/]")

    def ask_text(self, prompt: str) -> str:
        while True:
            value = self._read(prompt).strip()
            if value:
                return value
            self.console.print("[red]A value is required.[/]")

    def wait_for_enter(self, message: str) -> None:
        self.console.print(f"[yellow]{message}[/]")
        self._read("Press Enter to continue")
