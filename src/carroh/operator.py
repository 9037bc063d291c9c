from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

import typer


class OperatorGateway(Protocol):
    """Minimal interface for asking the person at the imaging station."""

    def confirm(self, prompt: str) -> bool:
        ...

    def ask_text(self, prompt: str) -> str:
        ...

    def ask_choice(self, prompt: str, options: Sequence[str]) -> str:
        ...


@dataclass
class TerminalOperator:
    """Operator prompts on the controlling terminal, via typer.

    Choices are shown as a numbered menu and re-asked until the answer is
    one of the listed numbers. Ctrl-C / EOF surface as typer's Abort.
    """

    def confirm(self, prompt: str) -> bool:
        return typer.confirm(prompt)

    def ask_text(self, prompt: str) -> str:
        return typer.prompt(prompt).strip()

    def ask_choice(self, prompt: str, options: Sequence[str]) -> str:
        if not options:
            raise ValueError("ask_choice() needs at least one option")

        typer.echo(prompt)
        for i, option in enumerate(options, start=1):
            typer.echo(f"  {i}) {option}")

        while True:
            picked = typer.prompt("Select an option", type=int)
            if 1 <= picked <= len(options):
                return options[picked - 1]
            typer.echo(f"Please enter a number between 1 and {len(options)}.", err=True)
