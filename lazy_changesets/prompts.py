"""Interactive prompt boundary.

The elicitation logic talks to a ``Prompter``; ``ClickPrompter`` renders the
questions in the terminal with click. Every prompt method raises
UserCancelled when the user presses Ctrl-C or closes input.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, TypeVar

import click

from .errors import UserCancelled

T = TypeVar("T")


class Prompter(Protocol):
    def select(self, message: str, choices: Sequence[tuple[str, T]]) -> T:
        """Ask for exactly one of ``choices`` (label, value) and return its value."""
        ...

    def checkbox(self, message: str, choices: Sequence[str]) -> list[str]:
        """Ask for any subset of ``choices``; an empty list is a valid answer."""
        ...

    def confirm(self, message: str, default: bool = False) -> bool: ...

    def text(self, message: str) -> str:
        """Ask for a line of free text. May return an empty string."""
        ...


def parse_indexes(raw: str, count: int) -> list[int]:
    """Parse a comma or space separated list of 1-based menu numbers.

    Returns sorted, de-duplicated 0-based indexes. Blank input means none.

    Raises:
        click.BadParameter: If an entry is not a number in ``1..count``.
    """
    indexes: set[int] = set()
    for token in raw.replace(",", " ").split():
        if not token.isdecimal() or not 1 <= int(token) <= count:
            raise click.BadParameter(f"{token!r} is not a number between 1 and {count}")
        indexes.add(int(token) - 1)
    return sorted(indexes)


class ClickPrompter:
    """Prompter rendering numbered menus with click."""

    def select(self, message: str, choices: Sequence[tuple[str, T]]) -> T:
        click.echo(message)
        for i, (label, _) in enumerate(choices, start=1):
            click.echo(f"  {i}) {label}")
        index = self._ask(
            "Choose one",
            type=click.IntRange(1, len(choices)),
        )
        return choices[index - 1][1]

    def checkbox(self, message: str, choices: Sequence[str]) -> list[str]:
        click.echo(message)
        for i, label in enumerate(choices, start=1):
            click.echo(f"  {i}) {label}")
        indexes = self._ask(
            "Numbers, comma separated (blank for none)",
            default="",
            show_default=False,
            value_proc=lambda raw: parse_indexes(raw, len(choices)),
        )
        return [choices[i] for i in indexes]

    def confirm(self, message: str, default: bool = False) -> bool:
        try:
            return click.confirm(message, default=default)
        except click.Abort as exc:
            raise UserCancelled() from exc

    def text(self, message: str) -> str:
        return self._ask(message, default="", show_default=False)

    @staticmethod
    def _ask(message: str, **kwargs):
        try:
            return click.prompt(message, **kwargs)
        except click.Abort as exc:
            raise UserCancelled() from exc
