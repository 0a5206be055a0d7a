"""Decide which discovered packages a changeset applies to."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from .discovery import sorted_package_names
from .models import Package
from .prompts import Prompter


class SelectionOutcome(str, Enum):
    SELECTED = "selected"
    NO_PACKAGES = "no_packages"
    NOTHING_SELECTED = "nothing_selected"


class Selection(BaseModel):
    """Result of package selection.

    ``packages`` is sorted by name and non-empty exactly when the outcome is
    SELECTED.
    """

    model_config = ConfigDict(frozen=True)

    outcome: SelectionOutcome
    packages: tuple[str, ...] = ()


def resolve_selection(packages: dict[str, Package], prompter: Prompter) -> Selection:
    """Pick the packages for the current changeset.

    A single package is selected without asking. With several, the user
    picks any subset from the sorted list. UserCancelled raised by the
    prompter propagates to the caller.
    """
    names = sorted_package_names(packages)
    if not names:
        return Selection(outcome=SelectionOutcome.NO_PACKAGES)
    if len(names) == 1:
        return Selection(outcome=SelectionOutcome.SELECTED, packages=(names[0],))

    chosen = set(prompter.checkbox("Which packages would you like to include?", names))
    selected = tuple(n for n in names if n in chosen)
    if not selected:
        return Selection(outcome=SelectionOutcome.NOTHING_SELECTED)
    return Selection(outcome=SelectionOutcome.SELECTED, packages=selected)
