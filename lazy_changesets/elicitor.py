"""Interactive changeset authoring session.

The session is an explicit state machine:

    START ─┬─(empty)──────────────────────────────────────────────┐
           └→ SELECT_PACKAGES → SELECT_TYPE → [CONFIRM_BREAKING] → ENTER_MESSAGE → WRITE
                  │                                                              │
                  └→ NO_PACKAGES / NOTHING_SELECTED                        WRITTEN

UserCancelled raised while in any state moves the session to CANCELLED.
Only WRITE touches the filesystem, so a cancelled session never leaves a
file behind.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .console import info, step, success, warn
from .errors import UserCancelled
from .models import Changeset, ChangeType, Package, Release, RepositoryConfig
from .prompts import Prompter
from .selection import SelectionOutcome, resolve_selection
from .writer import generate_changeset_id, write_changeset

EMPTY_SUMMARY_MESSAGE = "Please enter a summary of the change."


class State(str, Enum):
    START = "start"
    SELECT_PACKAGES = "select_packages"
    SELECT_TYPE = "select_type"
    CONFIRM_BREAKING = "confirm_breaking"
    ENTER_MESSAGE = "enter_message"
    WRITE = "write"
    # Terminal states
    WRITTEN = "written"
    CANCELLED = "cancelled"
    NO_PACKAGES = "no_packages"
    NOTHING_SELECTED = "nothing_selected"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL


_TERMINAL = frozenset(
    {State.WRITTEN, State.CANCELLED, State.NO_PACKAGES, State.NOTHING_SELECTED}
)


@dataclass
class SessionResult:
    outcome: State
    path: Path | None = None
    changeset: Changeset | None = None


@dataclass
class _Draft:
    """Answers collected so far."""

    packages: tuple[str, ...] = ()
    change_type: str = ""
    breaking: bool = False
    summary: str = ""
    trail: list[State] = field(default_factory=list)


def type_menu(catalog: dict[str, ChangeType]) -> list[tuple[str, str]]:
    """Return ``(label, key)`` menu entries in ascending sort order.

    The catalog's own iteration order is irrelevant.
    """
    ordered = sorted(catalog.items(), key=lambda item: item[1].sort)
    return [(f"{ct.emoji} {key}: {ct.display_name}", key) for key, ct in ordered]


def validate_summary(summary: str) -> str | None:
    """Return a validation message for an unusable summary, else None."""
    if not summary.strip():
        return EMPTY_SUMMARY_MESSAGE
    return None


class ChangesetElicitor:
    """Drive one authoring session from package selection to written file.

    Args:
        config: Active repository config (supplies the change type catalog).
        packages: Discovered packages, keyed by name.
        prompter: Renders the questions.
        directory: Where the changeset file is written.
        empty: Skip every question and write an empty changeset.
    """

    def __init__(
        self,
        config: RepositoryConfig,
        packages: dict[str, Package],
        prompter: Prompter,
        directory: Path,
        *,
        empty: bool = False,
    ) -> None:
        self.config = config
        self.packages = packages
        self.prompter = prompter
        self.directory = directory
        self.empty = empty
        self._draft = _Draft()
        self._result = SessionResult(outcome=State.START)
        self._handlers: dict[State, Callable[[], State]] = {
            State.START: self._start,
            State.SELECT_PACKAGES: self._select_packages,
            State.SELECT_TYPE: self._select_type,
            State.CONFIRM_BREAKING: self._confirm_breaking,
            State.ENTER_MESSAGE: self._enter_message,
            State.WRITE: self._write,
        }

    @property
    def trail(self) -> list[State]:
        """States visited so far, in order."""
        return list(self._draft.trail)

    def run(self) -> SessionResult:
        state = State.START
        while not state.is_terminal:
            self._draft.trail.append(state)
            try:
                state = self._handlers[state]()
            except UserCancelled:
                state = State.CANCELLED
        self._draft.trail.append(state)
        self._result.outcome = state
        self._report(state)
        return self._result

    # -- states --------------------------------------------------------------

    def _start(self) -> State:
        return State.WRITE if self.empty else State.SELECT_PACKAGES

    def _select_packages(self) -> State:
        selection = resolve_selection(self.packages, self.prompter)
        if selection.outcome is SelectionOutcome.NO_PACKAGES:
            return State.NO_PACKAGES
        if selection.outcome is SelectionOutcome.NOTHING_SELECTED:
            return State.NOTHING_SELECTED
        self._draft.packages = selection.packages
        if len(self.packages) == 1:
            info(f"Using the only package: {selection.packages[0]}")
        return State.SELECT_TYPE

    def _select_type(self) -> State:
        catalog = self.config.change_types
        self._draft.change_type = self.prompter.select(
            "What type of change are you making?", type_menu(catalog)
        )
        if catalog[self._draft.change_type].prompt_breaking_change:
            return State.CONFIRM_BREAKING
        self._draft.breaking = False
        return State.ENTER_MESSAGE

    def _confirm_breaking(self) -> State:
        self._draft.breaking = self.prompter.confirm(
            "Is this a breaking change?", default=False
        )
        return State.ENTER_MESSAGE

    def _enter_message(self) -> State:
        while True:
            summary = self.prompter.text("Summary")
            problem = validate_summary(summary)
            if problem is None:
                break
            warn(problem)
        self._draft.summary = summary.strip()
        return State.WRITE

    def _write(self) -> State:
        changeset = self._build_changeset()
        self._result.changeset = changeset
        self._result.path = write_changeset(changeset, self.directory)
        return State.WRITTEN

    # -- helpers -------------------------------------------------------------

    def _build_changeset(self) -> Changeset:
        changeset_id = generate_changeset_id()
        if self.empty:
            return Changeset(id=changeset_id)

        draft = self._draft
        # Same type and breaking flag for every selected package
        releases = tuple(
            Release(package=name, type=draft.change_type, breaking=draft.breaking)
            for name in draft.packages
        )
        return Changeset(id=changeset_id, releases=releases, summary=draft.summary)

    def _report(self, state: State) -> None:
        if state is State.WRITTEN:
            step("Changeset written")
            success(str(self._result.path))
        elif state is State.CANCELLED:
            info("Cancelled. No changeset written.")
        elif state is State.NO_PACKAGES:
            info("No packages found. No changeset written.")
        elif state is State.NOTHING_SELECTED:
            info("No packages selected. No changeset written.")
