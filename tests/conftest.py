"""Shared test fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pytest

from lazy_changesets.errors import UserCancelled


class FakePrompter:
    """Prompter answering from a script instead of the terminal.

    Each answer is consumed by the next prompt call. An exception instance in
    the script is raised instead of returned.
    """

    def __init__(self, *answers: Any) -> None:
        self.answers = list(answers)
        self.calls: list[tuple[str, str, Any]] = []

    def _next(self, kind: str, message: str, choices: Any = None) -> Any:
        self.calls.append((kind, message, choices))
        if not self.answers:
            raise AssertionError(f"unexpected {kind} prompt: {message}")
        answer = self.answers.pop(0)
        if isinstance(answer, BaseException):
            raise answer
        return answer

    def select(self, message: str, choices: Sequence[tuple[str, Any]]) -> Any:
        answer = self._next("select", message, list(choices))
        assert answer in [value for _, value in choices]
        return answer

    def checkbox(self, message: str, choices: Sequence[str]) -> list[str]:
        return self._next("checkbox", message, list(choices))

    def confirm(self, message: str, default: bool = False) -> bool:
        return self._next("confirm", message, default)

    def text(self, message: str) -> str:
        return self._next("text", message)

    @property
    def kinds(self) -> list[str]:
        return [kind for kind, _, _ in self.calls]


@pytest.fixture
def cancelled() -> UserCancelled:
    return UserCancelled()


@pytest.fixture
def write_manifest(tmp_path: Path) -> Callable[..., Path]:
    """Write a package.json (or raw manifest text) below tmp_path."""

    def _write(
        rel_dir: str,
        name: str | None = None,
        *,
        filename: str = "package.json",
        raw: str | None = None,
    ) -> Path:
        directory = tmp_path / rel_dir
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / filename
        if raw is None:
            data: dict[str, Any] = {"version": "1.0.0"}
            if name is not None:
                data["name"] = name
            raw = json.dumps(data)
        path.write_text(raw)
        return path

    return _write


@pytest.fixture
def changeset_root(tmp_path: Path) -> Path:
    """Workspace root with an existing, empty .changeset directory."""
    (tmp_path / ".changeset").mkdir()
    return tmp_path


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[dict[str, Any]], Path]:
    """Write .changeset/config.json below tmp_path."""

    def _write(data: dict[str, Any]) -> Path:
        directory = tmp_path / ".changeset"
        directory.mkdir(exist_ok=True)
        path = directory / "config.json"
        path.write_text(json.dumps(data))
        return path

    return _write


@pytest.fixture
def make_prompter() -> Callable[..., FakePrompter]:
    """Build a FakePrompter from scripted answers."""
    return FakePrompter
