"""Exception types for lazy-changesets.

Fatal errors derive from ``click.ClickException`` so the CLI reports them as
``Error: <message>`` and exits with status 1. The remaining exceptions are
recoverable and are always handled where they are raised.
"""

from __future__ import annotations

from pathlib import Path

import click


class LazyChangesetsError(click.ClickException):
    """Base class for errors that end the process with a non-zero status."""


class ConfigurationMissing(LazyChangesetsError):
    """The config directory does not exist and initialization was not requested."""

    def __init__(self, directory: Path) -> None:
        super().__init__(
            f"{directory} does not exist. Run `lazy-changesets init` first."
        )
        self.directory = directory


class ConfigurationInvalid(LazyChangesetsError):
    """The config file exists but cannot be parsed or validated."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Invalid config in {path}: {reason}")
        self.path = path
        self.reason = reason


class WriteFailure(LazyChangesetsError):
    """A changeset file could not be persisted."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Could not write {path}: {reason}")
        self.path = path
        self.reason = reason


class ManifestError(Exception):
    """A manifest file cannot contribute a package. Never fatal."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class ManifestUnreadable(ManifestError):
    """The manifest could not be read or parsed."""


class ManifestMissingName(ManifestError):
    """The manifest parsed but declares no usable package name."""


class ChangesetParseError(ValueError):
    """Changeset text does not follow the front matter format."""


class UserCancelled(Exception):
    """The user aborted an interactive prompt (Ctrl-C or end of input)."""
