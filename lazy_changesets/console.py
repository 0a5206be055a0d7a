"""Terminal output helpers.

Thin wrappers around click's echo functions so every component prints
progress, notices and warnings the same way.
"""

from __future__ import annotations

import click


def step(msg: str) -> None:
    """Print a visually distinct step header."""
    click.echo(f"\n{'─' * 60}\n{msg}\n{'─' * 60}")


def info(msg: str) -> None:
    """Print an indented informational line."""
    click.echo(f"  {msg}")


def success(msg: str) -> None:
    """Print a line marking something that was done."""
    click.secho(f"✓ {msg}", fg="green")


def warn(msg: str) -> None:
    """Print a warning to stderr.

    Used for recoverable problems, e.g. a manifest that had to be skipped.
    """
    click.secho(f"Warning: {msg}", fg="yellow", err=True)
