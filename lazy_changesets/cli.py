"""CLI entry point for lazy-changesets."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from .config import changeset_dir, load_config
from .discovery import discover_packages
from .elicitor import ChangesetElicitor, SessionResult
from .initializer import initialize
from .models import RepositoryConfig
from .prompts import ClickPrompter, Prompter


def run_session(
    *,
    empty: bool = False,
    root: Path | None = None,
    prompter: Prompter | None = None,
) -> SessionResult:
    """Load config, discover packages and run one authoring session.

    An empty changeset needs neither config nor packages, so both steps are
    skipped and the changeset directory is created if it is missing.
    """
    root = root or Path.cwd()
    if empty:
        config = RepositoryConfig()
        packages = {}
    else:
        config = load_config(root)
        packages = discover_packages(config, root)

    elicitor = ChangesetElicitor(
        config,
        packages,
        prompter or ClickPrompter(),
        changeset_dir(root),
        empty=empty,
    )
    return elicitor.run()


@click.group(invoke_without_command=True)
@click.version_option(package_name="lazy-changesets")
@click.option(
    "--empty",
    is_flag=True,
    help="Write a changeset with no packages and no summary, without prompting.",
)
@click.pass_context
def cli(ctx: click.Context, empty: bool) -> None:
    """Record a changeset for the packages in this workspace."""
    if ctx.invoked_subcommand is None:
        run_session(empty=empty)


@cli.command()
def init() -> None:
    """Create .changeset/ with a default config and README."""
    initialize()


def main() -> None:
    """Console script entry point.

    click reports its own exceptions (including every fatal lazy-changesets
    error) and exits. Anything else is reported here with status 1.
    """
    try:
        cli()
    except Exception as exc:
        click.secho(f"Error: unexpected failure: {exc!r}", fg="red", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
