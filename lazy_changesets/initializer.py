"""First-time setup of the ``.changeset`` directory."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

from pydantic import BaseModel, Field

from .config import CONFIG_FILE, changeset_dir, default_config_document
from .console import info, step, success
from .errors import WriteFailure

TEMPLATES_DIR = Path(__file__).parent / "templates"
README_FILE = "README.md"


class InitReport(BaseModel):
    """Which pieces ``initialize`` created and which were already there."""

    created: list[Path] = Field(default_factory=list)
    existing: list[Path] = Field(default_factory=list)


def initialize(root: Path | None = None) -> InitReport:
    """Create the changeset directory, default config and README.

    Each piece is created only if it is missing, so running this again (or
    after a partial setup) never overwrites anything.

    Raises:
        WriteFailure: If a missing piece cannot be created.
    """
    step("Initializing changesets")

    root = root or Path.cwd()
    directory = changeset_dir(root)
    report = InitReport()

    _ensure(report, root, directory, _make_dir)
    _ensure(report, root, directory / CONFIG_FILE, _write_default_config)
    _ensure(report, root, directory / README_FILE, _write_readme)

    return report


def _make_dir(path: Path) -> None:
    path.mkdir(parents=True)


def _write_default_config(path: Path) -> None:
    text = json.dumps(default_config_document(), indent=2, ensure_ascii=False)
    # "x" mode: never clobber a file created since the existence check
    with open(path, "x", encoding="utf-8") as fh:
        fh.write(text + "\n")


def _write_readme(path: Path) -> None:
    with open(path, "x", encoding="utf-8") as fh:
        fh.write((TEMPLATES_DIR / README_FILE).read_text(encoding="utf-8"))


def _ensure(
    report: InitReport,
    root: Path,
    path: Path,
    create: Callable[[Path], None],
) -> None:
    """Create ``path`` with ``create`` unless it already exists."""
    shown = path.relative_to(root)
    if path.exists():
        report.existing.append(path)
        info(f"{shown} already exists")
        return

    try:
        create(path)
    except OSError as exc:
        raise WriteFailure(path, exc.strerror or str(exc)) from exc

    report.created.append(path)
    success(f"Created {shown}")
