"""Manifest reading utilities.

A manifest is a file that declares a package: ``package.json`` for npm style
packages, ``pyproject.toml`` for Python packages. Each reader returns the
declared package name or raises a ManifestError describing why the file
cannot contribute one.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import tomlkit
from packaging.utils import canonicalize_name
from tomlkit.exceptions import TOMLKitError

from .errors import ManifestMissingName, ManifestUnreadable
from .models import ManifestKind


def read_package_json_name(path: Path) -> str:
    """Return the ``name`` field of a package.json file.

    npm names (including scoped ``@org/name`` names) are returned verbatim.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ManifestUnreadable(path, exc.strerror or str(exc)) from exc
    except json.JSONDecodeError as exc:
        raise ManifestUnreadable(path, f"invalid JSON ({exc})") from exc

    if not isinstance(data, dict):
        raise ManifestUnreadable(path, "top level is not a JSON object")
    return _require_name(path, data.get("name"))


def read_pyproject_name(path: Path) -> str:
    """Return the canonical ``[project].name`` of a pyproject.toml file.

    Names are normalized per PEP 503 (lowercase, hyphens instead of
    underscores). Ignore entries are normalized the same way before they
    are compared against these names.
    """
    try:
        doc = tomlkit.parse(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ManifestUnreadable(path, exc.strerror or str(exc)) from exc
    except TOMLKitError as exc:
        raise ManifestUnreadable(path, f"invalid TOML ({exc})") from exc

    project = doc.get("project", {})
    name = project.get("name") if isinstance(project, dict) else None
    return canonicalize_name(_require_name(path, name))


def _require_name(path: Path, name: object) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ManifestMissingName(path, "no package name declared")
    return str(name).strip()


# Checked in this order when a directory holds more than one manifest.
MANIFEST_READERS: dict[ManifestKind, Callable[[Path], str]] = {
    "package.json": read_package_json_name,
    "pyproject.toml": read_pyproject_name,
}
