"""Repository configuration loading.

The config lives in ``.changeset/config.json`` at the workspace root. Every
field falls back to a built-in default when absent, and the change type
catalog is replaced as a whole when the file provides one.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .errors import ConfigurationInvalid, ConfigurationMissing
from .models import RepositoryConfig

CHANGESET_DIR = ".changeset"
CONFIG_FILE = "config.json"


def changeset_dir(root: Path | None = None) -> Path:
    """Return the changeset directory for the given workspace root."""
    return (root or Path.cwd()) / CHANGESET_DIR


def config_path(root: Path | None = None) -> Path:
    """Return the config file path for the given workspace root."""
    return changeset_dir(root) / CONFIG_FILE


def load_config(root: Path | None = None) -> RepositoryConfig:
    """Load and normalize the repository config.

    Args:
        root: Workspace root. Defaults to the current working directory.

    Returns:
        A frozen RepositoryConfig with every default applied. When the config
        directory exists but holds no config file, the built-in defaults.

    Raises:
        ConfigurationMissing: If the ``.changeset`` directory does not exist.
        ConfigurationInvalid: If the file cannot be read, is not a JSON
            object, or fails validation.
    """
    directory = changeset_dir(root)
    if not directory.is_dir():
        raise ConfigurationMissing(directory)

    path = directory / CONFIG_FILE
    if not path.exists():
        return RepositoryConfig()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigurationInvalid(path, exc.strerror or str(exc)) from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationInvalid(path, str(exc)) from exc

    return parse_config(raw, path)


def parse_config(raw: Any, path: Path) -> RepositoryConfig:
    """Validate already-decoded config data.

    ``path`` is only used for error messages.
    """
    if not isinstance(raw, dict):
        raise ConfigurationInvalid(path, "top level must be a JSON object")
    try:
        return RepositoryConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigurationInvalid(path, _describe(exc)) from exc


def default_config_document() -> dict[str, Any]:
    """Return the JSON document written by ``lazy-changesets init``.

    Loading this document yields a config equal to ``RepositoryConfig()``.
    """
    doc = RepositoryConfig().model_dump(by_alias=True, exclude_none=True, mode="json")
    # frozenset dumps in arbitrary order
    doc["ignore"] = sorted(doc["ignore"])
    return doc


def _describe(exc: ValidationError) -> str:
    """Flatten pydantic errors into one line per problem."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "<root>"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)
