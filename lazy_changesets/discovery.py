"""Workspace package discovery.

Walks the workspace tree for manifest files and builds a name-keyed map of
packages. Problems with individual manifests are reported as warnings and
never abort the scan.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

from packaging.utils import canonicalize_name

from .console import info, step, warn
from .errors import ManifestError
from .manifest import MANIFEST_READERS
from .models import ManifestKind, Package, RepositoryConfig

# Dependency caches, build output and tool state that never hold packages
# a changeset should name.
EXCLUDED_DIRS = frozenset(
    {
        "node_modules",
        "dist",
        "build",
        ".git",
        ".venv",
        "venv",
        "__pycache__",
        ".changeset",
    }
)


def iter_manifests(root: Path) -> Iterator[tuple[ManifestKind, Path]]:
    """Yield ``(kind, path)`` for every manifest under root.

    Directories are walked in sorted order and excluded directory names are
    pruned before descending, so the order is deterministic and nothing
    below an excluded directory is ever visited.
    """
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in EXCLUDED_DIRS)
        present = set(filenames)
        for kind in MANIFEST_READERS:
            if kind in present:
                yield kind, Path(dirpath) / kind


def discover_packages(
    config: RepositoryConfig, root: Path | None = None
) -> dict[str, Package]:
    """Scan the workspace and discover all packages.

    Args:
        config: Active repository config. Packages named in ``config.ignore``
                are skipped. Entries match pyproject.toml names under
                PEP 503 normalization.
        root: Workspace root. Defaults to the current working directory.

    Returns:
        Map of package name to Package. When two manifests declare the same
        name, the one scanned last wins and a warning is printed.
    """
    step("Discovering workspace packages")

    root = root or Path.cwd()
    packages: dict[str, Package] = {}
    # pyproject names are read back canonicalized, so match them that way
    canonical_ignore = {canonicalize_name(entry) for entry in config.ignore}

    for kind, manifest_path in iter_manifests(root):
        try:
            name = MANIFEST_READERS[kind](manifest_path)
        except ManifestError as exc:
            warn(f"Skipping {_relative(manifest_path, root)}: {exc.reason}")
            continue

        if name in config.ignore or (
            kind == "pyproject.toml" and name in canonical_ignore
        ):
            info(f"{name}: ignored by config")
            continue

        package_dir = _relative(manifest_path.parent, root)
        if name in packages:
            warn(
                f"Duplicate package name {name!r}: {package_dir} replaces "
                f"{packages[name].path}"
            )
        packages[name] = Package(name=name, path=package_dir, manifest=kind)

    for name in sorted_package_names(packages):
        info(f"{name} ({packages[name].path})")
    if not packages:
        info("<none>")

    return packages


def sorted_package_names(packages: dict[str, Package]) -> list[str]:
    """Return package names in the lexicographic order used for listings."""
    return sorted(packages)


def _relative(path: Path, root: Path) -> str:
    rel = path.relative_to(root).as_posix()
    return rel or "."
