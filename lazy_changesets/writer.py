"""Changeset serialization and persistence.

A changeset file is Markdown with a front matter block listing one package
per line, followed by the summary:

    ---
    "pkg-a": feat!
    "pkg-b": feat!
    ---

    Summary of the change.

A trailing ``!`` on the type key marks a breaking change.
"""

from __future__ import annotations

import json
import os
import re
import tempfile
from pathlib import Path

import yaml
from coolname import generate_slug

from .errors import ChangesetParseError, WriteFailure
from .models import Changeset, Release

BREAKING_MARKER = "!"

_FRONTMATTER_RE = re.compile(r"\A---\n(.*?)^---[ \t]*(?:\n|\Z)", re.DOTALL | re.MULTILINE)


def generate_changeset_id() -> str:
    """Return a random, human readable identifier such as ``brave-red-fox``.

    Collisions are unlikely enough that existing files are not checked.
    """
    return generate_slug(3)


def render_changeset(changeset: Changeset) -> str:
    """Serialize a changeset to its on-disk text."""
    lines = ["---"]
    for release in changeset.releases:
        marker = BREAKING_MARKER if release.breaking else ""
        # JSON string quoting is valid YAML and survives any package name
        package = json.dumps(release.package, ensure_ascii=False)
        lines.append(f"{package}: {release.type}{marker}")
    lines.append("---")
    text = "\n".join(lines) + "\n"
    if changeset.summary:
        text += f"\n{changeset.summary}\n"
    return text


def parse_changeset(text: str, changeset_id: str) -> Changeset:
    """Parse changeset text written by render_changeset.

    Raises:
        ChangesetParseError: If the front matter block is missing or is not
            a mapping of package name to type key.
    """
    match = _FRONTMATTER_RE.match(text)
    if not match:
        raise ChangesetParseError("missing front matter block")

    try:
        # BaseLoader keeps every scalar a string ("no", "on", "1" stay as typed)
        data = yaml.load(match.group(1), Loader=yaml.BaseLoader)
    except yaml.YAMLError as exc:
        raise ChangesetParseError(f"invalid front matter: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ChangesetParseError("front matter must map package names to types")

    releases = []
    for package, value in data.items():
        if not isinstance(value, str) or not value.rstrip(BREAKING_MARKER):
            raise ChangesetParseError(f"invalid change type for {package!r}: {value!r}")
        breaking = value.endswith(BREAKING_MARKER)
        change_type = value[: -len(BREAKING_MARKER)] if breaking else value
        releases.append(Release(package=package, type=change_type, breaking=breaking))

    return Changeset(
        id=changeset_id, releases=tuple(releases), summary=text[match.end() :]
    )


def read_changeset(path: Path) -> Changeset:
    """Load a changeset file, using its stem as the identifier."""
    return parse_changeset(path.read_text(encoding="utf-8"), path.stem)


def _current_umask() -> int:
    # os.umask can only be read by setting it
    umask = os.umask(0)
    os.umask(umask)
    return umask


def write_changeset(changeset: Changeset, directory: Path) -> Path:
    """Write a changeset as ``<directory>/<id>.md``.

    The directory is created if needed. Content goes to a temporary file in
    the same directory which is then renamed into place, so a failed write
    never leaves a partial changeset behind. The file gets the permissions
    a plain open() would give it under the process umask.

    Raises:
        WriteFailure: On any filesystem error.
    """
    dest = directory / f"{changeset.id}.md"
    text = render_changeset(changeset)

    try:
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=".", suffix=".md.tmp")
    except OSError as exc:
        raise WriteFailure(dest, exc.strerror or str(exc)) from exc

    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
            fh.write(text)
        # mkstemp creates 0600; give the file the mode open() would
        os.chmod(tmp_name, 0o666 & ~_current_umask())
        os.replace(tmp_name, dest)
    except OSError as exc:
        Path(tmp_name).unlink(missing_ok=True)
        raise WriteFailure(dest, exc.strerror or str(exc)) from exc

    return dest
