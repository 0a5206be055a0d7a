"""Data models for lazy-changesets.

These Pydantic models represent the core data structures passed between
configuration loading, package discovery, elicitation and writing.
"""

from __future__ import annotations

import re
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

ReleaseType = Literal["major", "minor", "patch"]
Access = Literal["restricted", "public"]
InternalDependencyPolicy = Literal["patch", "minor", "major", "none"]
ManifestKind = Literal["package.json", "pyproject.toml"]

# Type keys are written unquoted into changeset front matter, where a
# trailing "!" marks a breaking change.
TYPE_KEY_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")


def _drop_nulls(data: Any) -> Any:
    """Treat an explicit JSON null like an absent key so the default applies."""
    if isinstance(data, dict):
        return {key: value for key, value in data.items() if value is not None}
    return data


class ChangeType(BaseModel):
    """One entry of the change type catalog.

    The machine key (e.g. ``feat``) is the key of the catalog mapping, not a
    field of the entry.

    Attributes:
        display_name: Human readable heading, e.g. "New Features".
        emoji: Label shown in front of the entry in menus.
        sort: Rank used to order menus. Lower comes first.
        release_type: Release impact hint, or None when the type has none.
        prompt_breaking_change: Whether selecting this type asks if the
            change is breaking.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    display_name: str = Field(alias="displayName")
    emoji: str
    sort: int
    release_type: ReleaseType | None = Field(default=None, alias="releaseType")
    prompt_breaking_change: bool = Field(default=False, alias="promptBreakingChange")

    @model_validator(mode="before")
    @classmethod
    def _nulls_mean_default(cls, data: Any) -> Any:
        return _drop_nulls(data)


def default_change_types() -> dict[str, ChangeType]:
    """Build the built-in change type catalog.

    A fresh mapping is returned on every call so callers never share state.
    """
    return {
        "feat": ChangeType(
            display_name="New Features",
            emoji="🚀",
            sort=0,
            release_type="minor",
            prompt_breaking_change=True,
        ),
        "fix": ChangeType(
            display_name="Bug Fixes", emoji="🐛", sort=1, prompt_breaking_change=True
        ),
        "perf": ChangeType(
            display_name="Performance Improvements",
            emoji="⚡️",
            sort=2,
            prompt_breaking_change=True,
        ),
        "chore": ChangeType(display_name="Chores", emoji="🏠", sort=3),
        "docs": ChangeType(display_name="Documentation", emoji="📚", sort=4),
        "style": ChangeType(display_name="Styles", emoji="🎨", sort=5),
        "refactor": ChangeType(
            display_name="Refactoring", emoji="♻️", sort=6, prompt_breaking_change=True
        ),
        "test": ChangeType(display_name="Tests", emoji="✅", sort=7),
        "build": ChangeType(
            display_name="Build", emoji="📦", sort=8, prompt_breaking_change=True
        ),
        "ci": ChangeType(display_name="Automation", emoji="🤖", sort=9),
        "revert": ChangeType(
            display_name="Reverts", emoji="⏪", sort=10, prompt_breaking_change=True
        ),
    }


class LazyChangesetsSettings(BaseModel):
    """The ``lazyChangesets`` section of the config file.

    A configured ``types`` mapping replaces the built-in catalog as a whole.
    Entries are never merged with the defaults.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    types: dict[str, ChangeType] = Field(default_factory=default_change_types)

    @model_validator(mode="before")
    @classmethod
    def _nulls_mean_default(cls, data: Any) -> Any:
        return _drop_nulls(data)

    @field_validator("types")
    @classmethod
    def _check_catalog(cls, types: dict[str, ChangeType]) -> dict[str, ChangeType]:
        if not types:
            raise ValueError("change type catalog must not be empty")
        ranks: dict[int, str] = {}
        for key, change_type in types.items():
            if not TYPE_KEY_RE.match(key):
                raise ValueError(
                    f"change type key {key!r} must start with a letter or digit "
                    "and contain only letters, digits, '.', '_' or '-'"
                )
            if change_type.sort in ranks:
                raise ValueError(
                    f"change types {ranks[change_type.sort]!r} and {key!r} "
                    f"share sort rank {change_type.sort}"
                )
            ranks[change_type.sort] = key
        return types


class RepositoryConfig(BaseModel):
    """Repository level configuration, read once per invocation.

    Every field has a default so a partial (or absent) config file still
    yields a complete config. Unknown keys in the file are ignored.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    access: Access = "restricted"
    base_branch: str = Field(default="main", alias="baseBranch")
    update_internal_dependencies: InternalDependencyPolicy = Field(
        default="patch", alias="updateInternalDependencies"
    )
    ignore: frozenset[str] = Field(default_factory=frozenset)
    lazy_changesets: LazyChangesetsSettings = Field(
        default_factory=LazyChangesetsSettings, alias="lazyChangesets"
    )

    @model_validator(mode="before")
    @classmethod
    def _nulls_mean_default(cls, data: Any) -> Any:
        return _drop_nulls(data)

    @property
    def change_types(self) -> dict[str, ChangeType]:
        """The active change type catalog."""
        return self.lazy_changesets.types


class Package(BaseModel):
    """A package discovered in the workspace.

    Attributes:
        name: Package name from its manifest.
        path: POSIX path of the package directory relative to the workspace
              root ("." for the root itself).
        manifest: Which kind of manifest declared the package.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    path: str
    manifest: ManifestKind = "package.json"


class Release(BaseModel):
    """A single package line of a changeset."""

    model_config = ConfigDict(frozen=True)

    package: str
    type: str
    breaking: bool = False


class Changeset(BaseModel):
    """Everything recorded by one authoring session.

    Attributes:
        id: Human readable identifier, also the file stem.
        releases: One entry per selected package. Empty for an empty changeset.
        summary: Free text description. Empty only for an empty changeset.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    releases: tuple[Release, ...] = ()
    summary: str = ""

    @field_validator("summary")
    @classmethod
    def _strip_summary(cls, summary: str) -> str:
        return summary.strip()

    @property
    def is_empty(self) -> bool:
        return not self.releases and not self.summary
