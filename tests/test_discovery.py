"""Tests for lazy_changesets.discovery."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from lazy_changesets.discovery import (
    discover_packages,
    iter_manifests,
    sorted_package_names,
)
from lazy_changesets.models import Package, RepositoryConfig


class TestDiscoverPackages:
    """Tests for discover_packages()."""

    def test_finds_nested_packages(
        self, tmp_path: Path, write_manifest: Callable[..., Path]
    ) -> None:
        """Manifests at any depth are found."""
        write_manifest("packages/a", "lib-a")
        write_manifest("packages/nested/b", "lib-b")

        packages = discover_packages(RepositoryConfig(), tmp_path)

        assert packages == {
            "lib-a": Package(name="lib-a", path="packages/a"),
            "lib-b": Package(name="lib-b", path="packages/nested/b"),
        }

    def test_root_manifest_has_dot_path(
        self, tmp_path: Path, write_manifest: Callable[..., Path]
    ) -> None:
        """The workspace root itself is reported as "."."""
        write_manifest(".", "monorepo-root")

        packages = discover_packages(RepositoryConfig(), tmp_path)

        assert packages["monorepo-root"].path == "."

    @pytest.mark.parametrize(
        "excluded", ["node_modules", "dist", "build", ".git", ".venv"]
    )
    def test_excluded_directories_never_appear(
        self,
        tmp_path: Path,
        write_manifest: Callable[..., Path],
        excluded: str,
    ) -> None:
        """Nothing under an excluded directory is scanned."""
        write_manifest("packages/a", "lib-a")
        write_manifest(f"packages/a/{excluded}/dep", "hidden-dep")
        write_manifest(f"{excluded}/other", "hidden-other")

        packages = discover_packages(RepositoryConfig(), tmp_path)

        assert list(packages) == ["lib-a"]

    def test_missing_name_is_skipped_without_aborting(
        self,
        tmp_path: Path,
        write_manifest: Callable[..., Path],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """A nameless manifest is warned about and later manifests still load."""
        write_manifest("packages/a")
        write_manifest("packages/b", "lib-b")
        write_manifest("packages/c", raw="{broken")
        write_manifest("packages/d", "lib-d")

        packages = discover_packages(RepositoryConfig(), tmp_path)

        assert sorted(packages) == ["lib-b", "lib-d"]
        err = capsys.readouterr().err
        assert "packages/a/package.json" in err
        assert "packages/c/package.json" in err

    def test_ignored_packages_are_skipped(
        self,
        tmp_path: Path,
        write_manifest: Callable[..., Path],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Ignored names are reported and left out."""
        write_manifest("packages/a", "lib-a")
        write_manifest("packages/b", "lib-b")
        config = RepositoryConfig(ignore=frozenset({"lib-b"}))

        packages = discover_packages(config, tmp_path)

        assert list(packages) == ["lib-a"]
        assert "lib-b: ignored by config" in capsys.readouterr().out

    def test_ignore_matches_normalized_pyproject_names(
        self,
        tmp_path: Path,
        write_manifest: Callable[..., Path],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """An ignore entry spelled as in pyproject.toml still skips the package."""
        write_manifest(
            "py/tool", filename="pyproject.toml", raw='[project]\nname = "My_Pkg"\n'
        )
        write_manifest("packages/a", "lib-a")
        config = RepositoryConfig(ignore=frozenset({"My_Pkg"}))

        packages = discover_packages(config, tmp_path)

        assert list(packages) == ["lib-a"]
        assert "my-pkg: ignored by config" in capsys.readouterr().out

    def test_ignore_is_exact_for_package_json(
        self, tmp_path: Path, write_manifest: Callable[..., Path]
    ) -> None:
        """package.json names are compared verbatim."""
        write_manifest("packages/a", "My_Pkg")
        config = RepositoryConfig(ignore=frozenset({"my-pkg"}))

        assert list(discover_packages(config, tmp_path)) == ["My_Pkg"]

    def test_duplicate_name_last_scanned_wins(
        self,
        tmp_path: Path,
        write_manifest: Callable[..., Path],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Directories are walked in sorted order, so "b" is scanned after "a"."""
        write_manifest("packages/a", "lib-x")
        write_manifest("packages/b", "lib-x")

        packages = discover_packages(RepositoryConfig(), tmp_path)

        assert packages["lib-x"].path == "packages/b"
        assert "Duplicate package name 'lib-x'" in capsys.readouterr().err

    def test_reads_pyproject_manifests(
        self, tmp_path: Path, write_manifest: Callable[..., Path]
    ) -> None:
        """pyproject.toml names are read canonicalized."""
        write_manifest(
            "py/tool",
            filename="pyproject.toml",
            raw='[project]\nname = "py_tool"\n',
        )

        packages = discover_packages(RepositoryConfig(), tmp_path)

        assert packages["py-tool"] == Package(
            name="py-tool", path="py/tool", manifest="pyproject.toml"
        )

    def test_empty_workspace(self, tmp_path: Path) -> None:
        """No manifests means no packages."""
        assert discover_packages(RepositoryConfig(), tmp_path) == {}

    def test_uses_cwd_by_default(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        write_manifest: Callable[..., Path],
    ) -> None:
        """Without a root the working directory is scanned."""
        write_manifest("packages/a", "lib-a")
        monkeypatch.chdir(tmp_path)

        assert list(discover_packages(RepositoryConfig())) == ["lib-a"]


class TestIterManifests:
    """Tests for iter_manifests()."""

    def test_yields_both_kinds_in_one_directory(
        self, tmp_path: Path, write_manifest: Callable[..., Path]
    ) -> None:
        """package.json comes before pyproject.toml."""
        write_manifest("pkg", "lib-a")
        write_manifest("pkg", filename="pyproject.toml", raw='[project]\nname = "a"\n')

        kinds = [kind for kind, _ in iter_manifests(tmp_path)]

        assert kinds == ["package.json", "pyproject.toml"]


class TestSortedPackageNames:
    """Tests for sorted_package_names()."""

    def test_lexicographic(self) -> None:
        """Names are listed alphabetically."""
        packages = {
            name: Package(name=name, path=name) for name in ["zeta", "alpha", "mid"]
        }
        assert sorted_package_names(packages) == ["alpha", "mid", "zeta"]
