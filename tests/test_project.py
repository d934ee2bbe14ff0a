"""Tests for project root discovery."""

from __future__ import annotations

from pathlib import Path

from codecompanion.project import find_project_root


def test_finds_nearest_marker_directory(tmp_path: Path) -> None:
    root = tmp_path / "repo"
    (root / ".git").mkdir(parents=True)
    nested = root / "a" / "b"
    nested.mkdir(parents=True)

    assert find_project_root(nested) == root.resolve()


def test_marker_files_count(tmp_path: Path) -> None:
    root = tmp_path / "crate"
    root.mkdir()
    (root / "Cargo.toml").write_text("[package]\n", encoding="utf-8")

    assert find_project_root(root) == root.resolve()


def test_start_may_be_a_file(tmp_path: Path) -> None:
    root = tmp_path / "web"
    root.mkdir()
    (root / "package.json").write_text("{}", encoding="utf-8")
    source = root / "index.js"
    source.write_text("", encoding="utf-8")

    assert find_project_root(source) == root.resolve()


def test_innermost_project_wins(tmp_path: Path) -> None:
    outer = tmp_path / "outer"
    inner = outer / "vendor" / "inner"
    (outer / ".git").mkdir(parents=True)
    (inner / ".hg").mkdir(parents=True)

    assert find_project_root(inner) == inner.resolve()


def test_custom_markers(tmp_path: Path) -> None:
    root = tmp_path / "py"
    root.mkdir()
    (root / "pyproject.toml").write_text("", encoding="utf-8")

    assert find_project_root(root, markers=("pyproject.toml",)) == root.resolve()


def test_returns_none_without_markers(tmp_path: Path) -> None:
    nested = tmp_path / "plain"
    nested.mkdir()

    assert find_project_root(nested, markers=("no-such-marker-anywhere.xyz",)) is None
