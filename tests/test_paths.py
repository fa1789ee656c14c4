"""Tests for iotz.paths module."""

from __future__ import annotations

from pathlib import Path

import pytest

from iotz.errors import PathError
from iotz.paths import resolve_for_docker, validate_project_path


class TestResolveForDocker:
    """Tests for resolve_for_docker."""

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("D:\\work\\blink", "/d/work/blink"),
            ("C:/Users/me/project/", "/c/Users/me/project"),
            ("C:\\", "/c"),
            ("/mnt/c/Users/me", "/c/Users/me"),
            ("/mnt/d", "/d"),
            ("/home/me/blink", "/home/me/blink"),
            ("/mnt/data/blink", "/mnt/data/blink"),
        ],
    )
    def test_conversion(self, path: str, expected: str) -> None:
        """Host paths map to docker volume paths."""
        assert resolve_for_docker(Path(path)) == expected


class TestValidateProjectPath:
    """Tests for validate_project_path."""

    def test_existing_directory(self, tmp_path: Path) -> None:
        """An existing directory is accepted."""
        assert validate_project_path(str(tmp_path)) == tmp_path.resolve()

    def test_missing(self, tmp_path: Path) -> None:
        """A missing path raises PathError."""
        with pytest.raises(PathError, match="does not exist"):
            validate_project_path(tmp_path / "nope")

    def test_file(self, tmp_path: Path) -> None:
        """A file instead of a directory raises PathError."""
        target = tmp_path / "iotz.json"
        target.write_text("{}")
        with pytest.raises(PathError, match="not a directory"):
            validate_project_path(target)
