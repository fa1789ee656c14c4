"""Pytest configuration and fixtures for iotz tests.

Makes the iotz package importable without installation and provides
a project directory fixture.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


@pytest.fixture
def mp_project(tmp_path: Path) -> Path:
    """A micro-python project directory with iotz.json and main.py."""
    (tmp_path / "iotz.json").write_text(
        json.dumps({"name": "blink", "toolchain": "micro-python"}), encoding="utf-8"
    )
    (tmp_path / "main.py").write_text("print('hello')\n", encoding="utf-8")
    return tmp_path
