"""iotz - build and compile projects inside per-toolchain Docker containers."""

from __future__ import annotations

__version__ = "0.1.0"
