"""Toolchain registry for iotz.

Maps toolchain identifiers to plugin instances. Lookups never exit the
process: :meth:`ToolchainRegistry.lookup` returns None for unknown names
and :meth:`ToolchainRegistry.require_extension` raises
:class:`~iotz.errors.UnknownToolchainError`, which the CLI reports as fatal.

Auto-detection asks every plugin in registration order and the first
positive answer wins.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..errors import ToolchainError, UnknownToolchainError
from ..logging import get_logger
from .base import CONTAINER_INIT, BuildResult, Toolchain

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

logger = get_logger(__name__)

__all__ = [
    "CONTAINER_INIT",
    "BuildResult",
    "Toolchain",
    "ToolchainRegistry",
    "default_registry",
]


class ToolchainRegistry:
    """Ordered collection of toolchain plugins."""

    def __init__(self) -> None:
        self._toolchains: dict[str, Toolchain] = {}
        self._aliases: dict[str, str] = {}

    def register(self, toolchain: Toolchain) -> Toolchain:
        """Register a plugin under its name and aliases."""
        if not toolchain.name:
            raise ToolchainError(f"{toolchain!r} has no name")
        key = toolchain.name.lower()
        if key in self._toolchains:
            raise ToolchainError(f"toolchain '{toolchain.name}' is already registered")
        self._toolchains[key] = toolchain
        for alias in toolchain.aliases:
            self._aliases[alias.lower()] = key
        return toolchain

    def __iter__(self) -> Iterator[Toolchain]:
        return iter(self._toolchains.values())

    def __len__(self) -> int:
        return len(self._toolchains)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self._canonical(name) is not None

    def names(self) -> list[str]:
        """Canonical names in registration order."""
        return [t.name for t in self._toolchains.values()]

    def _canonical(self, name: str) -> str | None:
        key = name.lower()
        if key in self._toolchains:
            return key
        return self._aliases.get(key)

    def lookup(self, name: str | None) -> Toolchain | None:
        """Return the plugin for ``name`` (or one of its aliases), else None."""
        if not name:
            return None
        key = self._canonical(name)
        return self._toolchains[key] if key else None

    def is_toolchain(self, name: str | None) -> bool:
        """True if ``name`` is a registered toolchain name or alias."""
        return self.lookup(name) is not None

    def get_toolchain(self, name: str, strict: bool = False) -> str | None:
        """Resolve ``name`` to its canonical identifier.

        Unknown names come back unchanged, or as None when ``strict``.
        """
        toolchain = self.lookup(name)
        if toolchain is not None:
            return toolchain.name
        return None if strict else name

    def require_extension(self, name: str | None) -> Toolchain:
        """Return the plugin for ``name``.

        Raises:
            UnknownToolchainError: If no plugin is registered under ``name``.
        """
        toolchain = self.lookup(name)
        if toolchain is None:
            known = ", ".join(self.names()) or "none"
            raise UnknownToolchainError(f"unknown toolchain '{name}' (known: {known})")
        return toolchain

    def toolchain_for_command(self, command: str | None) -> Toolchain | None:
        """Return the first plugin that declares ``command`` as one of its verbs."""
        if not command:
            return None
        for toolchain in self:
            if command in toolchain.commands:
                return toolchain
        return None

    def auto_detect_toolchain(
        self,
        path: Path,
        run_arg: str | None = None,
        command: str | None = None,
    ) -> dict[str, str] | None:
        """Ask each plugin's detector, in registration order."""
        for toolchain in self:
            detected = toolchain.detect_project(path, run_arg, command)
            if detected and detected.get("toolchain"):
                logger.debug("Detected toolchain %s for %s", detected["toolchain"], path)
                return detected
        return None


def default_registry() -> ToolchainRegistry:
    """Registry with the toolchains bundled with iotz."""
    from .micropython import MicroPythonToolchain

    registry = ToolchainRegistry()
    registry.register(MicroPythonToolchain())
    return registry
