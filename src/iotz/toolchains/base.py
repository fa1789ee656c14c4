"""Toolchain plugin contract.

A toolchain knows how to turn a generic iotz verb (``compile``, ``clean``,
...) into a concrete shell command inside the project container, and which
lines the shared local image needs to host it. Plugins are stateless: one
instance per toolchain, registered in :class:`iotz.toolchains.ToolchainRegistry`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from ..errors import ScaffoldError, ToolchainError

if TYPE_CHECKING:
    from pathlib import Path

    from ..project import ProjectConfig

# Command passed to build() while the project image is being created
CONTAINER_INIT = "container_init"


@dataclass(frozen=True)
class BuildResult:
    """What a toolchain wants done for one invocation.

    Attributes:
        run: Shell fragment to execute (or, for ``container_init`` and
            ``create_extension``, to add to the build script). None leaves
            the caller's command untouched; an empty string means "nothing
            to execute".
        callback: Called with the project config once the command finished.
        commit_changes: Persist the container onto the project image
            after the command exits.
    """

    run: str | None = None
    callback: Callable[[ProjectConfig | None], Any] | None = None
    commit_changes: bool = False


class Toolchain(ABC):
    """Base class for toolchain plugins.

    Only :meth:`build` is mandatory. The optional hooks default to
    "not supported": no extension lines, no detection, no extra verbs.
    """

    #: Canonical identifier, the value of ``toolchain`` in iotz.json
    name: str = ""

    #: Other spellings accepted for ``toolchain``
    aliases: tuple[str, ...] = ()

    #: Toolchain-specific CLI verbs routed to :meth:`add_features`
    commands: tuple[str, ...] = ()

    #: One-line description for ``iotz toolchains``
    description: str = ""

    @abstractmethod
    def build(
        self,
        config: ProjectConfig | None,
        run_arg: str | None,
        command: str,
        path: Path,
    ) -> BuildResult:
        """Translate a generic verb into the command to run."""

    def direct_call(
        self,
        config: ProjectConfig | None,
        run_arg: str | None,
        command: str,
        path: Path,
    ) -> str | None:
        """Handle ``iotz <toolchain name> <arg>``."""
        raise ToolchainError(f"toolchain '{self.name}' does not support direct calls")

    def create_extension(self) -> BuildResult | None:
        """Dockerfile lines the shared local image needs for this toolchain."""
        return None

    def detect_project(
        self,
        path: Path,
        run_arg: str | None,
        command: str | None,
    ) -> dict[str, str] | None:
        """Return ``{"toolchain": name}`` if this toolchain recognizes the project."""
        return None

    def add_features(
        self,
        config: ProjectConfig | None,
        run_arg: str | None,
        command: str,
        path: Path,
    ) -> BuildResult | None:
        """Handle one of :attr:`commands`."""
        return None

    def create_project(self, path: Path, run_arg: str | None) -> Path:
        """Scaffold a new project, returning its directory."""
        raise ScaffoldError(f"toolchain '{self.name}' cannot create projects")

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"
