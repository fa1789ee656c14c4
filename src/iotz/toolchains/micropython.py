"""MicroPython toolchain: runs scripts with the MicroPython unix port."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console

from ..constants import CONFIG_FILENAME
from ..errors import ScaffoldError, ToolchainError
from .base import CONTAINER_INIT, BuildResult, Toolchain

if TYPE_CHECKING:
    from ..project import ProjectConfig

console = Console()

# Built once into the shared local image
MICROPYTHON_EXTENSION = """
RUN apt-get update
RUN apt-get install -y build-essential libreadline-dev libffi-dev git pkg-config python3 && apt-get clean
RUN mkdir /tools && cd /tools \\
  && git clone --recurse-submodules https://github.com/micropython/micropython.git \\
  && make -C micropython/mpy-cross \\
  && cd ./micropython/ports/unix \\
  && make submodules \\
  && make
RUN ln -s /tools/micropython/ports/unix/build-standard/micropython /usr/bin/micropython
"""

DEFAULT_PROJECT_NAME = "sampleApplication"


class MicroPythonToolchain(Toolchain):
    name = "micro-python"
    aliases = ("micropython",)
    commands = ("micropython", "mip", "upip")
    description = "MicroPython unix port (micropython, mip, upip)"

    def detect_project(
        self, path: Path, run_arg: str | None, command: str | None
    ) -> dict[str, str] | None:
        if run_arg in ("micro-python", "micropython"):
            return {"toolchain": self.name}
        return None

    def create_extension(self) -> BuildResult:
        return BuildResult(run=MICROPYTHON_EXTENSION)

    def build(
        self, config: ProjectConfig | None, run_arg: str | None, command: str, path: Path
    ) -> BuildResult:
        if command in (CONTAINER_INIT, "init", "clean", "export"):
            # Nothing to execute: the interpreter already lives in the local image
            return BuildResult(run="")
        if command == "compile":
            return BuildResult(run=f"micropython {run_arg or ''}".rstrip())
        raise ToolchainError(f"unknown command '{command}' for toolchain '{self.name}'")

    def direct_call(
        self, config: ProjectConfig | None, run_arg: str | None, command: str, path: Path
    ) -> str | None:
        return self.build(config, run_arg, "compile", path).run

    def add_features(
        self, config: ProjectConfig | None, run_arg: str | None, command: str, path: Path
    ) -> BuildResult | None:
        if command in ("mip", "upip"):
            # upip is kept as an alias of mip
            return BuildResult(
                run=f"micropython -m mip {run_arg or ''}".rstrip(),
                commit_changes=True,
            )
        if command == "micropython":
            return self.build(config, run_arg, "compile", path)
        return None

    def create_project(self, path: Path, run_arg: str | None) -> Path:
        """Write a hello-world script and its iotz.json.

        ``run_arg`` is the project name; without one the skeleton goes
        straight into ``path``.
        """
        words = run_arg.split() if run_arg else []
        if words:
            project_name = words[0]
            target = path / project_name
            try:
                target.mkdir()
            except FileExistsError:
                if not target.is_dir():
                    raise ScaffoldError(f"can't create folder {project_name}") from None
            except OSError as e:
                raise ScaffoldError(f"can't create folder {project_name}: {e}") from e
        else:
            project_name = DEFAULT_PROJECT_NAME
            target = path

        (target / f"{project_name}.py").write_text("print('hello')\n", encoding="utf-8")
        (target / CONFIG_FILENAME).write_text(
            json.dumps({"name": project_name, "toolchain": self.name}, indent=2) + "\n",
            encoding="utf-8",
        )
        console.print("[bold]done![/bold]")
        return target
