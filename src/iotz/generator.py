"""Build script generation for iotz.

Build scripts are assembled as ordered :class:`Instruction` records and
rendered to Dockerfile text only when written to disk.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from .constants import BUILD_DIR, MOUNT_POINT

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .config import ContainerIdentity
    from .toolchains import ToolchainRegistry

_INSTRUCTION = re.compile(r"^([A-Za-z]+)\s+(.*)$", re.DOTALL)

# Tools every toolchain can rely on
COMMON_TOOLS = """
RUN apt-get update && apt-get install -y --no-install-recommends \\
    bash ca-certificates curl git make \\
    && rm -rf /var/lib/apt/lists/*
"""


@dataclass(frozen=True)
class Instruction:
    """One Dockerfile instruction, e.g. ``RUN make``."""

    keyword: str
    value: str

    def __str__(self) -> str:
        return f"{self.keyword.upper()} {self.value}"


@dataclass
class BuildScript:
    """Ordered list of instructions."""

    instructions: list[Instruction] = field(default_factory=list)

    def add(self, keyword: str, value: str) -> BuildScript:
        self.instructions.append(Instruction(keyword, value))
        return self

    def from_(self, image: str) -> BuildScript:
        return self.add("FROM", image)

    def workdir(self, path: str) -> BuildScript:
        return self.add("WORKDIR", path)

    def env(self, value: str) -> BuildScript:
        return self.add("ENV", value)

    def run(self, command: str) -> BuildScript:
        return self.add("RUN", command)

    def extend(self, instructions: Iterable[Instruction]) -> BuildScript:
        self.instructions.extend(instructions)
        return self

    def render(self) -> str:
        return "\n".join(str(i) for i in self.instructions) + "\n"


def parse_instructions(text: str) -> list[Instruction]:
    """Split a Dockerfile fragment into instructions.

    Lines ending in a backslash continue onto the next line and stay part
    of the same instruction. Blank lines and comments are dropped.

    Raises:
        ValueError: If a line does not start with an instruction keyword.
    """
    instructions: list[Instruction] = []
    pending: list[str] = []

    for raw in text.strip().splitlines():
        line = raw.strip()
        if not pending and (not line or line.startswith("#")):
            continue
        pending.append(line)
        if line.endswith("\\"):
            continue
        joined = " \\\n  ".join(p.rstrip("\\").rstrip() for p in pending)
        pending = []
        match = _INSTRUCTION.match(joined)
        if not match:
            raise ValueError(f"not a Dockerfile instruction: {joined!r}")
        instructions.append(Instruction(match.group(1).upper(), match.group(2)))

    if pending:
        raise ValueError(f"dangling line continuation: {pending[-1]!r}")
    return instructions


def project_build_script(
    local_image: str,
    identity: ContainerIdentity,
    setup: str | None = None,
) -> BuildScript:
    """Project image: the local image plus the toolchain's setup command."""
    command = f'echo "Setting up {identity.image_name}"'
    if setup:
        command = f"{command} && {setup}"
    return BuildScript().from_(local_image).workdir(MOUNT_POINT).run(command)


def local_build_script(base_image: str, registry: ToolchainRegistry) -> BuildScript:
    """Shared local image: common tools plus every toolchain's extension lines."""
    script = BuildScript().from_(base_image).env("DEBIAN_FRONTEND=noninteractive")
    script.extend(parse_instructions(COMMON_TOOLS))
    for toolchain in registry:
        extension = toolchain.create_extension()
        if extension and extension.run:
            script.extend(parse_instructions(extension.run))
    return script.workdir(MOUNT_POINT)


def write_build_files(script: BuildScript, build_dir: Path | None = None) -> Path:
    """Write a build script into its own build context directory.

    Returns:
        Path to the build directory.
    """
    build_dir = build_dir or Path(BUILD_DIR) / "local"
    build_dir.mkdir(parents=True, exist_ok=True)

    # Force LF line endings (CRLF breaks shell continuations in the image)
    with open(build_dir / "Dockerfile", "w", encoding="utf-8", newline="\n") as f:
        f.write(script.render())
    return build_dir
