"""Build operations for iotz.

Builds the shared local image once and a project image per directory.
"""

from __future__ import annotations

import sys
from pathlib import Path

from rich.console import Console

from .. import docker
from ..config import Settings, container_identity
from ..constants import BUILD_SCRIPT_NAME, DOCKER_BUILD_TIMEOUT
from ..errors import ConfigError, NotInitializedError
from ..generator import local_build_script, project_build_script, write_build_files
from ..logging import get_logger
from ..project import ProjectConfig
from ..run_config import Invocation
from ..toolchains import CONTAINER_INIT, ToolchainRegistry

console = Console()
logger = get_logger(__name__)


def provision_local_image(registry: ToolchainRegistry, settings: Settings) -> int:
    """Build the shared local image every project image starts from.

    Returns:
        Exit code of ``docker build``.
    """
    console.print(f"[bold]First-time setup: building {settings.local_image}...[/bold]")
    build_dir = write_build_files(local_build_script(settings.base_image, registry))

    result = docker.safe_docker_run(
        [
            "docker",
            "build",
            "--force-rm",
            "-t",
            settings.local_image,
            "-f",
            str(build_dir / "Dockerfile"),
            str(build_dir),
        ],
        capture_output=False,
        timeout=DOCKER_BUILD_TIMEOUT,
    )
    if result.returncode == 0:
        console.print(f"[green]✓ Built {settings.local_image}[/green]")
    else:
        console.print(f"[red]✗ Failed to build {settings.local_image}[/red]")
    return result.returncode


def _build_project_image(
    project_path: Path,
    config: ProjectConfig,
    invocation: Invocation,
    registry: ToolchainRegistry,
    settings: Settings,
) -> int:
    identity = container_identity(project_path)
    toolchain = registry.require_extension(config.toolchain)
    init = toolchain.build(config, invocation.run_arg, CONTAINER_INIT, project_path)

    script = project_build_script(settings.local_image, identity, init.run if init else None)
    script_path = project_path / BUILD_SCRIPT_NAME
    with open(script_path, "w", encoding="utf-8", newline="\n") as f:
        f.write(script.render())

    try:
        result = docker.safe_docker_run(
            [
                "docker",
                "build",
                "--force-rm",
                "-t",
                identity.image_name,
                "-f",
                BUILD_SCRIPT_NAME,
                ".",
            ],
            capture_output=False,
            timeout=DOCKER_BUILD_TIMEOUT,
            cwd=project_path,
        )
    finally:
        script_path.unlink(missing_ok=True)

    if init and init.callback:
        init.callback(config)

    logger.debug("Project image %s build exit=%d", identity.image_name, result.returncode)
    return result.returncode


def ensure_image(
    invocation: Invocation,
    project_path: Path,
    config: ProjectConfig | None,
    *,
    registry: ToolchainRegistry,
    settings: Settings,
) -> int:
    """Make sure the project image exists, building it when needed.

    ``init`` always rebuilds. ``clean`` on a project without a usable
    config succeeds without building anything.

    Returns:
        0 when the image is ready, else the failing build's exit code.

    Raises:
        NotInitializedError: ``connect`` before the project image exists.
        ConfigError: The image must be built but no toolchain is known.
        UnknownToolchainError: The configured toolchain is not registered.
    """
    command = invocation.command
    if command == "clean" and (config is None or not config.toolchain):
        return 0

    identity = container_identity(project_path)
    project_image_ready = docker.image_exists(identity.image_name)
    if command == "connect" and not project_image_ready:
        raise NotInitializedError(
            "there wasn't any project 'initialized' on this path. try 'iotz init' ?"
        )

    if not docker.image_exists(settings.local_image):
        code = provision_local_image(registry, settings)
        if code:
            return code

    if project_image_ready and command != "init":
        return 0

    if command == "init" and sys.platform == "win32":
        console.print("[yellow]Have you shared the current drive on Docker for Windows?[/yellow]")

    if config is None:
        raise ConfigError("iotz.json file is needed. try 'iotz --help'")
    if not config.toolchain:
        raise ConfigError(
            "no toolchain is defined under iotz.json. "
            'i.e. "toolchain":"micro-python"'
        )

    console.print("[yellow]initializing the project container..[/yellow]")
    return _build_project_image(project_path, config, invocation, registry, settings)
