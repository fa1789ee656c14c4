"""Run operations for iotz.

Executes shell commands inside the project container.
"""

from __future__ import annotations

import sys
from pathlib import Path

from rich.console import Console

from .. import docker
from ..config import container_identity
from ..constants import EXIT_INTERRUPTED, MOUNT_POINT
from ..logging import get_logger
from ..paths import resolve_for_docker
from ..run_config import RunContext

console = Console(stderr=True)
logger = get_logger(__name__)


def diagnose_container_failure(returncode: int) -> None:
    """Explain well-known container exit codes."""
    if returncode == 137:
        console.print("[yellow]Container was killed (OOM or manual stop)[/yellow]")
    elif returncode == 139:
        console.print("[yellow]Container crashed (segmentation fault)[/yellow]")
    elif returncode == 143:
        console.print("[dim]Container terminated by signal[/dim]")


def get_docker_run_cmd(
    project_path: Path,
    image_name: str,
    instance_name: str,
    shell_command: str,
    *,
    remove: bool = True,
    tty: bool | None = None,
) -> list[str]:
    """Build the ``docker run`` command executing ``shell_command`` via bash."""
    if tty is None:
        tty = sys.stdout.isatty()

    cmd = ["docker", "run"]
    if remove:
        cmd.append("--rm")
    cmd.extend(["--name", instance_name])
    if tty:
        cmd.append("-t")
    cmd.extend(
        [
            "--volume",
            f"{resolve_for_docker(project_path)}:{MOUNT_POINT}:rw,cached",
            image_name,
            "/bin/bash",
            "-c",
            shell_command,
        ]
    )
    return cmd


def run_command(
    project_path: Path,
    shell_command: str,
    *,
    context: RunContext,
    commit: bool = False,
) -> int:
    """Run ``shell_command`` in a fresh instance of the project image.

    Any leftover container with the instance name is force-removed first.
    Output streams straight to this process's stdout/stderr. Ctrl+C, also
    during the commit step, force-removes the instance and yields 130.

    Args:
        project_path: Project directory, mounted read/write.
        shell_command: Command line handed to ``bash -c``.
        context: Tracks the active instance for the interrupt path.
        commit: Keep the container after exit and commit it onto the
            project image (plugin ``commit_changes``).

    Returns:
        Exit code of the command.
    """
    identity = container_identity(project_path)
    instance = identity.instance_name
    context.activate(instance)

    # A previous run may have left a stopped instance behind
    docker.remove_container(instance, force=True)

    cmd = get_docker_run_cmd(
        project_path, identity.image_name, instance, shell_command, remove=not commit
    )
    logger.info("Running in %s: %s", instance, shell_command)

    try:
        returncode = docker.safe_docker_run(
            cmd, capture_output=False, timeout=None, cwd=project_path
        ).returncode
        if commit:
            if returncode == 0 and docker.commit_container(instance, identity.image_name):
                console.print(f"[dim]Saved changes to {identity.image_name}[/dim]")
            docker.remove_container(instance, force=True)
    except KeyboardInterrupt:
        context.cancel()
        return EXIT_INTERRUPTED
    finally:
        context.release()

    if returncode != 0:
        diagnose_container_failure(returncode)
    return returncode


def connect_shell(project_path: Path) -> int:
    """Attach an interactive terminal to the project image."""
    identity = container_identity(project_path)
    cmd = [
        "docker",
        "run",
        "--rm",
        "-ti",
        "--volume",
        f"{resolve_for_docker(project_path)}:{MOUNT_POINT}",
        identity.image_name,
    ]
    try:
        return docker.safe_docker_run(cmd, capture_output=False, timeout=None).returncode
    except KeyboardInterrupt:
        return EXIT_INTERRUPTED
