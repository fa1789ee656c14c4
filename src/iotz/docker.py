"""Docker operations for iotz.

Thin wrappers over the docker CLI, separated from CLI logic. Query and
cleanup helpers never raise for docker failures; they report through
their return value so callers can treat removal of a possibly missing
resource as best-effort.
"""

from __future__ import annotations

import subprocess
from typing import TYPE_CHECKING

from .constants import DOCKER_COMMAND_TIMEOUT
from .errors import DockerError, DockerNotFoundError, DockerTimeoutError
from .logging import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

__all__ = [
    "DockerError",
    "DockerNotFoundError",
    "DockerTimeoutError",
    "safe_docker_run",
    "check_docker_status",
    "image_exists",
    "remove_image",
    "remove_container",
    "commit_container",
]


def safe_docker_run(
    cmd: Sequence[str],
    *,
    timeout: int | None = DOCKER_COMMAND_TIMEOUT,
    capture_output: bool = True,
    check: bool = False,
    cwd: Path | str | None = None,
) -> subprocess.CompletedProcess[str]:
    """Run a Docker command with consistent error handling.

    Args:
        cmd: Command to run (should start with 'docker').
        timeout: Command timeout in seconds, None to wait indefinitely.
        capture_output: Capture stdout/stderr if True, otherwise stream
            through the invoking process's stdio.
        check: Raise CalledProcessError on non-zero exit.
        cwd: Working directory for the command.

    Returns:
        CompletedProcess with command result.

    Raises:
        DockerNotFoundError: If docker command is not found.
        DockerTimeoutError: If command times out.
        subprocess.CalledProcessError: If check=True and command fails.
    """
    cmd_str = " ".join(cmd[:4]) + ("..." if len(cmd) > 4 else "")
    logger.debug("Running Docker command: %s", cmd_str)
    try:
        result = subprocess.run(
            cmd,
            capture_output=capture_output,
            text=True,
            check=check,
            timeout=timeout,
            cwd=cwd,
        )
        logger.debug("Docker command completed: exit=%d", result.returncode)
        return result
    except FileNotFoundError as e:
        logger.error("Docker not found in PATH: %s", cmd_str)
        raise DockerNotFoundError(f"Docker not found in PATH. Command: {cmd_str}") from e
    except subprocess.TimeoutExpired as e:
        logger.error("Docker command timed out after %ss: %s", timeout, cmd_str)
        raise DockerTimeoutError(
            f"Docker command timed out after {timeout}s. Command: {cmd_str}"
        ) from e


def check_docker_status() -> bool:
    """Check if Docker daemon is responsive."""
    try:
        result = safe_docker_run(["docker", "info"])
        return result.returncode == 0
    except (DockerNotFoundError, DockerTimeoutError):
        return False


def image_exists(image_name: str) -> bool:
    """Check if a Docker image with this name exists locally."""
    try:
        result = safe_docker_run(["docker", "image", "inspect", image_name])
        return result.returncode == 0
    except (DockerNotFoundError, DockerTimeoutError):
        return False


def remove_image(image_name: str, *, force: bool = True) -> bool:
    """Remove a Docker image.

    Returns:
        True if image was removed, False otherwise.
    """
    cmd = ["docker", "image", "rm"]
    if force:
        cmd.append("-f")
    cmd.append(image_name)
    try:
        return safe_docker_run(cmd).returncode == 0
    except (DockerNotFoundError, DockerTimeoutError):
        return False


def remove_container(container_name: str, *, force: bool = True) -> bool:
    """Remove a container; with force, a running one is killed first.

    Returns:
        True if container was removed, False otherwise (including when
        it did not exist).
    """
    cmd = ["docker", "container", "rm"]
    if force:
        cmd.append("-f")
    cmd.append(container_name)
    try:
        return safe_docker_run(cmd).returncode == 0
    except (DockerNotFoundError, DockerTimeoutError):
        return False


def commit_container(container_name: str, image_name: str) -> bool:
    """Persist a stopped container's filesystem as ``image_name``."""
    try:
        return safe_docker_run(["docker", "commit", container_name, image_name]).returncode == 0
    except (DockerNotFoundError, DockerTimeoutError):
        return False
