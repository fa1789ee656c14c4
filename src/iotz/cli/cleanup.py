"""Cleanup operations for iotz."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console

from .. import docker
from ..config import container_identity

console = Console(force_terminal=True, legacy_windows=False)


def remove_project_image(project_path: Path) -> bool:
    """Remove the cached image of a project (best-effort).

    Returns:
        True if docker removed an image.
    """
    identity = container_identity(project_path)
    docker.remove_container(identity.instance_name, force=True)
    removed = docker.remove_image(identity.image_name, force=True)
    console.print("[green]container is deleted[/green]")
    return removed

