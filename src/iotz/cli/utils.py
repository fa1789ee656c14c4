"""CLI utilities for iotz."""

from __future__ import annotations

from rich.console import Console

from .. import docker

console = Console(stderr=True)

ERR_DOCKER_NOT_RUNNING = "[red]error:[/red] Docker is not running."


def check_docker() -> bool:
    """Check if Docker is available and running."""
    return docker.check_docker_status()


def print_error(message: object) -> None:
    """Print an error in the iotz style: a red label and the message."""
    console.print(f"[red]error:[/red] {message}", highlight=False)
