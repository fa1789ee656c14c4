"""Path utilities for Docker volume mounts.

Docker Desktop expects POSIX-style host paths: /c/Users/... rather than
C:\\Users\\... (Windows) or /mnt/c/Users/... (WSL).
"""

from __future__ import annotations

import re
from pathlib import Path

from .errors import PathError

_WINDOWS_DRIVE = re.compile(r"^([A-Za-z]):[/\\]*(.*)$")
_WSL_MOUNT = re.compile(r"^/mnt/([a-z])(?:/(.*))?$")


def _normalize_separators(path_str: str) -> str:
    """Forward slashes only, no duplicates, no trailing slash."""
    normalized = re.sub(r"/+", "/", path_str.replace("\\", "/"))
    if len(normalized) > 1:
        normalized = normalized.rstrip("/")
    return normalized


def _drive_path(drive: str, rest: str) -> str:
    rest = _normalize_separators(rest).lstrip("/")
    return f"/{drive.lower()}/{rest}" if rest else f"/{drive.lower()}"


def resolve_for_docker(path: Path) -> str:
    """Resolve a host path to the form docker expects in ``--volume``.

    Examples:
        >>> resolve_for_docker(Path("D:/work/blink"))
        '/d/work/blink'
        >>> resolve_for_docker(Path("/mnt/c/Users/me"))
        '/c/Users/me'
        >>> resolve_for_docker(Path("/home/me/blink"))
        '/home/me/blink'
    """
    path_str = str(path).replace("\\", "/")

    match = _WINDOWS_DRIVE.match(path_str)
    if match:
        return _drive_path(match.group(1), match.group(2))

    match = _WSL_MOUNT.match(path_str)
    if match:
        return _drive_path(match.group(1), match.group(2) or "")

    return path_str


def validate_project_path(path: str | Path) -> Path:
    """Resolve the project path and make sure it is an existing directory.

    Raises:
        PathError: If the path does not exist or is not a directory.
    """
    project_path = Path(path).expanduser().resolve()
    if not project_path.exists():
        raise PathError(f"Project path does not exist: {project_path}")
    if not project_path.is_dir():
        raise PathError(f"Project path is not a directory: {project_path}")
    return project_path
