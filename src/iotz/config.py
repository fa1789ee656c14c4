"""Configuration management for iotz.

User-level settings live in ``~/.iotz/config.json``. Project-level
configuration (``iotz.json``) is handled by :mod:`iotz.project`.
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path

from rich.console import Console

from .constants import DEFAULT_BASE_IMAGE, DEFAULT_LOCAL_IMAGE, IMAGE_PREFIX, INSTANCE_SUFFIX

console = Console(stderr=True)


@dataclass
class Settings:
    """iotz user settings."""

    version: str = "1.0.0"

    # Image the shared local image is built FROM
    base_image: str = DEFAULT_BASE_IMAGE

    # Shared local image every project image is built FROM
    local_image: str = DEFAULT_LOCAL_IMAGE


def get_config_dir() -> Path:
    """Get the iotz configuration directory."""
    return Path.home() / ".iotz"


def get_config_path() -> Path:
    """Get the path to the settings file."""
    return get_config_dir() / "config.json"


def load_settings() -> Settings:
    """Load settings from file, or return defaults."""
    config_path = get_config_path()

    if config_path.exists():
        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
            known = {f.name for f in fields(Settings)}
            return Settings(**{k: v for k, v in data.items() if k in known})
        except (json.JSONDecodeError, ValueError, TypeError, AttributeError) as e:
            console.print(f"[yellow]Warning: Failed to load settings ({e}), using defaults[/yellow]")

    return Settings()


def save_settings(settings: Settings) -> None:
    """Save settings to file."""
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    get_config_path().write_text(
        json.dumps(asdict(settings), indent=2, ensure_ascii=False),
        encoding="utf-8",
    )


@dataclass(frozen=True)
class ContainerIdentity:
    """Docker names of a project directory.

    The image is shared by every run in the directory; the instance is the
    name of the container launched for a single command.
    """

    inode: int

    @property
    def image_name(self) -> str:
        return f"{IMAGE_PREFIX}{self.inode}"

    @property
    def instance_name(self) -> str:
        return f"{self.image_name}{INSTANCE_SUFFIX}"


def container_identity(project_path: Path | str) -> ContainerIdentity:
    """Derive the container identity from the directory's inode.

    The same directory maps to the same identity across runs, renames
    included; two directories on one filesystem never share an inode.
    """
    return ContainerIdentity(inode=os.stat(project_path).st_ino)
