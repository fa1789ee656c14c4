"""Project configuration (iotz.json) loading and toolchain inference."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .constants import CONFIG_FILENAME
from .errors import ConfigError
from .logging import get_logger

if TYPE_CHECKING:
    from .toolchains import ToolchainRegistry

logger = get_logger(__name__)


@dataclass
class ProjectConfig:
    """Contents of iotz.json.

    Fields other than ``name`` and ``toolchain`` belong to the toolchain
    and are kept in ``extra`` untouched.
    """

    name: str | None = None
    toolchain: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProjectConfig:
        """Build a config from parsed iotz.json.

        Raises:
            ConfigError: If 'toolchain' is present but not a string.
        """
        toolchain = data.get("toolchain")
        if toolchain is not None and not isinstance(toolchain, str):
            raise ConfigError("'toolchain' in iotz.json must be a string")
        extra = {k: v for k, v in data.items() if k not in ("name", "toolchain")}
        return cls(name=data.get("name"), toolchain=toolchain, extra=extra)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = dict(self.extra)
        if self.name is not None:
            data["name"] = self.name
        if self.toolchain is not None:
            data["toolchain"] = self.toolchain
        return data

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a toolchain-specific field."""
        return self.extra.get(key, default)


def get_project_config_path(project_path: Path) -> Path:
    return project_path / CONFIG_FILENAME


def load_project_config(project_path: Path) -> ProjectConfig | None:
    """Read iotz.json, or None if it is missing or not a JSON object.

    Raises:
        ConfigError: If the file holds a non-string toolchain.
    """
    config_path = get_project_config_path(project_path)
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as e:
        logger.debug("Ignoring unreadable %s: %s", config_path, e)
        return None

    if not isinstance(data, dict):
        logger.debug("Ignoring %s: top level is not an object", config_path)
        return None
    return ProjectConfig.from_dict(data)


def get_project_config(
    project_path: Path,
    *,
    run_arg: str | None = None,
    command: str | None = None,
    registry: ToolchainRegistry | None = None,
) -> ProjectConfig | None:
    """Resolve the project config, inferring the toolchain when absent.

    Without a readable iotz.json the result is a config holding only the
    detected toolchain, or None. A loaded config missing ``toolchain``
    gets the detected one; an explicit value is never replaced. Nothing
    is written back to disk.
    """
    if registry is None:
        from .toolchains import default_registry

        registry = default_registry()

    config = load_project_config(project_path)
    if config is not None and config.toolchain:
        return config

    detected = registry.auto_detect_toolchain(project_path, run_arg, command)
    if config is None:
        if detected is None:
            return None
        return ProjectConfig(toolchain=detected["toolchain"])

    if detected:
        config.toolchain = detected["toolchain"]
    return config
