"""Unified exception hierarchy for iotz.

All custom exceptions inherit from IotzError. The CLI catches these,
prints a short colored label plus the message and exits non-zero.

This module has no internal dependencies (leaf module).
"""

from __future__ import annotations


class IotzError(Exception):
    """Base exception for all iotz errors."""


class ConfigError(IotzError):
    """Project configuration errors.

    Examples:
        - Missing iotz.json where a toolchain is required
        - No 'toolchain' field in iotz.json
    """


class NotInitializedError(ConfigError):
    """Raised when a command needs a project image that was never built."""


class PathError(IotzError):
    """Project path does not exist or is not a directory."""


class ToolchainError(IotzError):
    """Errors raised by or about a toolchain plugin."""


class UnknownToolchainError(ToolchainError):
    """Raised when a toolchain name has no registered implementation."""


class UsageError(IotzError):
    """Invalid command line usage (unknown verb, missing argument)."""


class ScaffoldError(IotzError):
    """Raised when a project skeleton cannot be created."""


class DockerError(IotzError):
    """Base class for all Docker-related exceptions."""


class DockerNotFoundError(DockerError):
    """Raised when Docker is not installed or not in PATH."""


class DockerTimeoutError(DockerError):
    """Raised when a Docker operation times out."""
