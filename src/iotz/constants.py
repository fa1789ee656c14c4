"""Constants module for iotz.

Naming, paths and timeout values shared across modules (SSOT).
"""

from __future__ import annotations

# === Project files ===
CONFIG_FILENAME = "iotz.json"  # Project config at the project root
BUILD_SCRIPT_NAME = "Dockerfile.iotz"  # Transient build script at the project root

# === Container naming ===
IMAGE_PREFIX = "aiot_iotz_"  # Project image = prefix + directory inode
INSTANCE_SUFFIX = "_"  # Instance = project image + suffix
MOUNT_POINT = "/src/program"  # Project mount point inside the container

# === Images ===
DEFAULT_BASE_IMAGE = "ubuntu:22.04"  # Foundation of the shared local image
DEFAULT_LOCAL_IMAGE = "azureiot/iotz_local"  # Shared, toolchain-agnostic local image

# === Docker Timeouts (seconds) ===
DOCKER_COMMAND_TIMEOUT = 30  # Quick docker commands (info, inspect, rm)
DOCKER_BUILD_TIMEOUT = 3600  # Toolchain setup can compile from source

# === Build paths ===
BUILD_DIR = "/tmp/iotz/build"  # Build context for the local image

# === Exit codes ===
EXIT_INTERRUPTED = 130  # Ctrl+C
