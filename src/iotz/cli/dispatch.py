"""Command dispatch for iotz.

One invocation runs, in order: config resolution, image check/build,
toolchain translation of the verb, the container run, the toolchain
callback and (for ``clean``) removal of the project image. A non-zero
exit code from any external step ends the sequence and becomes the
process exit code.
"""

from __future__ import annotations

from pathlib import Path

from ..config import Settings, load_settings
from ..errors import ConfigError, UsageError
from ..logging import get_logger
from ..project import get_project_config
from ..run_config import Invocation, RunContext
from ..toolchains import BuildResult, ToolchainRegistry, default_registry
from .build import ensure_image
from .cleanup import remove_project_image
from .run import connect_shell, run_command

logger = get_logger(__name__)

# Verbs translated by the project's toolchain
BUILD_COMMANDS = frozenset({"init", "compile", "clean", "export"})

# Verbs handled here without a toolchain
CORE_COMMANDS = BUILD_COMMANDS | {"run", "connect", "make"}


def is_known_command(command: str, registry: ToolchainRegistry) -> bool:
    """True for core verbs, toolchain names and toolchain-specific verbs."""
    return (
        command in CORE_COMMANDS
        or registry.is_toolchain(command)
        or registry.toolchain_for_command(command) is not None
    )


def dispatch(
    invocation: Invocation,
    project_path: Path,
    *,
    registry: ToolchainRegistry | None = None,
    settings: Settings | None = None,
    context: RunContext | None = None,
) -> int:
    """Execute one iotz command against ``project_path``.

    Returns:
        Process exit code.

    Raises:
        IotzError: Configuration, toolchain or usage errors. The CLI
            reports these and exits with 1.
    """
    if registry is None:
        registry = default_registry()
    if settings is None:
        settings = load_settings()
    if context is None:
        context = RunContext()

    command = invocation.command
    run_arg = invocation.run_arg
    logger.debug("Dispatching %s (arg=%r) in %s", command, run_arg, project_path)

    if not is_known_command(command, registry):
        raise UsageError(f"unknown command '{command}'")

    config = get_project_config(
        project_path, run_arg=run_arg, command=command, registry=registry
    )

    code = ensure_image(invocation, project_path, config, registry=registry, settings=settings)
    if code:
        return code

    result: BuildResult | None = None
    shell_command = run_arg

    if command in BUILD_COMMANDS:
        if config is None or not config.toolchain:
            if command == "clean":
                remove_project_image(project_path)
                return 0
            if config is None:
                raise ConfigError("iotz.json file is needed. try 'iotz --help'")
            raise ConfigError(
                'no toolchain is defined. i.e. "toolchain":"micro-python"'
            )
        toolchain = registry.require_extension(config.toolchain)
        result = toolchain.build(config, run_arg, command, project_path)
    elif command == "run":
        pass
    elif command == "connect":
        return connect_shell(project_path)
    elif command == "make":
        shell_command = f"make {run_arg or ''}".rstrip()
    elif registry.is_toolchain(command):
        toolchain = registry.require_extension(command)
        shell_command = toolchain.direct_call(config, run_arg, command, project_path)
    else:
        # Toolchain-specific verb (is_known_command checked it is registered)
        feature_owner = registry.toolchain_for_command(command)
        if feature_owner is not None:
            result = feature_owner.add_features(config, run_arg, command, project_path)

    if result is not None and result.run is not None:
        shell_command = result.run

    if shell_command is None:
        raise UsageError(f'you should provide a command to run after "{command}".')

    if shell_command.strip():
        code = run_command(
            project_path,
            shell_command,
            context=context,
            commit=bool(result and result.commit_changes),
        )
        if code:
            return code

    if result is not None and result.callback:
        result.callback(config)

    if command == "clean":
        remove_project_image(project_path)
    return 0
