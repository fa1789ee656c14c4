"""CLI package for iotz.

- dispatch: routes a verb to its toolchain and sequences build/run/cleanup
- build: local and project image builds
- run: container execution
- cleanup: image removal
- utils: Docker checks, error output

Verbs other than the ones registered here (toolchain names such as
``micro-python`` and toolchain verbs such as ``upip``) are resolved at
dispatch time against the toolchain registry.
"""

from __future__ import annotations

import sys

import click
from rich.console import Console
from rich.table import Table

from .. import __version__
from ..errors import IotzError
from ..logging import set_debug
from ..paths import validate_project_path
from ..run_config import Invocation
from ..toolchains import default_registry
from .utils import ERR_DOCKER_NOT_RUNNING, check_docker, print_error

console = Console(force_terminal=True, legacy_windows=False)

# Core verbs and their help text
VERBS: dict[str, str] = {
    "init": "(Re)build the project container.",
    "compile": "Compile the project with its toolchain.",
    "clean": "Clean build output and remove the project container.",
    "export": "Export the project (toolchain specific).",
    "run": "Run a shell command inside the project container.",
    "connect": "Open an interactive shell in the project container.",
    "make": "Run make with the given arguments.",
}


def _execute(ctx: click.Context, invocation: Invocation) -> None:
    """Dispatch one invocation and exit with its code."""
    from .dispatch import dispatch

    if not check_docker():
        console.print(ERR_DOCKER_NOT_RUNNING)
        sys.exit(1)

    try:
        project_path = validate_project_path(ctx.obj["path"])
        code = dispatch(invocation, project_path)
    except IotzError as e:
        print_error(e)
        sys.exit(1)
    sys.exit(code)


def _verb_command(name: str, help_text: str | None = None) -> click.Command:
    """Command that hands everything after the verb to the dispatcher."""

    @click.command(
        name=name,
        help=help_text,
        context_settings={"ignore_unknown_options": True},
    )
    @click.argument("args", nargs=-1, type=click.UNPROCESSED)
    @click.pass_context
    def command(ctx: click.Context, args: tuple[str, ...]) -> None:
        _execute(ctx, Invocation.from_cli(name, args))

    return command


class DispatchGroup(click.Group):
    """Group that routes unregistered verbs to the dispatcher.

    The dispatcher decides whether the verb names a toolchain or a
    toolchain feature, and rejects it otherwise.
    """

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        command = super().get_command(ctx, cmd_name)
        if command is not None or cmd_name.startswith("-"):
            return command
        return _verb_command(cmd_name)


@click.group(cls=DispatchGroup)
@click.option(
    "--chdir",
    "-C",
    "path",
    default=".",
    type=click.Path(exists=True, file_okay=False),
    help="Project directory (default: current directory)",
)
@click.option("--debug", "-d", is_flag=True, help="Verbose diagnostic logging")
@click.version_option(version=__version__, prog_name="iotz")
@click.pass_context
def cli(ctx: click.Context, path: str, debug: bool) -> None:
    """iotz - compile projects inside per-toolchain Docker containers.

    Run 'iotz init' once in a project with an iotz.json, then
    'iotz compile'. 'iotz toolchains' lists the available toolchains.
    """
    if debug:
        set_debug(True)
    ctx.ensure_object(dict)
    ctx.obj["path"] = path


for _name, _help in VERBS.items():
    cli.add_command(_verb_command(_name, _help))


@cli.command()
@click.argument("toolchain")
@click.argument("args", nargs=-1)
@click.pass_context
def create(ctx: click.Context, toolchain: str, args: tuple[str, ...]) -> None:
    """Create a new project for TOOLCHAIN, optionally in a sub-folder."""
    registry = default_registry()
    try:
        project_path = validate_project_path(ctx.obj["path"])
        plugin = registry.require_extension(toolchain)
        plugin.create_project(project_path, " ".join(args) if args else None)
    except IotzError as e:
        print_error(e)
        sys.exit(1)


@cli.command()
def toolchains() -> None:
    """List available toolchains."""
    table = Table(title="Available Toolchains")
    table.add_column("Toolchain", style="cyan")
    table.add_column("Verbs")
    table.add_column("Description")

    for toolchain in default_registry():
        table.add_row(toolchain.name, ", ".join(toolchain.commands), toolchain.description)

    console.print(table)
    console.print("\n[dim]Usage: set \"toolchain\" in iotz.json, then 'iotz init'[/dim]")


if __name__ == "__main__":  # pragma: no cover
    cli()
