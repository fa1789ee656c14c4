"""Per-invocation state for iotz.

:class:`Invocation` bundles the parsed command line; :class:`RunContext`
tracks the container currently running on behalf of this process so the
interrupt path can stop it.
"""

from __future__ import annotations

from dataclasses import dataclass

from . import docker
from .logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Invocation:
    """A parsed ``iotz <command> [args...]`` call.

    ``run_arg`` is None when nothing followed the command, which verbs
    like ``run`` and ``make`` treat as a usage error.
    """

    command: str
    run_arg: str | None = None

    @classmethod
    def from_cli(cls, command: str, args: tuple[str, ...] | list[str] = ()) -> Invocation:
        """Join the remaining CLI words into the run argument."""
        return cls(command=command, run_arg=" ".join(args) if args else None)


@dataclass
class RunContext:
    """Holds at most one active container instance.

    Created once per invocation and handed to the runner. Not shared
    between threads; nested or parallel runs in one process are unsupported.
    """

    active_instance: str | None = None

    def activate(self, instance_name: str) -> None:
        if self.active_instance and self.active_instance != instance_name:
            logger.warning("Replacing active instance %s", self.active_instance)
        self.active_instance = instance_name

    def release(self) -> None:
        self.active_instance = None

    def cancel(self) -> bool:
        """Force-remove the active instance (best-effort).

        Returns:
            True if a container was removed.
        """
        if not self.active_instance:
            return False
        instance, self.active_instance = self.active_instance, None
        logger.debug("Force stopping %s", instance)
        return docker.remove_container(instance, force=True)
