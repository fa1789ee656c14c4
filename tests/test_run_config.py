"""Tests for iotz.run_config module."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from iotz.run_config import Invocation, RunContext


class TestInvocation:
    """Tests for Invocation dataclass."""

    def test_from_cli_joins_args(self) -> None:
        """from_cli joins the remaining words."""
        invocation = Invocation.from_cli("run", ("ls", "-la"))
        assert invocation.command == "run"
        assert invocation.run_arg == "ls -la"

    def test_from_cli_without_args(self) -> None:
        """No words after the verb leaves run_arg unset."""
        assert Invocation.from_cli("compile").run_arg is None

    def test_frozen(self) -> None:
        """Invocation is immutable."""
        invocation = Invocation("compile")
        with pytest.raises(AttributeError):
            invocation.command = "clean"  # type: ignore[misc]


class TestRunContext:
    """Tests for RunContext."""

    def test_activate_and_release(self) -> None:
        """activate and release track the instance."""
        context = RunContext()
        context.activate("aiot_iotz_1_")
        assert context.active_instance == "aiot_iotz_1_"
        context.release()
        assert context.active_instance is None

    def test_cancel_removes_active_instance(self) -> None:
        """cancel force-removes the active instance."""
        context = RunContext()
        context.activate("aiot_iotz_1_")
        with patch("iotz.run_config.docker.remove_container", return_value=True) as mock_rm:
            assert context.cancel() is True
        mock_rm.assert_called_once_with("aiot_iotz_1_", force=True)
        assert context.active_instance is None

    def test_cancel_without_instance(self) -> None:
        """Nothing to stop when no container is active."""
        with patch("iotz.run_config.docker.remove_container") as mock_rm:
            assert RunContext().cancel() is False
        mock_rm.assert_not_called()

    def test_contexts_are_independent(self) -> None:
        """Separate contexts do not share state."""
        first, second = RunContext(), RunContext()
        first.activate("aiot_iotz_1_")
        assert second.active_instance is None
