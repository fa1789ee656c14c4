"""End-to-end tests for iotz.

The full CLI runs against a mocked docker CLI; every docker command is
recorded so the sequence of builds and runs can be checked.
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

from click.testing import CliRunner

from iotz.cli import cli
from iotz.config import container_identity
from iotz.toolchains.micropython import MICROPYTHON_EXTENSION


class FakeDocker:
    """Minimal docker CLI: tracks images and records every call."""

    def __init__(self, images: set[str] | None = None) -> None:
        self.images = set(images or ())
        self.calls: list[list[str]] = []
        self.scripts: list[str] = []

    def __call__(self, cmd, **kwargs):
        cmd = list(cmd)
        self.calls.append(cmd)
        if cmd[1:3] == ["image", "inspect"]:
            return MagicMock(returncode=0 if cmd[3] in self.images else 1)
        if cmd[1] == "build":
            script = Path(kwargs.get("cwd") or ".") / cmd[cmd.index("-f") + 1]
            self.scripts.append(script.read_text())
            self.images.add(cmd[cmd.index("-t") + 1])
        if cmd[1:3] == ["image", "rm"]:
            self.images.discard(cmd[-1])
        return MagicMock(returncode=0, stdout="", stderr="")

    def runs(self) -> list[list[str]]:
        return [c for c in self.calls if c[1] == "run"]

    def builds(self) -> list[list[str]]:
        return [c for c in self.calls if c[1] == "build"]


def _invoke(project: Path, fake: FakeDocker, *args: str, tmp_build: Path | None = None):
    with (
        patch("iotz.docker.safe_docker_run", fake),
        patch("iotz.config.get_config_dir", return_value=project / ".iotz-home"),
        patch("iotz.generator.BUILD_DIR", str(tmp_build or project / ".build")),
    ):
        return CliRunner().invoke(cli, ["-C", str(project), *args])


class TestMicroPythonCompile:
    """compile of a micro-python project from scratch."""

    def test_compile_from_scratch(self, tmp_path: Path) -> None:
        """compile builds both images and then runs the script."""
        project = tmp_path / "blink"
        project.mkdir()
        (project / "iotz.json").write_text(json.dumps({"toolchain": "micro-python"}))
        (project / "main.py").write_text("print('hello')\n")
        fake = FakeDocker()

        result = _invoke(project, fake, "compile", "main.py", tmp_build=tmp_path / "build")

        assert result.exit_code == 0, result.output
        local_build, project_build = fake.builds()
        assert "azureiot/iotz_local" in local_build
        for line in MICROPYTHON_EXTENSION.strip().splitlines():
            assert line in fake.scripts[0]
        assert container_identity(project).image_name in project_build
        assert not (project / "Dockerfile.iotz").exists()

        (run,) = fake.runs()
        assert run[-3:] == ["/bin/bash", "-c", "micropython main.py"]
        assert "--name" in run
        assert run[run.index("--name") + 1] == container_identity(project).instance_name

    def test_second_compile_reuses_image(self, mp_project: Path) -> None:
        """A second compile does not rebuild anything."""
        image = container_identity(mp_project).image_name
        fake = FakeDocker({"azureiot/iotz_local", image})
        result = _invoke(mp_project, fake, "compile", "main.py")
        assert result.exit_code == 0, result.output
        assert fake.builds() == []
        assert len(fake.runs()) == 1


class TestLifecycle:
    """init / clean / connect flows."""

    def test_init_rebuilds_existing_image(self, mp_project: Path) -> None:
        """init always rebuilds the project image."""
        image = container_identity(mp_project).image_name
        fake = FakeDocker({"azureiot/iotz_local", image})
        result = _invoke(mp_project, fake, "init")
        assert result.exit_code == 0, result.output
        assert len(fake.builds()) == 1
        assert fake.runs() == []

    def test_clean_uninitialized_directory(self, tmp_path: Path) -> None:
        """clean in a bare directory only removes the image."""
        fake = FakeDocker()
        result = _invoke(tmp_path, fake, "clean")
        assert result.exit_code == 0, result.output
        assert fake.builds() == []
        assert fake.runs() == []

    def test_clean_removes_project_image(self, mp_project: Path) -> None:
        """clean removes the project image."""
        image = container_identity(mp_project).image_name
        fake = FakeDocker({"azureiot/iotz_local", image})
        result = _invoke(mp_project, fake, "clean")
        assert result.exit_code == 0, result.output
        assert image not in fake.images

    def test_connect_before_init(self, mp_project: Path) -> None:
        """connect without an image fails without building."""
        fake = FakeDocker({"azureiot/iotz_local"})
        result = _invoke(mp_project, fake, "connect")
        assert result.exit_code == 1
        assert "initialized" in result.output
        assert fake.builds() == []

    def test_failed_build_exit_code(self, mp_project: Path) -> None:
        """The exit code of a failed build is returned."""
        fake = FakeDocker({"azureiot/iotz_local"})
        original = fake.__call__

        def failing(cmd, **kwargs):
            result = original(cmd, **kwargs)
            if cmd[1] == "build":
                result.returncode = 2
            return result

        with (
            patch("iotz.docker.safe_docker_run", side_effect=failing),
            patch("iotz.config.get_config_dir", return_value=mp_project / ".iotz-home"),
        ):
            result = CliRunner().invoke(cli, ["-C", str(mp_project), "compile", "main.py"])
        assert result.exit_code == 2
        assert fake.runs() == []
