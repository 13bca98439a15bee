# Copyright (c) 2026 plumiume
# SPDX-License-Identifier: MIT
# License: MIT License (https://opensource.org/licenses/MIT)
# See LICENSE.txt for details.

import io
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import pytest
from rich.console import Console

from run_src.compose import ComposeWrapper
from run_src.dispatcher import Dispatcher
from run_src.errors import CommandFailedError
from run_src.models import RunSettings
from run_src.runner import ProcessRunner
from run_src.tasks import ProjectTasks, build_registry


@dataclass
class RecordedCall:
    argv: list[str]
    env: Optional[dict[str, str]]
    stdin_path: Optional[Path]


class FakeRunner(ProcessRunner):
    """Records commands instead of running them.

    ``status_for`` decides the exit status of each command.
    """

    def __init__(self, cwd: Path, console: Console):
        super().__init__(cwd, console, echo=False)
        self.calls: list[RecordedCall] = []
        self.status_for: Callable[[list[str]], int] = lambda argv: 0

    def run(self, argv, env=None, *, check=True, stdin_path=None) -> int:
        cmd = [str(arg) for arg in argv]
        self.calls.append(RecordedCall(cmd, dict(env) if env else None, stdin_path))
        status = self.status_for(cmd)
        if check and status != 0:
            raise CommandFailedError(cmd, status)
        return status

    @property
    def argvs(self) -> list[list[str]]:
        return [call.argv for call in self.calls]


def make_console() -> Console:
    return Console(file=io.StringIO(), width=200, color_system=None)


def console_text(console: Console) -> str:
    return console.file.getvalue()


@pytest.fixture()
def console() -> Console:
    return make_console()


@pytest.fixture()
def out() -> Console:
    return make_console()


@pytest.fixture()
def project(tmp_path: Path) -> Path:
    (tmp_path / ".env").write_text(
        "# database\nPOSTGRES_USER=hello\nPOSTGRES_PASSWORD=password\n",
        encoding="utf-8",
    )
    (tmp_path / "Dockerfile").write_text("FROM python:3.13-slim\n", encoding="utf-8")
    return tmp_path


@pytest.fixture()
def settings() -> RunSettings:
    return RunSettings(_env_file=None)


@pytest.fixture()
def runner(project: Path, console: Console) -> FakeRunner:
    return FakeRunner(project, console)


@pytest.fixture()
def tasks(project, settings, runner, console, out) -> ProjectTasks:
    compose = ComposeWrapper(runner, mode=settings.compose_mode, interactive=False)
    return ProjectTasks(project, settings, runner, compose, console, out)


@pytest.fixture()
def dispatcher(tasks: ProjectTasks, console: Console) -> Dispatcher:
    return Dispatcher(build_registry(tasks), console)
