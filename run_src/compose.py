#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# Copyright (c) 2026 plumiume
# SPDX-License-Identifier: MIT
# License: MIT License (https://opensource.org/licenses/MIT)
# See LICENSE.txt for details.

"""
Docker Compose command wrappers.
"""

from typing import Literal, Mapping, Optional, Sequence

from .environment import is_interactive
from .models import InvocationContext
from .runner import ProcessRunner

COMPOSE = ["docker", "compose"]


class ComposeWrapper:
    """Builds and runs ``docker compose`` invocations against named services"""

    def __init__(
        self,
        runner: ProcessRunner,
        mode: Literal["exec", "run"] = "exec",
        interactive: Optional[bool] = None,
    ):
        self.runner = runner
        self.mode = mode
        # Sampled once per wrapper; an explicit value wins over detection
        self.interactive = is_interactive() if interactive is None else interactive

    def context(
        self,
        service: str,
        flags: Sequence[str] = (),
        env: Optional[Mapping[str, str]] = None,
        interactive: Optional[bool] = None,
    ) -> InvocationContext:
        return InvocationContext(
            service=service,
            interactive=self.interactive if interactive is None else interactive,
            flags=tuple(flags),
            env=dict(env or {}),
        )

    def exec_argv(
        self,
        service: str,
        argv: Sequence[str],
        env: Optional[Mapping[str, str]] = None,
        interactive: Optional[bool] = None,
        mode: Optional[Literal["exec", "run"]] = None,
    ) -> list[str]:
        """argv for running a command in the already-running ``service``"""
        ctx = self.context(service, env=env, interactive=interactive)
        return [*COMPOSE, mode or self.mode, *ctx.compose_args(), ctx.service, *argv]

    def run_once_argv(
        self,
        service: str,
        argv: Sequence[str],
        env: Optional[Mapping[str, str]] = None,
    ) -> list[str]:
        """argv for a disposable ``service`` container without its dependencies"""
        ctx = self.context(service, flags=("--rm", "--no-deps"), env=env)
        return [*COMPOSE, "run", *ctx.compose_args(), ctx.service, *argv]

    def run_argv(self, argv: Sequence[str]) -> list[str]:
        """argv for a plain ``docker compose run``, honoring interactivity"""
        ctx = self.context("")
        return [*COMPOSE, "run", *ctx.compose_args(), *argv]

    def exec_in_service(
        self,
        service: str,
        argv: Sequence[str],
        env: Optional[Mapping[str, str]] = None,
        host_env: Optional[Mapping[str, str]] = None,
    ) -> int:
        return self.runner.run(self.exec_argv(service, argv, env), host_env)

    def run_once_in_service(
        self,
        service: str,
        argv: Sequence[str],
        env: Optional[Mapping[str, str]] = None,
        host_env: Optional[Mapping[str, str]] = None,
    ) -> int:
        return self.runner.run(self.run_once_argv(service, argv, env), host_env)

    def compose(self, *args: str, host_env: Optional[Mapping[str, str]] = None) -> int:
        """Plain ``docker compose <args>`` (build, up, down, logs, ...)"""
        return self.runner.run([*COMPOSE, *args], host_env)
