#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# Copyright (c) 2026 plumiume
# SPDX-License-Identifier: MIT
# License: MIT License (https://opensource.org/licenses/MIT)
# See LICENSE.txt for details.

"""
Project tasks.

Each task receives the arguments left after the task name and either
returns 0 or raises a RunError. Composite tasks call other task methods
directly, so the first failing step ends the whole task.
"""

import shlex
import shutil
from pathlib import Path
from typing import Callable

from jinja2 import Environment, StrictUndefined, TemplateError
from rich.console import Console
from rich.table import Table

from .compose import ComposeWrapper
from .environment import ensure_env_file, load_env_file
from .errors import ConfigError
from .models import RunSettings
from .registry import TaskRegistry
from .runner import ProcessRunner, wait_until
from .schema_utils import generate_settings_schema


class ProjectTasks:
    """Task bodies for the project's development workflow"""

    def __init__(
        self,
        project_root: Path,
        settings: RunSettings,
        runner: ProcessRunner,
        compose: ComposeWrapper,
        console: Console,
        out: Console,
        prog: str = "run",
    ):
        self.project_root = project_root
        self.settings = settings
        self.runner = runner
        self.compose = compose
        self.console = console
        self.out = out
        self.prog = prog
        self.registry: TaskRegistry | None = None

    @property
    def services(self):
        return self.settings.services

    @property
    def env_path(self) -> Path:
        return self.project_root / self.settings.dotenv_path

    def catalogue(self) -> list[tuple[str, Callable[[list[str]], int], str]]:
        """(name, handler, summary) in help order"""
        return [
            ("cmd", self.cmd, "Run any command in the web container"),
            ("manage", self.manage, "Run manage.py commands"),
            ("lint:dockerfile", self.lint_dockerfile, "Lint the Dockerfile with hadolint"),
            ("lint", self.lint, "Lint Python code with ruff"),
            ("format:imports", self.format_imports, "Sort Python imports"),
            ("format", self.format, "Format Python code"),
            ("quality", self.quality, "Sort imports, format and lint"),
            ("test", self.test, "Run the test suite"),
            ("shell", self.shell, "Start a shell session in the web container"),
            ("psql", self.psql, "Connect to PostgreSQL"),
            ("redis-cli", self.redis_cli, "Connect to Redis"),
            ("deps:install", self.deps_install, "Install back-end and front-end dependencies"),
            ("uv", self.uv, "Run uv in the web container"),
            ("uv:outdated", self.uv_outdated, "List outdated back-end dependencies"),
            ("yarn", self.yarn, "Run yarn in the js container"),
            ("yarn:outdated", self.yarn_outdated, "List outdated front-end dependencies"),
            ("yarn:build:js", self.yarn_build_js, "Build JS assets"),
            ("yarn:build:css", self.yarn_build_css, "Build CSS assets"),
            ("clean", self.clean, "Remove cache and generated assets"),
            ("ci:test", self.ci_test, "Run the full CI pipeline"),
            ("settings:schema", self.settings_schema, "Write the run.yaml JSON schema"),
            ("help", self.help, "List available tasks"),
            ("_build_run_down", self._build_run_down, "Build, run once, then stop services"),
        ]

    # ------------------------------------------------------------------
    # Container commands
    # ------------------------------------------------------------------

    def cmd(self, args: list[str]) -> int:
        return self.compose.exec_in_service(self.services.web, args)

    def manage(self, args: list[str]) -> int:
        return self.cmd(["python3", "manage.py", *args])

    def shell(self, args: list[str]) -> int:
        return self.cmd(["bash", *args])

    def test(self, args: list[str]) -> int:
        return self.cmd(["python3", "manage.py", "test", *args])

    def psql(self, args: list[str]) -> int:
        env = load_env_file(self.env_path)
        user = env.get("POSTGRES_USER")
        if not user:
            raise ConfigError(f"POSTGRES_USER is not set in {self.env_path}")
        return self.compose.exec_in_service(
            self.services.postgres, ["psql", "-U", user, *args], host_env=env
        )

    def redis_cli(self, args: list[str]) -> int:
        return self.compose.exec_in_service(self.services.redis, ["redis-cli", *args])

    # ------------------------------------------------------------------
    # Linting and formatting
    # ------------------------------------------------------------------

    def lint_dockerfile(self, args: list[str]) -> int:
        ci = self.settings.ci
        argv = ["docker", "container", "run", "--rm", "-i", ci.hadolint_image, "hadolint"]
        for rule in ci.hadolint_ignore:
            argv.extend(["--ignore", rule])
        argv.extend([*args, "-"])
        return self.runner.run(argv, stdin_path=self.project_root / ci.dockerfile)

    def lint(self, args: list[str]) -> int:
        return self.cmd(["ruff", "check", *args])

    def format_imports(self, args: list[str]) -> int:
        return self.lint(["--select", "I", "--fix", *args])

    def format(self, args: list[str]) -> int:
        return self.cmd(["ruff", "format", ".", *args])

    def quality(self, args: list[str]) -> int:
        self.format_imports([])
        self.format([])
        self.lint([])
        return 0

    # ------------------------------------------------------------------
    # Dependencies
    # ------------------------------------------------------------------

    def deps_install(self, args: list[str]) -> int:
        if "--no-build" not in args:
            self.compose.compose("down")
            self.compose.compose("build")
        self.compose.run_once_in_service(self.services.js, ["yarn", "install"])
        self.compose.run_once_in_service(
            self.services.web, ["bash", "-c", "cd .. && bin/uv-install"]
        )
        return 0

    def uv(self, args: list[str]) -> int:
        return self.cmd(["uv", *args])

    def uv_outdated(self, args: list[str]) -> int:
        return self.compose.run_once_in_service(
            self.services.web, ["uv", "pip", "list", "--outdated", *args]
        )

    def yarn(self, args: list[str]) -> int:
        return self.compose.exec_in_service(self.services.js, ["yarn", *args])

    def yarn_outdated(self, args: list[str]) -> int:
        return self.compose.run_once_in_service(
            self.services.js, ["yarn", "outdated", *args]
        )

    def yarn_build_js(self, args: list[str]) -> int:
        return self.yarn(["build:js", *args])

    def yarn_build_css(self, args: list[str]) -> int:
        return self.yarn(["build:css", *args])

    def _build_run_down(self, args: list[str]) -> int:
        self.compose.compose("build")
        self.runner.run(self.compose.run_argv(args))
        self.compose.compose("down")
        return 0

    # ------------------------------------------------------------------
    # Housekeeping
    # ------------------------------------------------------------------

    def clean(self, args: list[str]) -> int:
        removed = 0
        for pattern in self.settings.clean.paths:
            for path in sorted(self.project_root.glob(pattern)):
                if self.runner.dry_run:
                    self.console.print(f"[yellow]Would remove {path}[/yellow]")
                    continue
                if path.is_dir() and not path.is_symlink():
                    shutil.rmtree(path)
                else:
                    path.unlink()
                removed += 1

        if not self.runner.dry_run:
            for keep in self.settings.clean.keep_files:
                keep_path = self.project_root / keep
                keep_path.parent.mkdir(parents=True, exist_ok=True)
                keep_path.touch()

        self.console.print(f"[green]✓[/green] Removed {removed} paths")
        return 0

    def settings_schema(self, args: list[str]) -> int:
        schema_path = generate_settings_schema(self.project_root)
        self.console.print(f"[green]✓[/green] Generated {schema_path}")
        return 0

    # ------------------------------------------------------------------
    # CI
    # ------------------------------------------------------------------

    def readiness_argv(self, env: dict[str, str]) -> list[str]:
        """Database readiness check, run non-interactively in the postgres service"""
        ci = self.settings.ci
        try:
            template = Environment(undefined=StrictUndefined).from_string(
                ci.readiness_check
            )
            command = template.render(**env)
        except TemplateError as e:
            raise ConfigError(f"Cannot render ci.readiness_check: {e}")

        container_env = {}
        if ci.readiness_password_var and ci.readiness_password_var in env:
            container_env["PGPASSWORD"] = env[ci.readiness_password_var]

        return self.compose.exec_argv(
            self.services.postgres,
            shlex.split(command),
            env=container_env,
            interactive=False,
            mode="exec",
        )

    def ci_test(self, args: list[str]) -> int:
        ci = self.settings.ci

        self.lint_dockerfile([])

        if ensure_env_file(self.env_path, self.project_root / self.settings.dotenv_example_path):
            self.console.print(f"[green]✓[/green] Created {self.env_path}")

        self.compose.compose("build")
        self.compose.compose("up", "-d")

        env = load_env_file(self.env_path)
        wait_until(self.runner, self.readiness_argv(env), ci.wait_timeout, ci.wait_interval)
        self.compose.compose("logs")

        self.lint(args)
        self.format_imports(["--check"])
        self.format(["--check"])
        self.manage(["migrate"])
        self.test(args)
        return 0

    # ------------------------------------------------------------------
    # Help
    # ------------------------------------------------------------------

    def help(self, args: list[str]) -> int:
        tasks = self.registry.public_tasks() if self.registry else []

        table = Table(box=None, show_header=False, pad_edge=False)
        table.add_column(justify="right", style="dim")
        table.add_column(style="cyan", no_wrap=True)
        table.add_column()
        for index, task in enumerate(tasks, start=1):
            table.add_row(str(index), task.name, task.summary)

        self.out.print(f"{self.prog} <task> [args]\n", markup=False, highlight=False)
        self.out.print("Tasks:")
        self.out.print(table)
        self.out.print(
            "\nExtended help:\n  Arguments after the task name are passed to the wrapped tool"
        )
        return 0


def build_registry(tasks: ProjectTasks) -> TaskRegistry:
    """Register every project task and freeze the table"""
    registry = TaskRegistry()
    for name, handler, summary in tasks.catalogue():
        registry.register(name, handler, summary)
    tasks.registry = registry
    return registry.freeze()
