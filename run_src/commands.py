#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CLI entry point for the run tool.
"""

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape

from .compose import ComposeWrapper
from .dispatcher import Dispatcher
from .errors import ConfigError
from .models import RunSettings, load_settings
from .runner import ProcessRunner
from .tasks import ProjectTasks, build_registry

# Diagnostics go to stderr so tool output stays pipeable
console = Console(stderr=True)
out_console = Console()

app = typer.Typer(
    name="run",
    help="Development workflow tasks for Docker Compose projects",
    add_completion=False,
)


def create_dispatcher(
    project_root: Path,
    settings: RunSettings,
    console: Console,
    out: Console,
    dry_run: bool = False,
) -> Dispatcher:
    """Wire runner, compose wrapper and task registry together"""
    runner = ProcessRunner(
        project_root, console, echo=settings.echo_commands, dry_run=dry_run
    )
    compose = ComposeWrapper(runner, mode=settings.compose_mode, interactive=settings.tty)
    tasks = ProjectTasks(project_root, settings, runner, compose, console, out)
    return Dispatcher(build_registry(tasks), console)


@app.command(
    context_settings={
        "allow_extra_args": True,
        "ignore_unknown_options": True,
        # Everything after the task name belongs to the task
        "allow_interspersed_args": False,
    }
)
def run(
    ctx: typer.Context,
    task: Annotated[
        Optional[str], typer.Argument(help="Task to run (default: help)")
    ] = None,
    dry_run: Annotated[
        bool, typer.Option("--dry-run", help="Print commands without running them")
    ] = False,
    tty: Annotated[
        Optional[bool],
        typer.Option("--tty/--no-tty", help="Force TTY allocation on or off"),
    ] = None,
    project_root: Annotated[
        Optional[Path],
        typer.Option("--project-root", help="Project directory (default: cwd)"),
    ] = None,
):
    """Run a task: run [OPTIONS] TASK [ARGS]..."""
    root = (project_root or Path.cwd()).resolve()

    try:
        settings = load_settings(root, tty=tty)
    except ConfigError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(e.status)

    dispatcher = create_dispatcher(root, settings, console, out_console, dry_run)
    argv = [task, *ctx.args] if task is not None else []
    raise typer.Exit(dispatcher.dispatch(argv))


def main():
    """Main entry point"""
    app()
