#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# Copyright (c) 2026 plumiume
# SPDX-License-Identifier: MIT
# License: MIT License (https://opensource.org/licenses/MIT)
# See LICENSE.txt for details.

"""
Task dispatch: name lookup, invocation, timing.
"""

import time
from typing import Sequence

from rich.console import Console
from rich.markup import escape

from .errors import RunError
from .registry import TaskRegistry

HELP_TASK = "help"


def format_duration(seconds: float) -> str:
    """Format like bash's TIMEFORMAT %3lR, e.g. 1m2.345s"""
    minutes, secs = divmod(seconds, 60)
    return f"{int(minutes)}m{secs:.3f}s"


class Dispatcher:
    """Resolves argv[0] against a registry and runs the task"""

    def __init__(
        self,
        registry: TaskRegistry,
        console: Console,
        help_task: str = HELP_TASK,
    ):
        self.registry = registry
        self.console = console
        self.help_task = help_task

    def dispatch(self, argv: Sequence[str]) -> int:
        """Run the requested task and return the process exit status"""
        name = argv[0] if argv else self.help_task
        args = list(argv[1:])

        try:
            task = self.registry.get(name)
        except RunError as e:
            self.console.print(f"[red]Error: {escape(str(e))}[/red]", highlight=False)
            self.console.print(f"Run '{self.help_task}' to list available tasks")
            return e.status

        start = time.perf_counter()
        try:
            status = task.handler(args) or 0
        except RunError as e:
            self.console.print(f"[red]Error: {escape(str(e))}[/red]", highlight=False)
            status = e.status
        elapsed = format_duration(time.perf_counter() - start)

        if status == 0:
            self.console.print(f"\n[green]Task completed in {elapsed}[/green]")
        else:
            self.console.print(
                f"\n[red]Task '{task.name}' failed with status {status} "
                f"after {elapsed}[/red]"
            )
        return status
