#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# Copyright (c) 2026 plumiume
# SPDX-License-Identifier: MIT
# License: MIT License (https://opensource.org/licenses/MIT)
# See LICENSE.txt for details.

"""
Process execution for tasks.
"""

import math
import os
import shlex
import subprocess
import time
from pathlib import Path
from typing import Mapping, Optional, Sequence

from rich.console import Console

from .errors import (
    CommandFailedError,
    MissingFileError,
    ReadinessTimeoutError,
    SetupError,
)

SIGINT_STATUS = 130


def normalize_status(returncode: int) -> int:
    """Map a signal-terminated child (negative returncode) to 128 + signal"""
    if returncode < 0:
        return 128 - returncode
    return returncode


class ProcessRunner:
    """Runs external commands with inherited standard streams"""

    def __init__(
        self,
        cwd: Path,
        console: Console,
        echo: bool = True,
        dry_run: bool = False,
    ):
        self.cwd = cwd
        self.console = console
        self.echo = echo
        self.dry_run = dry_run

    def run(
        self,
        argv: Sequence[str],
        env: Optional[Mapping[str, str]] = None,
        *,
        check: bool = True,
        stdin_path: Optional[Path] = None,
    ) -> int:
        """Run ``argv`` and return its exit status.

        ``env`` is layered over the current environment for this call only.
        With ``check`` a non-zero status raises CommandFailedError.
        """
        cmd = [str(arg) for arg in argv]
        if not cmd:
            raise ValueError("empty command")

        if self.echo:
            self.console.print(
                f"Running: {shlex.join(cmd)}", style="dim", markup=False, highlight=False
            )
        if self.dry_run:
            return 0

        full_env = {**os.environ, **env} if env else None

        stdin = None
        if stdin_path is not None:
            try:
                stdin = open(stdin_path, "rb")
            except (FileNotFoundError, IsADirectoryError):
                raise MissingFileError(stdin_path)
            except PermissionError as e:
                raise SetupError(f"Cannot read {stdin_path} ({e.strerror})", 126)

        try:
            result = subprocess.run(cmd, cwd=self.cwd, env=full_env, stdin=stdin)
            status = normalize_status(result.returncode)
        except FileNotFoundError as e:
            raise SetupError(f"Command not found: {cmd[0]} ({e.strerror})", 127)
        except PermissionError as e:
            raise SetupError(f"Permission denied: {cmd[0]} ({e.strerror})", 126)
        except KeyboardInterrupt:
            self.console.print("\n[yellow]Interrupted by user[/yellow]")
            status = SIGINT_STATUS
        finally:
            if stdin is not None:
                stdin.close()

        if check and status != 0:
            raise CommandFailedError(cmd, status)
        return status


def wait_until(
    runner: ProcessRunner,
    argv: Sequence[str],
    timeout: float,
    interval: float,
    env: Optional[Mapping[str, str]] = None,
) -> int:
    """Poll ``argv`` until it exits 0.

    The predicate runs at most ``ceil(timeout / interval)`` times with a
    fixed ``interval`` sleep between attempts. Returns the number of
    attempts used; raises ReadinessTimeoutError when the budget runs out.
    """
    attempts = max(1, math.ceil(timeout / interval))
    for attempt in range(1, attempts + 1):
        status = runner.run(argv, env, check=False)
        if status == SIGINT_STATUS:
            raise CommandFailedError(argv, status)
        if status == 0:
            return attempt
        if attempt < attempts:
            time.sleep(interval)
    raise ReadinessTimeoutError(attempts, timeout)
