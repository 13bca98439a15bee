#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# Copyright (c) 2026 plumiume
# SPDX-License-Identifier: MIT
# License: MIT License (https://opensource.org/licenses/MIT)
# See LICENSE.txt for details.

"""
Error types for task dispatch.

Every error that ends a dispatch carries the exit status the process
should report.
"""

from typing import Sequence


class RunError(Exception):
    """Base error that terminates the current dispatch"""

    status: int = 1

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        if status is not None:
            self.status = status


class UnknownTaskError(RunError):
    """Requested task name is not registered"""

    status = 127

    def __init__(self, name: str):
        super().__init__(f"Unknown task: {name}")
        self.name = name


class CommandFailedError(RunError):
    """External command exited with a non-zero status"""

    def __init__(self, argv: Sequence[str], status: int):
        self.argv = list(argv)
        super().__init__(
            f"Command exited with status {status}: {' '.join(self.argv)}", status
        )


class SetupError(RunError):
    """External command could not be launched at all"""

    status = 127


class MissingFileError(RunError):
    """A required file does not exist"""

    def __init__(self, path: object, hint: str = ""):
        message = f"Required file not found: {path}"
        if hint:
            message = f"{message} ({hint})"
        super().__init__(message)
        self.path = path


class ReadinessTimeoutError(RunError):
    """Readiness predicate never succeeded within the retry budget"""

    def __init__(self, attempts: int, timeout: float):
        super().__init__(
            f"Readiness check was never successful, "
            f"aborting after {attempts} attempts ({timeout:g}s timeout)"
        )
        self.attempts = attempts


class ConfigError(RunError):
    """Invalid run.yaml or environment configuration"""

    status = 2


class RegistryError(Exception):
    """Misuse of the task registry (programming error, not an exit status)"""
