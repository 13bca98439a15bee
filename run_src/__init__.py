#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2026 plumiume
# SPDX-License-Identifier: MIT
# License: MIT License (https://opensource.org/licenses/MIT)
# See LICENSE.txt for details.

"""
Development workflow task runner.
"""

from .commands import app, create_dispatcher, main
from .compose import ComposeWrapper
from .dispatcher import Dispatcher
from .errors import (
    CommandFailedError,
    ConfigError,
    MissingFileError,
    ReadinessTimeoutError,
    RegistryError,
    RunError,
    SetupError,
    UnknownTaskError,
)
from .models import (
    CIConfig,
    CleanConfig,
    InvocationContext,
    RunSettings,
    ServicesConfig,
    Task,
    load_settings,
)
from .registry import TaskRegistry
from .runner import ProcessRunner, wait_until
from .tasks import ProjectTasks, build_registry

__all__ = [
    # Commands
    "app",
    "main",
    "create_dispatcher",
    # Core
    "ComposeWrapper",
    "Dispatcher",
    "ProcessRunner",
    "ProjectTasks",
    "TaskRegistry",
    "build_registry",
    "wait_until",
    # Models
    "RunSettings",
    "ServicesConfig",
    "CIConfig",
    "CleanConfig",
    "InvocationContext",
    "Task",
    "load_settings",
    # Errors
    "RunError",
    "UnknownTaskError",
    "CommandFailedError",
    "SetupError",
    "MissingFileError",
    "ReadinessTimeoutError",
    "ConfigError",
    "RegistryError",
]
