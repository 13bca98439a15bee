#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# Copyright (c) 2026 plumiume
# SPDX-License-Identifier: MIT
# License: MIT License (https://opensource.org/licenses/MIT)
# See LICENSE.txt for details.

"""
Ordered task registry.
"""

from typing import Iterator

from .errors import RegistryError, UnknownTaskError
from .models import Task, TaskHandler


class TaskRegistry:
    """Flat name -> task table, built once and then frozen.

    Names are matched exactly; ``format:imports`` is a single key.
    Iteration follows registration order.
    """

    def __init__(self) -> None:
        self._tasks: dict[str, Task] = {}
        self._frozen = False

    def register(self, name: str, handler: TaskHandler, summary: str = "") -> Task:
        if self._frozen:
            raise RegistryError(f"Registry is frozen, cannot register {name!r}")
        if name in self._tasks:
            raise RegistryError(f"Task {name!r} is already registered")
        task = Task(name=name, handler=handler, summary=summary)
        self._tasks[name] = task
        return task

    def freeze(self) -> "TaskRegistry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, name: str) -> Task:
        try:
            return self._tasks[name]
        except KeyError:
            raise UnknownTaskError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._tasks

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks.values())

    def __len__(self) -> int:
        return len(self._tasks)

    def public_tasks(self) -> list[Task]:
        """Tasks shown in help, in registration order"""
        return [task for task in self._tasks.values() if not task.internal]
