#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# Copyright (c) 2026 plumiume
# SPDX-License-Identifier: MIT
# License: MIT License (https://opensource.org/licenses/MIT)
# See LICENSE.txt for details.

"""
Interactivity detection and env file handling.
"""

import shutil
import sys
from pathlib import Path
from typing import Optional, TextIO

from dotenv import dotenv_values

from .errors import MissingFileError


def is_interactive(stream: Optional[TextIO] = None) -> bool:
    """Return True if ``stream`` (stdout by default) is attached to a terminal"""
    stream = sys.stdout if stream is None else stream
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        # Detached or closed streams
        return False


def load_env_file(path: Path, required: bool = True) -> dict[str, str]:
    """Parse KEY=VALUE lines from a dotenv-style file.

    Comments and blank lines are skipped and later keys override earlier
    ones. Lines without ``=`` carry no value and are dropped.
    """
    if not path.is_file():
        if required:
            raise MissingFileError(path)
        return {}

    values = dotenv_values(path, interpolate=False)
    return {key: value for key, value in values.items() if value is not None}


def ensure_env_file(path: Path, example_path: Path) -> bool:
    """Copy ``example_path`` to ``path`` unless ``path`` already exists.

    Returns True if the file was created.
    """
    if path.exists():
        return False
    if not example_path.is_file():
        raise MissingFileError(path, f"no template at {example_path}")
    shutil.copyfile(example_path, path)
    return True
