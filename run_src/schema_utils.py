#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# Copyright (c) 2026 plumiume
# SPDX-License-Identifier: MIT
# License: MIT License (https://opensource.org/licenses/MIT)
# See LICENSE.txt for details.

"""JSON schema for run.yaml, annotated with the matching environment variables."""

from __future__ import annotations

import json
from pathlib import Path

from .models import CONFIG_FILE_NAME, RunSettings

SCHEMA_PATH = Path(".vscode") / "run.schema.json"
ENV_VAR_KEY = "x-env-var"


def _def_name(prop: dict) -> str | None:
    """Name of the ``$defs`` entry a property refers to, if any"""
    ref = prop.get("$ref")
    if ref is None and prop.get("allOf"):
        ref = prop["allOf"][0].get("$ref")
    if ref and ref.startswith("#/$defs/"):
        return ref.split("/")[-1]
    return None


def annotate_env_vars(schema: dict, prefix: str, delimiter: str) -> dict:
    """Tag every property with the variable that overrides it.

    Nested sections get ``<PREFIX><SECTION><DELIMITER><FIELD>`` on the
    properties of their ``$defs`` entry.
    """
    defs = schema.get("$defs", {})
    for name, prop in schema.get("properties", {}).items():
        env_var = f"{prefix}{name}".upper()
        prop[ENV_VAR_KEY] = env_var

        def_name = _def_name(prop)
        if def_name in defs:
            for sub_name, sub_prop in defs[def_name].get("properties", {}).items():
                sub_prop[ENV_VAR_KEY] = f"{env_var}{delimiter}{sub_name}".upper()
    return schema


def settings_schema() -> dict:
    config = RunSettings.model_config
    schema = RunSettings.model_json_schema()
    schema["$schema"] = "https://json-schema.org/draft/2020-12/schema"
    schema["title"] = CONFIG_FILE_NAME
    return annotate_env_vars(
        schema, config.get("env_prefix", ""), config.get("env_nested_delimiter") or "__"
    )


def generate_settings_schema(project_root: Path) -> Path:
    """Write the run.yaml schema under .vscode/ and return its path."""
    schema_path = project_root / SCHEMA_PATH
    schema_path.parent.mkdir(parents=True, exist_ok=True)
    schema_path.write_text(
        json.dumps(settings_schema(), indent=2, ensure_ascii=True) + "\n",
        encoding="utf-8",
    )
    return schema_path
