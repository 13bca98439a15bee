#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# Copyright (c) 2026 plumiume
# SPDX-License-Identifier: MIT
# License: MIT License (https://opensource.org/licenses/MIT)
# See LICENSE.txt for details.

"""
Configuration and task models for the run tool.
"""

import re
from pathlib import Path
from typing import Callable, Literal, Optional, Tuple, Type

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from .errors import ConfigError

INTERNAL_PREFIX = "_"
CONFIG_FILE_NAME = "run.yaml"

_HADOLINT_RULE = re.compile(r"^(DL|SC)\d{4}$")

TaskHandler = Callable[[list[str]], int]

# ============================================================================
# Task / invocation models
# ============================================================================


class Task(BaseModel):
    """A named, invocable unit of work"""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Full task name, e.g. format:imports")
    handler: TaskHandler
    summary: str = Field(default="", description="One-line help text")

    @property
    def internal(self) -> bool:
        """Internal tasks are invocable but hidden from help"""
        return self.name.startswith(INTERNAL_PREFIX)


class InvocationContext(BaseModel):
    """How a single command is placed inside a compose service"""

    model_config = ConfigDict(frozen=True)

    service: str
    interactive: bool
    flags: tuple[str, ...] = ()
    env: dict[str, str] = Field(default_factory=dict)

    def compose_args(self) -> list[str]:
        """Flags that go between the compose subcommand and the service name"""
        args = list(self.flags)
        if not self.interactive:
            args.append("-T")
        for key, value in self.env.items():
            args.extend(["-e", f"{key}={value}"])
        return args


# ============================================================================
# Pydantic Models for Configuration
# ============================================================================


class ServicesConfig(BaseModel):
    """Compose service names used by tasks"""

    web: str = Field(default="web", description="Application service")
    postgres: str = Field(default="postgres", description="Database service")
    redis: str = Field(default="redis", description="Redis service")
    js: str = Field(default="js", description="Frontend asset service")


class CIConfig(BaseModel):
    """CI pipeline configuration"""

    dockerfile: str = Field(default="Dockerfile", description="Dockerfile to lint")
    hadolint_image: str = Field(
        default="hadolint/hadolint", description="Image providing hadolint"
    )
    hadolint_ignore: list[str] = Field(
        default_factory=lambda: ["DL3008", "DL3029"],
        description="hadolint rules to ignore",
    )
    readiness_check: str = Field(
        default="psql -U {{ POSTGRES_USER }} {{ POSTGRES_USER }} -c 'SELECT 1'",
        description="Jinja2 template of the command polled in the database service",
    )
    readiness_password_var: Optional[str] = Field(
        default="POSTGRES_PASSWORD",
        description="Env file variable exported as PGPASSWORD for the check",
    )
    wait_timeout: float = Field(default=60, gt=0, description="Seconds to wait")
    wait_interval: float = Field(default=1, gt=0, description="Seconds between polls")

    @field_validator("hadolint_ignore")
    @classmethod
    def validate_hadolint_ignore(cls, v: list[str]) -> list[str]:
        """Validate hadolint rule identifiers"""
        invalid = [rule for rule in v if not _HADOLINT_RULE.match(rule)]
        if invalid:
            raise ValueError(f"Invalid hadolint rule ids: {', '.join(invalid)}")
        return v


class CleanConfig(BaseModel):
    """Files removed by the clean task"""

    paths: list[str] = Field(
        default_factory=lambda: [
            "public/*.*",
            "public/js",
            "public/css",
            "public/images",
            "public/fonts",
            ".pytest_cache",
            ".coverage",
            "celerybeat-schedule",
        ],
        description="Glob patterns relative to the project root",
    )
    keep_files: list[str] = Field(
        default_factory=lambda: ["public/.keep"],
        description="Files recreated empty after cleaning",
    )


class RunSettings(BaseSettings):
    """Main configuration model"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="RUN_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    compose_mode: Literal["exec", "run"] = Field(
        default="exec", description="Compose subcommand used by exec-style tasks"
    )
    tty: Optional[bool] = Field(
        default=None, description="Force TTY allocation on/off (None = detect)"
    )
    echo_commands: bool = Field(default=True, description="Print commands before running")
    dotenv_path: str = Field(default=".env", description="Environment file")
    dotenv_example_path: str = Field(
        default=".env.example", description="Template copied when the env file is missing"
    )
    services: ServicesConfig = Field(default_factory=ServicesConfig)
    ci: CIConfig = Field(default_factory=CIConfig)
    clean: CleanConfig = Field(default_factory=CleanConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        """
        Customize settings sources priority.
        Priority: env vars > .env file > YAML (init) > file secrets > defaults
        """
        return env_settings, dotenv_settings, init_settings, file_secret_settings


def load_settings(project_root: Path, **overrides) -> RunSettings:
    """Load settings from run.yaml, .env and the environment.

    ``overrides`` (typically CLI options) win over every other source.
    """
    config_path = project_root / CONFIG_FILE_NAME
    data: dict = {}
    if config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}")
        if not isinstance(data, dict):
            raise ConfigError(f"{config_path} must contain a mapping at the top level")

    try:
        env_file = project_root / data.get("dotenv_path", ".env")
        settings = RunSettings(_env_file=env_file, **data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration:\n{e}")

    updates = {key: value for key, value in overrides.items() if value is not None}
    if updates:
        settings = settings.model_copy(update=updates)
    return settings
