"""Server configuration file loader.

The file is YAML with a ``main`` section and an ``application`` list::

    main:
      secret: hunter2
      buffer_update_cooldown: 10
    application:
      - path: /var/log/myapp
        name: myapp
        parser: '^(?P<timestamp>\\S+) (?P<level>\\S+) (?P<module>\\S+) - (?P<message>.+)$'
        timeformat: iso8601
        level_map: {WARNING: WARN}
        buffer_size: 100000
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from logpeek.core.config import Settings, settings as default_settings
from logpeek.services.parser import TimeFormat

logger = logging.getLogger(__name__)

DEFAULT_BUFFER_SIZE = 1_000_000
DEFAULT_LOG_PATH = "logpeek-logs"
DEFAULT_PARSER = r"^(?P<timestamp>\S+) (?P<level>\S+) (?P<module>\S+) - (?P<message>.+)$"


class ConfigError(Exception):
    """Configuration is missing or invalid; the server must not start."""


@dataclass(frozen=True)
class CompiledApplication:
    """An application entry with its regex and time format ready to use."""

    name: str
    path: str
    pattern: re.Pattern[str]
    time_format: TimeFormat
    level_map: Mapping[str, str] | None
    buffer_size: int


class ApplicationConfig(BaseModel):
    """One ``application`` table from the configuration file."""

    path: str
    name: str | None = None
    parser: str
    timeformat: str = "iso8601"
    level_map: dict[str, str] | None = None
    buffer_size: int = Field(default=DEFAULT_BUFFER_SIZE, gt=0)

    @field_validator("parser")
    @classmethod
    def _check_parser(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as exc:
            raise ValueError(f"Failed to compile regex: {exc}") from exc
        return value

    @field_validator("timeformat")
    @classmethod
    def _check_timeformat(cls, value: str) -> str:
        TimeFormat.from_config(value)
        return value

    def compile(self) -> CompiledApplication:
        return CompiledApplication(
            name=self.name or self.path,
            path=self.path,
            pattern=re.compile(self.parser),
            time_format=TimeFormat.from_config(self.timeformat),
            level_map=dict(self.level_map) if self.level_map else None,
            buffer_size=self.buffer_size,
        )


class MainConfig(BaseModel):
    secret: str | None = None
    buffer_update_cooldown: int = Field(default=10, ge=0)


@dataclass(frozen=True)
class ServerConfig:
    """Immutable configuration handed to the log store and query engine."""

    applications: tuple[CompiledApplication, ...]
    secret: str | None = None
    buffer_update_cooldown: int = 10


def _default_application() -> dict[str, Any]:
    logger.warning("No application configurations found, proceeding with defaults.")
    return {"path": DEFAULT_LOG_PATH, "parser": DEFAULT_PARSER, "timeformat": "iso8601"}


def parse_server_config(data: Mapping[str, Any], settings: Settings = default_settings) -> ServerConfig:
    """Validate an already-decoded configuration mapping."""

    main_payload = dict(data.get("main") or {})
    main_payload.setdefault("secret", settings.secret)
    main_payload.setdefault("buffer_update_cooldown", settings.buffer_update_cooldown)

    raw_apps = data.get("application")
    if raw_apps is None:
        raw_apps = [_default_application()]
    if not isinstance(raw_apps, list):
        raise ConfigError("Config file is formatted incorrectly: 'application' must be a list")

    try:
        main = MainConfig.model_validate(main_payload)
        apps = [ApplicationConfig.model_validate(item).compile() for item in raw_apps]
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc

    return ServerConfig(
        applications=tuple(apps),
        secret=main.secret or None,
        buffer_update_cooldown=main.buffer_update_cooldown,
    )


def load_server_config(path: str | Path | None = None, settings: Settings = default_settings) -> ServerConfig:
    """Load the server configuration from YAML, seeding defaults from settings."""

    config_path = Path(path or settings.config_path)
    data: Any = {}
    if config_path.exists():
        try:
            data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse {config_path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {config_path} is formatted incorrectly")
    else:
        logger.warning("Config file %s not found, using defaults", config_path)

    config = parse_server_config(data, settings)
    logger.info(
        "Loaded %d application(s) from %s: %s",
        len(config.applications),
        config_path,
        ", ".join(app.name for app in config.applications),
    )
    return config


__all__ = [
    "ApplicationConfig",
    "CompiledApplication",
    "ConfigError",
    "ServerConfig",
    "load_server_config",
    "parse_server_config",
]
