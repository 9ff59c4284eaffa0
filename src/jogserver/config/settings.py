"""Configuration management for jogserver.

Loads settings from a YAML configuration file with environment variable
overrides (``JOGSERVER_SERVER__PORT=5000`` and so on). Supports .env files.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/jogserver.yaml")


class ServerConfig(BaseModel):
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=4445, ge=1, le=65535)
    probe_timeout: float = Field(default=1.0, gt=0, description="Seconds to wait on the exit probe")
    grace_interval: float = Field(
        default=0.5, ge=0, description="Seconds to wait after a previous instance was told to exit"
    )
    bind_attempts: int = Field(default=8, ge=1)
    bind_backoff: float = Field(default=0.1, gt=0, description="First delay between bind attempts")
    bind_backoff_max: float = Field(default=1.0, gt=0)


class MachineConfig(BaseModel):
    backend: Literal["simulated", "none"] = Field(default="simulated")
    start_z: float = Field(default=0.0)
    min_z: float | None = Field(default=None)
    max_z: float | None = Field(default=None)

    @model_validator(mode="after")
    def _check_limits(self) -> MachineConfig:
        if self.min_z is not None and self.max_z is not None and self.min_z > self.max_z:
            raise ValueError("machine.min_z must not exceed machine.max_z")
        return self


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")
    format: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    file: str | None = Field(default=None)


class Settings(BaseSettings):
    """Root configuration for jogserver.

    Loads from YAML file and supports environment variable overrides.
    Reads .env files automatically.
    """

    model_config = {
        "env_prefix": "JOGSERVER_",
        "env_nested_delimiter": "__",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    server: ServerConfig = Field(default_factory=ServerConfig)
    machine: MachineConfig = Field(default_factory=MachineConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # YAML values arrive as init kwargs; env vars must still win
        return env_settings, dotenv_settings, init_settings, file_secret_settings


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from YAML + .env + environment variables.

    Priority: env vars > .env file > YAML file > defaults
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    yaml_data = {}
    if path.exists():
        with open(path) as f:
            yaml_data = yaml.safe_load(f) or {}
        logger.info("Loaded configuration from %s", path)
    else:
        logger.warning("Config file %s not found, using defaults + env vars", path)

    return Settings(**yaml_data)
