"""
Configuration management for the CPF tool

Loads settings from:
1. Environment variables (CPF_*, optionally via .env)
2. config/config.yaml
3. Default values
"""

import os
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Load environment variables
load_dotenv()


DEFAULT_CONFIG_DIR = Path.home() / ".cpf-cli"
DEFAULT_CONFIG_FILE = Path("config") / "config.yaml"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Config(BaseSettings):
    """CPF tool configuration settings"""

    model_config = SettingsConfigDict(
        env_prefix="CPF_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Local state
    config_dir: Path = Field(
        default=DEFAULT_CONFIG_DIR,
        description="Directory holding the persisted telemetry flag"
    )
    telemetry_file: str = Field(
        default="telemetry.json",
        description="Telemetry flag file name inside config_dir"
    )

    # PostHog telemetry
    posthog_api_key: str = Field(
        default="",
        description="PostHog project key; telemetry is inert without it"
    )
    posthog_endpoint: str = Field(
        default="https://app.posthog.com/capture",
        description="PostHog capture endpoint"
    )
    telemetry_timeout: float = Field(
        default=2.0,
        description="Timeout for telemetry requests (seconds)"
    )

    # Logging
    log_level: str = Field(default="WARNING", description="Logging level")
    log_file: Optional[Path] = Field(default=None, description="Log file path (optional)")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {v!r}")
        return level

    @property
    def telemetry_path(self) -> Path:
        return Path(self.config_dir).expanduser() / self.telemetry_file

    @classmethod
    def from_yaml(cls, yaml_path: str | Path = DEFAULT_CONFIG_FILE) -> "Config":
        """Load configuration from YAML file.

        Environment variables still take precedence over YAML values.
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            return cls()

        with open(yaml_path) as f:
            config_data = yaml.safe_load(f) or {}

        # init kwargs would beat the environment, so drop keys the env overrides
        env_keys = {key.upper() for key in os.environ}
        env_overridden = {
            name for name in cls.model_fields
            if f"CPF_{name.upper()}" in env_keys
        }
        return cls(**{k: v for k, v in config_data.items() if k not in env_overridden})


# Global configuration instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create global configuration instance"""
    global _config
    if _config is None:
        _config = Config.from_yaml()
    return _config


def reload_config(yaml_path: Optional[str | Path] = None) -> Config:
    """Reload configuration from file"""
    global _config
    _config = Config.from_yaml(yaml_path) if yaml_path else Config.from_yaml()
    return _config
