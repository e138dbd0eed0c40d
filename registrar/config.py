"""
Settings for the Registrar platform.

Values come from ``REGISTRAR_*`` environment variables or a ``.env`` file,
and a JSON config file passed on the command line overrides both.
"""

import json
from typing import Any, Dict, Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.exceptions import ConfigurationError


class RegistrarSettings(BaseSettings):
    # Identities
    admin_identity: str = "admin"

    # Event store
    event_store_type: Literal["memory", "file"] = "memory"
    event_store_path: str = "events"

    # Snapshots
    snapshot_path: Optional[str] = None

    # REST boundary
    rest_host: str = "0.0.0.0"
    rest_port: int = 8000

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"

    model_config = SettingsConfigDict(
        env_prefix="REGISTRAR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("admin_identity")
    @classmethod
    def _admin_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("admin_identity must not be blank")
        return v.strip()

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, v):
        return v.upper() if isinstance(v, str) else v


def load_settings(config_path: Optional[str] = None, **overrides: Any) -> RegistrarSettings:
    """Build settings from the environment, a JSON file and explicit overrides."""
    values: Dict[str, Any] = {}
    if config_path:
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                values.update(json.load(f))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot read config file {config_path}: {e}") from e
    values.update({key: value for key, value in overrides.items() if value is not None})
    try:
        return RegistrarSettings(**values)
    except ValueError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
