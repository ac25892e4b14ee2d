"""Configuration models for the nostrcite CLI.

All sections have defaults, so an empty or partial YAML file is valid.

Examples:
    ```yaml
    logging:
      level: DEBUG
      json_output: false
    contacts:
      verify: true
    keys_env: NOSTRCITE_PRIVATE_KEY
    ```
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Self

import yaml
from pydantic import BaseModel, Field, ValidationError

from .exceptions import ConfigurationError
from .yaml import load_yaml


class LoggingConfig(BaseModel):
    """Root logger settings applied by [setup_logging()][nostrcite.core.logger.setup_logging]."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    json_output: bool = False
    max_value_length: int = Field(default=1000, ge=16)


class ContactsConfig(BaseModel):
    """Contact list decoding settings."""

    verify: bool = Field(default=True, description="Validate followed public keys")


class CliConfig(BaseModel):
    """Top-level CLI configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    contacts: ContactsConfig = Field(default_factory=ContactsConfig)
    keys_env: str = Field(
        default="PRIVATE_KEY",  # pragma: allowlist secret
        min_length=1,
        description="Environment variable holding the signing key for build-contacts",
    )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Validate *data*, wrapping pydantic errors in ``ConfigurationError``."""
        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigurationError(f"invalid configuration: {e}") from e

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> Self:
        """Load and validate a YAML configuration file.

        Raises:
            ConfigurationError: If the file is missing, unparseable, or invalid.
        """
        try:
            data = load_yaml(config_path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigurationError(f"cannot load {config_path}: {e}") from e
        return cls.from_dict(data)
