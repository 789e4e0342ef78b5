"""
Configuration loading and validation for fixture orchestration.

Supports YAML-based configuration files and plain dictionaries.
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class FixturesConfig(BaseModel):
    """Behavioural switches for a Fixtures orchestrator."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    strict_setup: bool = Field(
        default=True,
        description="Raise AlreadyInitializedError when setup() runs twice without teardown()",
    )
    suppress_teardown_errors: bool = Field(
        default=False,
        description="Log cleanup failures during teardown() instead of raising the first one",
    )
    log_level: str = Field(
        default="WARNING",
        description="Level for the fixturekit logger when configured through setup_logging()",
    )

    @field_validator("log_level")
    @classmethod
    def log_level_is_known(cls, v: str) -> str:
        """Normalize and validate the logging level name."""
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            available = ", ".join(_LOG_LEVELS)
            raise ValueError(f"Unknown log level: {v}. Available: {available}")
        return level

    @property
    def log_level_number(self) -> int:
        """Numeric logging level."""
        return logging.getLevelNamesMapping()[self.log_level]


class FixturesConfigLoader:
    """Load and validate fixture configuration from YAML files."""

    @classmethod
    def from_yaml(cls, path: str | Path) -> FixturesConfig:
        """
        Load configuration from a YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            FixturesConfig loaded from file
        """
        path = Path(path)
        if not path.exists():
            msg = f"Configuration file not found: {path}"
            raise FileNotFoundError(msg)

        with path.open() as f:
            data = yaml.safe_load(f)

        if data is None:
            return FixturesConfig()
        if not isinstance(data, dict):
            msg = f"Configuration file must contain a mapping: {path}"
            raise ValueError(msg)

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FixturesConfig:
        """
        Create configuration from a dictionary.

        Unknown keys are rejected.
        """
        return FixturesConfig.model_validate(data)

    @classmethod
    def generate_sample_config(cls) -> str:
        """
        Generate a sample YAML configuration file.

        Returns:
            YAML string for sample configuration
        """
        sample = FixturesConfig().model_dump()
        return yaml.dump(sample, default_flow_style=False, sort_keys=False)
