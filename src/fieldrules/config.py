"""Configuration management for fieldrules using Pydantic models."""

import json
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

CONFIG_FILENAME = ".fieldrules.json"


class UnknownRulePolicy(str, Enum):
    """What to do with rule names outside {len, in, min, max}."""
    IGNORE = "ignore"
    WARN = "warn"
    ERROR = "error"


class LengthUnit(str, Enum):
    """How string length is measured."""
    CHARS = "chars"
    BYTES = "bytes"


class LogLevel(str, Enum):
    """Logging levels."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"


class LoggingConfig(BaseModel):
    """Logging configuration section."""
    level: LogLevel = LogLevel.WARN

    model_config = ConfigDict(use_enum_values=True, validate_default=True)


class FieldRulesConfig(BaseModel):
    """Complete fieldrules configuration model."""
    tag_key: str = Field(alias="tagKey", default="validate")
    unknown_rules: UnknownRulePolicy = Field(alias="unknownRules", default=UnknownRulePolicy.IGNORE)
    strict_membership: bool = Field(alias="strictMembership", default=False)
    length_unit: LengthUnit = Field(alias="lengthUnit", default=LengthUnit.BYTES)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("tag_key")
    @classmethod
    def validate_tag_key(cls, v):
        if not v or not v.strip():
            raise ValueError("tag_key must be a non-empty string")
        return v

    model_config = ConfigDict(
        extra="forbid", populate_by_name=True, use_enum_values=True, validate_default=True
    )


def load_config(config_path: str | Path | None = None) -> FieldRulesConfig:
    """Load configuration from file with fallback to defaults.

    Args:
        config_path: Optional path to configuration file. If None, searches
                    current directory and parents for .fieldrules.json

    Returns:
        FieldRulesConfig: Loaded and validated configuration

    Raises:
        ValueError: If configuration is invalid, or if config_path is given
                    but does not exist
    """
    if config_path is None:
        config_path = find_config_file()
    else:
        config_path = Path(config_path)
        if not config_path.exists():
            raise ValueError(f"Config file not found: {config_path}")

    if config_path and config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                config_data = json.load(f)
            return FieldRulesConfig(**config_data)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in config file {config_path}: {e}") from e
        except Exception as e:
            raise ValueError(f"Failed to load config from {config_path}: {e}") from e
    return FieldRulesConfig()


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find .fieldrules.json by searching up the directory tree.

    Args:
        start_dir: Directory to start search from (default: current directory)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = Path(start_dir).resolve()

    while True:
        config_file = current / CONFIG_FILENAME
        if config_file.exists():
            return config_file

        parent = current.parent
        if parent == current:  # Reached root directory
            break
        current = parent

    return None
