"""
Configuration system using Pydantic for type-safe settings management.

Values come from, in increasing priority: field defaults, ``STACKED_PR_*``
environment variables, an optional YAML file, and command-line options.
"""

from __future__ import annotations

import os
import re
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from stacked_pr.exceptions import ConfigurationError

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class SourceType(str, Enum):
    """Where pull request data comes from."""

    GH = "gh"
    """GitHub CLI subprocess (uses the stored ``gh`` login)."""

    REST = "rest"
    """GitHub REST API over HTTPS (needs a token)."""

    def __str__(self) -> str:
        return self.value


class StackSettings(BaseSettings):
    """Settings for one stacked-pr run."""

    model_config = SettingsConfigDict(
        env_prefix="STACKED_PR_",
        case_sensitive=False,
        extra="forbid",
    )

    source: SourceType = Field(default=SourceType.GH, description="Pull request data source")

    gh_path: str = Field(default="gh", description="GitHub CLI executable")
    clear_env_token: bool = Field(
        default=True,
        description="Run gh with GITHUB_TOKEN blanked so its stored login is used",
    )
    command_timeout: float | None = Field(default=None, gt=0, description="Seconds allowed per gh invocation")

    api_url: str = Field(default="https://api.github.com", description="GitHub REST API base URL")
    token: SecretStr | None = Field(default=None, description="Token for the REST source")
    request_timeout: float = Field(default=30.0, gt=0, description="Seconds allowed per REST request")

    list_limit: int = Field(default=100, ge=1, le=1000, description="Maximum open PRs considered")
    trunk_branch: str = Field(default="main", min_length=1, description="Base branch sorted first")

    log_level: str = Field(default="WARNING", description="Logging level")
    json_logs: bool = Field(default=False, description="Render logs as JSON")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and check the log level name."""
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Invalid log level '{v}'. Must be one of: {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    def with_overrides(self, **overrides: Any) -> StackSettings:
        """Return a copy with the non-None overrides applied and validated.

        Args:
            **overrides: Field values, typically from command-line options

        Raises:
            ConfigurationError: If an override is invalid
        """
        values = self.model_dump()
        values.update({key: value for key, value in overrides.items() if value is not None})
        try:
            return type(self).model_validate(values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration value: {e}") from e

    @classmethod
    def load(cls) -> StackSettings:
        """Load settings from the environment only.

        Raises:
            ConfigurationError: If an environment variable holds an invalid value
        """
        try:
            return cls()
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration in environment: {e}") from e

    @classmethod
    def from_yaml(cls, config_path: str) -> StackSettings:
        """Load settings from a YAML file.

        ``${VAR}`` and ``${VAR:-default}`` references are replaced with
        environment values before the YAML is parsed. Environment variables
        with the ``STACKED_PR_`` prefix still apply to keys the file omits.

        Raises:
            ConfigurationError: If the file is missing, unreadable, not a YAML
                mapping, references an unset variable or holds invalid values
        """
        values = read_config_mapping(Path(config_path))
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Failed to validate configuration: {e}") from e


ENV_REFERENCE_PATTERN = re.compile(r"\$\{(?P<name>[A-Z_][A-Z0-9_]*)(?::-(?P<default>[^}]*))?\}")


def expand_env_references(text: str) -> str:
    """Replace ``${VAR}`` references with environment values.

    Lines whose first non-blank character is ``#`` are YAML comments and are
    kept as written, so a commented-out reference never has to be set.

    Raises:
        ConfigurationError: If a reference without a default names an unset
            variable
    """

    def substitute(match: re.Match[str]) -> str:
        value = os.environ.get(match.group("name"), match.group("default"))
        if value is None:
            raise ConfigurationError(
                f"Invalid environment variable reference in config: {match.group('name')} is not set"
            )
        return value

    return "\n".join(
        line if line.lstrip().startswith("#") else ENV_REFERENCE_PATTERN.sub(substitute, line)
        for line in text.split("\n")
    )


def read_config_mapping(path: Path) -> dict[str, Any]:
    """Read a YAML config file into a dict of setting values.

    An empty file yields an empty dict.

    Raises:
        ConfigurationError: If the file cannot be read or is not a YAML mapping
    """
    if not path.is_file():
        raise ConfigurationError(f"Configuration file not found: {path}")

    try:
        text = path.read_text()
    except OSError as e:
        raise ConfigurationError(f"Cannot read configuration file {path}: {e}") from e

    try:
        data = yaml.safe_load(expand_env_references(text))
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML syntax in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration in {path} must be a YAML object, not {type(data).__name__}")
    return data
