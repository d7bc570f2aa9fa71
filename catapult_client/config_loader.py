"""Config Loader - Loads client configuration from YAML or the environment.

Two sources, one result (a validated ClientConfig):

- A YAML file whose values may reference the environment, so secrets stay
  out of the file. ${NAME} must be set; ${NAME:-fallback} uses the fallback
  when NAME is unset:

      user_id: u-abc123
      api_token: ${CATAPULT_API_TOKEN}
      api_secret: ${CATAPULT_API_SECRET}
      base_endpoint: ${CATAPULT_API_ENDPOINT:-https://api.catapult.inetwork.com}

- CATAPULT_* environment variables, read through pydantic-settings.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from catapult_client.errors import ConfigError
from catapult_client.models import ClientConfig

_ENV_REFERENCE = re.compile(r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?::-(?P<fallback>[^}]*))?\}")


class CatapultSettings(BaseSettings):
    """Client settings taken from CATAPULT_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CATAPULT_",
        extra="ignore",
        case_sensitive=False,
    )

    user_id: str = Field(default="", description="CATAPULT_USER_ID")
    api_token: str = Field(default="", description="CATAPULT_API_TOKEN")
    api_secret: str = Field(default="", description="CATAPULT_API_SECRET")
    api_endpoint: str | None = Field(default=None, description="CATAPULT_API_ENDPOINT")
    timeout: float | None = Field(default=None, gt=0, description="CATAPULT_TIMEOUT (seconds)")

    def to_client_config(self) -> ClientConfig:
        """Build a ClientConfig; unset optional settings keep ClientConfig defaults.

        Raises:
            MissingCredentialsError: If user id, token or secret is empty.
        """
        values: dict[str, Any] = {
            "user_id": self.user_id,
            "api_token": self.api_token,
            "api_secret": self.api_secret,
        }
        if self.api_endpoint:
            values["base_endpoint"] = self.api_endpoint
        if self.timeout is not None:
            values["timeout"] = self.timeout
        return ClientConfig.model_validate(values)


def config_from_env() -> ClientConfig:
    """Build client configuration from CATAPULT_* environment variables.

    Raises:
        ConfigError: If a variable holds an invalid value (e.g. CATAPULT_TIMEOUT=abc).
        MissingCredentialsError: If user id, token or secret is unset or empty.
    """
    try:
        settings = CatapultSettings()
    except ValidationError as e:
        raise ConfigError(f"Invalid CATAPULT_* environment: {e}") from e
    return settings.to_client_config()


def load_client_config(config_path: Path) -> ClientConfig:
    """Load client configuration from a YAML file.

    Raises:
        ConfigError: If the file is missing, not a YAML mapping, references an
                     unset variable, or holds unknown or invalid keys.
        MissingCredentialsError: If user id, token or secret is empty.
    """
    try:
        text = config_path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {config_path}") from e

    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(document, dict):
        raise ConfigError(f"{config_path} must be a YAML mapping of client settings")

    values = {
        key: _expand_env(value, key) if isinstance(value, str) else value
        for key, value in document.items()
    }

    try:
        return ClientConfig.model_validate(values)
    except ValidationError as e:
        raise ConfigError(f"Invalid client settings in {config_path}: {e}") from e


def _expand_env(value: str, key: str) -> str:
    """Replace ${NAME} / ${NAME:-fallback} references in one setting."""

    def lookup(match: re.Match) -> str:
        name = match.group("name")
        resolved = os.environ.get(name, match.group("fallback"))
        if resolved is None:
            raise ConfigError(f"Setting '{key}' references unset environment variable '{name}'")
        return resolved

    return _ENV_REFERENCE.sub(lookup, value)
