"""Environment variable loading utilities for roocode-generator."""

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from roocode_generator.core.exceptions import ConfigError
from roocode_generator.utils.logging import get_logger

logger = get_logger("config.env_loader")


class EnvLoader:
    """Loads ``.env`` files and maps prefixed variables into config data.

    ``ROOCODE_LLM__API_KEY=...`` becomes ``{"llm": {"api_key": "..."}}``.
    """

    def __init__(self, env_prefix: str = "ROOCODE_", env_paths: list[Path] | None = None):
        """Initialize the environment loader.

        Args:
            env_prefix: Prefix for environment variables to load (default: "ROOCODE_")
            env_paths: Optional list of .env file paths to load (default: cwd)
        """
        self.env_prefix = env_prefix
        self.env_paths = (
            env_paths if env_paths is not None else [Path.cwd() / ".env", Path.cwd() / ".env.local"]
        )

    def load_env_files(self) -> None:
        """Load the configured .env files; later files override earlier ones.

        Raises:
            ConfigError: If a .env file exists but cannot be loaded
        """
        loaded_any = False
        for env_path in self.env_paths:
            if not env_path.exists():
                continue
            try:
                load_dotenv(env_path, override=loaded_any)
            except Exception as e:
                raise ConfigError(f"Failed to load .env file {env_path}: {e}") from e
            logger.info(f"Loaded environment variables from {env_path}")
            loaded_any = True

        if not loaded_any:
            logger.debug("No .env files found to load")

    def get_config_from_env(self, convert_values: bool = True) -> dict[str, Any]:
        """Extract configuration from environment variables.

        Args:
            convert_values: Coerce booleans, numbers and ``null``. Disable when
                a schema does its own coercion, so keys like ``007`` stay strings.

        Raises:
            ConfigError: If environment variable parsing fails
        """
        config_data: dict[str, Any] = {}
        env_count = 0

        try:
            for key, value in os.environ.items():
                if not key.startswith(self.env_prefix):
                    continue
                config_key = key[len(self.env_prefix) :].lower()
                env_count += 1

                # LLM__MAX_TOKENS → {"llm": {"max_tokens": value}}
                key_parts = config_key.split("__")
                self._set_nested_value(
                    config_data,
                    key_parts,
                    self._convert_env_value(value) if convert_values else value,
                )
        except Exception as e:
            raise ConfigError(f"Failed to parse environment variables: {e}") from e

        if env_count > 0:
            logger.debug(
                f"Loaded {env_count} environment variables with prefix '{self.env_prefix}'"
            )
        return config_data

    def get_llm_overrides(self) -> dict[str, Any]:
        """The ``ROOCODE_LLM__*`` section, left as strings for pydantic to coerce."""
        section = self.get_config_from_env(convert_values=False).get("llm", {})
        return section if isinstance(section, dict) else {}

    def _set_nested_value(self, data: dict[str, Any], key_parts: list[str], value: Any) -> None:
        current = data
        for part in key_parts[:-1]:
            if part not in current:
                current[part] = {}
            elif not isinstance(current[part], dict):
                logger.warning(
                    f"Cannot set nested value for {'.'.join(key_parts)}: {part} is not a dictionary"
                )
                return
            current = current[part]
        current[key_parts[-1]] = value

    def _convert_env_value(self, value: str) -> Any:
        """Convert a string value to bool, int, float, None or leave it as is."""
        if value.lower() in ("true", "false"):
            return value.lower() == "true"

        try:
            if "." not in value and "e" not in value.lower():
                return int(value)
            return float(value)
        except ValueError:
            pass

        return value if value != "null" else None
