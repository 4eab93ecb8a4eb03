"""File-backed LLM configuration source."""

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from roocode_generator.config.env_loader import EnvLoader
from roocode_generator.config.schemas import LLMConfig
from roocode_generator.core.exceptions import ConfigError
from roocode_generator.core.result import Result
from roocode_generator.utils.logging import get_logger

logger = get_logger("config.llm_config_service")

DEFAULT_CONFIG_FILENAME = "llm.config.json"
YAML_SUFFIXES = (".yaml", ".yml")

# camelCase keys used in llm.config.json → LLMConfig field names
_FILE_KEYS = {
    "apiKey": "api_key",
    "maxTokens": "max_tokens",
    "modelParams": "model_params",
    "projectId": "project_id",
    "apiUrl": "api_url",
}

# (field, accepted keys) checked in this order
_REQUIRED_FIELDS = (
    ("provider", ("provider",)),
    ("apiKey", ("apiKey", "api_key")),
    ("model", ("model",)),
)


class LLMConfigService:
    """Loads and saves the LLM configuration file.

    JSON and YAML are both read through PyYAML. ``ROOCODE_LLM__*`` environment
    variables override file values, so a key can live outside the file.
    """

    def __init__(self, config_path: Path | str | None = None, env_loader: EnvLoader | None = None):
        self.config_path = Path(config_path) if config_path else Path.cwd() / DEFAULT_CONFIG_FILENAME
        self.env_loader = env_loader or EnvLoader()

    def validate_config(self, data: Mapping[str, Any]) -> str | None:
        """Return a description of the first problem in ``data``, or None if usable."""
        for label, keys in _REQUIRED_FIELDS:
            value = next((data[k] for k in keys if k in data), None)
            if not isinstance(value, str) or not value.strip():
                return f"Missing or invalid '{label}'"
        return None

    def _read_file(self) -> dict[str, Any]:
        if not self.config_path.exists():
            return {}
        try:
            with open(self.config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to read {self.config_path}: {e}") from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"{self.config_path} must contain a mapping at the top level")
        return data

    async def load_config(self) -> Result[LLMConfig]:
        """Load, merge env overrides into, and validate the configuration."""
        try:
            data = {_FILE_KEYS.get(k, k): v for k, v in self._read_file().items()}
            overrides = self.env_loader.get_llm_overrides()
            if overrides:
                logger.debug(f"Applying environment overrides: {sorted(overrides)}")
                data.update(overrides)

            if not data:
                raise ConfigError(
                    f"No LLM configuration found at {self.config_path}. "
                    "Run 'roocode config init' to create one."
                )

            problem = self.validate_config(data)
            if problem:
                raise ConfigError(f"Invalid LLM config: {problem}")

            config = LLMConfig.model_validate(data)
        except ConfigError as e:
            logger.error(f"Failed to load LLM config: {e.message}")
            return Result.err(e)
        except ValidationError as e:
            error = ConfigError(f"Invalid LLM config: {e}")
            logger.error(f"Failed to load LLM config: {error.message}")
            return Result.err(error)

        logger.debug(f"Loaded LLM config for provider '{config.provider}' from {self.config_path}")
        return Result.ok(config)

    async def save_config(self, config: LLMConfig) -> Result[None]:
        """Write ``config`` to the config path as JSON, or YAML for .yaml/.yml paths."""
        data = config.to_file_dict()
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                if self.config_path.suffix.lower() in YAML_SUFFIXES:
                    yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
                else:
                    json.dump(data, f, indent=2)
                    f.write("\n")
        except OSError as e:
            logger.error(f"Failed to save LLM config: {e}")
            return Result.err(ConfigError(f"Failed to save {self.config_path}: {e}"))

        logger.info(f"Saved LLM config to {self.config_path}")
        return Result.ok(None)
