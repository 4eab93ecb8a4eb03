"""Configuration management for roocode-generator."""

from .env_loader import EnvLoader
from .llm_config_service import LLMConfigService
from .schemas import LLMConfig

__all__ = [
    "EnvLoader",
    "LLMConfig",
    "LLMConfigService",
]
