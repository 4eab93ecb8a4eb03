"""RooCode Generator - LLM provider abstraction and resilience layer."""

__version__ = "0.1.0"

from . import cli, config, core, providers, utils
from .core.result import Result
from .providers import ProviderError, ProviderRegistry

__all__ = ["ProviderError", "ProviderRegistry", "Result", "cli", "config", "core", "providers", "utils"]
