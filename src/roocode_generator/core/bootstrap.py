"""Application bootstrap sequence and dependency wiring."""

import logging
from collections.abc import Mapping
from pathlib import Path

from roocode_generator.config.env_loader import EnvLoader
from roocode_generator.config.llm_config_service import LLMConfigService
from roocode_generator.core.app_context import AppContext
from roocode_generator.core.protocols import IConfigSource
from roocode_generator.providers.base import ProviderFactory
from roocode_generator.providers.model_lister import ModelListerService
from roocode_generator.providers.provider_registry import (
    ProviderRegistry,
    builtin_factories,
)
from roocode_generator.utils.logging import get_logger, setup_logging

logger = get_logger("core.bootstrap")


def _setup_environment(env_loader: EnvLoader) -> None:
    """Load .env files; a broken file is reported but not fatal."""
    try:
        env_loader.load_env_files()
    except Exception as e:
        logger.warning(f"Failed to load .env files: {e}", exc_info=True)


def bootstrap(
    config_path: str | Path | None = None,
    *,
    log_level: int | None = None,
    config_source: IConfigSource | None = None,
    factories: Mapping[str, ProviderFactory] | None = None,
) -> AppContext:
    """Initialize and wire the application.

    Args:
        config_path: Optional path to the LLM config file (default: ./llm.config.json)
        log_level: Override log level
        config_source: Optional pre-built config source (for testing)
        factories: Optional provider factories replacing the builtin catalog

    Returns:
        AppContext with ``config``, ``llm`` and ``models`` registered

    Raises:
        RuntimeError: If application initialization fails
    """
    setup_logging(level=log_level or logging.INFO)

    try:
        logger.debug("Starting application bootstrap")

        env_loader = EnvLoader()
        _setup_environment(env_loader)

        if config_source is None:
            config_source = LLMConfigService(config_path, env_loader=env_loader)

        provider_factories = dict(factories) if factories is not None else builtin_factories()
        logger.debug(f"Available providers: {sorted(provider_factories)}")

        # Configuration is read lazily on the first get_provider() call
        ctx = AppContext()
        ctx.register("config", config_source)
        ctx.register("llm", ProviderRegistry(config_source, provider_factories))
        ctx.register("models", ModelListerService(provider_factories))

        logger.debug("Application bootstrap completed successfully")
        return ctx

    except Exception as e:
        logger.critical("Failed to bootstrap application", exc_info=True)
        raise RuntimeError("Failed to initialize application") from e
