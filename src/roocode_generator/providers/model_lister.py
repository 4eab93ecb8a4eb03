"""
Model discovery for arbitrary provider/API-key pairs
"""

import inspect
from collections.abc import Mapping

from roocode_generator.config.schemas import LLMConfig
from roocode_generator.core.result import Result
from roocode_generator.providers.base import ProviderFactory, supports_model_listing
from roocode_generator.providers.exceptions import (
    ErrorCode,
    ProviderError,
    ProviderNotFoundError,
)
from roocode_generator.utils.logging import get_logger

logger = get_logger("providers.model_lister")

PLACEHOLDER_MODEL = "temporary"


class ModelListerService:
    """Lists the models a provider offers for a given API key.

    Works independently of the active configuration: each call builds a
    throwaway provider through the same factories the registry uses, so it
    can run before any configuration has been saved.
    """

    def __init__(self, factories: Mapping[str, ProviderFactory]):
        self._factories = {name.lower(): factory for name, factory in factories.items()}

    async def list_models_for_provider(
        self, provider_name: str, api_key: str
    ) -> Result[list[str]]:
        """List model identifiers for ``provider_name`` using ``api_key``.

        The factory lookup is case-insensitive; the synthesized config keeps
        the caller's spelling of the provider name.
        """
        try:
            factory = self._factories.get(provider_name.lower())
            if factory is None:
                logger.warning(f"Provider factory not found for {provider_name}")
                available = ", ".join(sorted(self._factories))
                return Result.err(
                    ProviderNotFoundError(
                        f"LLM provider '{provider_name}' not found. "
                        f"Available providers: {available}",
                        provider=provider_name,
                    )
                )

            temp_config = LLMConfig(
                provider=provider_name,
                api_key=api_key,
                model=PLACEHOLDER_MODEL,
                temperature=1,
                max_tokens=2048,
            )

            provider_result = factory(temp_config)
            if provider_result.is_err():
                logger.warning(f"Failed to create provider instance for {provider_name}")
                return provider_result

            provider = provider_result.unwrap()
            if not supports_model_listing(provider):
                logger.warning(f"Provider {provider_name} does not support listing models")
                return Result.err(
                    ProviderError(
                        f"{provider_name} does not support listing models",
                        ErrorCode.NOT_IMPLEMENTED,
                        provider_name,
                    )
                )

            try:
                models_result = await provider.list_models()
            finally:
                close = getattr(provider, "aclose", None)
                if inspect.iscoroutinefunction(close):
                    await close()

            if models_result.is_err():
                logger.warning(f"No models available for {provider_name}")
                return models_result

            models = models_result.unwrap()
            if not models:
                logger.warning(f"No models available for {provider_name}")
                return Result.err(
                    ProviderError(
                        f"No models available for {provider_name}",
                        ErrorCode.NO_MODELS_AVAILABLE,
                        provider_name,
                    )
                )

            logger.debug(f"Listed {len(models)} models for {provider_name}")
            return Result.ok(list(models))

        except Exception as e:
            logger.warning(f"Could not fetch available models: {e}")
            return Result.err(
                ProviderError(
                    f"Failed to list models for {provider_name}: {e}",
                    ErrorCode.UNKNOWN_ERROR,
                    provider_name,
                    cause=e,
                )
            )
