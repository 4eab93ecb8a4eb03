"""
Provider factories and the registry that resolves the active provider
"""

from collections.abc import Callable, Mapping
from typing import TypeVar

from roocode_generator.config.schemas import LLMConfig
from roocode_generator.core.protocols import IConfigSource
from roocode_generator.core.result import Result
from roocode_generator.providers.base import LLMProvider, ProviderFactory
from roocode_generator.providers.exceptions import (
    ErrorCode,
    ProviderError,
    ProviderNotFoundError,
)
from roocode_generator.utils.logging import get_logger

logger = get_logger("providers.registry")

P = TypeVar("P", bound=type)

# Catalog of builtin factories, filled by @register_provider at import time.
# It holds constructors only; provider instances are cached per ProviderRegistry.
_builtin_factories: dict[str, ProviderFactory] = {}


def make_factory(name: str, provider_cls: Callable[[LLMConfig], LLMProvider]) -> ProviderFactory:
    """Wrap a provider constructor so construction failures become FACTORY_INIT_ERROR."""

    def factory(config: LLMConfig) -> Result[LLMProvider]:
        try:
            return Result.ok(provider_cls(config))
        except Exception as e:
            logger.error(f"Error creating {name} provider instance: {e}")
            return Result.err(
                ProviderError(
                    f"Failed to create {name} provider: {e}",
                    ErrorCode.FACTORY_INIT_ERROR,
                    name,
                    details={"error_type": type(e).__name__},
                    cause=e,
                )
            )

    factory.__name__ = f"{name.replace('-', '_')}_factory"
    return factory


def register_provider(name: str) -> Callable[[P], P]:
    """Decorator to register a provider class as a builtin factory"""

    def decorator(cls: P) -> P:
        _builtin_factories[name] = make_factory(name, cls)
        logger.debug(f"Registered builtin provider: {name}")
        return cls

    return decorator


def builtin_factories() -> dict[str, ProviderFactory]:
    """Copy of the builtin name → factory map."""
    # Importing the package registers every builtin provider module
    import roocode_generator.providers  # noqa: F401

    return dict(_builtin_factories)


class ProviderRegistry:
    """Resolves the provider named by the current configuration.

    The registry starts unresolved. The first successful :meth:`get_provider`
    loads configuration once, builds the provider and caches it for the
    lifetime of this registry; later calls return the same instance without
    touching the config source. Failures are never cached.
    """

    def __init__(
        self,
        config_source: IConfigSource,
        factories: Mapping[str, ProviderFactory],
    ):
        self._config_source = config_source
        self._factories = dict(factories)
        self._cached: tuple[str, LLMProvider] | None = None

    @property
    def is_resolved(self) -> bool:
        return self._cached is not None

    @property
    def available_providers(self) -> list[str]:
        return sorted(self._factories)

    async def get_provider(self) -> Result[LLMProvider]:
        """Return the active provider, building it on first use."""
        if self._cached is not None:
            name, provider = self._cached
            logger.debug(f"Using cached provider instance: {name}")
            return Result.ok(provider)

        try:
            config_result = await self._config_source.load_config()
            if config_result.is_err():
                cause = config_result.error
                logger.error(f"Failed to load LLM configuration: {cause}")
                return Result.err(
                    ProviderError(
                        f"Failed to load LLM configuration: {cause}",
                        ErrorCode.CONFIG_ERROR,
                        "unknown",
                        cause=cause,
                    )
                )

            config: LLMConfig = config_result.unwrap()
            factory_result = self.get_provider_factory(config.provider)
            if factory_result.is_err():
                logger.error(str(factory_result.error))
                return factory_result

            provider_result = factory_result.unwrap()(config)
            if provider_result.is_err():
                logger.error(
                    f"Failed to create provider '{config.provider}': {provider_result.error}"
                )
                return provider_result

            provider = provider_result.unwrap()
            self._cached = (config.provider, provider)
            logger.info(
                f"Resolved LLM provider '{config.provider}' (model: {config.model})"
            )
            return Result.ok(provider)

        except Exception as e:
            logger.error(f"Unexpected error resolving provider: {e}", exc_info=True)
            return Result.err(ProviderError.from_error(e, "registry"))

    def get_provider_factory(self, name: str) -> Result[ProviderFactory]:
        """Look up a factory by exact name without instantiating anything."""
        factory = self._factories.get(name)
        if factory is None:
            return Result.err(
                ProviderNotFoundError(
                    f"Provider factory not found for provider: {name}",
                    provider=name,
                    details={"available_providers": self.available_providers},
                )
            )
        return Result.ok(factory)

    async def aclose(self) -> None:
        """Close the cached provider's transport, if it has one."""
        if self._cached is None:
            return
        close = getattr(self._cached[1], "aclose", None)
        if callable(close):
            await close()
