"""
LLM Provider System

One contract over several LLM backends, with retry on transient failures,
a classified error taxonomy and model discovery.
"""

# Import provider modules to trigger decorator registration
from . import (
    anthropic_provider,  # noqa: F401
    google_genai_provider,  # noqa: F401
    openai_provider,  # noqa: F401
    openrouter_provider,  # noqa: F401
)
from .base import (
    LLMProvider,
    ModelListingProvider,
    ProviderFactory,
    approximate_token_count,
    supports_model_listing,
)
from .exceptions import (
    ErrorCode,
    ModelNotFoundError,
    ProviderError,
    ProviderNotFoundError,
)
from .model_lister import ModelListerService
from .provider_registry import (
    ProviderRegistry,
    builtin_factories,
    make_factory,
    register_provider,
)

__all__ = [
    "ErrorCode",
    "LLMProvider",
    "ModelListerService",
    "ModelListingProvider",
    "ModelNotFoundError",
    "ProviderError",
    "ProviderFactory",
    "ProviderNotFoundError",
    "ProviderRegistry",
    "approximate_token_count",
    "builtin_factories",
    "make_factory",
    "register_provider",
    "supports_model_listing",
]
