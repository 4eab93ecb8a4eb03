"""
OpenAI provider implementation
"""

from typing import Any

import openai
from openai import AsyncOpenAI

from roocode_generator.config.schemas import LLMConfig
from roocode_generator.core.result import Result
from roocode_generator.providers.base import (
    COMPLETION_RETRY_OPTIONS,
    DEFAULT_CONTEXT_SIZE,
    approximate_token_count,
    extract_chat_completion_text,
    raise_for_error_body,
)
from roocode_generator.providers.exceptions import ErrorCode, ProviderError
from roocode_generator.providers.provider_registry import register_provider
from roocode_generator.utils.logging import get_logger
from roocode_generator.utils.retry import retry_with_backoff

logger = get_logger("providers.openai")

# Checked in order: more specific families first
MODEL_CONTEXT_SIZES: list[tuple[str, int]] = [
    ("gpt-4.1", 128000),
    ("gpt-4o", 128000),
    ("gpt-4-turbo", 128000),
    ("gpt-4-32k", 32768),
    ("gpt-4", 8192),
    ("gpt-3.5-turbo-16k", 16385),
    ("gpt-3.5-turbo-0125", 16385),
    ("gpt-3.5-turbo-1106", 16385),
    ("gpt-3.5-turbo-instruct", 4096),
    ("gpt-3.5-turbo", 4096),
]


def default_context_size_for_model(model: str) -> int:
    """Known context size for an OpenAI model family, or the generic default."""
    for family, size in MODEL_CONTEXT_SIZES:
        if family in model:
            return size
    logger.warning(
        f"Unknown OpenAI model '{model}' for default context size. "
        f"Using fallback {DEFAULT_CONTEXT_SIZE}."
    )
    return DEFAULT_CONTEXT_SIZE


@register_provider("openai")
class OpenAIProvider:
    """Provider backed by the official ``openai`` async client."""

    name = "openai"

    def __init__(self, config: LLMConfig, client: AsyncOpenAI | None = None):
        self.config = config
        self.default_context_size = default_context_size_for_model(config.model)
        # Retries are handled by retry_with_backoff, not by the SDK
        self.client = client or AsyncOpenAI(
            api_key=config.api_key,
            base_url=config.api_url,
            max_retries=0,
            timeout=120.0,
        )

    def _to_provider_error(self, error: Exception) -> ProviderError:
        if isinstance(error, ProviderError):
            return error
        if isinstance(error, openai.APIStatusError):
            return ProviderError(
                f"{error.message} (Status: {error.status_code})",
                ErrorCode.http(error.status_code),
                self.name,
                details={"status_code": error.status_code, "api_error_code": error.code},
                cause=error,
            )
        if isinstance(error, openai.APIConnectionError):
            return ProviderError(
                f"Network error calling {self.name}: {error}",
                ErrorCode.NETWORK_ERROR,
                self.name,
                details={"error_type": type(error).__name__},
                cause=error,
            )
        return ProviderError.from_error(error, self.name)

    async def get_completion(self, system_prompt: str, user_prompt: str) -> Result[str]:
        async def _complete() -> str:
            try:
                response = await self.client.chat.completions.create(
                    model=self.config.model,
                    messages=[
                        {"role": "system", "content": system_prompt},
                        {"role": "user", "content": user_prompt},
                    ],
                    temperature=self.config.temperature,
                    max_tokens=self.config.max_tokens,
                )
            except Exception as e:
                raise self._to_provider_error(e) from e

            data: Any = response.model_dump() if hasattr(response, "model_dump") else response
            raise_for_error_body(data, self.name)
            return extract_chat_completion_text(data, self.name)

        logger.debug(f"Sending completion request to OpenAI (model: {self.config.model})")
        try:
            return Result.ok(await retry_with_backoff(_complete, COMPLETION_RETRY_OPTIONS))
        except Exception as e:
            error = self._to_provider_error(e)
            logger.error(f"Failed to get completion from OpenAI: {error.message} [{error.code}]")
            return Result.err(error)

    async def list_models(self) -> Result[list[str]]:
        try:
            page = await self.client.models.list()
            model_ids = [model.id for model in page.data]
        except Exception as e:
            error = self._to_provider_error(e)
            logger.error(f"Failed to list OpenAI models: {error.message}")
            return Result.err(error)

        logger.debug(f"OpenAI listed {len(model_ids)} models")
        return Result.ok(model_ids)

    async def get_context_window_size(self) -> int:
        try:
            model = await self.client.models.retrieve(self.config.model)
        except Exception as e:
            logger.warning(
                f"Failed to get context window size for model {self.config.model}, "
                f"using default {self.default_context_size}: {e}"
            )
            return self.default_context_size

        context_length = (getattr(model, "model_extra", None) or {}).get("context_length")
        if isinstance(context_length, int) and context_length > 0:
            return context_length
        return self.default_context_size

    async def count_tokens(self, text: str) -> int:
        return approximate_token_count(text)

    async def aclose(self) -> None:
        await self.client.close()
