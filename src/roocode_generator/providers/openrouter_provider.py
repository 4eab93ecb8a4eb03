"""
OpenRouter provider implementation
"""

from typing import Any

import httpx

from roocode_generator.config.schemas import LLMConfig
from roocode_generator.core.result import Result
from roocode_generator.providers.base import (
    COMPLETION_RETRY_OPTIONS,
    DEFAULT_CONTEXT_SIZE,
    DEFAULT_HTTP_TIMEOUT,
    approximate_token_count,
    extract_chat_completion_text,
    request_json,
)
from roocode_generator.providers.exceptions import ErrorCode, ProviderError
from roocode_generator.providers.provider_registry import register_provider
from roocode_generator.utils.logging import get_logger
from roocode_generator.utils.retry import retry_with_backoff

logger = get_logger("providers.openrouter")

DEFAULT_API_URL = "https://openrouter.ai/api/v1"
ATTRIBUTION_HEADERS = {
    "HTTP-Referer": "https://github.com/roocode-generator",
    "X-Title": "RooCode Generator",
}


def _positive_int(value: Any) -> int | None:
    """Read a context length that may arrive as a string from env or YAML."""
    if isinstance(value, bool):
        return None
    try:
        number = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None
    return number if number > 0 else None


@register_provider("openrouter")
class OpenRouterProvider:
    """Provider for the OpenRouter chat completions API.

    OpenRouter proxies many upstream models, so the context window comes from
    ``model_params["context_length"]`` when the user supplied it and token
    counts are always approximate.
    """

    name = "openrouter"

    def __init__(self, config: LLMConfig, client: httpx.AsyncClient | None = None):
        self.config = config
        self.default_context_size = DEFAULT_CONTEXT_SIZE
        self.api_url = (config.api_url or DEFAULT_API_URL).rstrip("/")
        self.client = client or httpx.AsyncClient(
            base_url=self.api_url,
            headers=self._headers(),
            timeout=DEFAULT_HTTP_TIMEOUT,
        )

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
            **ATTRIBUTION_HEADERS,
        }

    async def get_completion(self, system_prompt: str, user_prompt: str) -> Result[str]:
        payload = {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
        }

        async def _complete() -> str:
            data = await request_json(
                self.client,
                "POST",
                f"{self.api_url}/chat/completions",
                provider=self.name,
                json=payload,
                headers=self._headers(),
            )
            return extract_chat_completion_text(data, self.name)

        logger.debug(f"Sending completion request to OpenRouter (model: {self.config.model})")
        try:
            completion = await retry_with_backoff(_complete, COMPLETION_RETRY_OPTIONS)
        except Exception as e:
            error = ProviderError.from_error(e, self.name)
            logger.error(
                f"Failed to get completion from OpenRouter (model: {self.config.model}): "
                f"{error.message} [{error.code}]"
            )
            return Result.err(error)

        logger.debug(
            f"Received completion from OpenRouter (model: {self.config.model}, "
            f"length: {len(completion)})"
        )
        return Result.ok(completion)

    async def list_models(self) -> Result[list[str]]:
        try:
            data = await request_json(
                self.client,
                "GET",
                f"{self.api_url}/models",
                provider=self.name,
                headers=self._headers(),
            )
            models = data.get("data") if isinstance(data, dict) else None
            if not isinstance(models, list):
                raise ProviderError(
                    "Model list response has invalid structure",
                    ErrorCode.INVALID_RESPONSE_FORMAT,
                    self.name,
                    details={"response": data},
                )
            model_ids = [
                m["id"] for m in models if isinstance(m, dict) and isinstance(m.get("id"), str)
            ]
        except Exception as e:
            error = ProviderError.from_error(e, self.name)
            logger.error(f"Failed to fetch OpenRouter models: {error.message}")
            return Result.err(error)

        logger.debug(f"OpenRouter listed {len(model_ids)} models")
        return Result.ok(model_ids)

    async def get_context_window_size(self) -> int:
        context_length = _positive_int((self.config.model_params or {}).get("context_length"))
        if context_length is not None:
            logger.debug(
                f"Using context_length from model_params: {context_length} "
                f"for OpenRouter model {self.config.model}"
            )
            return context_length
        logger.debug(
            f"No context_length in model_params for {self.config.model}, "
            f"using default {self.default_context_size}"
        )
        return self.default_context_size

    async def count_tokens(self, text: str) -> int:
        # Upstream tokenizers vary per proxied model
        return approximate_token_count(text)

    async def aclose(self) -> None:
        await self.client.aclose()
