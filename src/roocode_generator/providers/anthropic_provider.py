"""
Anthropic provider implementation
"""

import httpx

from roocode_generator.config.schemas import LLMConfig
from roocode_generator.core.result import Result
from roocode_generator.providers.base import (
    COMPLETION_RETRY_OPTIONS,
    DEFAULT_HTTP_TIMEOUT,
    approximate_token_count,
    request_json,
    text_from_content,
)
from roocode_generator.providers.exceptions import ErrorCode, ProviderError
from roocode_generator.providers.provider_registry import register_provider
from roocode_generator.utils.logging import get_logger
from roocode_generator.utils.retry import retry_with_backoff

logger = get_logger("providers.anthropic")

DEFAULT_API_URL = "https://api.anthropic.com/v1"
ANTHROPIC_VERSION = "2023-06-01"


@register_provider("anthropic")
class AnthropicProvider:
    """Provider for the Anthropic Messages API.

    Anthropic exposes no model listing here, so this provider deliberately
    has no ``list_models`` method.
    """

    name = "anthropic"

    def __init__(self, config: LLMConfig, client: httpx.AsyncClient | None = None):
        self.config = config
        self.default_context_size = 100000
        self.api_url = (config.api_url or DEFAULT_API_URL).rstrip("/")
        self.client = client or httpx.AsyncClient(timeout=DEFAULT_HTTP_TIMEOUT)

    def _headers(self) -> dict[str, str]:
        return {
            "x-api-key": self.config.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "Content-Type": "application/json",
        }

    async def get_completion(self, system_prompt: str, user_prompt: str) -> Result[str]:
        payload = {
            "model": self.config.model,
            "system": system_prompt,
            "messages": [{"role": "user", "content": user_prompt}],
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
        }

        async def _complete() -> str:
            data = await request_json(
                self.client,
                "POST",
                f"{self.api_url}/messages",
                provider=self.name,
                json=payload,
                headers=self._headers(),
            )
            content = data.get("content") if isinstance(data, dict) else None
            if not isinstance(content, list):
                raise ProviderError(
                    "Response has no content blocks",
                    ErrorCode.INVALID_RESPONSE_FORMAT,
                    self.name,
                    details={"response": data},
                )
            text = text_from_content(content)
            if not text.strip():
                raise ProviderError(
                    "Completion message has no content",
                    ErrorCode.EMPTY_COMPLETION_CONTENT,
                    self.name,
                    details={"stop_reason": data.get("stop_reason")},
                )
            return text

        logger.debug(f"Sending completion request to Anthropic (model: {self.config.model})")
        try:
            return Result.ok(await retry_with_backoff(_complete, COMPLETION_RETRY_OPTIONS))
        except Exception as e:
            error = ProviderError.from_error(e, self.name)
            logger.error(
                f"Failed to get completion from Anthropic: {error.message} [{error.code}]"
            )
            return Result.err(error)

    async def get_context_window_size(self) -> int:
        return self.default_context_size

    async def count_tokens(self, text: str) -> int:
        async def _count() -> int:
            data = await request_json(
                self.client,
                "POST",
                f"{self.api_url}/messages/count_tokens",
                provider=self.name,
                json={
                    "model": self.config.model,
                    "messages": [{"role": "user", "content": text}],
                },
                headers=self._headers(),
            )
            tokens = data.get("input_tokens") if isinstance(data, dict) else None
            if not isinstance(tokens, int):
                raise ProviderError(
                    "Invalid response structure from count_tokens API",
                    ErrorCode.INVALID_RESPONSE_FORMAT,
                    self.name,
                    details={"response": data},
                )
            return tokens

        try:
            return await retry_with_backoff(_count, COMPLETION_RETRY_OPTIONS)
        except Exception as e:
            logger.warning(
                f"Failed to count tokens for Anthropic model {self.config.model}, "
                f"using approximation: {e}"
            )
            return approximate_token_count(text)

    async def aclose(self) -> None:
        await self.client.aclose()
