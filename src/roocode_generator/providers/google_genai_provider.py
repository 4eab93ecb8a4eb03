"""
Google Generative AI (Gemini) provider implementation
"""

from typing import Any

import httpx

from roocode_generator.config.schemas import LLMConfig
from roocode_generator.core.result import Result
from roocode_generator.providers.base import (
    DEFAULT_HTTP_TIMEOUT,
    approximate_token_count,
    request_json,
)
from roocode_generator.providers.exceptions import ErrorCode, ProviderError, should_retry
from roocode_generator.providers.provider_registry import register_provider
from roocode_generator.utils.logging import get_logger
from roocode_generator.utils.retry import RetryOptions, retry_with_backoff

logger = get_logger("providers.google_genai")

DEFAULT_API_URL = "https://generativelanguage.googleapis.com/v1beta"
FALLBACK_TOKEN_LIMIT = 1_000_000


def _should_retry(error: BaseException) -> bool:
    # An HTML body means a proxy or auth page, not a transient failure
    if isinstance(error, ProviderError) and (error.details or {}).get("html_response"):
        return False
    return should_retry(error)


RETRY_OPTIONS = RetryOptions(retries=3, initial_delay_ms=500, should_retry=_should_retry)


@register_provider("google-genai")
class GoogleGenAIProvider:
    """Provider for the Gemini ``generateContent`` REST API.

    The model's input token limit is looked up once from the models endpoint
    and reused; completions whose prompt exceeds it are rejected locally.
    """

    name = "google-genai"

    def __init__(self, config: LLMConfig, client: httpx.AsyncClient | None = None):
        self.config = config
        self.default_context_size = 8192
        self.api_url = (config.api_url or DEFAULT_API_URL).rstrip("/")
        self.client = client or httpx.AsyncClient(timeout=DEFAULT_HTTP_TIMEOUT)
        self._input_token_limit: int | None = None

    @property
    def model_path(self) -> str:
        """Model id in ``models/<id>`` form as used in request paths."""
        model = self.config.model
        return model if model.startswith("models/") else f"models/{model}"

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-goog-api-key": self.config.api_key,
        }

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        return await request_json(
            self.client,
            method,
            f"{self.api_url}/{path}",
            provider=self.name,
            headers=self._headers(),
            **kwargs,
        )

    async def get_completion(self, system_prompt: str, user_prompt: str) -> Result[str]:
        try:
            input_text = f"{system_prompt}\n\n{user_prompt}"
            input_tokens = await self.count_tokens(input_text)
            limit = await self._get_input_token_limit() or FALLBACK_TOKEN_LIMIT
            logger.debug(f"Input tokens: {input_tokens}, Limit: {limit}")
            if input_tokens > limit:
                message = (
                    f"Input ({input_tokens} tokens) exceeds model token limit ({limit})."
                )
                logger.warning(f"{message} Skipping API call.")
                return Result.err(
                    ProviderError(
                        message,
                        ErrorCode.INPUT_VALIDATION_ERROR,
                        self.name,
                        details={"input_tokens": input_tokens, "limit": limit},
                    )
                )

            payload = {
                "systemInstruction": {"parts": [{"text": system_prompt}]},
                "contents": [{"role": "user", "parts": [{"text": user_prompt}]}],
                "generationConfig": {
                    "temperature": self.config.temperature,
                    "maxOutputTokens": self.config.max_tokens,
                },
            }

            async def _generate() -> str:
                data = await self._request(
                    "POST", f"{self.model_path}:generateContent", json=payload
                )
                return self._extract_text(data)

            logger.debug(
                f"Sending completion request to Google GenAI (model: {self.config.model}) with retry"
            )
            return Result.ok(await retry_with_backoff(_generate, RETRY_OPTIONS))

        except Exception as e:
            error = ProviderError.from_error(e, self.name)
            logger.error(
                f"Failed to get completion from Google GenAI after retries: "
                f"{error.message} [{error.code}]"
            )
            return Result.err(error)

    def _extract_text(self, data: Any) -> str:
        if not isinstance(data, dict):
            raise ProviderError(
                "Response is not a JSON object",
                ErrorCode.INVALID_RESPONSE_FORMAT,
                self.name,
                details={"response": data},
            )

        candidates = data.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            block_reason = (data.get("promptFeedback") or {}).get("blockReason")
            raise ProviderError(
                "Response has no candidates"
                + (f" (blocked: {block_reason})" if block_reason else ""),
                ErrorCode.INVALID_RESPONSE_FORMAT,
                self.name,
                details={"response": data},
            )

        candidate = candidates[0]
        content = candidate.get("content") if isinstance(candidate, dict) else None
        if not isinstance(content, dict):
            raise ProviderError(
                "First candidate has no content",
                ErrorCode.INVALID_RESPONSE_FORMAT,
                self.name,
                details={"candidate": candidate},
            )

        text = "".join(
            part["text"]
            for part in content.get("parts") or []
            if isinstance(part, dict) and isinstance(part.get("text"), str)
        )
        if not text.strip():
            raise ProviderError(
                "LLM response did not contain any processable text parts",
                ErrorCode.EMPTY_COMPLETION_CONTENT,
                self.name,
                details={"finish_reason": candidate.get("finishReason")},
            )
        return text

    async def list_models(self) -> Result[list[str]]:
        logger.info("Fetching list of Google GenAI models")
        try:
            model_ids: list[str] = []
            page_token: str | None = None
            while True:
                params = {"pageSize": 1000}
                if page_token:
                    params["pageToken"] = page_token
                data = await self._request("GET", "models", params=params)
                if not isinstance(data, dict):
                    raise ProviderError(
                        "Model list response has invalid structure",
                        ErrorCode.INVALID_RESPONSE_FORMAT,
                        self.name,
                        details={"response": data},
                    )
                for model in data.get("models") or []:
                    if isinstance(model, dict):
                        model_id = model.get("baseModelId") or model.get("name")
                        if isinstance(model_id, str) and model_id:
                            model_ids.append(model_id)
                page_token = data.get("nextPageToken")
                if not page_token:
                    break
        except Exception as e:
            error = ProviderError.from_error(e, self.name)
            logger.error(f"Failed to list Google GenAI models: {error.message}")
            return Result.err(error)

        unique_ids = list(dict.fromkeys(model_ids))
        logger.info(f"Successfully listed {len(unique_ids)} unique Google GenAI models.")
        return Result.ok(unique_ids)

    async def _get_input_token_limit(self) -> int | None:
        """Model input token limit from the API, memoised after the first success."""
        if self._input_token_limit is not None:
            return self._input_token_limit

        try:
            data = await self._request("GET", self.model_path)
        except ProviderError as e:
            if e.status_code == 404:
                logger.error(
                    f"Received 404 Not Found for model '{self.config.model}'. The model may "
                    "not exist or may not be available with the provided API key."
                )
            else:
                logger.warning(f"Failed to fetch model limits for {self.config.model}: {e.message}")
            return None

        limit = data.get("inputTokenLimit") if isinstance(data, dict) else None
        if not isinstance(limit, int) or limit <= 0:
            logger.warning(
                f"Input token limit not found for model {self.config.model} in API response"
            )
            return None

        logger.info(f"Retrieved input token limit for {self.config.model}: {limit}")
        self._input_token_limit = limit
        return limit

    async def get_context_window_size(self) -> int:
        return await self._get_input_token_limit() or self.default_context_size

    async def count_tokens(self, text: str) -> int:
        async def _count() -> int:
            data = await self._request(
                "POST",
                f"{self.model_path}:countTokens",
                json={"contents": [{"parts": [{"text": text}]}]},
            )
            total = data.get("totalTokens") if isinstance(data, dict) else None
            if not isinstance(total, int):
                raise ProviderError(
                    "Invalid response structure from countTokens API",
                    ErrorCode.INVALID_RESPONSE_FORMAT,
                    self.name,
                    details={"response": data},
                )
            return total

        logger.debug(f"Counting tokens for Google GenAI (model: {self.config.model}) with retry")
        try:
            return await retry_with_backoff(_count, RETRY_OPTIONS)
        except Exception as e:
            logger.warning(
                f"Failed to count tokens for Google GenAI model {self.config.model}, "
                f"using approximation: {e}"
            )
            return approximate_token_count(text)

    async def aclose(self) -> None:
        await self.client.aclose()
