"""
Provider contract and helpers shared by the backend adapters
"""

import json
import math
from collections.abc import Callable
from typing import Any, Protocol, TypeGuard, runtime_checkable

import httpx

from roocode_generator.config.schemas import LLMConfig
from roocode_generator.core.result import Result
from roocode_generator.providers.exceptions import ErrorCode, ProviderError, should_retry
from roocode_generator.utils.logging import get_logger
from roocode_generator.utils.retry import RetryOptions

logger = get_logger("providers.base")

DEFAULT_CONTEXT_SIZE = 4096
CHARS_PER_TOKEN = 4
DEFAULT_HTTP_TIMEOUT = httpx.Timeout(120.0, connect=10.0)

COMPLETION_RETRY_OPTIONS = RetryOptions(
    retries=3, initial_delay_ms=500, should_retry=should_retry
)


@runtime_checkable
class LLMProvider(Protocol):
    """Uniform interface over one LLM backend.

    No method raises: failures come back as ``Result.err(ProviderError)``,
    and token counting degrades to an approximation.
    """

    name: str
    default_context_size: int

    async def get_completion(self, system_prompt: str, user_prompt: str) -> Result[str]:
        """Single-shot completion for a system/user prompt pair."""
        ...

    async def get_context_window_size(self) -> int:
        """Token budget of the configured model."""
        ...

    async def count_tokens(self, text: str) -> int:
        """Token count for ``text``; never fails."""
        ...


@runtime_checkable
class ModelListingProvider(LLMProvider, Protocol):
    """Providers that can enumerate the models available to the API key."""

    async def list_models(self) -> Result[list[str]]: ...


ProviderFactory = Callable[[LLMConfig], Result[LLMProvider]]


def supports_model_listing(provider: object) -> TypeGuard[ModelListingProvider]:
    """Capability check for the optional ``list_models`` operation."""
    return callable(getattr(provider, "list_models", None))


def approximate_token_count(text: str) -> int:
    """Universal fallback: one token per four characters, rounded up."""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def _error_from_body(body: Any) -> tuple[str | None, Any]:
    """Pull (message, code) out of ``{"error": {...}}`` / ``{"error": "..."}`` bodies."""
    if not isinstance(body, dict):
        return None, None
    error = body.get("error")
    if isinstance(error, dict):
        code = error.get("code") or error.get("status") or error.get("type")
        return error.get("message"), code
    if isinstance(error, str) and error:
        return error, None
    return None, None


def error_from_response(response: httpx.Response, provider: str) -> ProviderError:
    """Build an ``HTTP_<status>`` error, preferring the API's own message."""
    status = response.status_code
    body_text = response.text
    details: dict[str, Any] = {
        "status_code": status,
        "response_body": body_text[:500],
    }

    api_message = None
    try:
        api_message, api_code = _error_from_body(json.loads(body_text))
        if api_code is not None:
            details["api_error_code"] = api_code
    except ValueError:
        if body_text.lstrip().lower().startswith(("<!doctype html", "<html")):
            details["html_response"] = True

    reason = response.reason_phrase or "HTTP error"
    message = f"{api_message or reason} (Status: {status})"
    return ProviderError(message, ErrorCode.http(status), provider, details=details)


def parse_json_body(response: httpx.Response, provider: str) -> Any:
    """Decode a successful response; an embedded error object is still an error."""
    try:
        body = response.json()
    except ValueError as e:
        raise ProviderError(
            "Response body is not valid JSON",
            ErrorCode.INVALID_RESPONSE_FORMAT,
            provider,
            details={"response_body": response.text[:500]},
            cause=e,
        ) from e

    raise_for_error_body(body, provider, response.status_code)
    return body


def raise_for_error_body(body: Any, provider: str, status_code: int = 200) -> None:
    """Raise ``API_ERROR_IN_BODY`` when a successful response carries an error object."""
    api_message, api_code = _error_from_body(body)
    if api_message is None and not (isinstance(body, dict) and body.get("error")):
        return
    raise ProviderError(
        f"API returned an error in a {status_code} response: {api_message or body['error']}",
        ErrorCode.API_ERROR_IN_BODY,
        provider,
        details={"api_error_code": api_code, "error": body.get("error")},
    )


async def request_json(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    provider: str,
    **kwargs: Any,
) -> Any:
    """Send a request and return the decoded JSON body.

    Raises:
        ProviderError: ``NETWORK_ERROR`` for transport failures, ``HTTP_<status>``
            for non-2xx responses, ``INVALID_RESPONSE_FORMAT`` /
            ``API_ERROR_IN_BODY`` for unusable 2xx bodies.
    """
    try:
        response = await client.request(method, url, **kwargs)
    except httpx.HTTPError as e:
        raise ProviderError(
            f"Network error calling {provider}: {e}",
            ErrorCode.NETWORK_ERROR,
            provider,
            details={"error_type": type(e).__name__},
            cause=e,
        ) from e

    if not response.is_success:
        error = error_from_response(response, provider)
        logger.debug(f"{provider} responded {response.status_code}: {error.message}")
        raise error

    return parse_json_body(response, provider)


def text_from_content(content: Any) -> str:
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(
            part.get("text", "")
            for part in content
            if isinstance(part, dict)
            and part.get("type") == "text"
            and isinstance(part.get("text"), str)
        )
    return ""


def extract_chat_completion_text(data: Any, provider: str) -> str:
    """Extract the first choice's text from an OpenAI-shaped chat completion."""
    choices = data.get("choices") if isinstance(data, dict) else None
    if not isinstance(choices, list) or not choices:
        raise ProviderError(
            "Response has no choices",
            ErrorCode.INVALID_RESPONSE_FORMAT,
            provider,
            details={"response": data},
        )

    choice = choices[0]
    message = choice.get("message") if isinstance(choice, dict) else None
    if not isinstance(message, dict):
        raise ProviderError(
            "First choice has no message",
            ErrorCode.INVALID_RESPONSE_FORMAT,
            provider,
            details={"choice": choice},
        )

    text = text_from_content(message.get("content"))
    if not text.strip():
        raise ProviderError(
            "Completion message has no content",
            ErrorCode.EMPTY_COMPLETION_CONTENT,
            provider,
            details={"finish_reason": choice.get("finish_reason")},
        )
    return text
