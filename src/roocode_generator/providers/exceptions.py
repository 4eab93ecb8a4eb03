"""
Provider-specific exceptions and error codes
"""

from typing import Any

from roocode_generator.core.exceptions import LLMError


class ErrorCode:
    """Machine-readable codes carried by :class:`ProviderError`."""

    INVALID_RESPONSE_FORMAT = "INVALID_RESPONSE_FORMAT"
    EMPTY_COMPLETION_CONTENT = "EMPTY_COMPLETION_CONTENT"
    API_ERROR_IN_BODY = "API_ERROR_IN_BODY"
    NOT_IMPLEMENTED = "NOT_IMPLEMENTED"
    FACTORY_INIT_ERROR = "FACTORY_INIT_ERROR"
    PROVIDER_NOT_FOUND = "PROVIDER_NOT_FOUND"
    NO_MODELS_AVAILABLE = "NO_MODELS_AVAILABLE"
    MODEL_NOT_FOUND = "MODEL_NOT_FOUND"
    INPUT_VALIDATION_ERROR = "INPUT_VALIDATION_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    CONFIG_ERROR = "CONFIG_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"

    @staticmethod
    def http(status_code: int) -> str:
        return f"HTTP_{status_code}"


RETRIABLE_STATUS_CODES = frozenset({429, 500, 503})


class ProviderError(LLMError):
    """Structured error for everything that crosses the provider boundary.

    Callers branch on ``code`` and ``provider``; ``message`` is for humans.
    """

    def __init__(
        self,
        message: str,
        code: str = ErrorCode.UNKNOWN_ERROR,
        provider: str = "unknown",
        details: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ):
        self.code = code
        self.provider = provider
        self.details = details
        self.cause = cause
        super().__init__(f"[{provider}] {message}")
        # keep the bare message, not the prefixed one
        self.message = message
        if cause is not None:
            self.__cause__ = cause

    @property
    def status_code(self) -> int | None:
        """HTTP status behind an ``HTTP_<status>`` code, if any."""
        if self.details and isinstance(self.details.get("status_code"), int):
            return self.details["status_code"]
        if self.code.startswith("HTTP_") and self.code[5:].isdigit():
            return int(self.code[5:])
        return None

    @property
    def is_retriable(self) -> bool:
        return (
            self.status_code in RETRIABLE_STATUS_CODES
            or self.code == ErrorCode.NETWORK_ERROR
        )

    @classmethod
    def from_error(cls, error: BaseException, provider: str) -> "ProviderError":
        """Wrap an arbitrary exception, keeping its message and the original as cause."""
        if isinstance(error, ProviderError):
            return error
        message = str(error) or f"{type(error).__name__} raised by {provider}"
        return cls(
            message,
            ErrorCode.UNKNOWN_ERROR,
            provider,
            details={"error_type": type(error).__name__},
            cause=error,
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, code={self.code!r}, "
            f"provider={self.provider!r})"
        )


class ProviderNotFoundError(ProviderError):
    """Raised when no factory is registered for a provider name"""

    def __init__(self, message: str, provider: str = "unknown", **kwargs):
        super().__init__(message, ErrorCode.PROVIDER_NOT_FOUND, provider, **kwargs)


class ModelNotFoundError(ProviderError):
    """Raised when a requested model is not among the provider's models"""

    def __init__(self, message: str, provider: str = "unknown", **kwargs):
        super().__init__(message, ErrorCode.MODEL_NOT_FOUND, provider, **kwargs)


def should_retry(error: BaseException) -> bool:
    """Retry predicate shared by all providers: 429/500/503 and transport failures."""
    if isinstance(error, ProviderError):
        return error.is_retriable
    status = getattr(error, "status_code", None)
    if status is None:
        status = getattr(getattr(error, "response", None), "status_code", None)
    return status in RETRIABLE_STATUS_CODES
