"""Protocols (interfaces) for core components.

These protocols are the seams between the LLM core and the surrounding
application, so tests and callers can substitute their own implementations.
"""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from roocode_generator.config.schemas import LLMConfig
    from roocode_generator.core.result import Result


@runtime_checkable
class IConfigSource(Protocol):
    """Source of the active LLM configuration (file-backed or interactive)."""

    async def load_config(self) -> "Result[LLMConfig]":
        """Load the current configuration.

        Returns:
            ``Result.ok(LLMConfig)`` or ``Result.err`` describing why it could
            not be loaded. Implementations should not raise.
        """
        ...
