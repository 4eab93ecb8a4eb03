"""Configuration schemas for roocode-generator."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class LLMConfig(BaseModel):
    """Settings for one LLM provider/model pairing.

    Field names are snake_case; the camelCase keys written by ``llm.config.json``
    (``apiKey``, ``maxTokens``, ``modelParams`` ...) are accepted as aliases.
    Instances are frozen: build a new one with :meth:`with_overrides`.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    provider: str = Field(description="Provider name used for factory lookup")
    model: str = Field(description="Model identifier passed to the backend")
    api_key: str = Field(
        validation_alias=AliasChoices("api_key", "apiKey"),
        description="API key for the provider",
        repr=False,
    )
    temperature: float = Field(
        default=0.1, ge=0.0, le=2.0, description="Sampling temperature"
    )
    max_tokens: int = Field(
        default=2048,
        gt=0,
        validation_alias=AliasChoices("max_tokens", "maxTokens"),
        description="Maximum tokens to generate",
    )
    model_params: dict[str, Any] | None = Field(
        default=None,
        validation_alias=AliasChoices("model_params", "modelParams"),
        description="Provider-specific extras such as context_length",
    )
    location: str | None = Field(default=None, description="Cloud region")
    project_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("project_id", "projectId"),
        description="Cloud project identifier",
    )
    api_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("api_url", "apiUrl"),
        description="Override for the provider's base URL",
    )

    @field_validator("provider", "model", "api_key")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must be a non-empty string")
        return v

    def with_overrides(self, **overrides: Any) -> LLMConfig:
        """Return a new LLMConfig with non-None overrides applied and validated."""
        override_dict = {k: v for k, v in overrides.items() if v is not None}
        return LLMConfig(**{**self.model_dump(), **override_dict})

    def to_file_dict(self) -> dict[str, Any]:
        """Serialize with the camelCase keys used on disk."""
        data: dict[str, Any] = {
            "provider": self.provider,
            "apiKey": self.api_key,
            "model": self.model,
            "temperature": self.temperature,
            "maxTokens": self.max_tokens,
        }
        optional = {
            "modelParams": self.model_params,
            "location": self.location,
            "projectId": self.project_id,
            "apiUrl": self.api_url,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data
