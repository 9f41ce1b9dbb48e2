"""
Typed Pydantic models for the completion contract and provider settings.

Storage keeps the camelCase keys written by the settings page
(``activeProvider``, ``apiKey``); the models accept both spellings.
"""
from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from draftsplice.config.constants import SUPPORTED_PROVIDERS


# =============================================================================
# Completion request / result
# =============================================================================


class CompletionRequest(BaseModel):
    """Draft context plus the user's instruction."""

    context: str = Field(..., description="Draft text, optionally followed by the cleaned thread.")
    instruction: str = Field(..., min_length=1, description="What the model should do with the draft.")


class CompletionResult(BaseModel):
    """
    Structured result of one completion.

    Built from untrusted model output; ``parse_completion`` guarantees an
    instance even when the output is not the requested JSON object.
    """

    subject: str = Field("", description="Suggested subject line, empty when absent.")
    body: str = Field("", description="HTML or lightweight markdown body.")

    @field_validator("subject", mode="before")
    @classmethod
    def none_subject_to_empty(cls, v: Optional[str]) -> str:
        return "" if v is None else v

    @property
    def has_subject(self) -> bool:
        return bool(self.subject.strip())

    @property
    def has_body(self) -> bool:
        return bool(self.body.strip())


# =============================================================================
# Provider settings
# =============================================================================


class ProviderConfig(BaseModel):
    """Credentials and target of one vendor."""

    model_config = ConfigDict(populate_by_name=True)

    api_key: str = Field("", alias="apiKey")
    endpoint: str = ""
    model: str = ""

    @field_validator("endpoint")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class ProviderSettings(BaseModel):
    """Active provider plus the configuration of every known provider."""

    model_config = ConfigDict(populate_by_name=True)

    active_provider: str = Field("openai", alias="activeProvider")
    providers: Dict[str, ProviderConfig] = Field(default_factory=dict)

    @property
    def active_config(self) -> Optional[ProviderConfig]:
        return self.providers.get(self.active_provider)

    @property
    def is_supported(self) -> bool:
        return self.active_provider in SUPPORTED_PROVIDERS

    def to_storage(self) -> dict:
        return self.model_dump(by_alias=True)


class SavedPrompt(BaseModel):
    """A named, reusable instruction."""

    id: str = Field(..., min_length=1)
    name: str
    instruction: str
