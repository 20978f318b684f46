"""AI configuration schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field

from autoresponder.providers.types import ProviderKind


class AIConfigUpsert(BaseModel):
    """Create or replace the AI configuration for a channel."""

    provider: ProviderKind
    model: str = Field(min_length=1, max_length=100)
    api_key: str = Field(min_length=1)
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)
    max_tokens: int | None = Field(default=None, gt=0)
    instructions: str | None = None
    tone: str | None = "friendly"
    style: str | None = "medium"
    language: str | None = Field(default="fr", max_length=10)
    active: bool = True
    fallback_only: bool = True


class AIConfigRead(BaseModel):
    """Serialized AI configuration with the API key masked."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int
    channel_id: str
    provider: str
    model: str
    api_key: str = Field(exclude=True)
    temperature: float | None
    max_tokens: int | None
    instructions: str | None
    tone: str | None
    style: str | None
    language: str | None
    active: bool
    fallback_only: bool
    created_at: datetime

    @computed_field
    @property
    def api_key_hint(self) -> str:
        return f"...{self.api_key[-4:]}" if len(self.api_key) > 4 else "****"


class CredentialCheckRead(BaseModel):
    """Result of a provider credential probe."""

    ok: bool
    reason: str


class ModelCatalogRead(BaseModel):
    """Static model list for one provider."""

    provider: ProviderKind
    models: list[str]
