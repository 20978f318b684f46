"""Provider-neutral types shared by all generative AI adapters."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 500


class ConfigurationError(RuntimeError):
    """Raised when an AI configuration cannot be used (unknown provider, missing key)."""


class ProviderError(RuntimeError):
    """Raised when an upstream AI call fails or returns an unusable envelope."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.message = message


class ProviderKind(str, Enum):
    """Closed set of supported generative AI backends."""

    OPENAI = "openai"
    MISTRAL = "mistral"
    CLAUDE = "claude"

    @classmethod
    def parse(cls, name: str | None) -> "ProviderKind":
        """Map a stored provider name to a kind, case-insensitively."""

        normalized = (name or "").strip().lower()
        for kind in cls:
            if kind.value == normalized:
                return kind
        raise ConfigurationError(f"Unsupported AI provider: {name!r}")


@dataclass(frozen=True, slots=True)
class ModelParams:
    """Generation parameters sent with every request."""

    model: str
    api_key: str = field(default="", repr=False)
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS

    @classmethod
    def from_config(cls, config: Any, *, default_model: str) -> "ModelParams":
        """Build params from an AI config, applying fixed defaults for absent values."""

        temperature = getattr(config, "temperature", None)
        max_tokens = getattr(config, "max_tokens", None)
        model = (getattr(config, "model", None) or "").strip()
        return cls(
            model=model or default_model,
            api_key=(getattr(config, "api_key", None) or "").strip(),
            temperature=DEFAULT_TEMPERATURE if temperature is None else float(temperature),
            max_tokens=DEFAULT_MAX_TOKENS if max_tokens is None else int(max_tokens),
        )


@dataclass(frozen=True, slots=True)
class CredentialCheck:
    """Outcome of a low-cost credential probe."""

    ok: bool
    reason: str
