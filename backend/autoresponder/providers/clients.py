"""HTTP adapters for the supported generative AI providers."""

from __future__ import annotations

import http.client
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, assert_never
from urllib import error as urllib_error
from urllib import request as urllib_request

from autoresponder.config import get_settings
from autoresponder.providers.types import (
    ConfigurationError,
    CredentialCheck,
    ModelParams,
    ProviderError,
    ProviderKind,
)

MODEL_CATALOG: dict[ProviderKind, tuple[str, ...]] = {
    ProviderKind.OPENAI: ("gpt-3.5-turbo", "gpt-4", "gpt-4-turbo", "gpt-4o"),
    ProviderKind.MISTRAL: ("mistral-tiny", "mistral-small", "mistral-medium", "mistral-large"),
    ProviderKind.CLAUDE: (
        "claude-3-haiku-20240307",
        "claude-3-sonnet-20240229",
        "claude-3-opus-20240229",
    ),
}
ANTHROPIC_VERSION = "2023-06-01"
_PROBE_TEXT = "Test"


def list_models(kind: ProviderKind) -> list[str]:
    """Return the static model catalog for a provider."""

    return list(MODEL_CATALOG[kind])


class ChatProvider(ABC):
    """Uniform interface over one generative AI backend."""

    kind: ClassVar[ProviderKind]
    display_name: ClassVar[str]
    default_model: ClassVar[str]
    # Output-token budget for credential probes.
    probe_max_tokens: ClassVar[int] = 5

    base_url: str
    generation_timeout_seconds: int
    validation_timeout_seconds: int

    @abstractmethod
    def endpoint(self) -> str:
        """Return the absolute URL for generation requests."""

    @abstractmethod
    def headers(self, api_key: str) -> dict[str, str]:
        """Return authentication and content headers."""

    @abstractmethod
    def build_payload(self, system_prompt: str, user_text: str, params: ModelParams) -> dict[str, Any]:
        """Return the JSON request body for a generation call."""

    @abstractmethod
    def build_probe_payload(self, model: str) -> dict[str, Any]:
        """Return the smallest useful request body for credential validation."""

    @abstractmethod
    def extract_reply(self, decoded: dict[str, Any]) -> Any:
        """Return the reply text from a decoded response envelope."""

    def generate_reply(self, system_prompt: str, user_text: str, params: ModelParams) -> str:
        """Call the provider and return the stripped reply text."""

        if not params.api_key:
            raise ConfigurationError(f"{self.display_name} API key is not configured.")
        decoded = self._post_json(
            self.build_payload(system_prompt, user_text, params),
            api_key=params.api_key,
            timeout_seconds=self.generation_timeout_seconds,
        )
        try:
            content = self.extract_reply(decoded)
            if not isinstance(content, str) or not content.strip():
                raise TypeError("reply content missing")
            return content.strip()
        except (KeyError, IndexError, TypeError) as exc:
            raise ProviderError(self.display_name, "unexpected response envelope") from exc

    def validate_credentials(self, config: Any) -> CredentialCheck:
        """Probe the API key and model with a minimal request."""

        api_key = (getattr(config, "api_key", None) or "").strip()
        if not api_key:
            return CredentialCheck(ok=False, reason=f"{self.display_name} API key is not configured.")
        model = (getattr(config, "model", None) or "").strip() or self.default_model
        try:
            self._post_json(
                self.build_probe_payload(model),
                api_key=api_key,
                timeout_seconds=self.validation_timeout_seconds,
            )
        except ProviderError as exc:
            return CredentialCheck(ok=False, reason=str(exc))
        return CredentialCheck(ok=True, reason=f"{self.display_name} configuration is valid")

    def _post_json(self, payload: dict[str, Any], *, api_key: str, timeout_seconds: int) -> dict[str, Any]:
        req = urllib_request.Request(
            url=self.endpoint(),
            data=json.dumps(payload).encode("utf-8"),
            method="POST",
            headers=self.headers(api_key),
        )
        try:
            with urllib_request.urlopen(req, timeout=timeout_seconds) as resp:
                raw = resp.read().decode("utf-8")
        except urllib_error.HTTPError as exc:
            detail = _upstream_detail(exc.read().decode("utf-8", errors="replace"))
            raise ProviderError(self.display_name, f"HTTP {exc.code}: {detail}") from exc
        except urllib_error.URLError as exc:
            raise ProviderError(self.display_name, f"request failed: {exc.reason}") from exc
        except TimeoutError as exc:
            raise ProviderError(self.display_name, f"request timed out after {timeout_seconds}s") from exc
        except (OSError, http.client.HTTPException) as exc:
            raise ProviderError(self.display_name, f"connection failed: {exc!r}") from exc

        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ProviderError(self.display_name, "response was not valid JSON") from exc
        if not isinstance(decoded, dict):
            raise ProviderError(self.display_name, "response was not a JSON object")
        return decoded


@dataclass(slots=True)
class OpenAIProvider(ChatProvider):
    """OpenAI Chat Completions adapter."""

    kind: ClassVar[ProviderKind] = ProviderKind.OPENAI
    display_name: ClassVar[str] = "OpenAI"
    default_model: ClassVar[str] = "gpt-3.5-turbo"

    base_url: str = "https://api.openai.com/v1"
    generation_timeout_seconds: int = 30
    validation_timeout_seconds: int = 10

    def endpoint(self) -> str:
        return f"{self.base_url.rstrip('/')}/chat/completions"

    def headers(self, api_key: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"}

    def build_payload(self, system_prompt: str, user_text: str, params: ModelParams) -> dict[str, Any]:
        return {
            "model": params.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_text},
            ],
            "temperature": params.temperature,
            "max_tokens": params.max_tokens,
            "presence_penalty": 0.1,
            "frequency_penalty": 0.1,
        }

    def build_probe_payload(self, model: str) -> dict[str, Any]:
        return {
            "model": model,
            "messages": [{"role": "user", "content": _PROBE_TEXT}],
            "max_tokens": self.probe_max_tokens,
        }

    def extract_reply(self, decoded: dict[str, Any]) -> Any:
        return decoded["choices"][0]["message"]["content"]


@dataclass(slots=True)
class MistralProvider(ChatProvider):
    """Mistral chat completions adapter (OpenAI-compatible envelope)."""

    kind: ClassVar[ProviderKind] = ProviderKind.MISTRAL
    display_name: ClassVar[str] = "Mistral"
    default_model: ClassVar[str] = "mistral-small"

    base_url: str = "https://api.mistral.ai/v1"
    generation_timeout_seconds: int = 30
    validation_timeout_seconds: int = 10

    def endpoint(self) -> str:
        return f"{self.base_url.rstrip('/')}/chat/completions"

    def headers(self, api_key: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"}

    def build_payload(self, system_prompt: str, user_text: str, params: ModelParams) -> dict[str, Any]:
        return {
            "model": params.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_text},
            ],
            "temperature": params.temperature,
            "max_tokens": params.max_tokens,
        }

    def build_probe_payload(self, model: str) -> dict[str, Any]:
        return {
            "model": model,
            "messages": [{"role": "user", "content": _PROBE_TEXT}],
            "max_tokens": self.probe_max_tokens,
        }

    def extract_reply(self, decoded: dict[str, Any]) -> Any:
        return decoded["choices"][0]["message"]["content"]


@dataclass(slots=True)
class ClaudeProvider(ChatProvider):
    """Anthropic Messages API adapter."""

    kind: ClassVar[ProviderKind] = ProviderKind.CLAUDE
    display_name: ClassVar[str] = "Claude"
    default_model: ClassVar[str] = "claude-3-sonnet-20240229"
    probe_max_tokens: ClassVar[int] = 10

    base_url: str = "https://api.anthropic.com/v1"
    generation_timeout_seconds: int = 30
    validation_timeout_seconds: int = 10

    def endpoint(self) -> str:
        return f"{self.base_url.rstrip('/')}/messages"

    def headers(self, api_key: str) -> dict[str, str]:
        return {
            "x-api-key": api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "Content-Type": "application/json",
        }

    def build_payload(self, system_prompt: str, user_text: str, params: ModelParams) -> dict[str, Any]:
        return {
            "model": params.model,
            "max_tokens": params.max_tokens,
            "temperature": params.temperature,
            "system": system_prompt,
            "messages": [{"role": "user", "content": user_text}],
        }

    def build_probe_payload(self, model: str) -> dict[str, Any]:
        return {
            "model": model,
            "max_tokens": self.probe_max_tokens,
            "messages": [{"role": "user", "content": _PROBE_TEXT}],
        }

    def extract_reply(self, decoded: dict[str, Any]) -> Any:
        return decoded["content"][0]["text"]


def get_provider(kind: ProviderKind) -> ChatProvider:
    """Return the configured adapter for a provider kind."""

    settings = get_settings()
    timeouts = {
        "generation_timeout_seconds": settings.generation_timeout_seconds,
        "validation_timeout_seconds": settings.validation_timeout_seconds,
    }
    if kind is ProviderKind.OPENAI:
        return OpenAIProvider(base_url=settings.openai_base_url, **timeouts)
    if kind is ProviderKind.MISTRAL:
        return MistralProvider(base_url=settings.mistral_base_url, **timeouts)
    if kind is ProviderKind.CLAUDE:
        return ClaudeProvider(base_url=settings.anthropic_base_url, **timeouts)
    assert_never(kind)


def _upstream_detail(body: str) -> str:
    """Pull the human-readable message out of a provider error body."""

    try:
        decoded = json.loads(body)
    except json.JSONDecodeError:
        return body.strip() or "no error detail"
    if isinstance(decoded, dict):
        error = decoded.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
        if isinstance(decoded.get("message"), str):
            return decoded["message"]
    return body.strip() or "no error detail"
