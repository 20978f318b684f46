"""Generative AI provider adapters and prompt construction."""

from autoresponder.providers.clients import ChatProvider, get_provider, list_models
from autoresponder.providers.prompt_builder import build_system_prompt
from autoresponder.providers.types import (
    ConfigurationError,
    CredentialCheck,
    ModelParams,
    ProviderError,
    ProviderKind,
)

__all__ = [
    "ChatProvider",
    "ConfigurationError",
    "CredentialCheck",
    "ModelParams",
    "ProviderError",
    "ProviderKind",
    "build_system_prompt",
    "get_provider",
    "list_models",
]
