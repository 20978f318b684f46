"""Reply resolution: keyword rules first, generative AI as fallback."""

from __future__ import annotations

import logging
from collections.abc import Callable
from time import perf_counter

from autoresponder.providers.clients import ChatProvider, get_provider
from autoresponder.providers.prompt_builder import build_system_prompt
from autoresponder.providers.types import ConfigurationError, ModelParams, ProviderError, ProviderKind
from autoresponder.responder.matching import find_matching_rule
from autoresponder.responder.ports import ResponderStore
from autoresponder.responder.types import AIConfigSnapshot, ResolutionResult, SourceKind

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[ProviderKind], ChatProvider]


class ResponseResolver:
    """Decides the reply text for one inbound message."""

    def __init__(self, store: ResponderStore, provider_factory: ProviderFactory = get_provider) -> None:
        self._store = store
        self._provider_factory = provider_factory

    def resolve(self, owner_id: int, channel_id: str, message_text: str) -> ResolutionResult:
        """Return the resolution for ``message_text`` on one channel.

        Provider and configuration failures become an ``error`` result; they
        never fall back to a predefined reply. Store read failures propagate.
        """

        rules = self._store.list_active_rules(owner_id, channel_id)
        matched = find_matching_rule(message_text, rules)
        if matched is not None:
            return ResolutionResult(
                source_kind=SourceKind.PREDEFINED,
                reply_text=matched.response_text,
                matched_keyword=matched.keyword,
            )

        config = self._store.get_active_ai_config(owner_id, channel_id)
        if config is None or not config.active:
            return ResolutionResult(source_kind=SourceKind.NONE)
        return self._generate(config, channel_id, message_text)

    def _generate(self, config: AIConfigSnapshot, channel_id: str, message_text: str) -> ResolutionResult:
        started = perf_counter()
        try:
            kind = ProviderKind.parse(config.provider)
            provider = self._provider_factory(kind)
            params = ModelParams.from_config(config, default_model=provider.default_model)
            reply = provider.generate_reply(build_system_prompt(config), message_text, params)
        except (ConfigurationError, ProviderError) as exc:
            elapsed_ms = _elapsed_ms(started)
            logger.warning(
                "autoresponder.ai_reply_failed channel_id=%s provider=%s elapsed_ms=%d error=%s",
                channel_id,
                config.provider,
                elapsed_ms,
                exc,
            )
            return ResolutionResult(
                source_kind=SourceKind.ERROR,
                elapsed_ms=elapsed_ms,
                error_detail=str(exc),
                provider=config.provider,
                model=config.model,
            )

        return ResolutionResult(
            source_kind=SourceKind.AI,
            reply_text=reply,
            elapsed_ms=_elapsed_ms(started),
            provider=kind.value,
            model=params.model,
        )


def _elapsed_ms(started: float) -> int:
    return int((perf_counter() - started) * 1000)
