"""Tests for reply resolution: rules first, AI fallback."""

from __future__ import annotations

import unittest

from autoresponder.providers.clients import OpenAIProvider
from autoresponder.providers.types import ModelParams, ProviderError, ProviderKind
from autoresponder.responder.resolver import ResponseResolver
from autoresponder.responder.types import AIConfigSnapshot, RuleSpec, SourceKind


class _FakeStore:
    def __init__(self, rules: list[RuleSpec] | None = None, config: AIConfigSnapshot | None = None) -> None:
        self.rules = rules or []
        self.config = config

    def list_active_rules(self, owner_id: int, channel_id: str) -> list[RuleSpec]:
        _ = owner_id, channel_id
        return list(self.rules)

    def get_active_ai_config(self, owner_id: int, channel_id: str) -> AIConfigSnapshot | None:
        _ = owner_id, channel_id
        return self.config


class _StubProvider:
    default_model = "stub-default"

    def __init__(self, reply: str | None = None, error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: list[tuple[str, str, ModelParams]] = []

    def generate_reply(self, system_prompt: str, user_text: str, params: ModelParams) -> str:
        self.calls.append((system_prompt, user_text, params))
        if self.error is not None:
            raise self.error
        return self.reply or ""


def _config(**kwargs) -> AIConfigSnapshot:  # noqa: ANN003
    values = {"provider": "openai", "model": "gpt-4", "api_key": "sk-test", "tone": "friendly", "language": "en"}
    values.update(kwargs)
    return AIConfigSnapshot(**values)


class ResponseResolverTests(unittest.TestCase):
    def _resolver(self, store: _FakeStore, provider: _StubProvider | None = None) -> ResponseResolver:
        self.requested_kinds: list[ProviderKind] = []

        def factory(kind: ProviderKind):  # noqa: ANN202
            self.requested_kinds.append(kind)
            if provider is None:
                raise AssertionError("provider should not be requested")
            return provider

        return ResponseResolver(store, provider_factory=factory)

    def test_predefined_rule_short_circuits_ai(self) -> None:
        store = _FakeStore(
            rules=[RuleSpec(id=1, keyword="price", response_text="See our price list.")],
            config=_config(),
        )

        result = self._resolver(store).resolve(1, "P1", "What is the PRICE?")

        self.assertIs(result.source_kind, SourceKind.PREDEFINED)
        self.assertEqual(result.reply_text, "See our price list.")
        self.assertEqual(result.matched_keyword, "price")
        self.assertEqual(self.requested_kinds, [])

    def test_no_config_resolves_to_none(self) -> None:
        result = self._resolver(_FakeStore()).resolve(1, "P1", "hello")

        self.assertIs(result.source_kind, SourceKind.NONE)
        self.assertIsNone(result.reply_text)

    def test_inactive_config_resolves_to_none(self) -> None:
        result = self._resolver(_FakeStore(config=_config(active=False))).resolve(1, "P1", "hello")

        self.assertIs(result.source_kind, SourceKind.NONE)

    def test_ai_reply(self) -> None:
        provider = _StubProvider(reply="Hi! How can I help?")
        store = _FakeStore(config=_config(temperature=None, max_tokens=None))

        result = self._resolver(store, provider).resolve(1, "P1", "hello")

        self.assertIs(result.source_kind, SourceKind.AI)
        self.assertEqual(result.reply_text, "Hi! How can I help?")
        self.assertIsNone(result.matched_keyword)
        self.assertEqual(result.provider, "openai")
        self.assertEqual(result.model, "gpt-4")
        self.assertEqual(self.requested_kinds, [ProviderKind.OPENAI])
        system_prompt, user_text, params = provider.calls[0]
        self.assertTrue(system_prompt.endswith("Always reply in English."))
        self.assertEqual(user_text, "hello")
        self.assertEqual(params.temperature, 0.7)
        self.assertEqual(params.max_tokens, 500)

    def test_provider_failure_is_an_error_without_fallback(self) -> None:
        provider = _StubProvider(error=ProviderError("OpenAI", "HTTP 500: upstream down"))
        store = _FakeStore(
            rules=[RuleSpec(id=1, keyword="price", response_text="See our price list.")],
            config=_config(),
        )

        result = self._resolver(store, provider).resolve(1, "P1", "hello")

        self.assertIs(result.source_kind, SourceKind.ERROR)
        self.assertIsNone(result.reply_text)
        self.assertEqual(result.error_detail, "OpenAI: HTTP 500: upstream down")

    def test_unknown_provider_is_an_error(self) -> None:
        result = self._resolver(_FakeStore(config=_config(provider="gemini"))).resolve(1, "P1", "hello")

        self.assertIs(result.source_kind, SourceKind.ERROR)
        self.assertIn("gemini", result.error_detail or "")
        self.assertEqual(self.requested_kinds, [])

    def test_missing_api_key_is_an_error(self) -> None:
        resolver = ResponseResolver(_FakeStore(config=_config(api_key="")), provider_factory=lambda _: OpenAIProvider())

        result = resolver.resolve(1, "P1", "hello")

        self.assertIs(result.source_kind, SourceKind.ERROR)
        self.assertIn("API key", result.error_detail or "")


if __name__ == "__main__":
    unittest.main()
