"""Wire-contract tests for the generative AI provider adapters."""

from __future__ import annotations

import http.client
import io
import json
import unittest
from unittest.mock import MagicMock, patch
from urllib import error as urllib_error

from autoresponder.providers.clients import (
    ClaudeProvider,
    MistralProvider,
    OpenAIProvider,
    get_provider,
    list_models,
)
from autoresponder.providers.types import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    ConfigurationError,
    ModelParams,
    ProviderError,
    ProviderKind,
)
from autoresponder.responder.types import AIConfigSnapshot

URLOPEN = "autoresponder.providers.clients.urllib_request.urlopen"


def _response(payload: object) -> MagicMock:
    resp = MagicMock()
    resp.__enter__.return_value.read.return_value = json.dumps(payload).encode("utf-8")
    return resp


def _http_error(code: int, body: dict) -> urllib_error.HTTPError:
    return urllib_error.HTTPError(
        "https://api.example.test",
        code,
        "error",
        hdrs=None,
        fp=io.BytesIO(json.dumps(body).encode("utf-8")),
    )


def _sent_request(mock_urlopen: MagicMock):  # noqa: ANN202
    request = mock_urlopen.call_args.args[0]
    return request, json.loads(request.data.decode("utf-8"))


class ProviderKindTests(unittest.TestCase):
    def test_parse_is_case_insensitive(self) -> None:
        self.assertIs(ProviderKind.parse(" Claude "), ProviderKind.CLAUDE)
        self.assertIs(ProviderKind.parse("openai"), ProviderKind.OPENAI)

    def test_parse_rejects_unknown_provider(self) -> None:
        with self.assertRaises(ConfigurationError):
            ProviderKind.parse("gemini")
        with self.assertRaises(ConfigurationError):
            ProviderKind.parse(None)

    def test_get_provider_returns_matching_adapter(self) -> None:
        self.assertIsInstance(get_provider(ProviderKind.OPENAI), OpenAIProvider)
        self.assertIsInstance(get_provider(ProviderKind.MISTRAL), MistralProvider)
        self.assertIsInstance(get_provider(ProviderKind.CLAUDE), ClaudeProvider)

    def test_model_catalog(self) -> None:
        self.assertIn("gpt-4o", list_models(ProviderKind.OPENAI))
        self.assertIn("mistral-small", list_models(ProviderKind.MISTRAL))
        self.assertIn("claude-3-haiku-20240307", list_models(ProviderKind.CLAUDE))


class ModelParamsTests(unittest.TestCase):
    def test_absent_values_fall_back_to_defaults(self) -> None:
        config = AIConfigSnapshot(provider="openai", model="", api_key=" sk-1 ")

        params = ModelParams.from_config(config, default_model="gpt-3.5-turbo")

        self.assertEqual(params.model, "gpt-3.5-turbo")
        self.assertEqual(params.api_key, "sk-1")
        self.assertEqual(params.temperature, DEFAULT_TEMPERATURE)
        self.assertEqual(params.max_tokens, DEFAULT_MAX_TOKENS)

    def test_zero_temperature_is_kept(self) -> None:
        config = AIConfigSnapshot(provider="openai", model="gpt-4", api_key="sk-1", temperature=0.0, max_tokens=64)

        params = ModelParams.from_config(config, default_model="gpt-3.5-turbo")

        self.assertEqual(params.temperature, 0.0)
        self.assertEqual(params.max_tokens, 64)

    def test_api_key_is_hidden_from_repr(self) -> None:
        self.assertNotIn("sk-secret", repr(ModelParams(model="gpt-4", api_key="sk-secret")))
        self.assertNotIn(
            "sk-secret",
            repr(AIConfigSnapshot(provider="openai", model="gpt-4", api_key="sk-secret")),
        )


class GenerateReplyTests(unittest.TestCase):
    def setUp(self) -> None:
        self.params = ModelParams(model="test-model", api_key="sk-test")

    def test_openai_request_and_reply(self) -> None:
        provider = OpenAIProvider(base_url="https://openai.example.test/v1/")
        with patch(URLOPEN, return_value=_response({"choices": [{"message": {"content": "  Bonjour !  "}}]})) as mock:
            reply = provider.generate_reply("system text", "Salut", self.params)

        self.assertEqual(reply, "Bonjour !")
        request, body = _sent_request(mock)
        self.assertEqual(request.full_url, "https://openai.example.test/v1/chat/completions")
        self.assertEqual(request.get_header("Authorization"), "Bearer sk-test")
        self.assertEqual(
            body["messages"],
            [{"role": "system", "content": "system text"}, {"role": "user", "content": "Salut"}],
        )
        self.assertEqual(body["model"], "test-model")
        self.assertEqual(body["temperature"], DEFAULT_TEMPERATURE)
        self.assertEqual(body["max_tokens"], DEFAULT_MAX_TOKENS)
        self.assertEqual(body["presence_penalty"], 0.1)
        self.assertEqual(body["frequency_penalty"], 0.1)
        self.assertEqual(mock.call_args.kwargs["timeout"], 30)

    def test_mistral_request_has_no_penalties(self) -> None:
        provider = MistralProvider()
        with patch(URLOPEN, return_value=_response({"choices": [{"message": {"content": "ok"}}]})) as mock:
            provider.generate_reply("system text", "Salut", self.params)

        request, body = _sent_request(mock)
        self.assertEqual(request.full_url, "https://api.mistral.ai/v1/chat/completions")
        self.assertNotIn("presence_penalty", body)
        self.assertNotIn("frequency_penalty", body)

    def test_claude_request_and_reply(self) -> None:
        provider = ClaudeProvider()
        with patch(URLOPEN, return_value=_response({"content": [{"type": "text", "text": "Hello!"}]})) as mock:
            reply = provider.generate_reply("system text", "Hi", self.params)

        self.assertEqual(reply, "Hello!")
        request, body = _sent_request(mock)
        self.assertEqual(request.full_url, "https://api.anthropic.com/v1/messages")
        self.assertEqual(request.get_header("X-api-key"), "sk-test")
        self.assertEqual(request.get_header("Anthropic-version"), "2023-06-01")
        self.assertIsNone(request.get_header("Authorization"))
        self.assertEqual(body["system"], "system text")
        self.assertEqual(body["messages"], [{"role": "user", "content": "Hi"}])

    def test_missing_key_fails_before_any_request(self) -> None:
        with patch(URLOPEN) as mock:
            with self.assertRaises(ConfigurationError):
                OpenAIProvider().generate_reply("system", "hi", ModelParams(model="gpt-4"))
        mock.assert_not_called()

    def test_http_error_carries_upstream_message(self) -> None:
        error = _http_error(401, {"error": {"message": "Incorrect API key provided"}})
        with patch(URLOPEN, side_effect=error):
            with self.assertRaises(ProviderError) as ctx:
                OpenAIProvider().generate_reply("system", "hi", self.params)

        self.assertEqual(str(ctx.exception), "OpenAI: HTTP 401: Incorrect API key provided")
        self.assertEqual(ctx.exception.provider, "OpenAI")

    def test_network_error_is_a_provider_error(self) -> None:
        with patch(URLOPEN, side_effect=urllib_error.URLError("connection refused")):
            with self.assertRaises(ProviderError):
                MistralProvider().generate_reply("system", "hi", self.params)

    def test_dropped_connection_is_a_provider_error(self) -> None:
        for failure in (
            http.client.RemoteDisconnected("Remote end closed connection without response"),
            ConnectionResetError(104, "Connection reset by peer"),
            http.client.IncompleteRead(b"{\"choi"),
        ):
            with patch(URLOPEN, side_effect=failure):
                with self.assertRaises(ProviderError) as ctx:
                    OpenAIProvider().generate_reply("system", "hi", self.params)
            self.assertEqual(ctx.exception.provider, "OpenAI")
            self.assertIn("connection failed", str(ctx.exception))

    def test_unexpected_envelope(self) -> None:
        for payload in ({"choices": []}, {"choices": [{"message": {"content": "   "}}]}, {"id": "x"}):
            with self.subTest(payload=payload):
                with patch(URLOPEN, return_value=_response(payload)):
                    with self.assertRaises(ProviderError) as ctx:
                        OpenAIProvider().generate_reply("system", "hi", self.params)
                self.assertIn("unexpected response envelope", str(ctx.exception))

    def test_non_object_json_is_rejected(self) -> None:
        with patch(URLOPEN, return_value=_response(["not", "an", "object"])):
            with self.assertRaises(ProviderError):
                ClaudeProvider().generate_reply("system", "hi", self.params)


class ValidateCredentialsTests(unittest.TestCase):
    def test_successful_probe(self) -> None:
        config = AIConfigSnapshot(provider="openai", model="gpt-4", api_key="sk-test")
        with patch(URLOPEN, return_value=_response({"choices": []})) as mock:
            check = OpenAIProvider().validate_credentials(config)

        self.assertTrue(check.ok)
        self.assertEqual(check.reason, "OpenAI configuration is valid")
        _, body = _sent_request(mock)
        self.assertEqual(body["max_tokens"], 5)
        self.assertEqual(body["model"], "gpt-4")
        self.assertEqual(mock.call_args.kwargs["timeout"], 10)

    def test_claude_probe_budget(self) -> None:
        config = AIConfigSnapshot(provider="claude", model="claude-3-haiku-20240307", api_key="sk-ant")
        with patch(URLOPEN, return_value=_response({"content": []})) as mock:
            check = ClaudeProvider().validate_credentials(config)

        self.assertTrue(check.ok)
        _, body = _sent_request(mock)
        self.assertEqual(body["max_tokens"], 10)

    def test_rejected_key_is_reported_not_raised(self) -> None:
        config = AIConfigSnapshot(provider="mistral", model="mistral-small", api_key="bad")
        error = _http_error(401, {"message": "Unauthorized"})
        with patch(URLOPEN, side_effect=error):
            check = MistralProvider().validate_credentials(config)

        self.assertFalse(check.ok)
        self.assertIn("Unauthorized", check.reason)

    def test_missing_key(self) -> None:
        config = AIConfigSnapshot(provider="openai", model="gpt-4", api_key="")
        with patch(URLOPEN) as mock:
            check = OpenAIProvider().validate_credentials(config)

        self.assertFalse(check.ok)
        mock.assert_not_called()


if __name__ == "__main__":
    unittest.main()
