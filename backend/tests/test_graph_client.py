"""Tests for the Graph API messenger client."""

from __future__ import annotations

import http.client
import io
import json
import unittest
from unittest.mock import MagicMock, patch
from urllib import error as urllib_error

from autoresponder.integrations.facebook import DeliveryError, GraphAPIError, GraphMessengerClient
from autoresponder.responder.types import ChannelCredentials

URLOPEN = "autoresponder.integrations.facebook.urllib_request.urlopen"
CHANNEL = ChannelCredentials(owner_id=1, channel_id="P1", access_token="page-token", name="Demo")


def _response(payload: object) -> MagicMock:
    resp = MagicMock()
    resp.__enter__.return_value.read.return_value = json.dumps(payload).encode("utf-8")
    return resp


def _http_error(code: int, message: str) -> urllib_error.HTTPError:
    body = json.dumps({"error": {"message": message, "code": 190}}).encode("utf-8")
    return urllib_error.HTTPError("https://graph.example.test", code, "error", hdrs=None, fp=io.BytesIO(body))


class GraphMessengerClientTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = GraphMessengerClient(base_url="https://graph.example.test/v18.0", timeout_seconds=7)

    def test_send_message_request(self) -> None:
        with patch(URLOPEN, return_value=_response({"recipient_id": "U1", "message_id": "m_1"})) as mock:
            self.client.send_message(CHANNEL, "U1", "Hello!")

        request = mock.call_args.args[0]
        self.assertEqual(request.full_url, "https://graph.example.test/v18.0/P1/messages")
        self.assertEqual(request.get_header("Authorization"), "Bearer page-token")
        self.assertEqual(
            json.loads(request.data.decode("utf-8")),
            {"recipient": {"id": "U1"}, "message": {"text": "Hello!"}, "messaging_type": "RESPONSE"},
        )
        self.assertEqual(mock.call_args.kwargs["timeout"], 7)

    def test_send_failure_raises_delivery_error(self) -> None:
        with patch(URLOPEN, side_effect=_http_error(400, "Invalid OAuth access token.")):
            with self.assertRaises(DeliveryError) as ctx:
                self.client.send_message(CHANNEL, "U1", "Hello!")

        self.assertEqual(str(ctx.exception), "Send API HTTP 400: Invalid OAuth access token.")

    def test_send_network_failure_raises_delivery_error(self) -> None:
        with patch(URLOPEN, side_effect=urllib_error.URLError("timed out")):
            with self.assertRaises(DeliveryError):
                self.client.send_message(CHANNEL, "U1", "Hello!")

    def test_dropped_connection_raises_delivery_error(self) -> None:
        for failure in (
            http.client.RemoteDisconnected("Remote end closed connection without response"),
            ConnectionResetError(104, "Connection reset by peer"),
        ):
            with patch(URLOPEN, side_effect=failure):
                with self.assertRaises(DeliveryError) as ctx:
                    self.client.send_message(CHANNEL, "U1", "Hello!")
            self.assertIs(ctx.exception.__cause__, failure)

    def test_truncated_send_response_raises_delivery_error(self) -> None:
        response = MagicMock()
        response.__enter__.return_value.read.side_effect = http.client.IncompleteRead(b"{\"recip")
        with patch(URLOPEN, return_value=response):
            with self.assertRaises(DeliveryError):
                self.client.send_message(CHANNEL, "U1", "Hello!")

    def test_sender_name(self) -> None:
        with patch(URLOPEN, return_value=_response({"first_name": "Jane", "last_name": "Doe", "id": "U1"})) as mock:
            name = self.client.get_sender_name(CHANNEL, "U1")

        self.assertEqual(name, "Jane Doe")
        url = mock.call_args.args[0]
        self.assertTrue(url.startswith("https://graph.example.test/v18.0/U1?"))
        self.assertIn("fields=first_name%2Clast_name", url)
        self.assertIn("access_token=page-token", url)

    def test_sender_name_unavailable(self) -> None:
        with patch(URLOPEN, side_effect=_http_error(403, "Permissions error")):
            self.assertIsNone(self.client.get_sender_name(CHANNEL, "U1"))
        with patch(URLOPEN, return_value=_response({"id": "U1"})):
            self.assertIsNone(self.client.get_sender_name(CHANNEL, "U1"))
        with patch(URLOPEN, side_effect=http.client.RemoteDisconnected("closed")):
            self.assertIsNone(self.client.get_sender_name(CHANNEL, "U1"))

    def test_fetch_page_info(self) -> None:
        with patch(URLOPEN, return_value=_response({"id": "P1", "name": "Demo Page"})):
            self.assertEqual(self.client.fetch_page_info("P1", "page-token")["name"], "Demo Page")

        with patch(URLOPEN, side_effect=_http_error(400, "Invalid OAuth access token.")):
            with self.assertRaises(GraphAPIError) as ctx:
                self.client.fetch_page_info("P1", "bad")
        self.assertIn("Invalid OAuth access token.", str(ctx.exception))

        with patch(URLOPEN, side_effect=ConnectionResetError("reset")):
            with self.assertRaises(GraphAPIError):
                self.client.fetch_page_info("P1", "page-token")


if __name__ == "__main__":
    unittest.main()
