"""Facebook Graph API client for the Messenger Send API."""

from __future__ import annotations

import http.client
import json
import logging
from dataclasses import dataclass
from typing import Any
from urllib import error as urllib_error
from urllib import parse as urllib_parse
from urllib import request as urllib_request

from autoresponder.config import get_settings
from autoresponder.responder.types import ChannelCredentials

logger = logging.getLogger(__name__)


class DeliveryError(RuntimeError):
    """Raised when the Send API rejects or cannot receive a reply."""


class GraphAPIError(RuntimeError):
    """Raised when a Graph API read request fails."""


@dataclass(slots=True)
class GraphMessengerClient:
    """Minimal Graph API client using stdlib HTTP."""

    base_url: str = "https://graph.facebook.com/v18.0"
    timeout_seconds: int = 10

    def send_message(self, channel: ChannelCredentials, recipient_id: str, text: str) -> None:
        """Send one text reply as a ``RESPONSE`` to the recipient."""

        payload = {
            "recipient": {"id": recipient_id},
            "message": {"text": text},
            "messaging_type": "RESPONSE",
        }
        req = urllib_request.Request(
            url=f"{self.base_url.rstrip('/')}/{channel.channel_id}/messages",
            data=json.dumps(payload).encode("utf-8"),
            method="POST",
            headers={
                "Authorization": f"Bearer {channel.access_token}",
                "Content-Type": "application/json",
            },
        )
        try:
            with urllib_request.urlopen(req, timeout=self.timeout_seconds) as resp:
                resp.read()
        except urllib_error.HTTPError as exc:
            detail = _graph_error_detail(exc.read().decode("utf-8", errors="replace"))
            raise DeliveryError(f"Send API HTTP {exc.code}: {detail}") from exc
        except urllib_error.URLError as exc:
            raise DeliveryError(f"Send API request failed: {exc.reason}") from exc
        except TimeoutError as exc:
            raise DeliveryError(f"Send API request timed out after {self.timeout_seconds}s") from exc
        except (OSError, http.client.HTTPException) as exc:
            raise DeliveryError(f"Send API connection failed: {exc!r}") from exc

    def get_sender_name(self, channel: ChannelCredentials, sender_id: str) -> str | None:
        """Return "first last" for a sender, or ``None`` if the profile is unavailable."""

        try:
            profile = self._get_json(
                sender_id,
                {"fields": "first_name,last_name", "access_token": channel.access_token},
            )
        except GraphAPIError as exc:
            logger.info("autoresponder.sender_name_unavailable sender_id=%s error=%s", sender_id, exc)
            return None
        name = f"{profile.get('first_name') or ''} {profile.get('last_name') or ''}".strip()
        return name or None

    def fetch_page_info(self, channel_id: str, access_token: str) -> dict[str, Any]:
        """Return ``{"id", "name"}`` for a page, confirming the token can read it."""

        return self._get_json(channel_id, {"fields": "name,id", "access_token": access_token})

    def _get_json(self, path: str, query: dict[str, str]) -> dict[str, Any]:
        url = f"{self.base_url.rstrip('/')}/{path}?{urllib_parse.urlencode(query)}"
        try:
            with urllib_request.urlopen(url, timeout=self.timeout_seconds) as resp:
                raw = resp.read().decode("utf-8")
        except urllib_error.HTTPError as exc:
            detail = _graph_error_detail(exc.read().decode("utf-8", errors="replace"))
            raise GraphAPIError(f"Graph API HTTP {exc.code}: {detail}") from exc
        except (urllib_error.URLError, TimeoutError) as exc:
            raise GraphAPIError(f"Graph API request failed: {exc}") from exc
        except (OSError, http.client.HTTPException) as exc:
            raise GraphAPIError(f"Graph API connection failed: {exc!r}") from exc
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise GraphAPIError("Graph API returned invalid JSON") from exc
        if not isinstance(decoded, dict):
            raise GraphAPIError("Graph API returned an unexpected payload")
        return decoded


def get_default_messenger() -> GraphMessengerClient:
    """Return the Graph client configured from settings."""

    settings = get_settings()
    return GraphMessengerClient(
        base_url=settings.graph_api_base_url,
        timeout_seconds=settings.delivery_timeout_seconds,
    )


def _graph_error_detail(body: str) -> str:
    try:
        decoded = json.loads(body)
    except json.JSONDecodeError:
        return body.strip() or "no error detail"
    error = decoded.get("error") if isinstance(decoded, dict) else None
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error["message"]
    return body.strip() or "no error detail"
