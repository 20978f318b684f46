"""Parsing of Messenger webhook deliveries."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime, timezone
from typing import Any

from autoresponder.responder.types import InboundMessage

MESSAGE_EVENT = "message"


def iter_messaging_events(payload: Any) -> Iterator[tuple[str, dict[str, Any]]]:
    """Yield ``(channel_id, messaging_event)`` pairs from a webhook body.

    Entries without a page id and events that are not objects are dropped.
    """

    if not isinstance(payload, dict):
        return
    for entry in payload.get("entry") or []:
        if not isinstance(entry, dict) or not entry.get("id"):
            continue
        channel_id = str(entry["id"])
        for event in entry.get("messaging") or []:
            if isinstance(event, dict):
                yield channel_id, event


def classify_event(event: dict[str, Any]) -> str:
    """Return the event kind: ``message``, ``postback``, ``delivery``, ``read`` or ``unknown``."""

    for kind in (MESSAGE_EVENT, "postback", "delivery", "read"):
        if kind in event:
            return kind
    return "unknown"


def parse_inbound_message(
    channel_id: str,
    event: dict[str, Any],
    *,
    received_at: datetime | None = None,
) -> InboundMessage | None:
    """Return the text message carried by an event, or ``None`` to skip it.

    Events without ``message.text``, ``message.mid`` or ``sender.id`` are
    skipped, as are echoes of the page's own replies.
    """

    message = event.get("message")
    sender = event.get("sender")
    if not isinstance(message, dict) or not isinstance(sender, dict):
        return None
    if message.get("is_echo"):
        return None
    text = message.get("text")
    message_id = message.get("mid")
    sender_id = sender.get("id")
    if not text or not isinstance(text, str) or not message_id or not sender_id:
        return None
    return InboundMessage(
        channel_id=channel_id,
        sender_id=str(sender_id),
        message_id=str(message_id),
        text=text,
        received_at=received_at or datetime.now(timezone.utc),
    )
