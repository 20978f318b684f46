"""Ports (interfaces) consumed by the resolver, recorder and queue."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol

from autoresponder.responder.types import AIConfigSnapshot, ChannelCredentials, HistoryEntry, RuleSpec


class ResponderStore(Protocol):
    """Persistence operations required by the message pipeline.

    Write methods raise ``PersistenceError`` on failure; callers decide
    whether that is fatal.
    """

    def get_active_channel(self, channel_id: str) -> ChannelCredentials | None:
        ...

    def list_active_rules(self, owner_id: int, channel_id: str) -> Sequence[RuleSpec]:
        ...

    def get_active_ai_config(self, owner_id: int, channel_id: str) -> AIConfigSnapshot | None:
        ...

    def record_history(self, entry: HistoryEntry) -> None:
        ...

    def log_event(
        self,
        event_type: str,
        *,
        level: str = "info",
        owner_id: int | None = None,
        channel_id: str | None = None,
        message: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        ...


class MessengerClient(Protocol):
    """Outbound messaging channel."""

    def send_message(self, channel: ChannelCredentials, recipient_id: str, text: str) -> None:
        """Deliver one text reply; raise ``DeliveryError`` on failure."""

    def get_sender_name(self, channel: ChannelCredentials, sender_id: str) -> str | None:
        """Return the sender display name, or ``None`` when unavailable."""
