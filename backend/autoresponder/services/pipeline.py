"""Per-message processing: resolve, deliver, record history, emit lifecycle event."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from time import perf_counter

from sqlalchemy.orm import Session

from autoresponder.config import get_settings
from autoresponder.integrations.facebook import DeliveryError, get_default_messenger
from autoresponder.responder.ports import MessengerClient, ResponderStore
from autoresponder.responder.resolver import ResponseResolver
from autoresponder.responder.types import (
    ChannelCredentials,
    HistoryEntry,
    InboundMessage,
    ResolutionResult,
    SourceKind,
)
from autoresponder.services.store import PersistenceError, SqlResponderStore

logger = logging.getLogger(__name__)

MESSAGE_PROCESSED_EVENT = "message_processed"


@dataclass(slots=True)
class ProcessingOutcome:
    """What happened to one inbound message."""

    message: InboundMessage
    owner_id: int
    resolution: ResolutionResult
    elapsed_ms: int
    delivered: bool = False
    delivery_error: str | None = None
    history_recorded: bool = False

    @property
    def needs_retry(self) -> bool:
        """Only a failed delivery is worth replaying from the event queue."""

        return self.delivery_error is not None


class MessagePipeline:
    """Runs the four processing steps for inbound messages.

    Every step runs even when an earlier one failed: a resolution error still
    yields a history row and a lifecycle event, and a delivery failure is
    reported on the outcome instead of being raised.
    """

    def __init__(
        self,
        store: ResponderStore,
        messenger: MessengerClient,
        resolver: ResponseResolver | None = None,
        *,
        fetch_sender_names: bool = True,
    ) -> None:
        self._store = store
        self._messenger = messenger
        self._resolver = resolver or ResponseResolver(store)
        self._fetch_sender_names = fetch_sender_names

    def process(self, message: InboundMessage) -> ProcessingOutcome | None:
        """Process one message; return ``None`` when the page is unknown or inactive."""

        started = perf_counter()
        channel = self._store.get_active_channel(message.channel_id)
        if channel is None:
            logger.info("autoresponder.channel_not_found channel_id=%s", message.channel_id)
            return None

        sender_name = self._lookup_sender_name(channel, message)

        resolution = self._resolve(channel, message)

        delivered = False
        delivery_error = None
        if resolution.reply_text:
            try:
                self.deliver(channel, message.sender_id, resolution.reply_text)
                delivered = True
            except DeliveryError as exc:
                delivery_error = str(exc)
                logger.warning(
                    "autoresponder.delivery_failed channel_id=%s message_id=%s error=%s",
                    message.channel_id,
                    message.message_id,
                    exc,
                )
            except Exception as exc:
                delivery_error = str(exc) or exc.__class__.__name__
                logger.exception(
                    "autoresponder.delivery_failed channel_id=%s message_id=%s",
                    message.channel_id,
                    message.message_id,
                )

        elapsed_ms = int((perf_counter() - started) * 1000)
        history_recorded = self.record_history(
            HistoryEntry(
                owner_id=channel.owner_id,
                channel_id=message.channel_id,
                message_id=message.message_id,
                sender_id=message.sender_id,
                sender_name=sender_name,
                message_text=message.text,
                reply_text=resolution.reply_text,
                source_kind=resolution.source_kind,
                matched_keyword=resolution.matched_keyword,
                elapsed_ms=elapsed_ms,
                error_detail=resolution.error_detail or delivery_error,
                processed_at=datetime.now(timezone.utc),
            )
        )

        outcome = ProcessingOutcome(
            message=message,
            owner_id=channel.owner_id,
            resolution=resolution,
            elapsed_ms=elapsed_ms,
            delivered=delivered,
            delivery_error=delivery_error,
            history_recorded=history_recorded,
        )
        self._emit_processed_event(outcome)
        return outcome

    def deliver(self, channel: ChannelCredentials, recipient_id: str, reply_text: str) -> None:
        """Send one reply. Failures raise ``DeliveryError`` and are never retried here."""

        self._messenger.send_message(channel, recipient_id, reply_text)

    def record_history(self, entry: HistoryEntry) -> bool:
        """Append a history row; a write failure is logged and reported as ``False``."""

        try:
            self._store.record_history(entry)
        except PersistenceError:
            logger.exception(
                "autoresponder.history_write_failed channel_id=%s message_id=%s",
                entry.channel_id,
                entry.message_id,
            )
            return False
        return True

    def _lookup_sender_name(self, channel: ChannelCredentials, message: InboundMessage) -> str | None:
        if not self._fetch_sender_names:
            return None
        try:
            return self._messenger.get_sender_name(channel, message.sender_id)
        except Exception:
            logger.warning(
                "autoresponder.sender_name_lookup_failed channel_id=%s sender_id=%s",
                message.channel_id,
                message.sender_id,
                exc_info=True,
            )
            return None

    def _resolve(self, channel: ChannelCredentials, message: InboundMessage) -> ResolutionResult:
        started = perf_counter()
        try:
            return self._resolver.resolve(channel.owner_id, message.channel_id, message.text)
        except Exception as exc:
            logger.exception(
                "autoresponder.resolution_failed channel_id=%s message_id=%s",
                message.channel_id,
                message.message_id,
            )
            return ResolutionResult(
                source_kind=SourceKind.ERROR,
                elapsed_ms=int((perf_counter() - started) * 1000),
                error_detail=str(exc) or exc.__class__.__name__,
            )

    def _emit_processed_event(self, outcome: ProcessingOutcome) -> None:
        resolution = outcome.resolution
        logger.info(
            (
                "autoresponder.message_processed channel_id=%s message_id=%s source_kind=%s "
                "matched_keyword=%s delivered=%s history_recorded=%s elapsed_ms=%d"
            ),
            outcome.message.channel_id,
            outcome.message.message_id,
            resolution.source_kind.value,
            resolution.matched_keyword,
            outcome.delivered,
            outcome.history_recorded,
            outcome.elapsed_ms,
        )
        metadata: dict[str, object] = {
            "channel_id": outcome.message.channel_id,
            "message_id": outcome.message.message_id,
            "source_kind": resolution.source_kind.value,
            "elapsed_ms": outcome.elapsed_ms,
            "delivered": outcome.delivered,
        }
        if resolution.provider:
            metadata["provider"] = resolution.provider
            metadata["model"] = resolution.model
        if outcome.delivery_error:
            metadata["delivery_error"] = outcome.delivery_error
        level = "error" if resolution.source_kind is SourceKind.ERROR or outcome.delivery_error else "info"
        try:
            self._store.log_event(
                MESSAGE_PROCESSED_EVENT,
                level=level,
                owner_id=outcome.owner_id,
                channel_id=outcome.message.channel_id,
                metadata=metadata,
            )
        except PersistenceError:
            logger.exception("autoresponder.system_log_write_failed channel_id=%s", outcome.message.channel_id)


def build_default_pipeline(db: Session) -> MessagePipeline:
    """Return a pipeline wired to the SQL store and the Graph API client."""

    return MessagePipeline(
        SqlResponderStore(db),
        get_default_messenger(),
        fetch_sender_names=get_settings().fetch_sender_names,
    )
