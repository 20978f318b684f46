"""Inbound webhook handling."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from autoresponder.responder.events import (
    MESSAGE_EVENT,
    classify_event,
    iter_messaging_events,
    parse_inbound_message,
)
from autoresponder.services.event_queue import enqueue_event
from autoresponder.services.pipeline import MessagePipeline
from autoresponder.services.store import PersistenceError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class WebhookSummary:
    """Counts for one webhook delivery."""

    received: int = 0
    skipped: int = 0
    processed: int = 0
    queued: int = 0


def handle_webhook_payload(
    db: Session,
    payload: Any,
    pipeline: MessagePipeline,
    *,
    inline: bool = True,
) -> WebhookSummary:
    """Process or queue every text message in a webhook body.

    Never raises for per-event failures: the platform must always receive an
    acknowledgement. In inline mode a message whose delivery failed, or whose
    processing raised, is queued for replay; otherwise every message is queued.
    """

    summary = WebhookSummary()
    for channel_id, event in iter_messaging_events(payload):
        summary.received += 1
        message = parse_inbound_message(channel_id, event) if classify_event(event) == MESSAGE_EVENT else None
        if message is None:
            summary.skipped += 1
            continue

        if not inline:
            if _queue(db, channel_id, event, last_error=None):
                summary.queued += 1
            continue

        try:
            outcome = pipeline.process(message)
        except Exception as exc:
            logger.exception(
                "autoresponder.webhook_processing_failed channel_id=%s message_id=%s",
                channel_id,
                message.message_id,
            )
            if _queue(db, channel_id, event, last_error=str(exc) or exc.__class__.__name__):
                summary.queued += 1
            continue

        if outcome is None:
            summary.skipped += 1
            continue
        summary.processed += 1
        if outcome.needs_retry and _queue(db, channel_id, event, last_error=outcome.delivery_error):
            summary.queued += 1

    logger.info(
        "autoresponder.webhook_received received=%d processed=%d queued=%d skipped=%d inline=%s",
        summary.received,
        summary.processed,
        summary.queued,
        summary.skipped,
        inline,
    )
    return summary


def _queue(db: Session, channel_id: str, event: dict[str, Any], *, last_error: str | None) -> bool:
    try:
        enqueue_event(db, channel_id, MESSAGE_EVENT, event, last_error=last_error)
    except PersistenceError:
        logger.exception("autoresponder.webhook_enqueue_failed channel_id=%s", channel_id)
        return False
    return True
