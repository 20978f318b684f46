"""Persisted webhook event queue with leased, bounded-retry sweeps."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from time import perf_counter
from typing import Any
from uuid import uuid4

from sqlalchemy import ColumnElement, and_, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from autoresponder.models.base import utcnow
from autoresponder.models.webhook_event import WebhookEvent
from autoresponder.responder.events import MESSAGE_EVENT, parse_inbound_message
from autoresponder.services.pipeline import MessagePipeline
from autoresponder.services.store import PersistenceError

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 10
MAX_RETRIES = 3
DEFAULT_LEASE_SECONDS = 300

EventHandler = Callable[[WebhookEvent], None]


class EventReplayError(RuntimeError):
    """Raised when a queued event could not be processed."""


@dataclass(slots=True)
class SweepReport:
    """Counts for one sweep."""

    claimed: int = 0
    processed: int = 0
    failed: int = 0
    skipped: int = 0


def enqueue_event(
    db: Session,
    channel_id: str,
    event_kind: str,
    raw_payload: dict[str, Any],
    *,
    last_error: str | None = None,
) -> WebhookEvent:
    """Persist a raw event for deferred processing."""

    event = WebhookEvent(
        channel_id=channel_id,
        event_kind=event_kind,
        raw_payload=raw_payload,
        last_error=last_error,
    )
    try:
        db.add(event)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError(f"webhook event write failed: {exc}") from exc
    return event


def claim_pending_events(
    db: Session,
    *,
    batch_size: int = DEFAULT_BATCH_SIZE,
    max_retries: int = MAX_RETRIES,
    lease_seconds: int = DEFAULT_LEASE_SECONDS,
    now: datetime | None = None,
    token: str | None = None,
) -> list[WebhookEvent]:
    """Lease up to ``batch_size`` unprocessed events, oldest first.

    The lease is taken with one conditional UPDATE, so two concurrent sweeps
    can never both own the same row. Leases older than ``lease_seconds`` are
    considered abandoned by a crashed sweeper and may be taken over. Pass the
    same ``token`` to :func:`process_claimed_events` so it can tell whether
    each lease is still held.
    """

    now = now or utcnow()
    claimable = and_(
        WebhookEvent.processed.is_(False),
        WebhookEvent.retry_count < max_retries,
        or_(
            WebhookEvent.claim_token.is_(None),
            WebhookEvent.claimed_at < now - timedelta(seconds=lease_seconds),
        ),
    )
    candidate_ids = list(
        db.scalars(
            select(WebhookEvent.id)
            .where(claimable)
            .order_by(WebhookEvent.created_at.asc(), WebhookEvent.id.asc())
            .limit(batch_size)
        )
    )
    if not candidate_ids:
        return []

    token = token or new_claim_token()
    db.execute(
        update(WebhookEvent)
        .where(WebhookEvent.id.in_(candidate_ids), claimable)
        .values(claim_token=token, claimed_at=now)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    return list(
        db.scalars(
            select(WebhookEvent)
            .where(WebhookEvent.claim_token == token)
            .order_by(WebhookEvent.created_at.asc(), WebhookEvent.id.asc())
        )
    )


def new_claim_token() -> str:
    return uuid4().hex


def _held_by(event_id: int, token: str) -> ColumnElement[bool]:
    return and_(
        WebhookEvent.id == event_id,
        WebhookEvent.claim_token == token,
        WebhookEvent.processed.is_(False),
    )


def renew_lease(db: Session, event_id: int, token: str, *, now: datetime | None = None) -> bool:
    """Restart the lease clock on an event; ``False`` means another sweeper owns it now."""

    result = db.execute(
        update(WebhookEvent)
        .where(_held_by(event_id, token))
        .values(claimed_at=now or utcnow())
        .execution_options(synchronize_session=False)
    )
    db.commit()
    return result.rowcount == 1


def mark_event_processed(db: Session, event_id: int, token: str, *, now: datetime | None = None) -> bool:
    """Flag a leased event as done and release its lease.

    Nothing is written when ``token`` no longer holds the lease.
    """

    result = db.execute(
        update(WebhookEvent)
        .where(_held_by(event_id, token))
        .values(processed=True, processed_at=now or utcnow(), claim_token=None, claimed_at=None)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    return result.rowcount == 1


def mark_event_failed(db: Session, event_id: int, token: str, error: str) -> int | None:
    """Count one failed attempt, keep the error text and release the lease.

    Returns the new retry count, or ``None`` when ``token`` no longer holds the
    lease and nothing was written.
    """

    result = db.execute(
        update(WebhookEvent)
        .where(_held_by(event_id, token))
        .values(
            retry_count=WebhookEvent.retry_count + 1,
            last_error=error,
            claim_token=None,
            claimed_at=None,
        )
        .execution_options(synchronize_session=False)
    )
    db.commit()
    if result.rowcount != 1:
        return None
    return db.scalar(select(WebhookEvent.retry_count).where(WebhookEvent.id == event_id))


def process_claimed_events(
    db: Session,
    events: list[WebhookEvent],
    handler: EventHandler,
    *,
    token: str,
    max_retries: int = MAX_RETRIES,
) -> SweepReport:
    """Run ``handler`` on each event still leased under ``token``.

    The lease is renewed right before each handler call. An event whose lease
    was taken over by another sweeper is skipped and its outcome is not written.
    """

    report = SweepReport(claimed=len(events))
    for event in events:
        event_id = event.id
        if not renew_lease(db, event_id, token):
            logger.warning("autoresponder.queue_lease_lost event_id=%s stage=before_handler", event_id)
            report.skipped += 1
            continue
        try:
            handler(event)
        except Exception as exc:
            db.rollback()
            logger.warning("autoresponder.queue_event_failed event_id=%s error=%s", event_id, exc)
            retry_count = mark_event_failed(db, event_id, token, str(exc) or exc.__class__.__name__)
            if retry_count is None:
                logger.warning("autoresponder.queue_lease_lost event_id=%s stage=after_failure", event_id)
                report.skipped += 1
                continue
            if retry_count >= max_retries:
                logger.error(
                    "autoresponder.queue_event_abandoned event_id=%s retry_count=%d",
                    event_id,
                    retry_count,
                )
            report.failed += 1
            continue
        if mark_event_processed(db, event_id, token):
            report.processed += 1
        else:
            logger.warning("autoresponder.queue_lease_lost event_id=%s stage=after_handler", event_id)
            report.skipped += 1
    return report


def run_sweep(
    db: Session,
    handler: EventHandler,
    *,
    batch_size: int = DEFAULT_BATCH_SIZE,
    max_retries: int = MAX_RETRIES,
    lease_seconds: int = DEFAULT_LEASE_SECONDS,
) -> SweepReport:
    """Claim one batch and run ``handler`` on each event.

    A handler exception counts as one failed attempt. Once an event reaches
    ``max_retries`` failures it is no longer selected but stays in the table.
    """

    started = perf_counter()
    token = new_claim_token()
    events = claim_pending_events(
        db,
        batch_size=batch_size,
        max_retries=max_retries,
        lease_seconds=lease_seconds,
        token=token,
    )
    report = process_claimed_events(db, events, handler, token=token, max_retries=max_retries)

    logger.info(
        "autoresponder.queue_sweep claimed=%d processed=%d failed=%d skipped=%d total_ms=%.2f",
        report.claimed,
        report.processed,
        report.failed,
        report.skipped,
        (perf_counter() - started) * 1000.0,
    )
    return report


def make_replay_handler(pipeline: MessagePipeline) -> EventHandler:
    """Return a handler that replays queued events through the message pipeline."""

    def replay(event: WebhookEvent) -> None:
        if event.event_kind != MESSAGE_EVENT:
            return
        message = parse_inbound_message(event.channel_id, dict(event.raw_payload or {}))
        if message is None:
            raise EventReplayError("payload carries no message text or id")
        outcome = pipeline.process(message)
        if outcome is not None and outcome.needs_retry:
            raise EventReplayError(outcome.delivery_error or "delivery failed")

    return replay
