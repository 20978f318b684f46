"""Retention purge for append-only tables."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy import delete
from sqlalchemy.orm import Session

from autoresponder.config import get_settings
from autoresponder.models.base import utcnow
from autoresponder.models.message_history import MessageHistory
from autoresponder.models.system_log import SystemLog
from autoresponder.models.webhook_event import WebhookEvent
from autoresponder.services.history import append_system_log

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CleanupReport:
    """Rows removed per table."""

    history_deleted: int
    system_logs_deleted: int
    webhook_events_deleted: int


def cleanup_old_data(db: Session, *, now: datetime | None = None) -> CleanupReport:
    """Delete rows older than the configured retention windows.

    Only processed webhook events are purged; abandoned ones stay visible.
    """

    settings = get_settings()
    now = now or utcnow()
    history = db.execute(
        delete(MessageHistory).where(
            MessageHistory.processed_at < now - timedelta(days=settings.history_retention_days)
        )
    )
    logs = db.execute(
        delete(SystemLog).where(SystemLog.created_at < now - timedelta(days=settings.system_log_retention_days))
    )
    events = db.execute(
        delete(WebhookEvent).where(
            WebhookEvent.processed.is_(True),
            WebhookEvent.created_at < now - timedelta(days=settings.webhook_event_retention_days),
        )
    )
    db.commit()

    report = CleanupReport(
        history_deleted=history.rowcount or 0,
        system_logs_deleted=logs.rowcount or 0,
        webhook_events_deleted=events.rowcount or 0,
    )
    logger.info(
        "autoresponder.cleanup_completed history=%d system_logs=%d webhook_events=%d",
        report.history_deleted,
        report.system_logs_deleted,
        report.webhook_events_deleted,
    )
    append_system_log(
        db,
        "cleanup_completed",
        message="Retention cleanup completed",
        metadata={
            "history_deleted": report.history_deleted,
            "system_logs_deleted": report.system_logs_deleted,
            "webhook_events_deleted": report.webhook_events_deleted,
        },
    )
    return report
