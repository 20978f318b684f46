"""Message history and lifecycle log services."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from autoresponder.models.message_history import MessageHistory
from autoresponder.models.system_log import SystemLog
from autoresponder.responder.types import HistoryEntry


def append_history(db: Session, entry: HistoryEntry) -> MessageHistory:
    """Insert one history row. Rows are never updated afterwards."""

    row = MessageHistory(
        owner_id=entry.owner_id,
        channel_id=entry.channel_id,
        message_id=entry.message_id,
        sender_id=entry.sender_id,
        sender_name=entry.sender_name,
        message_text=entry.message_text,
        reply_text=entry.reply_text,
        source_kind=entry.source_kind.value,
        matched_keyword=entry.matched_keyword,
        elapsed_ms=entry.elapsed_ms,
        error_detail=entry.error_detail,
        processed_at=entry.processed_at,
    )
    db.add(row)
    db.commit()
    return row


def list_history(
    db: Session,
    owner_id: int,
    channel_id: str | None = None,
    *,
    limit: int = 100,
    offset: int = 0,
) -> list[MessageHistory]:
    """Return history rows, newest first."""

    stmt = select(MessageHistory).where(MessageHistory.owner_id == owner_id)
    if channel_id is not None:
        stmt = stmt.where(MessageHistory.channel_id == channel_id)
    stmt = stmt.order_by(MessageHistory.processed_at.desc(), MessageHistory.id.desc()).limit(limit).offset(offset)
    return list(db.scalars(stmt).all())


def append_system_log(
    db: Session,
    event_type: str,
    *,
    level: str = "info",
    owner_id: int | None = None,
    channel_id: str | None = None,
    message: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> SystemLog:
    """Insert one lifecycle event row."""

    row = SystemLog(
        owner_id=owner_id,
        channel_id=channel_id,
        level=level,
        event_type=event_type,
        message=message or f"Event: {event_type}",
        metadata_json=dict(metadata or {}),
    )
    db.add(row)
    db.commit()
    return row
