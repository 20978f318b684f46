"""Append-only message processing history."""

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from autoresponder.models.base import Base, IdMixin, utcnow


class MessageHistory(Base, IdMixin):
    """Outcome of one inbound message."""

    __tablename__ = "message_history"
    __table_args__ = (Index("ix_message_history_owner_channel", "owner_id", "channel_id"),)

    owner_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    channel_id: Mapped[str] = mapped_column(String(255), nullable=False)
    message_id: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    sender_id: Mapped[str] = mapped_column(String(255), nullable=False)
    sender_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    message_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    reply_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    source_kind: Mapped[str] = mapped_column(String(16), index=True, nullable=False)
    matched_keyword: Mapped[str | None] = mapped_column(String(255), nullable=True)
    elapsed_ms: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    error_detail: Mapped[str | None] = mapped_column(Text, nullable=True)
    processed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        index=True,
    )
