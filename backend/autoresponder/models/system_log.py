"""Durable lifecycle event log."""

from sqlalchemy import JSON, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from autoresponder.models.base import Base, CreatedAtMixin, IdMixin


class SystemLog(Base, IdMixin, CreatedAtMixin):
    """Structured lifecycle event, mirrored from the application logger."""

    __tablename__ = "system_logs"

    owner_id: Mapped[int | None] = mapped_column(Integer, index=True, nullable=True)
    channel_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    level: Mapped[str] = mapped_column(String(16), index=True, nullable=False)
    event_type: Mapped[str] = mapped_column(String(100), index=True, nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    metadata_json: Mapped[dict[str, object]] = mapped_column(JSON, default=dict, nullable=False)
