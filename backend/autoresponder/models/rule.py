"""Keyword-triggered predefined response model."""

from sqlalchemy import Boolean, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from autoresponder.models.base import Base, CreatedAtMixin, IdMixin
from autoresponder.responder.types import MatchType


class Rule(Base, IdMixin, CreatedAtMixin):
    """Predefined response owned by one (owner, channel) pair."""

    __tablename__ = "predefined_responses"
    __table_args__ = (Index("ix_predefined_responses_owner_channel", "owner_id", "channel_id"),)

    owner_id: Mapped[int] = mapped_column(Integer, nullable=False)
    channel_id: Mapped[str] = mapped_column(String(255), nullable=False)
    keyword: Mapped[str] = mapped_column(String(255), nullable=False)
    response_text: Mapped[str] = mapped_column(Text, nullable=False)
    # Stored as plain text so rows written before a match type existed still load.
    match_type: Mapped[str] = mapped_column(String(32), default=MatchType.CONTAINS.value, nullable=False)
    case_sensitive: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    priority: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
