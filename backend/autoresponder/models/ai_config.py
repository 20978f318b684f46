"""Per-channel generative AI configuration model."""

from sqlalchemy import Boolean, Float, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from autoresponder.models.base import Base, CreatedAtMixin, IdMixin


class AIConfig(Base, IdMixin, CreatedAtMixin):
    """Provider credentials and prompt settings for one (owner, channel) pair."""

    __tablename__ = "ai_configs"
    __table_args__ = (UniqueConstraint("owner_id", "channel_id", name="uq_ai_configs_owner_channel"),)

    owner_id: Mapped[int] = mapped_column(Integer, nullable=False)
    channel_id: Mapped[str] = mapped_column(String(255), nullable=False)
    provider: Mapped[str] = mapped_column(String(50), index=True, nullable=False)
    model: Mapped[str] = mapped_column(String(100), nullable=False)
    api_key: Mapped[str] = mapped_column(Text, nullable=False)
    temperature: Mapped[float | None] = mapped_column(Float, nullable=True)
    max_tokens: Mapped[int | None] = mapped_column(Integer, nullable=True)
    instructions: Mapped[str | None] = mapped_column(Text, nullable=True)
    tone: Mapped[str | None] = mapped_column(String(100), default="friendly", nullable=True)
    style: Mapped[str | None] = mapped_column(String(100), default="medium", nullable=True)
    language: Mapped[str | None] = mapped_column(String(10), default="fr", nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    fallback_only: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
