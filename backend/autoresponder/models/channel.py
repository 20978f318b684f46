"""Connected Facebook Page model."""

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from autoresponder.models.base import Base, CreatedAtMixin, IdMixin


class Channel(Base, IdMixin, CreatedAtMixin):
    """Page credentials used to receive and answer messages."""

    __tablename__ = "channels"

    owner_id: Mapped[int] = mapped_column(Integer, index=True, nullable=False)
    channel_id: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    access_token: Mapped[str] = mapped_column(Text, nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
