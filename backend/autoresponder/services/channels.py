"""Connected page services."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from autoresponder.models.channel import Channel
from autoresponder.schemas.channel import ChannelCreate


class ChannelOwnershipError(RuntimeError):
    """Raised when a page is already connected by another owner."""


def upsert_channel(db: Session, owner_id: int, payload: ChannelCreate) -> Channel:
    """Connect a page, or refresh its name and token when this owner already connected it."""

    channel = db.scalar(select(Channel).where(Channel.channel_id == payload.channel_id))
    if channel is None:
        channel = Channel(owner_id=owner_id, channel_id=payload.channel_id)
        db.add(channel)
    elif channel.owner_id != owner_id:
        raise ChannelOwnershipError(f"Page {payload.channel_id} is connected by another account.")
    channel.name = payload.name.strip()
    channel.access_token = payload.access_token.strip()
    channel.active = True
    db.commit()
    db.refresh(channel)
    return channel


def list_channels(db: Session, owner_id: int) -> list[Channel]:
    """Return all pages connected by an owner."""

    stmt = select(Channel).where(Channel.owner_id == owner_id).order_by(Channel.name.asc(), Channel.id.asc())
    return list(db.scalars(stmt).all())


def get_active_channel(db: Session, channel_id: str) -> Channel | None:
    """Return the active page row for a page id."""

    return db.scalar(select(Channel).where(Channel.channel_id == channel_id, Channel.active.is_(True)))
