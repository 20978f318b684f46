"""AI configuration services."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from autoresponder.models.ai_config import AIConfig
from autoresponder.schemas.ai_config import AIConfigUpsert


def upsert_ai_config(db: Session, owner_id: int, channel_id: str, payload: AIConfigUpsert) -> AIConfig:
    """Create or replace the single AI configuration of a channel."""

    config = get_ai_config(db, owner_id, channel_id)
    if config is None:
        config = AIConfig(owner_id=owner_id, channel_id=channel_id)
        db.add(config)
    config.provider = payload.provider.value
    config.model = payload.model.strip()
    config.api_key = payload.api_key.strip()
    config.temperature = payload.temperature
    config.max_tokens = payload.max_tokens
    config.instructions = (payload.instructions or "").strip() or None
    config.tone = payload.tone
    config.style = payload.style
    config.language = payload.language
    config.active = payload.active
    config.fallback_only = payload.fallback_only
    db.commit()
    db.refresh(config)
    return config


def get_ai_config(db: Session, owner_id: int, channel_id: str) -> AIConfig | None:
    """Return the channel's AI configuration, active or not."""

    return db.scalar(select(AIConfig).where(AIConfig.owner_id == owner_id, AIConfig.channel_id == channel_id))


def get_active_ai_config(db: Session, owner_id: int, channel_id: str) -> AIConfig | None:
    """Return the channel's AI configuration only when it is active."""

    return db.scalar(
        select(AIConfig).where(
            AIConfig.owner_id == owner_id,
            AIConfig.channel_id == channel_id,
            AIConfig.active.is_(True),
        )
    )
