"""Message history schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class HistoryRead(BaseModel):
    """Serialized history row."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int | None
    channel_id: str
    message_id: str
    sender_id: str
    sender_name: str | None
    message_text: str | None
    reply_text: str | None
    source_kind: str
    matched_keyword: str | None
    elapsed_ms: int
    error_detail: str | None
    processed_at: datetime
