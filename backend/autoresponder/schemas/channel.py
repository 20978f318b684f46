"""Connected page request/response schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ChannelCreate(BaseModel):
    """Connect (or refresh the token of) a Facebook Page."""

    channel_id: str = Field(min_length=1, max_length=255)
    name: str = Field(min_length=1, max_length=255)
    access_token: str = Field(min_length=1)
    verify_token: bool = True


class ChannelRead(BaseModel):
    """Serialized page, without its access token."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int
    channel_id: str
    name: str
    active: bool
    created_at: datetime
