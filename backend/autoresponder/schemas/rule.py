"""Predefined response rule schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from autoresponder.responder.types import MatchType


class RuleCreate(BaseModel):
    """New keyword rule for one channel."""

    keyword: str = Field(min_length=1, max_length=255)
    response_text: str = Field(min_length=1)
    match_type: MatchType = MatchType.CONTAINS
    case_sensitive: bool = False
    priority: int = 1
    active: bool = True

    @field_validator("keyword")
    @classmethod
    def validate_keyword(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("Keyword cannot be blank.")
        return stripped


class RuleRead(BaseModel):
    """Serialized keyword rule."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int
    channel_id: str
    keyword: str
    response_text: str
    match_type: str
    case_sensitive: bool
    priority: int
    active: bool
    created_at: datetime
