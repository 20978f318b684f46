"""Typed pipeline values independent of persistence."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class MatchType(str, Enum):
    """How a rule keyword is compared with the inbound text."""

    CONTAINS = "contains"
    EXACT = "exact"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"


class SourceKind(str, Enum):
    """Where a reply came from."""

    PREDEFINED = "predefined"
    AI = "ai"
    NONE = "none"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class InboundMessage:
    """One text message received through the webhook."""

    channel_id: str
    sender_id: str
    message_id: str
    text: str
    received_at: datetime


@dataclass(frozen=True, slots=True)
class RuleSpec:
    """Read-only view of a predefined response rule."""

    id: int
    keyword: str
    response_text: str
    match_type: str = "contains"
    case_sensitive: bool = False
    priority: int = 1
    active: bool = True


@dataclass(frozen=True, slots=True)
class AIConfigSnapshot:
    """Read-only view of the AI configuration for one channel."""

    provider: str
    model: str
    api_key: str
    temperature: float | None = None
    max_tokens: int | None = None
    instructions: str | None = None
    tone: str | None = None
    style: str | None = None
    language: str | None = None
    active: bool = True
    fallback_only: bool = True

    def __repr__(self) -> str:
        return f"AIConfigSnapshot(provider={self.provider!r}, model={self.model!r})"


@dataclass(frozen=True, slots=True)
class ChannelCredentials:
    """Page identity and Send API token."""

    owner_id: int
    channel_id: str
    access_token: str
    name: str = ""


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    """Reply decision for one inbound message."""

    source_kind: SourceKind
    reply_text: str | None = None
    matched_keyword: str | None = None
    elapsed_ms: int = 0
    error_detail: str | None = None
    provider: str | None = None
    model: str | None = None


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """Row appended to the message history log."""

    owner_id: int | None
    channel_id: str
    message_id: str
    sender_id: str
    message_text: str | None
    source_kind: SourceKind
    elapsed_ms: int
    processed_at: datetime
    sender_name: str | None = None
    reply_text: str | None = None
    matched_keyword: str | None = None
    error_detail: str | None = None
