"""SQLAlchemy-backed implementation of the responder store port."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from autoresponder.models.ai_config import AIConfig
from autoresponder.models.rule import Rule
from autoresponder.responder.types import AIConfigSnapshot, ChannelCredentials, HistoryEntry, RuleSpec
from autoresponder.services.ai_configs import get_active_ai_config
from autoresponder.services.channels import get_active_channel
from autoresponder.services.history import append_history, append_system_log
from autoresponder.services.rules import list_active_rules

T = TypeVar("T")


class PersistenceError(RuntimeError):
    """Raised when a history, log or queue write fails."""


class SqlResponderStore:
    """Adapts session-based services to the ``ResponderStore`` port."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get_active_channel(self, channel_id: str) -> ChannelCredentials | None:
        channel = self._run(lambda: get_active_channel(self.db, channel_id), "channel lookup")
        if channel is None:
            return None
        return ChannelCredentials(
            owner_id=channel.owner_id,
            channel_id=channel.channel_id,
            access_token=channel.access_token,
            name=channel.name,
        )

    def list_active_rules(self, owner_id: int, channel_id: str) -> list[RuleSpec]:
        rows = self._run(lambda: list_active_rules(self.db, owner_id, channel_id), "rule lookup")
        return [rule_to_spec(row) for row in rows]

    def get_active_ai_config(self, owner_id: int, channel_id: str) -> AIConfigSnapshot | None:
        row = self._run(lambda: get_active_ai_config(self.db, owner_id, channel_id), "AI config lookup")
        return None if row is None else ai_config_to_snapshot(row)

    def record_history(self, entry: HistoryEntry) -> None:
        self._run(lambda: append_history(self.db, entry), "history write")

    def log_event(
        self,
        event_type: str,
        *,
        level: str = "info",
        owner_id: int | None = None,
        channel_id: str | None = None,
        message: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        self._run(
            lambda: append_system_log(
                self.db,
                event_type,
                level=level,
                owner_id=owner_id,
                channel_id=channel_id,
                message=message,
                metadata=metadata,
            ),
            "system log write",
        )

    def _run(self, operation: Callable[[], T], description: str) -> T:
        try:
            return operation()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise PersistenceError(f"{description} failed: {exc}") from exc


def rule_to_spec(row: Rule) -> RuleSpec:
    return RuleSpec(
        id=row.id,
        keyword=row.keyword,
        response_text=row.response_text,
        match_type=row.match_type,
        case_sensitive=row.case_sensitive,
        priority=row.priority,
        active=row.active,
    )


def ai_config_to_snapshot(row: AIConfig) -> AIConfigSnapshot:
    return AIConfigSnapshot(
        provider=row.provider,
        model=row.model,
        api_key=row.api_key,
        temperature=row.temperature,
        max_tokens=row.max_tokens,
        instructions=row.instructions,
        tone=row.tone,
        style=row.style,
        language=row.language,
        active=row.active,
        fallback_only=row.fallback_only,
    )
