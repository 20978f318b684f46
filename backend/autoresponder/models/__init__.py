"""ORM models package exports."""

from autoresponder.models.ai_config import AIConfig
from autoresponder.models.channel import Channel
from autoresponder.models.message_history import MessageHistory
from autoresponder.models.rule import MatchType, Rule
from autoresponder.models.system_log import SystemLog
from autoresponder.models.webhook_event import WebhookEvent

__all__ = [
    "AIConfig",
    "Channel",
    "MatchType",
    "MessageHistory",
    "Rule",
    "SystemLog",
    "WebhookEvent",
]
