"""SQLAlchemy metadata registry import for Alembic."""

from autoresponder.models import AIConfig, Channel, MessageHistory, Rule, SystemLog, WebhookEvent
from autoresponder.models.base import Base

__all__ = ["Base", "AIConfig", "Channel", "MessageHistory", "Rule", "SystemLog", "WebhookEvent"]
