"""Webhook and event queue schemas."""

from pydantic import BaseModel


class WebhookAck(BaseModel):
    """Acknowledgement returned to the platform for every delivery."""

    status: str = "EVENT_RECEIVED"


class SweepReportRead(BaseModel):
    """Summary of one event queue sweep."""

    claimed: int
    processed: int
    failed: int
    skipped: int = 0
