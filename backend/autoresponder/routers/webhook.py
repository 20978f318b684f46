"""Facebook Messenger webhook routes."""

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from autoresponder.config import get_settings
from autoresponder.db.dependencies import get_db
from autoresponder.schemas.webhook import WebhookAck
from autoresponder.services.pipeline import MessagePipeline, build_default_pipeline
from autoresponder.services.webhook import handle_webhook_payload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhook")


@router.get("/facebook", response_class=PlainTextResponse)
def verify_webhook(
    hub_mode: str | None = Query(default=None, alias="hub.mode"),
    hub_verify_token: str | None = Query(default=None, alias="hub.verify_token"),
    hub_challenge: str | None = Query(default=None, alias="hub.challenge"),
) -> str:
    """Answer the platform's subscription handshake."""

    expected = get_settings().webhook_verify_token
    if hub_mode == "subscribe" and expected and hub_verify_token == expected:
        return hub_challenge or ""
    raise HTTPException(status_code=403, detail="Webhook verification failed")


@router.post("/facebook", response_model=WebhookAck)
async def receive_webhook(request: Request, db: Session = Depends(get_db)) -> WebhookAck:
    """Accept a delivery; always acknowledged so the platform does not redeliver."""

    body = await request.body()
    return await run_in_threadpool(process_webhook_body, db, body)


def process_webhook_body(db: Session, body: bytes, pipeline: MessagePipeline | None = None) -> WebhookAck:
    """Decode and handle a raw webhook body, swallowing every failure."""

    try:
        payload = json.loads(body or b"{}")
    except ValueError:
        logger.warning("autoresponder.webhook_invalid_json bytes=%d", len(body or b""))
        return WebhookAck()

    try:
        handle_webhook_payload(
            db,
            payload,
            pipeline or build_default_pipeline(db),
            inline=get_settings().process_webhooks_inline,
        )
    except Exception:
        logger.exception("autoresponder.webhook_failed")
    return WebhookAck()
