"""Connected page routes."""

from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy.orm import Session

from autoresponder.db.dependencies import get_db
from autoresponder.integrations.facebook import GraphAPIError, get_default_messenger
from autoresponder.schemas.channel import ChannelCreate, ChannelRead
from autoresponder.schemas.common import ApiResponse
from autoresponder.services.channels import ChannelOwnershipError, list_channels, upsert_channel


router = APIRouter(prefix="/owners/{owner_id}")


@router.post("/channels", response_model=ApiResponse[ChannelRead], status_code=201)
def connect_channel(
    payload: ChannelCreate,
    owner_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
) -> ApiResponse[ChannelRead]:
    """Connect a Facebook Page, optionally checking its token against the Graph API."""

    if payload.verify_token:
        try:
            get_default_messenger().fetch_page_info(payload.channel_id, payload.access_token)
        except GraphAPIError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
    try:
        channel = upsert_channel(db, owner_id, payload)
    except ChannelOwnershipError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return ApiResponse(data=ChannelRead.model_validate(channel))


@router.get("/channels", response_model=ApiResponse[list[ChannelRead]])
def get_channels(
    owner_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
) -> ApiResponse[list[ChannelRead]]:
    """List pages connected by an owner."""

    return ApiResponse(data=[ChannelRead.model_validate(channel) for channel in list_channels(db, owner_id)])
