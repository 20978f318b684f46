"""Message history routes."""

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from autoresponder.db.dependencies import get_db
from autoresponder.schemas.common import PagedResponse
from autoresponder.schemas.history import HistoryRead
from autoresponder.services.history import list_history


router = APIRouter(prefix="/owners/{owner_id}")


@router.get("/history", response_model=PagedResponse[HistoryRead])
def get_owner_history(
    owner_id: int = Path(..., ge=1),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
) -> PagedResponse[HistoryRead]:
    """List processed messages across all of an owner's pages."""

    rows = list_history(db, owner_id, limit=limit, offset=offset)
    return PagedResponse(
        data=[HistoryRead.model_validate(row) for row in rows],
        limit=limit,
        offset=offset,
    )


@router.get("/channels/{channel_id}/history", response_model=PagedResponse[HistoryRead])
def get_channel_history(
    owner_id: int = Path(..., ge=1),
    channel_id: str = Path(..., min_length=1),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
) -> PagedResponse[HistoryRead]:
    """List processed messages for one page, newest first."""

    rows = list_history(db, owner_id, channel_id, limit=limit, offset=offset)
    return PagedResponse(
        data=[HistoryRead.model_validate(row) for row in rows],
        limit=limit,
        offset=offset,
    )
