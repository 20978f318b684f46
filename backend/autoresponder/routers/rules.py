"""Predefined response rule routes."""

from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy.orm import Session

from autoresponder.db.dependencies import get_db
from autoresponder.schemas.common import ApiResponse, DeleteResult
from autoresponder.schemas.rule import RuleCreate, RuleRead
from autoresponder.services.rules import create_rule, delete_rule, list_rules


router = APIRouter(prefix="/owners/{owner_id}")


@router.post("/channels/{channel_id}/rules", response_model=ApiResponse[RuleRead], status_code=201)
def add_rule(
    payload: RuleCreate,
    owner_id: int = Path(..., ge=1),
    channel_id: str = Path(..., min_length=1),
    db: Session = Depends(get_db),
) -> ApiResponse[RuleRead]:
    """Create a keyword rule for a channel."""

    return ApiResponse(data=RuleRead.model_validate(create_rule(db, owner_id, channel_id, payload)))


@router.get("/channels/{channel_id}/rules", response_model=ApiResponse[list[RuleRead]])
def get_rules(
    owner_id: int = Path(..., ge=1),
    channel_id: str = Path(..., min_length=1),
    db: Session = Depends(get_db),
) -> ApiResponse[list[RuleRead]]:
    """List a channel's rules, highest priority first."""

    return ApiResponse(data=[RuleRead.model_validate(rule) for rule in list_rules(db, owner_id, channel_id)])


@router.delete("/rules/{rule_id}", response_model=ApiResponse[DeleteResult])
def remove_rule(
    owner_id: int = Path(..., ge=1),
    rule_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
) -> ApiResponse[DeleteResult]:
    """Delete one rule."""

    if not delete_rule(db, owner_id, rule_id):
        raise HTTPException(status_code=404, detail="Rule not found")
    return ApiResponse(data=DeleteResult(id=rule_id, deleted=True))
