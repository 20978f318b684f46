"""AI configuration and provider catalog routes."""

from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy.orm import Session

from autoresponder.db.dependencies import get_db
from autoresponder.providers.clients import get_provider, list_models
from autoresponder.providers.types import ProviderKind
from autoresponder.schemas.ai_config import AIConfigRead, AIConfigUpsert, CredentialCheckRead, ModelCatalogRead
from autoresponder.schemas.common import ApiResponse
from autoresponder.services.ai_configs import get_ai_config, upsert_ai_config


router = APIRouter(prefix="/owners/{owner_id}/channels/{channel_id}")
providers_router = APIRouter(prefix="/providers")


@router.put("/ai-config", response_model=ApiResponse[AIConfigRead])
def save_ai_config(
    payload: AIConfigUpsert,
    owner_id: int = Path(..., ge=1),
    channel_id: str = Path(..., min_length=1),
    db: Session = Depends(get_db),
) -> ApiResponse[AIConfigRead]:
    """Create or replace the channel's AI configuration."""

    return ApiResponse(data=AIConfigRead.model_validate(upsert_ai_config(db, owner_id, channel_id, payload)))


@router.get("/ai-config", response_model=ApiResponse[AIConfigRead])
def read_ai_config(
    owner_id: int = Path(..., ge=1),
    channel_id: str = Path(..., min_length=1),
    db: Session = Depends(get_db),
) -> ApiResponse[AIConfigRead]:
    """Return the channel's AI configuration with the key masked."""

    config = get_ai_config(db, owner_id, channel_id)
    if config is None:
        raise HTTPException(status_code=404, detail="AI configuration not found")
    return ApiResponse(data=AIConfigRead.model_validate(config))


@router.post("/ai-config/validate", response_model=ApiResponse[CredentialCheckRead])
def validate_ai_config(payload: AIConfigUpsert) -> ApiResponse[CredentialCheckRead]:
    """Probe the submitted key and model without saving them."""

    check = get_provider(payload.provider).validate_credentials(payload)
    return ApiResponse(data=CredentialCheckRead(ok=check.ok, reason=check.reason))


@providers_router.get("/{provider}/models", response_model=ApiResponse[ModelCatalogRead])
def get_provider_models(provider: ProviderKind) -> ApiResponse[ModelCatalogRead]:
    """Return the static model catalog for a provider."""

    return ApiResponse(data=ModelCatalogRead(provider=provider, models=list_models(provider)))
