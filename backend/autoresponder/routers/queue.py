"""Event queue routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from autoresponder.config import get_settings
from autoresponder.db.dependencies import get_db
from autoresponder.schemas.common import ApiResponse
from autoresponder.schemas.webhook import SweepReportRead
from autoresponder.services.event_queue import make_replay_handler, run_sweep
from autoresponder.services.pipeline import build_default_pipeline


router = APIRouter(prefix="/webhook-events")


@router.post("/sweep", response_model=ApiResponse[SweepReportRead])
def sweep_events(db: Session = Depends(get_db)) -> ApiResponse[SweepReportRead]:
    """Run one sweep over pending webhook events."""

    settings = get_settings()
    report = run_sweep(
        db,
        make_replay_handler(build_default_pipeline(db)),
        batch_size=settings.queue_batch_size,
        max_retries=settings.queue_max_retries,
        lease_seconds=settings.queue_lease_seconds,
    )
    return ApiResponse(
        data=SweepReportRead(
            claimed=report.claimed,
            processed=report.processed,
            failed=report.failed,
            skipped=report.skipped,
        )
    )
