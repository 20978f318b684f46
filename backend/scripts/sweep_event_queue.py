"""Replay pending webhook events through the message pipeline.

Usage (from repository root):
    python backend/scripts/sweep_event_queue.py            # sweep forever
    python backend/scripts/sweep_event_queue.py --once     # one batch

Usage (from backend directory):
    python scripts/sweep_event_queue.py --once
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from autoresponder.config import get_settings
from autoresponder.db.session import SessionLocal
from autoresponder.services.event_queue import SweepReport, make_replay_handler, run_sweep
from autoresponder.services.pipeline import build_default_pipeline

logger = logging.getLogger("autoresponder.sweeper")


def parse_args() -> argparse.Namespace:
    """Parse script CLI arguments."""

    settings = get_settings()
    parser = argparse.ArgumentParser(description="Replay pending webhook events.")
    parser.add_argument("--once", action="store_true", help="Run a single sweep and exit.")
    parser.add_argument(
        "--interval",
        type=int,
        default=settings.sweep_interval_seconds,
        help=f"Seconds between sweeps (default: {settings.sweep_interval_seconds})",
    )
    return parser.parse_args()


def sweep_once() -> SweepReport:
    settings = get_settings()
    with SessionLocal() as db:
        return run_sweep(
            db,
            make_replay_handler(build_default_pipeline(db)),
            batch_size=settings.queue_batch_size,
            max_retries=settings.queue_max_retries,
            lease_seconds=settings.queue_lease_seconds,
        )


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    if args.once:
        report = sweep_once()
        print(
            f"claimed={report.claimed} processed={report.processed} "
            f"failed={report.failed} skipped={report.skipped}"
        )
        return

    logger.info("autoresponder.sweeper_started interval_s=%d", args.interval)
    try:
        while True:
            try:
                sweep_once()
            except Exception:
                logger.exception("autoresponder.sweep_failed")
            time.sleep(args.interval)
    except KeyboardInterrupt:
        logger.info("autoresponder.sweeper_stopped")


if __name__ == "__main__":
    main()
