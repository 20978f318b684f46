"""Purge history, system logs and processed webhook events past retention.

Usage (from repository root):
    python backend/scripts/cleanup_old_data.py
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from autoresponder.config import get_settings
from autoresponder.db.session import SessionLocal
from autoresponder.services.housekeeping import cleanup_old_data


def main() -> None:
    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    with SessionLocal() as db:
        report = cleanup_old_data(db)

    print("Cleanup complete")
    print(f"history_deleted={report.history_deleted}")
    print(f"system_logs_deleted={report.system_logs_deleted}")
    print(f"webhook_events_deleted={report.webhook_events_deleted}")


if __name__ == "__main__":
    main()
