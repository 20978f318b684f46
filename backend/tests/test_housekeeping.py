"""Tests for the retention cleanup job."""

from __future__ import annotations

import unittest
from datetime import timedelta

from sqlalchemy import create_engine, delete, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from autoresponder.models.base import Base, utcnow
from autoresponder.models.message_history import MessageHistory
from autoresponder.models.system_log import SystemLog
from autoresponder.models.webhook_event import WebhookEvent
from autoresponder.services.housekeeping import cleanup_old_data


class HousekeepingTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.engine = create_engine(
            "sqlite+pysqlite:///:memory:",
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        cls.SessionLocal = sessionmaker(bind=cls.engine, autoflush=False, autocommit=False, future=True)
        Base.metadata.create_all(cls.engine)

    @classmethod
    def tearDownClass(cls) -> None:
        Base.metadata.drop_all(cls.engine)
        cls.engine.dispose()

    def setUp(self) -> None:
        self.db: Session = self.SessionLocal()
        for model in (MessageHistory, SystemLog, WebhookEvent):
            self.db.execute(delete(model))
        self.db.commit()

    def tearDown(self) -> None:
        self.db.close()

    def _history(self, message_id: str, age: timedelta) -> MessageHistory:
        return MessageHistory(
            owner_id=1,
            channel_id="P1",
            message_id=message_id,
            sender_id="U1",
            source_kind="none",
            elapsed_ms=0,
            processed_at=self.now - age,
        )

    def test_rows_past_retention_are_deleted(self) -> None:
        self.now = utcnow()
        self.db.add_all(
            [
                self._history("old", timedelta(days=91)),
                self._history("recent", timedelta(days=5)),
                SystemLog(level="info", event_type="message_processed", message="old", created_at=self.now - timedelta(days=31)),
                SystemLog(level="info", event_type="message_processed", message="recent", created_at=self.now - timedelta(days=1)),
                WebhookEvent(channel_id="P1", event_kind="message", raw_payload={}, processed=True, created_at=self.now - timedelta(days=8)),
                WebhookEvent(channel_id="P1", event_kind="message", raw_payload={}, processed=False, retry_count=3, created_at=self.now - timedelta(days=8)),
                WebhookEvent(channel_id="P1", event_kind="message", raw_payload={}, processed=True, created_at=self.now - timedelta(days=1)),
            ]
        )
        self.db.commit()

        report = cleanup_old_data(self.db, now=self.now)

        self.assertEqual((report.history_deleted, report.system_logs_deleted, report.webhook_events_deleted), (1, 1, 1))
        self.assertEqual([row.message_id for row in self.db.scalars(select(MessageHistory))], ["recent"])
        self.assertEqual(len(self.db.scalars(select(WebhookEvent)).all()), 2)
        events = [row.event_type for row in self.db.scalars(select(SystemLog).order_by(SystemLog.id))]
        self.assertEqual(events, ["message_processed", "cleanup_completed"])


if __name__ == "__main__":
    unittest.main()
