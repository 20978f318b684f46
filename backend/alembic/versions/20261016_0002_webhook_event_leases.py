"""webhook event leases

Revision ID: 20261016_0002
Revises: 20261016_0001
Create Date: 2026-10-16 00:00:02
"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20261016_0002"
down_revision: str | None = "20261016_0001"
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    op.add_column("webhook_events", sa.Column("claim_token", sa.String(length=64), nullable=True))
    op.add_column("webhook_events", sa.Column("claimed_at", sa.DateTime(timezone=True), nullable=True))
    op.create_index(
        "ix_webhook_events_pending",
        "webhook_events",
        ["processed", "retry_count", "created_at"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_webhook_events_pending", table_name="webhook_events")
    op.drop_column("webhook_events", "claimed_at")
    op.drop_column("webhook_events", "claim_token")
