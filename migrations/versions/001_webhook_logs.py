"""webhook_logs audit table (SQL-only).

Revision ID: 001_webhook_logs
Revises:
Create Date: 2026-10-17
"""

from __future__ import annotations

from alembic import op


# revision identifiers, used by Alembic.
revision = "001_webhook_logs"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute(
        """
        CREATE TABLE IF NOT EXISTS webhook_logs (
            id                  BIGSERIAL PRIMARY KEY,
            created_at          TIMESTAMPTZ NOT NULL DEFAULT now(),
            status              TEXT,
            order_number        TEXT,
            message_template    TEXT,
            purchase_date       TEXT,
            tracking_url        TEXT,
            note                TEXT,
            webhook_payload     JSONB NOT NULL,
            blip_payload        JSONB,
            blip_response       JSONB,
            vtex_order_payload  JSONB,
            error_message       TEXT,
            error_stack         TEXT
        )
        """
    )
    op.execute(
        """
        CREATE INDEX IF NOT EXISTS ix_webhook_logs_order_template
            ON webhook_logs (order_number, message_template)
        """
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS webhook_logs")
