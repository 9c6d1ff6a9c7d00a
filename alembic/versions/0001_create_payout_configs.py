"""create payout_configs table

Revision ID: 0001_create_payout_configs
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""

from __future__ import annotations

from alembic import op


revision = "0001_create_payout_configs"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute("CREATE SCHEMA IF NOT EXISTS app;")
    op.execute("CREATE EXTENSION IF NOT EXISTS pgcrypto;")
    op.execute(
        """
        CREATE TABLE IF NOT EXISTS app.payout_configs (
            id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
            name text NOT NULL,
            phone text NOT NULL CHECK (phone ~ '^(254[0-9]{9}|0[0-9]{9})$'),
            payout_percentage numeric(5,2) NOT NULL CHECK (payout_percentage > 0 AND payout_percentage <= 100),
            payout_frequency text NOT NULL CHECK (payout_frequency IN ('weekly', 'monthly')),
            is_active boolean NOT NULL DEFAULT true,
            last_payout_date timestamptz,
            created_at timestamptz NOT NULL DEFAULT now(),
            updated_at timestamptz NOT NULL DEFAULT now()
        );
        """
    )
    op.execute(
        """
        CREATE INDEX IF NOT EXISTS payout_configs_active_order_idx
        ON app.payout_configs (created_at, id)
        WHERE is_active;
        """
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS app.payout_configs;")
