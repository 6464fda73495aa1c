"""invoices table

Revision ID: 20261019_000001
Revises:
Create Date: 2026-10-19

One row per stored extraction result, owned by the uploading user.
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision = "20261019_000001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "invoices",
        sa.Column("id", postgresql.UUID(as_uuid=True), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("file_url", sa.Text(), nullable=False),
        sa.Column("vendor", sa.Text(), nullable=True),
        sa.Column("invoice_date", sa.String(32), nullable=True),
        sa.Column("amount", sa.Numeric(18, 4), nullable=True),
        sa.Column("amount_text", sa.Text(), nullable=True),
        sa.Column("currency", sa.CHAR(3), nullable=True),
        sa.Column("confidence", sa.SmallInteger(), nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint("confidence BETWEEN 0 AND 100", name="chk_invoice_confidence"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_invoices_user_created", "invoices", ["user_id", "created_at"])


def downgrade() -> None:
    op.drop_index("idx_invoices_user_created", table_name="invoices")
    op.drop_table("invoices")
