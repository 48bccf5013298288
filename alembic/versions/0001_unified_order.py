"""unified_order and order_sync_failures

Revision ID: 0001_unified_order
Revises:
Create Date: 2026-10-19 00:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_unified_order"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "unified_order",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("order_no", sa.String(length=64), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("order_type", sa.String(length=20), nullable=False),
        sa.Column("module_order_id", sa.Integer(), nullable=True),
        sa.Column("order_title", sa.String(length=255), nullable=False),
        sa.Column("order_description", sa.Text(), nullable=True),
        sa.Column("total_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("payment_status", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("payment_method", sa.String(length=32), nullable=True),
        sa.Column("payment_time", sa.DateTime(), nullable=True),
        sa.Column("create_time", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("update_time", sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index("ix_unified_order_order_no", "unified_order", ["order_no"], unique=True)
    op.create_index("ix_unified_order_user_id", "unified_order", ["user_id"])
    op.create_index(
        "ix_unified_order_module_lookup",
        "unified_order",
        ["module_order_id", "order_type", "payment_status"],
    )

    op.create_table(
        "order_sync_failures",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("order_no", sa.String(length=64), nullable=False),
        sa.Column("order_type", sa.String(length=20), nullable=False),
        sa.Column("module_order_id", sa.Integer(), nullable=False),
        sa.Column("action", sa.String(length=20), nullable=False),
        sa.Column("error", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index("ix_order_sync_failures_order_no", "order_sync_failures", ["order_no"])


def downgrade() -> None:
    op.drop_index("ix_order_sync_failures_order_no", table_name="order_sync_failures")
    op.drop_table("order_sync_failures")
    op.drop_index("ix_unified_order_module_lookup", table_name="unified_order")
    op.drop_index("ix_unified_order_user_id", table_name="unified_order")
    op.drop_index("ix_unified_order_order_no", table_name="unified_order")
    op.drop_table("unified_order")
