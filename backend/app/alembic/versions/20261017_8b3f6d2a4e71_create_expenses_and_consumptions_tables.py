"""create expenses and consumptions tables

Revision ID: 8b3f6d2a4e71
Revises: 5d2e8f1a9c3b
Create Date: 2026-10-17 09:40:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "8b3f6d2a4e71"
down_revision = "5d2e8f1a9c3b"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "expenses",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("agent_id", sa.String(length=255), nullable=False),
        sa.Column("amount", sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column("payment_method", sa.String(length=20), nullable=False),
        sa.Column("commentary", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=True,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_expenses_agent_id"), "expenses", ["agent_id"], unique=False)

    op.create_table(
        "consumptions",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("agent_id", sa.String(length=255), nullable=False),
        sa.Column("amount", sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column("payment_method", sa.String(length=20), nullable=False),
        sa.Column("commentary", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=True,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_consumptions_agent_id"), "consumptions", ["agent_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_consumptions_agent_id"), table_name="consumptions")
    op.drop_table("consumptions")
    op.drop_index(op.f("ix_expenses_agent_id"), table_name="expenses")
    op.drop_table("expenses")
