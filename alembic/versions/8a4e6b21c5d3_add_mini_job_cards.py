"""add mini job cards

Revision ID: 8a4e6b21c5d3
Revises: 3f1c2a7d9b10
Create Date: 2026-09-14 10:40:07.551902

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8a4e6b21c5d3'
down_revision: Union[str, Sequence[str], None] = '3f1c2a7d9b10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "mini_job_cards",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column("job_card_id", sa.String(), nullable=False),
        sa.Column("employee_id", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="PENDING"),
        sa.Column("work_date", sa.Date(), nullable=False),
        sa.Column("time", sa.Time(), nullable=True),
        sa.Column("location", sa.String(), nullable=True),
        sa.Column("last_status_change_at", sa.DateTime(), nullable=False),
        sa.Column("spent_on_hold_minutes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("spent_assigned_minutes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("spent_in_progress_minutes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["job_card_id"], ["job_cards.id"], name="fk_mini_job_cards_job_card_id"),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"], name="fk_mini_job_cards_employee_id"),
        sa.CheckConstraint(
            "status IN ('PENDING', 'ASSIGNED', 'IN_PROGRESS', 'ON_HOLD', 'COMPLETED', 'CANCELLED')",
            name="ck_mini_job_cards_status",
        ),
        sa.CheckConstraint("spent_on_hold_minutes >= 0", name="ck_mini_job_cards_on_hold_nonneg"),
        sa.CheckConstraint("spent_assigned_minutes >= 0", name="ck_mini_job_cards_assigned_nonneg"),
        sa.CheckConstraint("spent_in_progress_minutes >= 0", name="ck_mini_job_cards_in_progress_nonneg"),
    )
    op.create_index("ix_mini_job_cards_id", "mini_job_cards", ["id"], unique=False)
    op.create_index("ix_mini_job_cards_job_card_id", "mini_job_cards", ["job_card_id"], unique=False)
    op.create_index("ix_mini_job_cards_employee_id", "mini_job_cards", ["employee_id"], unique=False)
    op.create_index("ix_mini_job_cards_status", "mini_job_cards", ["status"], unique=False)
    op.create_index(
        "ix_mini_job_cards_employee_date",
        "mini_job_cards",
        ["employee_id", "work_date"],
        unique=False,
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_mini_job_cards_employee_date", table_name="mini_job_cards")
    op.drop_index("ix_mini_job_cards_status", table_name="mini_job_cards")
    op.drop_index("ix_mini_job_cards_employee_id", table_name="mini_job_cards")
    op.drop_index("ix_mini_job_cards_job_card_id", table_name="mini_job_cards")
    op.drop_index("ix_mini_job_cards_id", table_name="mini_job_cards")
    op.drop_table("mini_job_cards")
