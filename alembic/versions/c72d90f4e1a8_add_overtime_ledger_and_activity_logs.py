"""add overtime ledger and activity logs

Revision ID: c72d90f4e1a8
Revises: 8a4e6b21c5d3
Create Date: 2026-09-16 15:03:22.904117

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'c72d90f4e1a8'
down_revision: Union[str, Sequence[str], None] = '8a4e6b21c5d3'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "overtime_ledger_entries",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("employee_id", sa.Integer(), nullable=False),
        sa.Column("work_date", sa.Date(), nullable=False),
        sa.Column("first_time", sa.Time(), nullable=False),
        sa.Column("last_time", sa.Time(), nullable=False),
        sa.Column("current_status", sa.String(), nullable=True),
        sa.Column("last_status", sa.String(), nullable=True),
        sa.Column("status_change_time", sa.DateTime(), nullable=True),
        sa.Column("spent_on_hold_minutes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("spent_assigned_minutes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("spent_in_progress_minutes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("morning_ot_minutes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("evening_ot_minutes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("locations", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"], name="fk_overtime_ledger_employee_id"),
        sa.UniqueConstraint("employee_id", "work_date", name="uq_overtime_ledger_employee_date"),
        sa.CheckConstraint("spent_on_hold_minutes >= 0", name="ck_overtime_ledger_on_hold_nonneg"),
        sa.CheckConstraint("spent_assigned_minutes >= 0", name="ck_overtime_ledger_assigned_nonneg"),
        sa.CheckConstraint("spent_in_progress_minutes >= 0", name="ck_overtime_ledger_in_progress_nonneg"),
        sa.CheckConstraint(
            "morning_ot_minutes BETWEEN 0 AND 1439",
            name="ck_overtime_ledger_morning_ot_range",
        ),
        sa.CheckConstraint(
            "evening_ot_minutes BETWEEN 0 AND 1439",
            name="ck_overtime_ledger_evening_ot_range",
        ),
    )
    op.create_index(
        "ix_overtime_ledger_entries_employee_id",
        "overtime_ledger_entries",
        ["employee_id"],
        unique=False,
    )
    op.create_index(
        "ix_overtime_ledger_entries_work_date",
        "overtime_ledger_entries",
        ["work_date"],
        unique=False,
    )

    op.create_table(
        "activity_logs",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("employee_id", sa.Integer(), nullable=False),
        sa.Column("action", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("location", sa.String(), nullable=True),
        sa.Column("generator_name", sa.String(), nullable=True),
        sa.Column("log_date", sa.Date(), nullable=False),
        sa.Column("log_time", sa.Time(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"], name="fk_activity_logs_employee_id"),
    )
    op.create_index(
        "ix_activity_logs_employee_date",
        "activity_logs",
        ["employee_id", "log_date"],
        unique=False,
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_activity_logs_employee_date", table_name="activity_logs")
    op.drop_table("activity_logs")

    op.drop_index("ix_overtime_ledger_entries_work_date", table_name="overtime_ledger_entries")
    op.drop_index("ix_overtime_ledger_entries_employee_id", table_name="overtime_ledger_entries")
    op.drop_table("overtime_ledger_entries")
