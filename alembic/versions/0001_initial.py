"""Leave ledger, policy store, balance snapshot and audit log.

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "leave_request",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("employee_id", sa.String(length=255), nullable=False),
        sa.Column("employee_uid", sa.String(length=255), nullable=False),
        sa.Column("leave_type", sa.String(length=20), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("days", sa.Float(), nullable=False),
        sa.Column("is_half_day", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("half_day_period", sa.String(length=20), nullable=True),
        sa.Column("category", sa.String(length=50), nullable=False),
        sa.Column("status", sa.String(length=20), server_default="pending", nullable=False),
        sa.Column("reason", sa.String(), nullable=True),
        sa.Column("assigned_to", sa.String(length=255), nullable=True),
        sa.Column("requested_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("processed_by", sa.String(length=255), nullable=True),
        sa.Column("admin_notes", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("start_date <= end_date", name="ck_leave_request_date_order"),
        sa.CheckConstraint("NOT is_half_day OR start_date = end_date", name="ck_leave_request_half_day_single_date"),
    )
    op.create_index("ix_leave_request_employee_id", "leave_request", ["employee_id"])
    op.create_index("ix_leave_request_status", "leave_request", ["status"])
    op.create_index("ix_leave_request_assigned_to", "leave_request", ["assigned_to"])
    op.create_index(
        "ix_leave_request_employee_type_status", "leave_request", ["employee_id", "leave_type", "status"]
    )

    op.create_table(
        "leave_policy_defaults",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("annual", sa.Integer(), nullable=False),
        sa.Column("sick", sa.Integer(), nullable=False),
        sa.Column("casual", sa.Integer(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_by", sa.String(length=255), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("annual >= 0 AND sick >= 0 AND casual >= 0", name="ck_policy_defaults_non_negative"),
    )

    op.create_table(
        "leave_policy_override",
        sa.Column("employee_id", sa.String(length=255), nullable=False),
        sa.Column("annual", sa.Integer(), nullable=False),
        sa.Column("sick", sa.Integer(), nullable=False),
        sa.Column("casual", sa.Integer(), nullable=False),
        sa.Column("is_custom", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("employee_id"),
        sa.CheckConstraint("annual >= 0 AND sick >= 0 AND casual >= 0", name="ck_policy_override_non_negative"),
    )

    op.create_table(
        "leave_balance_snapshot",
        sa.Column("employee_id", sa.String(length=255), nullable=False),
        sa.Column("leave_type", sa.String(length=20), nullable=False),
        sa.Column("entitlement_days", sa.Float(), server_default="0", nullable=False),
        sa.Column("used_days", sa.Float(), server_default="0", nullable=False),
        sa.Column("pending_days", sa.Float(), server_default="0", nullable=False),
        sa.Column("remaining_days", sa.Float(), server_default="0", nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("version", sa.Integer(), server_default="1", nullable=False),
        sa.PrimaryKeyConstraint("employee_id", "leave_type"),
    )

    op.create_table(
        "audit_log",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("actor", sa.String(length=255), nullable=False),
        sa.Column("entity_type", sa.String(length=50), nullable=False),
        sa.Column("entity_id", sa.String(length=255), nullable=False),
        sa.Column("action", sa.String(length=50), nullable=False),
        sa.Column("before_json", sa.JSON(), nullable=True),
        sa.Column("after_json", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_audit_entity", "audit_log", ["entity_type", "entity_id"])


def downgrade() -> None:
    op.drop_index("ix_audit_entity", table_name="audit_log")
    op.drop_table("audit_log")
    op.drop_table("leave_balance_snapshot")
    op.drop_table("leave_policy_override")
    op.drop_table("leave_policy_defaults")
    op.drop_index("ix_leave_request_employee_type_status", table_name="leave_request")
    op.drop_index("ix_leave_request_assigned_to", table_name="leave_request")
    op.drop_index("ix_leave_request_status", table_name="leave_request")
    op.drop_index("ix_leave_request_employee_id", table_name="leave_request")
    op.drop_table("leave_request")
