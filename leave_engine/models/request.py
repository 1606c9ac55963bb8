# ruff: noqa: TC003
from __future__ import annotations

from datetime import date, datetime

import sqlalchemy as sa
from sqlmodel import Field

from leave_engine.models.base import UUIDBase, created_at_field
from leave_engine.models.enums import LeaveStatus


class LeaveRequest(UUIDBase, table=True):
    """Ledger row for one leave request; the source of truth for consumed leave.

    Only ``status`` and the processing audit fields ever change, and only
    once, on the transition out of PENDING.
    """

    __tablename__ = "leave_request"
    __table_args__ = (
        sa.Index("ix_leave_request_employee_type_status", "employee_id", "leave_type", "status"),
        sa.CheckConstraint("start_date <= end_date", name="ck_leave_request_date_order"),
        sa.CheckConstraint("NOT is_half_day OR start_date = end_date", name="ck_leave_request_half_day_single_date"),
    )

    employee_id: str = Field(max_length=255, index=True)
    employee_uid: str = Field(max_length=255)
    leave_type: str = Field(max_length=20)
    start_date: date
    end_date: date
    days: float
    is_half_day: bool = Field(default=False, sa_column_kwargs={"server_default": sa.false()})
    half_day_period: str | None = Field(default=None, max_length=20)
    category: str = Field(max_length=50)
    status: str = Field(
        default=LeaveStatus.PENDING, max_length=20, index=True, sa_column_kwargs={"server_default": "pending"}
    )
    reason: str | None = None
    assigned_to: str | None = Field(default=None, max_length=255, index=True)
    requested_at: datetime = created_at_field()
    processed_at: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
    processed_by: str | None = Field(default=None, max_length=255)
    admin_notes: str | None = None
