# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field

from leave_engine.models.enums import HalfDayPeriod, LeaveStatus

# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------


class CreateLeaveRequestPayload(BaseModel):
    """Request body for submitting a leave request.

    Leave type, dates and category stay plain strings so the validator can
    report them with domain errors instead of a generic 422.
    """

    employee_id: str = Field(min_length=1, max_length=255)
    leave_type: str
    start_date: str
    end_date: str
    reason: str | None = Field(default=None, max_length=2000)
    is_half_day: bool = False
    half_day_period: HalfDayPeriod | None = None
    category: str | None = None


class DecisionPayload(BaseModel):
    """Request body for processing a pending request."""

    decision: str
    notes: str | None = Field(default=None, max_length=1000)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class LeaveRequestResponse(BaseModel):
    """A single ledger entry."""

    id: uuid.UUID
    employee_id: str
    leave_type: str
    start_date: date
    end_date: date
    days: float
    is_half_day: bool
    half_day_period: HalfDayPeriod | None
    category: str
    status: LeaveStatus
    reason: str | None
    assigned_to: str | None
    requested_at: datetime
    processed_at: datetime | None
    processed_by: str | None
    admin_notes: str | None


class LeaveRequestListResponse(BaseModel):
    items: list[LeaveRequestResponse]
    total: int
