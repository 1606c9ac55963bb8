# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import date

from pydantic import BaseModel

from leave_engine.models.enums import HalfDayPeriod


class LeaveDatesResponse(BaseModel):
    """Weekday dates covered by an employee's approved leave."""

    employee_id: str
    dates: list[date]


class CalendarEntry(BaseModel):
    request_id: uuid.UUID
    employee_id: str
    employee_name: str
    leave_type: str
    reason: str | None
    days: float
    start_date: date
    end_date: date
    is_half_day: bool
    half_day_period: HalfDayPeriod | None


class LeaveCalendarResponse(BaseModel):
    days: dict[date, list[CalendarEntry]]
