# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Query

from leave_engine.api.deps import ActorDep, DirectoryDep, EmployeeViewerDep
from leave_engine.db import SessionDep
from leave_engine.exceptions import DateOrderViolation
from leave_engine.schemas.calendar import LeaveCalendarResponse, LeaveDatesResponse
from leave_engine.services import calendar as calendar_service

leave_dates_router = APIRouter(prefix="/employees/{employee_id}/leave-dates", tags=["calendar"])

calendar_router = APIRouter(prefix="/leave-calendar", tags=["calendar"])


@leave_dates_router.get("", response_model=LeaveDatesResponse)
async def get_leave_dates(
    employee_id: str,
    session: SessionDep,
    _viewer: EmployeeViewerDep,
) -> LeaveDatesResponse:
    """Weekday dates covered by the employee's approved leave."""
    return await calendar_service.get_approved_leave_dates(session, employee_id)


@calendar_router.get("", response_model=LeaveCalendarResponse)
async def get_leave_calendar(
    session: SessionDep,
    directory: DirectoryDep,
    actor: ActorDep,
    start: date | None = Query(default=None),
    end: date | None = Query(default=None),
) -> LeaveCalendarResponse:
    """Approved absences by day for the caller and the people they manage."""
    if start is not None and end is not None and start > end:
        raise DateOrderViolation
    return await calendar_service.get_leave_calendar(session, directory, actor, start, end)
