"""Read-only views of approved leave laid out on the calendar."""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from leave_engine.models.enums import HalfDayPeriod, LeaveStatus
from leave_engine.models.request import LeaveRequest
from leave_engine.schemas.calendar import CalendarEntry, LeaveCalendarResponse, LeaveDatesResponse
from leave_engine.services.authorization import can_manage, lookup_employee
from leave_engine.services.duration import iter_weekdays

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from leave_engine.services.directory import EmployeeDirectory, EmployeeInfo


async def _approved_requests(
    session: AsyncSession,
    employee_id: str | None = None,
    start: date | None = None,
    end: date | None = None,
) -> list[LeaveRequest]:
    query = select(LeaveRequest).where(col(LeaveRequest.status) == LeaveStatus.APPROVED.value)
    if employee_id is not None:
        query = query.where(col(LeaveRequest.employee_id) == employee_id)
    if start is not None:
        query = query.where(col(LeaveRequest.end_date) >= start)
    if end is not None:
        query = query.where(col(LeaveRequest.start_date) <= end)
    result = await session.execute(query.order_by(col(LeaveRequest.start_date)))
    return list(result.scalars().all())


async def get_approved_leave_dates(session: AsyncSession, employee_id: str) -> LeaveDatesResponse:
    """Sorted weekday dates covered by the employee's approved leave."""
    dates: set[date] = set()
    for leave_request in await _approved_requests(session, employee_id):
        dates.update(iter_weekdays(leave_request.start_date, leave_request.end_date))
    return LeaveDatesResponse(employee_id=employee_id, dates=sorted(dates))


async def get_leave_calendar(
    session: AsyncSession,
    directory: EmployeeDirectory,
    actor: EmployeeInfo,
    start: date | None = None,
    end: date | None = None,
) -> LeaveCalendarResponse:
    """Approved absences per weekday for the actor and everyone they can manage.

    Dates outside ``[start, end]`` are dropped when bounds are given.
    """
    people: dict[str, EmployeeInfo | None] = {}
    days: dict[date, list[CalendarEntry]] = defaultdict(list)

    for leave_request in await _approved_requests(session, start=start, end=end):
        if leave_request.employee_id not in people:
            people[leave_request.employee_id] = await lookup_employee(directory, leave_request.employee_id)
        employee = people[leave_request.employee_id]
        if leave_request.employee_id != actor.id and not can_manage(actor, employee):
            continue

        entry = CalendarEntry(
            request_id=leave_request.id,
            employee_id=leave_request.employee_id,
            employee_name=employee.name if employee else "Unknown",
            leave_type=leave_request.leave_type,
            reason=leave_request.reason,
            days=leave_request.days,
            start_date=leave_request.start_date,
            end_date=leave_request.end_date,
            is_half_day=leave_request.is_half_day,
            half_day_period=HalfDayPeriod(leave_request.half_day_period) if leave_request.half_day_period else None,
        )
        for day in iter_weekdays(leave_request.start_date, leave_request.end_date):
            if (start is None or day >= start) and (end is None or day <= end):
                days[day].append(entry)

    return LeaveCalendarResponse(days=dict(sorted(days.items())))
