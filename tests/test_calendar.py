"""Tests for approved-leave dates and the team leave calendar."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from leave_engine.models.enums import LeaveStatus
from leave_engine.models.request import LeaveRequest

if TYPE_CHECKING:
    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession


async def _leave(
    session: AsyncSession,
    employee_id: str,
    start: date,
    end: date,
    status: LeaveStatus = LeaveStatus.APPROVED,
    is_half_day: bool = False,
) -> LeaveRequest:
    leave_request = LeaveRequest(
        employee_id=employee_id,
        employee_uid=employee_id,
        leave_type="annual",
        start_date=start,
        end_date=end,
        days=0.5 if is_half_day else 1.0,
        is_half_day=is_half_day,
        half_day_period="morning" if is_half_day else None,
        category="engineering",
        status=status.value,
        reason="Time off",
    )
    session.add(leave_request)
    await session.commit()
    return leave_request


async def test_leave_dates_cover_approved_weekdays_only(async_client: AsyncClient, db_session: AsyncSession) -> None:
    await _leave(db_session, "emp-alice", date(2026, 3, 6), date(2026, 3, 9))
    await _leave(db_session, "emp-alice", date(2026, 3, 2), date(2026, 3, 2))
    await _leave(db_session, "emp-alice", date(2026, 3, 3), date(2026, 3, 3), LeaveStatus.PENDING)
    await _leave(db_session, "emp-alice", date(2026, 3, 4), date(2026, 3, 4), LeaveStatus.REJECTED)

    resp = await async_client.get("/employees/emp-alice/leave-dates", headers={"X-User-Id": "emp-alice"})
    assert resp.status_code == 200
    assert resp.json() == {"employee_id": "emp-alice", "dates": ["2026-03-02", "2026-03-06", "2026-03-09"]}


async def test_leave_dates_are_deduplicated(async_client: AsyncClient, db_session: AsyncSession) -> None:
    await _leave(db_session, "emp-alice", date(2026, 3, 2), date(2026, 3, 3))
    await _leave(db_session, "emp-alice", date(2026, 3, 3), date(2026, 3, 3), is_half_day=True)
    resp = await async_client.get("/employees/emp-alice/leave-dates", headers={"X-User-Id": "emp-alice"})
    assert resp.json()["dates"] == ["2026-03-02", "2026-03-03"]


async def test_leave_dates_hidden_from_other_departments(async_client: AsyncClient, db_session: AsyncSession) -> None:
    await _leave(db_session, "emp-alice", date(2026, 3, 2), date(2026, 3, 2))
    url = "/employees/emp-alice/leave-dates"
    assert (await async_client.get(url, headers={"X-User-Id": "mgr-hr"})).status_code == 403
    assert (await async_client.get(url, headers={"X-User-Id": "emp-bob"})).status_code == 403
    resp = await async_client.get(url, headers={"X-User-Id": "mgr-eng"})
    assert resp.json()["dates"] == ["2026-03-02"]


async def test_calendar_for_manager_covers_department(async_client: AsyncClient, db_session: AsyncSession) -> None:
    alice = await _leave(db_session, "emp-alice", date(2026, 3, 5), date(2026, 3, 6))
    await _leave(db_session, "emp-bob", date(2026, 3, 5), date(2026, 3, 5))
    own = await _leave(db_session, "mgr-eng", date(2026, 3, 6), date(2026, 3, 6))

    resp = await async_client.get("/leave-calendar", headers={"X-User-Id": "mgr-eng"})
    assert resp.status_code == 200
    days = resp.json()["days"]
    assert list(days) == ["2026-03-05", "2026-03-06"]
    assert [e["request_id"] for e in days["2026-03-05"]] == [str(alice.id)]
    assert {e["request_id"] for e in days["2026-03-06"]} == {str(alice.id), str(own.id)}
    assert days["2026-03-05"][0]["employee_name"] == "Alice Able"


async def test_calendar_for_employee_shows_own_leave_only(async_client: AsyncClient, db_session: AsyncSession) -> None:
    await _leave(db_session, "emp-alice", date(2026, 3, 5), date(2026, 3, 5))
    await _leave(db_session, "emp-carol", date(2026, 3, 5), date(2026, 3, 5))
    days = (await async_client.get("/leave-calendar", headers={"X-User-Id": "emp-alice"})).json()["days"]
    assert [e["employee_id"] for e in days["2026-03-05"]] == ["emp-alice"]


async def test_calendar_for_super_admin_covers_everyone(async_client: AsyncClient, db_session: AsyncSession) -> None:
    await _leave(db_session, "emp-alice", date(2026, 3, 5), date(2026, 3, 5))
    await _leave(db_session, "emp-bob", date(2026, 3, 5), date(2026, 3, 5))
    await _leave(db_session, "ex-employee", date(2026, 3, 5), date(2026, 3, 5))
    days = (await async_client.get("/leave-calendar", headers={"X-User-Id": "admin-1"})).json()["days"]
    entries = {e["employee_id"]: e["employee_name"] for e in days["2026-03-05"]}
    assert entries == {"emp-alice": "Alice Able", "emp-bob": "Bob Benefits", "ex-employee": "Unknown"}


async def test_calendar_window(async_client: AsyncClient, db_session: AsyncSession) -> None:
    await _leave(db_session, "emp-alice", date(2026, 3, 2), date(2026, 3, 13))
    resp = await async_client.get(
        "/leave-calendar",
        params={"start": "2026-03-05", "end": "2026-03-09"},
        headers={"X-User-Id": "emp-alice"},
    )
    assert list(resp.json()["days"]) == ["2026-03-05", "2026-03-06", "2026-03-09"]


async def test_calendar_window_reversed(async_client: AsyncClient) -> None:
    resp = await async_client.get(
        "/leave-calendar",
        params={"start": "2026-03-09", "end": "2026-03-05"},
        headers={"X-User-Id": "emp-alice"},
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "DateOrderViolation"
