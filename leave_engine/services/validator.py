"""Admission rules for new leave requests.

Rules run in a fixed order and stop at the first failure:

1. leave type is one of annual / sick / casual
2. both dates parse as ``YYYY-MM-DD``
3. a half day starts and ends on the same date
4. start date is not after end date
5. days = 0.5 for a half day, else the weekday count of the range
6. days do not exceed the remaining balance for the leave type

Rules 1-5 are pure; rule 6 reads the balance calculator and nothing else.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING

from leave_engine.exceptions import (
    DateOrderViolation,
    HalfDayRangeViolation,
    InsufficientBalance,
    InvalidLeaveType,
)
from leave_engine.models.enums import HalfDayPeriod, LeaveType
from leave_engine.services.balance import compute_balance
from leave_engine.services.duration import leave_days, parse_date

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


@dataclass(frozen=True)
class LeaveDraft:
    """A request that passed the shape rules, with its consumed days computed."""

    leave_type: LeaveType
    start_date: date
    end_date: date
    days: float
    is_half_day: bool
    half_day_period: HalfDayPeriod | None


def check_request_shape(
    leave_type: str,
    start_date: str,
    end_date: str,
    is_half_day: bool = False,
    half_day_period: HalfDayPeriod | str | None = None,
) -> LeaveDraft:
    """Apply rules 1-5. Raises the first violated rule's error."""
    try:
        parsed_type = LeaveType(leave_type)
    except ValueError:
        raise InvalidLeaveType(leave_type) from None

    start = parse_date(start_date)
    end = parse_date(end_date)

    if is_half_day and start != end:
        raise HalfDayRangeViolation
    if start > end:
        raise DateOrderViolation

    period = None
    if is_half_day:
        period = HalfDayPeriod(half_day_period) if half_day_period else HalfDayPeriod.MORNING

    return LeaveDraft(
        leave_type=parsed_type,
        start_date=start,
        end_date=end,
        days=leave_days(start, end, is_half_day=is_half_day),
        is_half_day=is_half_day,
        half_day_period=period,
    )


async def check_sufficiency(
    session: AsyncSession,
    employee_id: str,
    leave_type: LeaveType,
    days: float,
) -> None:
    """Apply rule 6 against the current ledger."""
    balance = await compute_balance(session, employee_id)
    available = balance[leave_type].remaining
    if days > available:
        raise InsufficientBalance(leave_type.value, available=available, requested=days)


async def validate_leave_request(
    session: AsyncSession,
    employee_id: str,
    leave_type: str,
    start_date: str,
    end_date: str,
    is_half_day: bool = False,
    half_day_period: HalfDayPeriod | str | None = None,
) -> LeaveDraft:
    """Run every admission rule for ``employee_id``. No side effects."""
    draft = check_request_shape(leave_type, start_date, end_date, is_half_day, half_day_period)
    await check_sufficiency(session, employee_id, draft.leave_type, draft.days)
    return draft
