"""Balance calculator.

Balances are always derived from the ledger: entitlement comes from the
policy store and ``used`` is the sum of approved days. The snapshot table is
an advisory copy refreshed on ledger writes and doubles as the per
(employee, leave type) row lock; it is never read as the authority.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import col

from leave_engine.exceptions import PersistenceFailure
from leave_engine.models.balance import LeaveBalanceSnapshot
from leave_engine.models.enums import LeaveStatus, LeaveType
from leave_engine.models.request import LeaveRequest
from leave_engine.schemas.balance import BalanceListResponse, EmployeeBalanceResponse, LeaveTypeBalance
from leave_engine.services.policy import get_entitlement

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from leave_engine.services.directory import EmployeeDirectory

logger = logging.getLogger(__name__)


async def _sum_days_by_type(
    session: AsyncSession,
    employee_id: str,
    status: LeaveStatus,
) -> dict[LeaveType, float]:
    result = await session.execute(
        select(
            col(LeaveRequest.leave_type),
            func.coalesce(func.sum(col(LeaveRequest.days)), 0).label("days"),
        )
        .where(
            col(LeaveRequest.employee_id) == employee_id,
            col(LeaveRequest.status) == status.value,
        )
        .group_by(col(LeaveRequest.leave_type))
    )
    totals = dict.fromkeys(LeaveType, 0.0)
    for leave_type, days in result.all():
        totals[LeaveType(leave_type)] = float(days)
    return totals


async def compute_balance(session: AsyncSession, employee_id: str) -> dict[LeaveType, LeaveTypeBalance]:
    """Entitlement, used and remaining days per leave type.

    Read-only and idempotent. ``remaining`` is clamped at zero while
    ``used`` keeps the true sum for audit.
    """
    entitlement, _ = await get_entitlement(session, employee_id)
    used = await _sum_days_by_type(session, employee_id, LeaveStatus.APPROVED)
    return {
        leave_type: LeaveTypeBalance(
            entitlement=float(entitlement[leave_type]),
            used=used[leave_type],
            remaining=max(0.0, entitlement[leave_type] - used[leave_type]),
        )
        for leave_type in LeaveType
    }


async def get_balance(session: AsyncSession, employee_id: str) -> EmployeeBalanceResponse:
    """Balance view for all three leave types of one employee."""
    _, is_custom = await get_entitlement(session, employee_id)
    balance = await compute_balance(session, employee_id)
    return EmployeeBalanceResponse(
        employee_id=employee_id,
        annual=balance[LeaveType.ANNUAL],
        sick=balance[LeaveType.SICK],
        casual=balance[LeaveType.CASUAL],
        is_custom=is_custom,
    )


async def list_balances(session: AsyncSession, directory: EmployeeDirectory) -> BalanceListResponse:
    """Balances of every active employee in the directory, ordered by id."""
    employees = sorted(await directory.list_employees(), key=lambda e: e.id)
    items = [await get_balance(session, employee.id) for employee in employees]
    return BalanceListResponse(items=items, total=len(items))


# ---------------------------------------------------------------------------
# Snapshot maintenance (write path only)
# ---------------------------------------------------------------------------


async def _select_snapshot_for_update(
    session: AsyncSession,
    employee_id: str,
    leave_type: LeaveType,
) -> LeaveBalanceSnapshot | None:
    result = await session.execute(
        select(LeaveBalanceSnapshot)
        .where(
            col(LeaveBalanceSnapshot.employee_id) == employee_id,
            col(LeaveBalanceSnapshot.leave_type) == leave_type.value,
        )
        .with_for_update()
    )
    return result.scalar_one_or_none()


async def lock_balance_snapshot(
    session: AsyncSession,
    employee_id: str,
    leave_type: LeaveType,
) -> LeaveBalanceSnapshot:
    """Get the snapshot row with a FOR UPDATE lock, creating it if absent.

    Holding this lock serializes validate+create and approve for the same
    employee and leave type. Two writers may both miss the row on first use;
    the loser of the insert race locks the winner's row instead.
    """
    snapshot = await _select_snapshot_for_update(session, employee_id, leave_type)
    if snapshot is not None:
        return snapshot

    # Insert inside a savepoint so that a duplicate IntegrityError
    # only rolls back this insert, not the outer transaction.
    snapshot = LeaveBalanceSnapshot(employee_id=employee_id, leave_type=leave_type.value)
    try:
        async with session.begin_nested():
            session.add(snapshot)
            await session.flush()
    except IntegrityError:
        logger.info("Snapshot %s/%s created concurrently; locking existing row", employee_id, leave_type.value)
        existing = await _select_snapshot_for_update(session, employee_id, leave_type)
        if existing is None:
            raise PersistenceFailure from None
        return existing
    except SQLAlchemyError as exc:
        logger.exception("Snapshot insert failed; rolling back")
        await session.rollback()
        raise PersistenceFailure from exc

    await reconcile_snapshot(session, snapshot)
    return snapshot


async def reconcile_snapshot(session: AsyncSession, snapshot: LeaveBalanceSnapshot) -> LeaveBalanceSnapshot:
    """Overwrite the snapshot with values recomputed from the ledger."""
    leave_type = LeaveType(snapshot.leave_type)
    balance = (await compute_balance(session, snapshot.employee_id))[leave_type]
    pending = await _sum_days_by_type(session, snapshot.employee_id, LeaveStatus.PENDING)
    snapshot.entitlement_days = balance.entitlement
    snapshot.used_days = balance.used
    snapshot.pending_days = pending[leave_type]
    snapshot.remaining_days = balance.remaining
    snapshot.version += 1
    await session.flush()
    return snapshot
