# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import select, update
from sqlmodel import col

from leave_engine.exceptions import (
    AlreadyProcessed,
    EmployeeNotFound,
    Forbidden,
    InvalidDecision,
    NotFound,
    SessionIdentityMissing,
)
from leave_engine.models.base import as_utc
from leave_engine.models.enums import AuditAction, AuditEntityType, Decision, HalfDayPeriod, LeaveStatus, LeaveType
from leave_engine.models.request import LeaveRequest
from leave_engine.schemas.request import LeaveRequestListResponse, LeaveRequestResponse
from leave_engine.services.audit import commit_or_fail, flush_or_fail, model_to_audit_dict, write_audit_log
from leave_engine.services.authorization import can_manage, ensure_can_view, lookup_employee
from leave_engine.services.balance import lock_balance_snapshot, reconcile_snapshot
from leave_engine.services.notification import build_decision_notification, build_new_request_notification, dispatch
from leave_engine.services.routing import resolve_route
from leave_engine.services.validator import check_request_shape, check_sufficiency

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession

    from leave_engine.schemas.auth import Identity
    from leave_engine.schemas.request import CreateLeaveRequestPayload, DecisionPayload
    from leave_engine.services.directory import EmployeeDirectory, EmployeeInfo

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _build_request_response(leave_request: LeaveRequest) -> LeaveRequestResponse:
    """Map a ledger row to its response schema."""
    return LeaveRequestResponse(
        id=leave_request.id,
        employee_id=leave_request.employee_id,
        leave_type=leave_request.leave_type,
        start_date=leave_request.start_date,
        end_date=leave_request.end_date,
        days=leave_request.days,
        is_half_day=leave_request.is_half_day,
        half_day_period=HalfDayPeriod(leave_request.half_day_period) if leave_request.half_day_period else None,
        category=leave_request.category,
        status=LeaveStatus(leave_request.status),
        reason=leave_request.reason,
        assigned_to=leave_request.assigned_to,
        requested_at=as_utc(leave_request.requested_at),
        processed_at=as_utc(leave_request.processed_at),
        processed_by=leave_request.processed_by,
        admin_notes=leave_request.admin_notes,
    )


def _build_list_response(requests: list[LeaveRequest]) -> LeaveRequestListResponse:
    return LeaveRequestListResponse(items=[_build_request_response(r) for r in requests], total=len(requests))


async def _get_request_or_404(session: AsyncSession, request_id: uuid.UUID) -> LeaveRequest:
    result = await session.execute(select(LeaveRequest).where(col(LeaveRequest.id) == request_id))
    leave_request = result.scalar_one_or_none()
    if leave_request is None:
        raise NotFound
    return leave_request


def _parse_decision(decision: str) -> Decision:
    try:
        return Decision(decision)
    except ValueError:
        raise InvalidDecision(decision) from None


async def _notify_new_request(
    leave_request: LeaveRequest,
    employee: EmployeeInfo,
    assigned: EmployeeInfo | None,
    directory: EmployeeDirectory,
) -> None:
    try:
        super_admins = await directory.get_super_admins()
    except Exception:
        logger.exception("Super-admin lookup failed; notifying assigned approver only")
        super_admins = []
    await dispatch(build_new_request_notification(leave_request, employee, assigned, super_admins))


async def _notify_decision(leave_request: LeaveRequest, directory: EmployeeDirectory) -> None:
    try:
        employee = await directory.get_employee(leave_request.employee_id)
    except Exception:
        logger.exception("Employee lookup failed; decision on %s not notified", leave_request.id)
        return
    if employee is None:
        logger.warning(
            "Employee %s not found; decision on %s not notified", leave_request.employee_id, leave_request.id
        )
        return
    await dispatch(build_decision_notification(leave_request, employee))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def create_leave_request(
    session: AsyncSession,
    directory: EmployeeDirectory,
    identity: Identity | None,
    payload: CreateLeaveRequestPayload,
) -> LeaveRequestResponse:
    """Validate, route and persist a new PENDING request.

    Flow:
    1. Shape rules (type, dates, half-day, order, days)
    2. Lock the (employee, leave type) balance snapshot
    3. Sufficiency against the ledger-derived balance
    4. Resolve the employee and route the request
    5. Require a verified session identity bound to the employee, or to
       someone who manages them
    6. Insert the ledger row, refresh snapshot, audit, commit
    7. Notify super-admins and the assigned approver (best-effort)
    """
    draft = check_request_shape(
        payload.leave_type,
        payload.start_date,
        payload.end_date,
        payload.is_half_day,
        payload.half_day_period,
    )

    snapshot = await lock_balance_snapshot(session, payload.employee_id, draft.leave_type)
    await check_sufficiency(session, payload.employee_id, draft.leave_type, draft.days)

    employee = await directory.get_employee(payload.employee_id)
    if employee is None:
        raise EmployeeNotFound(payload.employee_id)

    route = await resolve_route(employee, payload.category, directory)

    if identity is None or not identity.uid:
        logger.warning("Rejecting leave request for %s: no session identity", payload.employee_id)
        raise SessionIdentityMissing

    if identity.uid != employee.uid:
        submitter = await directory.get_employee_by_uid(identity.uid)
        if submitter is None or not can_manage(submitter, employee):
            logger.warning("Session %s may not submit leave for %s", identity.uid, payload.employee_id)
            raise Forbidden("Not authorized to submit leave for this employee")

    leave_request = LeaveRequest(
        employee_id=payload.employee_id,
        employee_uid=identity.uid,
        leave_type=draft.leave_type.value,
        start_date=draft.start_date,
        end_date=draft.end_date,
        days=draft.days,
        is_half_day=draft.is_half_day,
        half_day_period=draft.half_day_period.value if draft.half_day_period else None,
        category=route.category.value,
        status=LeaveStatus.PENDING.value,
        reason=payload.reason or None,
        assigned_to=route.assigned_username,
    )
    session.add(leave_request)
    await flush_or_fail(session)
    await reconcile_snapshot(session, snapshot)

    await write_audit_log(
        session,
        actor=identity.uid,
        entity_type=AuditEntityType.LEAVE_REQUEST,
        entity_id=str(leave_request.id),
        action=AuditAction.SUBMIT,
        after_json=model_to_audit_dict(leave_request),
    )
    await commit_or_fail(session)
    logger.info(
        "Leave request %s created: employee=%s type=%s days=%s assigned_to=%s",
        leave_request.id,
        leave_request.employee_id,
        leave_request.leave_type,
        leave_request.days,
        leave_request.assigned_to,
    )

    await _notify_new_request(leave_request, employee, route.assigned_to, directory)
    return _build_request_response(leave_request)


async def process_leave_request(
    session: AsyncSession,
    directory: EmployeeDirectory,
    actor: EmployeeInfo,
    request_id: uuid.UUID,
    payload: DecisionPayload,
) -> LeaveRequestResponse:
    """Move a PENDING request to APPROVED or REJECTED.

    1. Parse the decision.
    2. Fetch the request; authorize the actor against its employee.
    3. Refuse terminal requests (AlreadyProcessed).
    4. Lock the balance snapshot; approvals re-check sufficiency.
    5. Compare-and-set the status (``WHERE status = 'pending'``).
    6. Refresh snapshot, audit, commit.
    7. Notify the employee (best-effort).
    """
    decision = _parse_decision(payload.decision)
    leave_request = await _get_request_or_404(session, request_id)

    target = await directory.get_employee(leave_request.employee_id)
    if not can_manage(actor, target):
        raise Forbidden

    current = LeaveStatus(leave_request.status)
    try:
        new_status = current.apply(decision)
    except ValueError:
        raise AlreadyProcessed(current.value) from None

    leave_type = LeaveType(leave_request.leave_type)
    snapshot = await lock_balance_snapshot(session, leave_request.employee_id, leave_type)
    if new_status is LeaveStatus.APPROVED:
        await check_sufficiency(session, leave_request.employee_id, leave_type, leave_request.days)

    before = model_to_audit_dict(leave_request)
    result = await session.execute(
        update(LeaveRequest)
        .where(
            col(LeaveRequest.id) == request_id,
            col(LeaveRequest.status) == LeaveStatus.PENDING.value,
        )
        .values(
            status=new_status.value,
            processed_at=datetime.now(UTC),
            processed_by=actor.username,
            admin_notes=payload.notes or None,
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        await session.rollback()
        latest = await _get_request_or_404(session, request_id)
        raise AlreadyProcessed(latest.status)

    await session.refresh(leave_request)
    await reconcile_snapshot(session, snapshot)

    await write_audit_log(
        session,
        actor=actor.username,
        entity_type=AuditEntityType.LEAVE_REQUEST,
        entity_id=str(leave_request.id),
        action=AuditAction.APPROVE if new_status is LeaveStatus.APPROVED else AuditAction.REJECT,
        before_json=before,
        after_json=model_to_audit_dict(leave_request),
    )
    await commit_or_fail(session)
    logger.info("Leave request %s %s by %s", leave_request.id, new_status.value, actor.username)

    await _notify_decision(leave_request, directory)
    return _build_request_response(leave_request)


async def get_request(
    session: AsyncSession,
    directory: EmployeeDirectory,
    actor: EmployeeInfo,
    request_id: uuid.UUID,
) -> LeaveRequestResponse:
    """Get a single request by ID if the actor may see its employee's leave."""
    leave_request = await _get_request_or_404(session, request_id)
    await ensure_can_view(directory, actor, leave_request.employee_id)
    return _build_request_response(leave_request)


async def list_employee_requests(session: AsyncSession, employee_id: str) -> LeaveRequestListResponse:
    """All requests of one employee, newest first."""
    result = await session.execute(
        select(LeaveRequest)
        .where(col(LeaveRequest.employee_id) == employee_id)
        .order_by(col(LeaveRequest.requested_at).desc())
    )
    return _build_list_response(list(result.scalars().all()))


async def _filter_visible(
    directory: EmployeeDirectory,
    actor: EmployeeInfo,
    requests: Sequence[LeaveRequest],
    *,
    include_own: bool,
) -> list[LeaveRequest]:
    targets: dict[str, EmployeeInfo | None] = {}
    visible: list[LeaveRequest] = []
    for leave_request in requests:
        employee_id = leave_request.employee_id
        if include_own and employee_id == actor.id:
            visible.append(leave_request)
            continue
        if employee_id not in targets:
            targets[employee_id] = await lookup_employee(directory, employee_id)
        if can_manage(actor, targets[employee_id]):
            visible.append(leave_request)
    return visible


async def list_pending_for(
    session: AsyncSession,
    directory: EmployeeDirectory,
    actor: EmployeeInfo,
) -> LeaveRequestListResponse:
    """Pending requests the actor is allowed to manage, newest first.

    Requests whose employee cannot be looked up are left out.
    """
    result = await session.execute(
        select(LeaveRequest)
        .where(col(LeaveRequest.status) == LeaveStatus.PENDING.value)
        .order_by(col(LeaveRequest.requested_at).desc())
    )
    return _build_list_response(await _filter_visible(directory, actor, result.scalars().all(), include_own=False))


async def list_visible_requests(
    session: AsyncSession,
    directory: EmployeeDirectory,
    actor: EmployeeInfo,
) -> LeaveRequestListResponse:
    """Every request the actor may see, any status, newest first.

    That is the actor's own requests plus those of everyone they manage.
    """
    result = await session.execute(select(LeaveRequest).order_by(col(LeaveRequest.requested_at).desc()))
    return _build_list_response(await _filter_visible(directory, actor, result.scalars().all(), include_own=True))
