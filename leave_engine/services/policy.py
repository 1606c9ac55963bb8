# ruff: noqa: TC003
"""Policy store: default entitlements and per-employee overrides."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from leave_engine.config import get_settings
from leave_engine.models.base import as_utc, now_utc
from leave_engine.models.enums import AuditAction, AuditEntityType, LeaveType
from leave_engine.models.policy import POLICY_DEFAULTS_ROW_ID, LeavePolicyDefaults, LeavePolicyOverride
from leave_engine.schemas.policy import (
    PolicyDefaultsResponse,
    PolicyEntitlement,
    PolicyOverrideResponse,
)
from leave_engine.services.audit import commit_or_fail, model_to_audit_dict, write_audit_log

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from leave_engine.schemas.policy import PolicyOverridePayload
    from leave_engine.services.directory import EmployeeInfo

logger = logging.getLogger(__name__)


def _configured_defaults() -> PolicyDefaultsResponse:
    settings = get_settings()
    return PolicyDefaultsResponse(
        annual=settings.default_annual_leaves,
        sick=settings.default_sick_leaves,
        casual=settings.default_casual_leaves,
    )


def _build_override_response(override: LeavePolicyOverride) -> PolicyOverrideResponse:
    return PolicyOverrideResponse(
        employee_id=override.employee_id,
        annual=override.annual,
        sick=override.sick,
        casual=override.casual,
        is_custom=override.is_custom,
        created_at=as_utc(override.created_at),
        updated_at=as_utc(override.updated_at),
    )


async def _get_defaults_row(session: AsyncSession) -> LeavePolicyDefaults | None:
    result = await session.execute(
        select(LeavePolicyDefaults).where(col(LeavePolicyDefaults.id) == POLICY_DEFAULTS_ROW_ID)
    )
    return result.scalar_one_or_none()


async def _get_override_row(session: AsyncSession, employee_id: str) -> LeavePolicyOverride | None:
    result = await session.execute(
        select(LeavePolicyOverride).where(col(LeavePolicyOverride.employee_id) == employee_id)
    )
    return result.scalar_one_or_none()


# ---------------------------------------------------------------------------
# Read path
# ---------------------------------------------------------------------------


async def get_defaults(session: AsyncSession) -> PolicyDefaultsResponse:
    """Stored defaults, or the configured ones when none were stored yet."""
    row = await _get_defaults_row(session)
    if row is None:
        return _configured_defaults()
    return PolicyDefaultsResponse(
        annual=row.annual,
        sick=row.sick,
        casual=row.casual,
        updated_at=as_utc(row.updated_at),
        updated_by=row.updated_by,
    )


async def get_override(session: AsyncSession, employee_id: str) -> PolicyOverrideResponse | None:
    row = await _get_override_row(session, employee_id)
    return _build_override_response(row) if row is not None else None


async def get_entitlement(session: AsyncSession, employee_id: str) -> tuple[dict[LeaveType, int], bool]:
    """Effective entitlement per leave type and whether it is a custom override."""
    override = await _get_override_row(session, employee_id)
    source: PolicyEntitlement | LeavePolicyOverride = override if override is not None else await get_defaults(session)
    entitlement = {
        LeaveType.ANNUAL: source.annual,
        LeaveType.SICK: source.sick,
        LeaveType.CASUAL: source.casual,
    }
    return entitlement, override is not None


async def get_effective_policy(session: AsyncSession, employee_id: str) -> PolicyOverrideResponse:
    """The override when present, else the defaults presented for this employee."""
    override = await get_override(session, employee_id)
    if override is not None:
        return override
    defaults = await get_defaults(session)
    return PolicyOverrideResponse(
        employee_id=employee_id,
        annual=defaults.annual,
        sick=defaults.sick,
        casual=defaults.casual,
        is_custom=False,
    )


# ---------------------------------------------------------------------------
# Write path
# ---------------------------------------------------------------------------


async def set_defaults(
    session: AsyncSession,
    actor: EmployeeInfo,
    payload: PolicyEntitlement,
) -> PolicyDefaultsResponse:
    """Replace the organization-wide defaults."""
    row = await _get_defaults_row(session)
    before = model_to_audit_dict(row) if row is not None else None
    if row is None:
        row = LeavePolicyDefaults(id=POLICY_DEFAULTS_ROW_ID, annual=0, sick=0, casual=0)
        session.add(row)

    row.annual = payload.annual
    row.sick = payload.sick
    row.casual = payload.casual
    row.updated_at = now_utc()
    row.updated_by = actor.username

    await write_audit_log(
        session,
        actor=actor.username,
        entity_type=AuditEntityType.POLICY_DEFAULTS,
        entity_id=str(POLICY_DEFAULTS_ROW_ID),
        action=AuditAction.UPDATE,
        before_json=before,
        after_json=model_to_audit_dict(row),
    )
    await commit_or_fail(session)
    logger.info("Leave policy defaults set to %s by %s", payload.model_dump(), actor.username)
    return await get_defaults(session)


async def set_override(
    session: AsyncSession,
    actor: EmployeeInfo,
    employee_id: str,
    payload: PolicyOverridePayload,
) -> PolicyOverrideResponse:
    """Create or update an employee's entitlement override.

    Types omitted from the payload keep their current effective value.
    """
    current = await get_effective_policy(session, employee_id)
    row = await _get_override_row(session, employee_id)
    before = model_to_audit_dict(row) if row is not None else None
    if row is None:
        row = LeavePolicyOverride(employee_id=employee_id, annual=0, sick=0, casual=0)
        session.add(row)

    row.annual = payload.annual if payload.annual is not None else current.annual
    row.sick = payload.sick if payload.sick is not None else current.sick
    row.casual = payload.casual if payload.casual is not None else current.casual
    row.is_custom = True
    if before is not None:
        row.updated_at = now_utc()

    await write_audit_log(
        session,
        actor=actor.username,
        entity_type=AuditEntityType.POLICY_OVERRIDE,
        entity_id=employee_id,
        action=AuditAction.UPDATE,
        before_json=before,
        after_json=model_to_audit_dict(row),
    )
    await commit_or_fail(session)
    await session.refresh(row)
    logger.info("Leave entitlement override for %s set by %s", employee_id, actor.username)
    return _build_override_response(row)


async def clear_override(
    session: AsyncSession,
    actor: EmployeeInfo,
    employee_id: str,
) -> PolicyOverrideResponse:
    """Revert an employee to the default entitlement. A no-op when no override exists."""
    row = await _get_override_row(session, employee_id)
    if row is not None:
        before = model_to_audit_dict(row)
        await session.delete(row)
        await write_audit_log(
            session,
            actor=actor.username,
            entity_type=AuditEntityType.POLICY_OVERRIDE,
            entity_id=employee_id,
            action=AuditAction.DELETE,
            before_json=before,
        )
        await commit_or_fail(session)
        logger.info("Leave entitlement override for %s cleared by %s", employee_id, actor.username)
    return await get_effective_policy(session, employee_id)
