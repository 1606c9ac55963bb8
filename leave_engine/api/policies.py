# ruff: noqa: TC001
from __future__ import annotations

from fastapi import APIRouter

from leave_engine.api.deps import ActorDep, EmployeeViewerDep, SuperAdminDep
from leave_engine.db import SessionDep
from leave_engine.schemas.policy import (
    PolicyDefaultsResponse,
    PolicyEntitlement,
    PolicyOverridePayload,
    PolicyOverrideResponse,
)
from leave_engine.services import policy as policy_service

router = APIRouter(prefix="/policies", tags=["policies"])


@router.get("/defaults", response_model=PolicyDefaultsResponse)
async def get_defaults(session: SessionDep, _actor: ActorDep) -> PolicyDefaultsResponse:
    return await policy_service.get_defaults(session)


@router.put("/defaults", response_model=PolicyDefaultsResponse)
async def set_defaults(
    payload: PolicyEntitlement,
    session: SessionDep,
    admin: SuperAdminDep,
) -> PolicyDefaultsResponse:
    """Replace the organization-wide entitlements (super-admin only)."""
    return await policy_service.set_defaults(session, admin, payload)


@router.get("/overrides/{employee_id}", response_model=PolicyOverrideResponse)
async def get_effective_policy(
    employee_id: str,
    session: SessionDep,
    _viewer: EmployeeViewerDep,
) -> PolicyOverrideResponse:
    """The employee's override, or the defaults with ``is_custom`` false."""
    return await policy_service.get_effective_policy(session, employee_id)


@router.put("/overrides/{employee_id}", response_model=PolicyOverrideResponse)
async def set_override(
    employee_id: str,
    payload: PolicyOverridePayload,
    session: SessionDep,
    admin: SuperAdminDep,
) -> PolicyOverrideResponse:
    """Give an employee a custom entitlement (super-admin only)."""
    return await policy_service.set_override(session, admin, employee_id, payload)


@router.delete("/overrides/{employee_id}", response_model=PolicyOverrideResponse)
async def clear_override(
    employee_id: str,
    session: SessionDep,
    admin: SuperAdminDep,
) -> PolicyOverrideResponse:
    """Revert an employee to the defaults (super-admin only)."""
    return await policy_service.clear_override(session, admin, employee_id)
