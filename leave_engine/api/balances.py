# ruff: noqa: TC001
from __future__ import annotations

from fastapi import APIRouter

from leave_engine.api.deps import DirectoryDep, EmployeeViewerDep, SuperAdminDep
from leave_engine.db import SessionDep
from leave_engine.schemas.balance import BalanceListResponse, EmployeeBalanceResponse
from leave_engine.schemas.request import LeaveRequestListResponse
from leave_engine.services import balance as balance_service
from leave_engine.services import request as request_service

employee_router = APIRouter(prefix="/employees/{employee_id}", tags=["balances"])

balances_router = APIRouter(prefix="/balances", tags=["balances"])


@employee_router.get("/balance", response_model=EmployeeBalanceResponse)
async def get_employee_balance(
    employee_id: str,
    session: SessionDep,
    _viewer: EmployeeViewerDep,
) -> EmployeeBalanceResponse:
    """Entitlement, used and remaining days per leave type."""
    return await balance_service.get_balance(session, employee_id)


@employee_router.get("/leave-requests", response_model=LeaveRequestListResponse)
async def list_employee_requests(
    employee_id: str,
    session: SessionDep,
    _viewer: EmployeeViewerDep,
) -> LeaveRequestListResponse:
    """Leave history of one employee, newest first."""
    return await request_service.list_employee_requests(session, employee_id)


@balances_router.get("", response_model=BalanceListResponse)
async def list_balances(
    session: SessionDep,
    directory: DirectoryDep,
    _admin: SuperAdminDep,
) -> BalanceListResponse:
    """Balances of every active employee (super-admin only)."""
    return await balance_service.list_balances(session, directory)
