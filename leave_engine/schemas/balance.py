from __future__ import annotations

from pydantic import BaseModel


class LeaveTypeBalance(BaseModel):
    """Entitlement and consumption for one leave type.

    ``used`` is the unclamped sum of approved days; ``remaining`` never
    drops below zero.
    """

    entitlement: float
    used: float
    remaining: float


class EmployeeBalanceResponse(BaseModel):
    employee_id: str
    annual: LeaveTypeBalance
    sick: LeaveTypeBalance
    casual: LeaveTypeBalance
    is_custom: bool


class BalanceListResponse(BaseModel):
    items: list[EmployeeBalanceResponse]
    total: int
