import logging
from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel
from sqlalchemy import func, select
from sqlmodel import col

from leave_engine.api.deps import DirectoryDep
from leave_engine.config import get_settings
from leave_engine.db import SessionDep
from leave_engine.models.enums import LeaveStatus
from leave_engine.models.request import LeaveRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class LedgerCheck(BaseModel):
    reachable: bool
    pending_requests: int | None = None


class DirectoryCheck(BaseModel):
    reachable: bool
    active_employees: int | None = None


class HealthResponse(BaseModel):
    """Service status with the two collaborators every leave operation needs."""

    status: Literal["ok", "degraded"]
    version: str
    environment: str
    ledger: LedgerCheck
    directory: DirectoryCheck


@router.get("/health", response_model=HealthResponse)
async def health(session: SessionDep, directory: DirectoryDep) -> HealthResponse:
    """Report service status; an unreachable ledger or directory marks it degraded."""
    settings = get_settings()

    try:
        pending = await session.scalar(
            select(func.count()).select_from(LeaveRequest).where(col(LeaveRequest.status) == LeaveStatus.PENDING.value)
        )
        ledger = LedgerCheck(reachable=True, pending_requests=pending or 0)
    except Exception:
        logger.exception("Health check: leave ledger unreachable")
        ledger = LedgerCheck(reachable=False)

    try:
        employees = await directory.list_employees()
        directory_check = DirectoryCheck(reachable=True, active_employees=len(employees))
    except Exception:
        logger.exception("Health check: employee directory unreachable")
        directory_check = DirectoryCheck(reachable=False)

    return HealthResponse(
        status="ok" if ledger.reachable and directory_check.reachable else "degraded",
        version=settings.app_version,
        environment=settings.environment,
        ledger=ledger,
        directory=directory_check,
    )
