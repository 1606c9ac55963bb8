# ruff: noqa: TC003
from __future__ import annotations

from datetime import datetime

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from leave_engine.models.base import now_utc


class LeaveBalanceSnapshot(SQLModel, table=True):
    """Advisory balance copy, refreshed from the ledger on every ledger write.

    Never read as the authority. Its row is locked FOR UPDATE to serialize
    writers for the same employee and leave type.
    """

    __tablename__ = "leave_balance_snapshot"

    employee_id: str = Field(primary_key=True, max_length=255)
    leave_type: str = Field(primary_key=True, max_length=20)
    entitlement_days: float = Field(default=0, sa_column_kwargs={"server_default": "0"})
    used_days: float = Field(default=0, sa_column_kwargs={"server_default": "0"})
    pending_days: float = Field(default=0, sa_column_kwargs={"server_default": "0"})
    remaining_days: float = Field(default=0, sa_column_kwargs={"server_default": "0"})
    updated_at: datetime = Field(  # type: ignore[call-overload]
        default_factory=now_utc,
        sa_type=sa.DateTime(timezone=True),
        sa_column_kwargs={"server_default": sa.func.now(), "onupdate": sa.func.now()},
    )
    version: int = Field(default=1, sa_column_kwargs={"server_default": "1"})
