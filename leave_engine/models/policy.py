# ruff: noqa: TC003
from __future__ import annotations

from datetime import datetime

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from leave_engine.models.base import TimestampMixin

POLICY_DEFAULTS_ROW_ID = 1


class LeavePolicyDefaults(SQLModel, table=True):
    """Organization-wide entitlement per leave type. Holds a single row."""

    __tablename__ = "leave_policy_defaults"
    __table_args__ = (
        sa.CheckConstraint("annual >= 0 AND sick >= 0 AND casual >= 0", name="ck_policy_defaults_non_negative"),
    )

    id: int = Field(default=POLICY_DEFAULTS_ROW_ID, primary_key=True)
    annual: int
    sick: int
    casual: int
    updated_at: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
    updated_by: str | None = Field(default=None, max_length=255)


class LeavePolicyOverride(TimestampMixin, table=True):
    """Per-employee entitlement that replaces the defaults while it exists."""

    __tablename__ = "leave_policy_override"
    __table_args__ = (
        sa.CheckConstraint("annual >= 0 AND sick >= 0 AND casual >= 0", name="ck_policy_override_non_negative"),
    )

    employee_id: str = Field(primary_key=True, max_length=255)
    annual: int
    sick: int
    casual: int
    is_custom: bool = Field(default=True, sa_column_kwargs={"server_default": sa.true()})
