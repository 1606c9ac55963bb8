# ruff: noqa: TC003
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class PolicyEntitlement(BaseModel):
    """Days allotted per leave type."""

    annual: int = Field(ge=0)
    sick: int = Field(ge=0)
    casual: int = Field(ge=0)


class PolicyDefaultsResponse(PolicyEntitlement):
    updated_at: datetime | None = None
    updated_by: str | None = None


class PolicyOverridePayload(BaseModel):
    """Partial entitlement override; omitted types keep their current value."""

    annual: int | None = Field(default=None, ge=0)
    sick: int | None = Field(default=None, ge=0)
    casual: int | None = Field(default=None, ge=0)


class PolicyOverrideResponse(PolicyEntitlement):
    employee_id: str
    is_custom: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None
