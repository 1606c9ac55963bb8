from sqlmodel import SQLModel

from leave_engine.models.audit import AuditLog
from leave_engine.models.balance import LeaveBalanceSnapshot
from leave_engine.models.base import TimestampMixin, UUIDBase
from leave_engine.models.enums import (
    AuditAction,
    AuditEntityType,
    Decision,
    EmployeeRole,
    HalfDayPeriod,
    LeaveCategory,
    LeaveStatus,
    LeaveType,
    NotificationKind,
)
from leave_engine.models.policy import LeavePolicyDefaults, LeavePolicyOverride
from leave_engine.models.request import LeaveRequest

__all__ = [
    "AuditAction",
    "AuditEntityType",
    "AuditLog",
    "Decision",
    "EmployeeRole",
    "HalfDayPeriod",
    "LeaveBalanceSnapshot",
    "LeaveCategory",
    "LeavePolicyDefaults",
    "LeavePolicyOverride",
    "LeaveRequest",
    "LeaveStatus",
    "LeaveType",
    "NotificationKind",
    "SQLModel",
    "TimestampMixin",
    "UUIDBase",
]
