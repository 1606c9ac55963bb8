from __future__ import annotations

import enum


class LeaveType(enum.StrEnum):
    """Kinds of paid leave with their own entitlement."""

    ANNUAL = "annual"
    SICK = "sick"
    CASUAL = "casual"

    @property
    def label(self) -> str:
        return f"{self.value.capitalize()} Leave"


class HalfDayPeriod(enum.StrEnum):
    MORNING = "morning"
    AFTERNOON = "afternoon"


class LeaveCategory(enum.StrEnum):
    """Routing category of a leave request."""

    ENGINEERING = "engineering"
    TECHNICAL = "technical"
    HR = "hr"
    FINANCE = "finance"
    SALES = "sales"
    FACILITIES = "facilities"
    OTHER = "other"

    @property
    def label(self) -> str:
        return "HR" if self is LeaveCategory.HR else self.value.capitalize()


class Decision(enum.StrEnum):
    """Outcome an approver can record on a pending request."""

    APPROVED = "approved"
    REJECTED = "rejected"


class LeaveStatus(enum.StrEnum):
    """State machine for leave requests: PENDING -> APPROVED | REJECTED."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not LeaveStatus.PENDING

    def apply(self, decision: Decision) -> LeaveStatus:
        """Return the status reached by applying ``decision``.

        Raises ValueError from a terminal status; callers map that onto
        their own conflict error.
        """
        if self.is_terminal:
            msg = f"cannot apply {decision} to a {self} request"
            raise ValueError(msg)
        return LeaveStatus(decision.value)


class EmployeeRole(enum.StrEnum):
    EMPLOYEE = "employee"
    MANAGER = "manager"
    SUPER_ADMIN = "super_admin"


class NotificationKind(enum.StrEnum):
    LEAVE_REQUEST = "leave_request"
    LEAVE_APPROVED = "leave_approved"
    LEAVE_REJECTED = "leave_rejected"


class AuditEntityType(enum.StrEnum):
    """Entity type recorded in the audit log."""

    LEAVE_REQUEST = "LEAVE_REQUEST"
    POLICY_DEFAULTS = "POLICY_DEFAULTS"
    POLICY_OVERRIDE = "POLICY_OVERRIDE"


class AuditAction(enum.StrEnum):
    """Action recorded in the audit log."""

    SUBMIT = "SUBMIT"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
