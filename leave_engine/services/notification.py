"""Notification dispatch for leave events.

Delivery is best-effort: a failed dispatch is logged and never propagated,
because the ledger write that triggered it has already committed.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from pydantic import BaseModel

from leave_engine.exceptions import format_days
from leave_engine.models.enums import LeaveCategory, LeaveStatus, LeaveType, NotificationKind

if TYPE_CHECKING:
    from leave_engine.models.request import LeaveRequest
    from leave_engine.services.directory import EmployeeInfo

logger = logging.getLogger(__name__)


class Notification(BaseModel):
    """A notification as handed to the dispatcher."""

    recipients: list[str]
    title: str
    body: str
    kind: NotificationKind
    payload: dict[str, Any]


@runtime_checkable
class NotificationDispatcher(Protocol):
    """Interface for the notification delivery service."""

    async def notify(
        self,
        recipients: list[str],
        title: str,
        body: str,
        kind: NotificationKind,
        payload: dict[str, Any],
    ) -> None:
        """Deliver a notification to the given usernames."""
        ...


class InMemoryNotificationDispatcher:
    """In-memory stub that records every notification it is given."""

    def __init__(self) -> None:
        self.sent: list[Notification] = []

    async def notify(
        self,
        recipients: list[str],
        title: str,
        body: str,
        kind: NotificationKind,
        payload: dict[str, Any],
    ) -> None:
        self.sent.append(Notification(recipients=recipients, title=title, body=body, kind=kind, payload=payload))


_dispatcher: NotificationDispatcher = InMemoryNotificationDispatcher()


def get_notification_dispatcher() -> NotificationDispatcher:
    return _dispatcher


def set_notification_dispatcher(dispatcher: NotificationDispatcher) -> None:
    """Override the dispatcher (for testing or production wiring)."""
    global _dispatcher
    _dispatcher = dispatcher


async def dispatch(notification: Notification) -> bool:
    """Send a notification, logging instead of raising on failure.

    Returns True when the dispatcher accepted it.
    """
    if not notification.recipients:
        logger.warning("No recipients for %s notification; skipping", notification.kind)
        return False
    try:
        await get_notification_dispatcher().notify(
            notification.recipients,
            notification.title,
            notification.body,
            notification.kind,
            notification.payload,
        )
    except Exception:
        logger.exception(
            "Failed to dispatch %s notification to %s",
            notification.kind,
            ", ".join(notification.recipients),
        )
        return False
    logger.info("Dispatched %s notification to %d recipient(s)", notification.kind, len(notification.recipients))
    return True


# ---------------------------------------------------------------------------
# Message builders
# ---------------------------------------------------------------------------


def _date_range(leave_request: LeaveRequest) -> str:
    if leave_request.start_date == leave_request.end_date:
        return leave_request.start_date.isoformat()
    return f"{leave_request.start_date.isoformat()} to {leave_request.end_date.isoformat()}"


def build_new_request_notification(
    leave_request: LeaveRequest,
    employee: EmployeeInfo,
    assigned: EmployeeInfo | None,
    super_admins: list[EmployeeInfo],
) -> Notification:
    """Announce a new request to every super-admin and the assigned approver."""
    recipients: list[str] = []
    for person in [*super_admins, *([assigned] if assigned else [])]:
        if person.username and person.username not in recipients:
            recipients.append(person.username)

    category_label = LeaveCategory(leave_request.category).label
    if leave_request.is_half_day:
        duration = f"half day (Half Day - {leave_request.half_day_period})"
    else:
        duration = format_days(leave_request.days)
    routed = f"Assigned to {assigned.name} - {category_label}" if assigned else category_label
    body = (
        f"{employee.name} has submitted a {LeaveType(leave_request.leave_type).label} request "
        f"for {duration} ({_date_range(leave_request)}) ({routed})"
    )
    return Notification(
        recipients=recipients,
        title="New Leave Request",
        body=body,
        kind=NotificationKind.LEAVE_REQUEST,
        payload={
            "request_id": str(leave_request.id),
            "employee_id": leave_request.employee_id,
            "employee_name": employee.name,
            "leave_type": leave_request.leave_type,
            "category": leave_request.category,
            "days": leave_request.days,
            "start_date": leave_request.start_date.isoformat(),
            "end_date": leave_request.end_date.isoformat(),
            "assigned_to": leave_request.assigned_to,
        },
    )


def build_decision_notification(leave_request: LeaveRequest, employee: EmployeeInfo) -> Notification:
    """Tell the employee their request was approved or rejected."""
    status = LeaveStatus(leave_request.status)
    approved = status is LeaveStatus.APPROVED
    body = (
        f"Your {LeaveType(leave_request.leave_type).label} request for {format_days(leave_request.days)} "
        f"({_date_range(leave_request)}) has been {status.value}."
    )
    if not approved and leave_request.admin_notes:
        body += f"\n\nNote: {leave_request.admin_notes}"
    return Notification(
        recipients=[employee.username],
        title="Leave Request Approved" if approved else "Leave Request Rejected",
        body=body,
        kind=NotificationKind.LEAVE_APPROVED if approved else NotificationKind.LEAVE_REJECTED,
        payload={
            "request_id": str(leave_request.id),
            "employee_id": leave_request.employee_id,
            "leave_type": leave_request.leave_type,
            "days": leave_request.days,
            "start_date": leave_request.start_date.isoformat(),
            "end_date": leave_request.end_date.isoformat(),
            "status": status.value,
            "processed_by": leave_request.processed_by,
            "admin_notes": leave_request.admin_notes,
        },
    )
