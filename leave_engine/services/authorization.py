from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from leave_engine.exceptions import Forbidden
from leave_engine.models.enums import EmployeeRole

if TYPE_CHECKING:
    from leave_engine.services.directory import EmployeeDirectory, EmployeeInfo

logger = logging.getLogger(__name__)


def can_manage(actor: EmployeeInfo, target: EmployeeInfo | None) -> bool:
    """Whether ``actor`` may view and act on ``target``'s leave requests.

    Super-admins manage everyone. Managers manage their own department,
    except super-admins. Independent of the routing ``assigned_to`` hint.
    """
    if actor.role is EmployeeRole.SUPER_ADMIN:
        return True
    if target is None:
        return False
    if actor.role is EmployeeRole.MANAGER:
        return (
            actor.department is not None
            and actor.department == target.department
            and target.role is not EmployeeRole.SUPER_ADMIN
        )
    return False


def can_view(actor: EmployeeInfo, employee_id: str, target: EmployeeInfo | None) -> bool:
    """Whether ``actor`` may read ``employee_id``'s requests, history and balance."""
    return actor.id == employee_id or can_manage(actor, target)


async def lookup_employee(directory: EmployeeDirectory, employee_id: str) -> EmployeeInfo | None:
    """Directory lookup for read paths; an unreachable directory reads as unknown."""
    try:
        return await directory.get_employee(employee_id)
    except Exception:
        logger.exception("Employee lookup failed for %s", employee_id)
        return None


async def ensure_can_view(directory: EmployeeDirectory, actor: EmployeeInfo, employee_id: str) -> None:
    """Raise Forbidden unless ``actor`` may read ``employee_id``'s leave."""
    if actor.id == employee_id or actor.is_super_admin:
        return
    target = await lookup_employee(directory, employee_id)
    if not can_view(actor, employee_id, target):
        logger.warning("Denied %s read access to leave of %s", actor.id, employee_id)
        raise Forbidden("Not authorized to view this employee's leave")
