# ruff: noqa: B008
from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Header

from leave_engine.exceptions import Forbidden
from leave_engine.schemas.auth import Identity
from leave_engine.services.authorization import ensure_can_view
from leave_engine.services.directory import EmployeeDirectory, EmployeeInfo, get_employee_directory

DirectoryDep = Annotated[EmployeeDirectory, Depends(get_employee_directory)]


async def get_session_identity(x_session_uid: str | None = Header(default=None)) -> Identity | None:
    """Verified session identity forwarded by the auth gateway, if any."""
    if not x_session_uid or not x_session_uid.strip():
        return None
    return Identity(uid=x_session_uid.strip())


IdentityDep = Annotated[Identity | None, Depends(get_session_identity)]


async def get_actor(
    directory: DirectoryDep,
    x_user_id: str = Header(),
) -> EmployeeInfo:
    """Resolve the calling employee from the directory."""
    actor = await directory.get_employee(x_user_id)
    if actor is None:
        raise Forbidden("Unknown or inactive user")
    return actor


ActorDep = Annotated[EmployeeInfo, Depends(get_actor)]


async def require_super_admin(actor: ActorDep) -> EmployeeInfo:
    """Require the super-admin role for the request."""
    if not actor.is_super_admin:
        raise Forbidden("Super-admin access required")
    return actor


SuperAdminDep = Annotated[EmployeeInfo, Depends(require_super_admin)]


async def require_employee_view(employee_id: str, actor: ActorDep, directory: DirectoryDep) -> EmployeeInfo:
    """Allow reads of ``employee_id``'s leave to the employee and to whoever manages them."""
    await ensure_can_view(directory, actor, employee_id)
    return actor


EmployeeViewerDep = Annotated[EmployeeInfo, Depends(require_employee_view)]
