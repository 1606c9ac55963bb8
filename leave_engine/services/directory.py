# ruff: noqa: TC003
from __future__ import annotations

from datetime import datetime
from typing import Protocol, runtime_checkable

from pydantic import BaseModel

from leave_engine.models.enums import EmployeeRole


class EmployeeInfo(BaseModel):
    """Employee record as served by the employee directory."""

    id: str
    uid: str | None = None  # auth account bound to this employee
    username: str
    name: str
    department: str | None = None
    role: EmployeeRole = EmployeeRole.EMPLOYEE
    is_active: bool = True
    created_at: datetime | None = None  # stable ordering when picking an approver

    @property
    def is_super_admin(self) -> bool:
        return self.role is EmployeeRole.SUPER_ADMIN


@runtime_checkable
class EmployeeDirectory(Protocol):
    """Interface for the employee directory."""

    async def get_employee(self, employee_id: str) -> EmployeeInfo | None:
        """Fetch an active employee. Returns None if not found."""
        ...

    async def get_employee_by_uid(self, uid: str) -> EmployeeInfo | None:
        """Fetch the active employee bound to an auth account. Returns None if not found."""
        ...

    async def get_managers_by_department(self, department: str) -> list[EmployeeInfo]:
        """Active managers of a department."""
        ...

    async def get_super_admins(self) -> list[EmployeeInfo]:
        """Active super-admins."""
        ...

    async def list_employees(self) -> list[EmployeeInfo]:
        """All active employees."""
        ...


class InMemoryEmployeeDirectory:
    """In-memory stub implementation for development and tests."""

    def __init__(self, employees: list[EmployeeInfo] | None = None) -> None:
        self._employees: dict[str, EmployeeInfo] = {}
        for employee in employees or []:
            self.seed(employee)

    def seed(self, employee: EmployeeInfo) -> None:
        """Seed an employee for testing."""
        self._employees[employee.id] = employee

    def _active(self) -> list[EmployeeInfo]:
        return [e for e in self._employees.values() if e.is_active]

    async def get_employee(self, employee_id: str) -> EmployeeInfo | None:
        employee = self._employees.get(employee_id)
        if employee is None or not employee.is_active:
            return None
        return employee

    async def get_employee_by_uid(self, uid: str) -> EmployeeInfo | None:
        return next((e for e in self._active() if e.uid is not None and e.uid == uid), None)

    async def get_managers_by_department(self, department: str) -> list[EmployeeInfo]:
        return [e for e in self._active() if e.role is EmployeeRole.MANAGER and e.department == department]

    async def get_super_admins(self) -> list[EmployeeInfo]:
        return [e for e in self._active() if e.role is EmployeeRole.SUPER_ADMIN]

    async def list_employees(self) -> list[EmployeeInfo]:
        return self._active()


_employee_directory: EmployeeDirectory = InMemoryEmployeeDirectory()


def get_employee_directory() -> EmployeeDirectory:
    """FastAPI dependency for the employee directory."""
    return _employee_directory


def set_employee_directory(directory: EmployeeDirectory) -> None:
    """Override the directory (for testing or production wiring)."""
    global _employee_directory
    _employee_directory = directory
