"""Tests for category resolution and approver routing."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from leave_engine.models.enums import EmployeeRole, LeaveCategory
from leave_engine.services.directory import EmployeeInfo, InMemoryEmployeeDirectory
from leave_engine.services.routing import ROUTING_TABLE, category_for_department, resolve_category, resolve_route


def _person(
    employee_id: str,
    department: str | None = None,
    role: EmployeeRole = EmployeeRole.EMPLOYEE,
    year: int | None = 2024,
    is_active: bool = True,
) -> EmployeeInfo:
    return EmployeeInfo(
        id=employee_id,
        username=employee_id,
        name=employee_id.title(),
        department=department,
        role=role,
        is_active=is_active,
        created_at=datetime(year, 1, 1, tzinfo=UTC) if year else None,
    )


ENGINEER = _person("eve", "Engineering")


class FailingDirectory(InMemoryEmployeeDirectory):
    """Directory whose manager lookup is down."""

    async def get_managers_by_department(self, department: str) -> list[EmployeeInfo]:
        raise ConnectionError("directory unavailable")


class DownDirectory(FailingDirectory):
    """Directory with every lookup down."""

    async def get_super_admins(self) -> list[EmployeeInfo]:
        raise ConnectionError("directory unavailable")


# ---------------------------------------------------------------------------
# Category resolution
# ---------------------------------------------------------------------------


def test_routing_table_covers_every_category() -> None:
    assert set(ROUTING_TABLE) == set(LeaveCategory)
    assert ROUTING_TABLE[LeaveCategory.OTHER] is None
    assert ROUTING_TABLE[LeaveCategory.ENGINEERING] != ROUTING_TABLE[LeaveCategory.TECHNICAL]


@pytest.mark.parametrize(
    ("department", "expected"),
    [
        ("Engineering", LeaveCategory.ENGINEERING),
        ("Technical", LeaveCategory.TECHNICAL),
        ("HR", LeaveCategory.HR),
        ("Facilities", LeaveCategory.FACILITIES),
        ("Legal", LeaveCategory.OTHER),
        (None, LeaveCategory.OTHER),
    ],
)
def test_category_for_department(department: str | None, expected: LeaveCategory) -> None:
    assert category_for_department(department) is expected


def test_explicit_category_wins() -> None:
    assert resolve_category(ENGINEER, "finance") is LeaveCategory.FINANCE


def test_unknown_explicit_category_falls_back_to_department() -> None:
    assert resolve_category(ENGINEER, "payroll") is LeaveCategory.ENGINEERING


# ---------------------------------------------------------------------------
# Approver resolution
# ---------------------------------------------------------------------------


async def test_routes_to_department_manager() -> None:
    directory = InMemoryEmployeeDirectory(
        [
            ENGINEER,
            _person("boss", "Engineering", EmployeeRole.MANAGER),
            _person("admin", role=EmployeeRole.SUPER_ADMIN),
        ]
    )
    route = await resolve_route(ENGINEER, None, directory)
    assert route.category is LeaveCategory.ENGINEERING
    assert route.department == "Engineering"
    assert route.assigned_username == "boss"


async def test_earliest_created_manager_wins() -> None:
    directory = InMemoryEmployeeDirectory(
        [
            _person("newer", "Engineering", EmployeeRole.MANAGER, year=2023),
            _person("older", "Engineering", EmployeeRole.MANAGER, year=2018),
            _person("undated", "Engineering", EmployeeRole.MANAGER, year=None),
        ]
    )
    route = await resolve_route(ENGINEER, None, directory)
    assert route.assigned_username == "older"


async def test_creation_ties_broken_by_id() -> None:
    directory = InMemoryEmployeeDirectory(
        [
            _person("mgr-b", "Engineering", EmployeeRole.MANAGER, year=2020),
            _person("mgr-a", "Engineering", EmployeeRole.MANAGER, year=2020),
        ]
    )
    route = await resolve_route(ENGINEER, None, directory)
    assert route.assigned_username == "mgr-a"


async def test_inactive_manager_is_skipped() -> None:
    directory = InMemoryEmployeeDirectory(
        [
            _person("retired", "Engineering", EmployeeRole.MANAGER, year=2010, is_active=False),
            _person("current", "Engineering", EmployeeRole.MANAGER, year=2020),
        ]
    )
    route = await resolve_route(ENGINEER, None, directory)
    assert route.assigned_username == "current"


async def test_missing_manager_falls_back_to_super_admin() -> None:
    directory = InMemoryEmployeeDirectory(
        [
            _person("hr-boss", "HR", EmployeeRole.MANAGER),
            _person("admin", role=EmployeeRole.SUPER_ADMIN),
        ]
    )
    route = await resolve_route(ENGINEER, None, directory)
    assert route.category is LeaveCategory.ENGINEERING
    assert route.assigned_username == "admin"


async def test_other_category_goes_to_super_admin() -> None:
    directory = InMemoryEmployeeDirectory(
        [
            _person("boss", "Engineering", EmployeeRole.MANAGER),
            _person("admin", role=EmployeeRole.SUPER_ADMIN),
        ]
    )
    route = await resolve_route(ENGINEER, "other", directory)
    assert route.category is LeaveCategory.OTHER
    assert route.department is None
    assert route.assigned_username == "admin"


async def test_unresolved_route_is_unassigned() -> None:
    directory = InMemoryEmployeeDirectory([_person("boss", "Engineering", EmployeeRole.MANAGER)])
    route = await resolve_route(ENGINEER, "other", directory)
    assert route.assigned_to is None
    assert route.assigned_username is None


async def test_manager_lookup_failure_falls_back_to_super_admin() -> None:
    directory = FailingDirectory([_person("admin", role=EmployeeRole.SUPER_ADMIN)])
    route = await resolve_route(ENGINEER, None, directory)
    assert route.assigned_username == "admin"


async def test_directory_outage_leaves_request_unassigned() -> None:
    route = await resolve_route(ENGINEER, None, DownDirectory())
    assert route.category is LeaveCategory.ENGINEERING
    assert route.assigned_to is None
