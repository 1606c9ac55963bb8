"""Approval routing: category -> department -> responsible approver.

The outcome is advisory metadata on the request (``assigned_to``). It decides
who is notified, not who may act; see ``services.authorization``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from leave_engine.exceptions import RoutingUnresolved
from leave_engine.models.enums import LeaveCategory

if TYPE_CHECKING:
    from leave_engine.services.directory import EmployeeDirectory, EmployeeInfo

logger = logging.getLogger(__name__)

# Engineering and Technical are separate departments with separate managers.
ROUTING_TABLE: dict[LeaveCategory, str | None] = {
    LeaveCategory.ENGINEERING: "Engineering",
    LeaveCategory.TECHNICAL: "Technical",
    LeaveCategory.HR: "HR",
    LeaveCategory.FINANCE: "Finance",
    LeaveCategory.SALES: "Sales",
    LeaveCategory.FACILITIES: "Facilities",
    LeaveCategory.OTHER: None,
}

_DEPARTMENT_TO_CATEGORY: dict[str, LeaveCategory] = {
    department: category for category, department in ROUTING_TABLE.items() if department is not None
}


@dataclass(frozen=True)
class RouteResolution:
    """Where a request was routed."""

    category: LeaveCategory
    department: str | None
    assigned_to: EmployeeInfo | None

    @property
    def assigned_username(self) -> str | None:
        return self.assigned_to.username if self.assigned_to else None


def category_for_department(department: str | None) -> LeaveCategory:
    """Reverse lookup of the routing table; unknown departments route as OTHER."""
    if department is None:
        return LeaveCategory.OTHER
    return _DEPARTMENT_TO_CATEGORY.get(department, LeaveCategory.OTHER)


def resolve_category(employee: EmployeeInfo, explicit_category: str | None) -> LeaveCategory:
    """Pick the explicit category when valid, else derive it from the employee's department."""
    if explicit_category:
        try:
            return LeaveCategory(explicit_category)
        except ValueError:
            logger.warning(
                "Ignoring unknown leave category %r for employee %s; deriving from department",
                explicit_category,
                employee.id,
            )
    return category_for_department(employee.department)


def _first_by_creation(candidates: list[EmployeeInfo]) -> EmployeeInfo | None:
    """Deterministic pick: earliest created active employee, ties broken by id."""
    active = [c for c in candidates if c.is_active]
    if not active:
        return None
    return min(
        active,
        key=lambda e: (e.created_at is None, e.created_at.timestamp() if e.created_at else 0.0, e.id),
    )


async def _first_super_admin(directory: EmployeeDirectory, category: LeaveCategory) -> EmployeeInfo:
    try:
        super_admins = await directory.get_super_admins()
    except Exception as exc:
        logger.exception("Super-admin lookup failed while routing %s leave", category)
        raise RoutingUnresolved(category) from exc
    chosen = _first_by_creation(super_admins)
    if chosen is None:
        raise RoutingUnresolved(category)
    return chosen


async def resolve_route(
    employee: EmployeeInfo,
    explicit_category: str | None,
    directory: EmployeeDirectory,
) -> RouteResolution:
    """Resolve category, department and approver for a new request.

    Fallback chain: department manager, then the first super-admin, then
    nobody. An unresolved route never blocks request creation.
    """
    category = resolve_category(employee, explicit_category)
    department = ROUTING_TABLE[category]

    assigned: EmployeeInfo | None = None
    if department is not None:
        try:
            assigned = _first_by_creation(await directory.get_managers_by_department(department))
        except Exception:
            logger.exception("Manager lookup failed for department %s; falling back to super-admin", department)
        if assigned is None:
            logger.info("No active manager in %s; falling back to super-admin", department)

    if assigned is None:
        try:
            assigned = await _first_super_admin(directory, category)
        except RoutingUnresolved as exc:
            logger.warning("%s; request will be created unassigned", exc.message)

    logger.info(
        "Routed leave for %s: category=%s department=%s assigned_to=%s",
        employee.id,
        category,
        department or "-",
        assigned.username if assigned else "-",
    )
    return RouteResolution(category=category, department=department, assigned_to=assigned)
