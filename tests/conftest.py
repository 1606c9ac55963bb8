from __future__ import annotations

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from leave_engine.db import get_session
from leave_engine.main import app
from leave_engine.models import EmployeeRole, SQLModel
from leave_engine.services.directory import EmployeeInfo, InMemoryEmployeeDirectory, set_employee_directory
from leave_engine.services.notification import InMemoryNotificationDispatcher, set_notification_dispatcher

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator

    from sqlalchemy.ext.asyncio import AsyncEngine


def _employee(
    employee_id: str,
    username: str,
    name: str,
    department: str | None,
    role: EmployeeRole = EmployeeRole.EMPLOYEE,
    year: int = 2024,
) -> EmployeeInfo:
    return EmployeeInfo(
        id=employee_id,
        uid=employee_id,
        username=username,
        name=name,
        department=department,
        role=role,
        created_at=datetime(year, 1, 1, tzinfo=UTC),
    )


ROSTER = [
    _employee("admin-1", "root", "Rita Root", None, EmployeeRole.SUPER_ADMIN, year=2019),
    _employee("admin-2", "ops", "Oscar Ops", None, EmployeeRole.SUPER_ADMIN, year=2021),
    _employee("mgr-eng", "eng.lead", "Erin Lead", "Engineering", EmployeeRole.MANAGER, year=2020),
    _employee("mgr-eng-2", "eng.deputy", "Dan Deputy", "Engineering", EmployeeRole.MANAGER, year=2022),
    _employee("mgr-hr", "hr.lead", "Hana Lead", "HR", EmployeeRole.MANAGER, year=2020),
    _employee("emp-alice", "alice", "Alice Able", "Engineering"),
    _employee("emp-carol", "carol", "Carol Coder", "Engineering"),
    _employee("emp-bob", "bob", "Bob Benefits", "HR"),
    _employee("emp-dave", "dave", "Dave Drifter", None),
]


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """Fresh in-memory SQLite database per test."""
    _engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with _engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield _engine
    await _engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
async def async_client(db_session: AsyncSession) -> AsyncIterator[AsyncClient]:
    """Async HTTP client with the database session dependency overridden."""

    async def _override_get_session() -> AsyncIterator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_session] = _override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def directory() -> Iterator[InMemoryEmployeeDirectory]:
    """Seed the in-memory employee directory for every test."""
    svc = InMemoryEmployeeDirectory(ROSTER)
    set_employee_directory(svc)
    yield svc
    set_employee_directory(InMemoryEmployeeDirectory())


@pytest.fixture(autouse=True)
def notifications() -> Iterator[InMemoryNotificationDispatcher]:
    """Capture dispatched notifications for every test."""
    dispatcher = InMemoryNotificationDispatcher()
    set_notification_dispatcher(dispatcher)
    yield dispatcher
    set_notification_dispatcher(InMemoryNotificationDispatcher())
