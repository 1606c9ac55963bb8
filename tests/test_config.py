from __future__ import annotations

import pytest

from leave_engine.config import Settings
from leave_engine.db import engine_options


def test_default_entitlements() -> None:
    settings = Settings()
    assert (settings.default_annual_leaves, settings.default_sick_leaves, settings.default_casual_leaves) == (20, 10, 5)


def test_entitlements_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DEFAULT_ANNUAL_LEAVES", "25")
    assert Settings().default_annual_leaves == 25


def test_postgres_engine_gets_pool_sizing() -> None:
    options = engine_options(Settings(database_url="postgresql+asyncpg://u:p@db/leave", db_pool_size=3))
    assert options["pool_size"] == 3
    assert options["max_overflow"] == 10
    assert options["pool_pre_ping"] is True


def test_sqlite_engine_skips_pool_sizing() -> None:
    options = engine_options(Settings(database_url="sqlite+aiosqlite://"))
    assert "pool_size" not in options
    assert "max_overflow" not in options
