"""Tests for the policy store: organization defaults and per-employee overrides."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import select
from sqlmodel import col

from leave_engine.models.audit import AuditLog

if TYPE_CHECKING:
    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession

ADMIN = {"X-User-Id": "admin-1"}
MANAGER = {"X-User-Id": "mgr-eng"}
DEFAULTS_URL = "/policies/defaults"


def _override_url(employee_id: str = "emp-alice") -> str:
    return f"/policies/overrides/{employee_id}"


async def _set_defaults(client: AsyncClient, **values: int) -> Any:
    body = {"annual": 20, "sick": 10, "casual": 5, **values}
    return await client.put(DEFAULTS_URL, json=body, headers=ADMIN)


async def test_defaults_fall_back_to_settings(async_client: AsyncClient) -> None:
    resp = await async_client.get(DEFAULTS_URL, headers=MANAGER)
    assert resp.status_code == 200
    assert resp.json() == {"annual": 20, "sick": 10, "casual": 5, "updated_at": None, "updated_by": None}


async def test_super_admin_sets_defaults(async_client: AsyncClient) -> None:
    resp = await _set_defaults(async_client, annual=25)
    assert resp.status_code == 200
    body = resp.json()
    assert body["annual"] == 25
    assert body["updated_by"] == "root"
    assert body["updated_at"] is not None

    again = (await async_client.get(DEFAULTS_URL, headers=MANAGER)).json()
    assert again["annual"] == 25


async def test_defaults_change_feeds_balance(async_client: AsyncClient) -> None:
    await _set_defaults(async_client, casual=8)
    balance = (await async_client.get("/employees/emp-bob/balance", headers={"X-User-Id": "mgr-hr"})).json()
    assert balance["casual"]["entitlement"] == 8.0
    assert balance["is_custom"] is False


async def test_manager_cannot_set_defaults(async_client: AsyncClient) -> None:
    resp = await async_client.put(DEFAULTS_URL, json={"annual": 1, "sick": 1, "casual": 1}, headers=MANAGER)
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Super-admin access required"


async def test_negative_entitlement_is_422(async_client: AsyncClient) -> None:
    resp = await _set_defaults(async_client, sick=-1)
    assert resp.status_code == 422


async def test_effective_policy_without_override(async_client: AsyncClient) -> None:
    resp = await async_client.get(_override_url(), headers=MANAGER)
    body = resp.json()
    assert body["employee_id"] == "emp-alice"
    assert body["is_custom"] is False
    assert (body["annual"], body["sick"], body["casual"]) == (20, 10, 5)


async def test_effective_policy_hidden_from_other_departments(async_client: AsyncClient) -> None:
    resp = await async_client.get(_override_url(), headers={"X-User-Id": "emp-bob"})
    assert resp.status_code == 403
    resp = await async_client.get(_override_url("emp-bob"), headers={"X-User-Id": "emp-bob"})
    assert resp.status_code == 200


async def test_partial_override_keeps_other_types(async_client: AsyncClient) -> None:
    resp = await async_client.put(_override_url(), json={"annual": 30}, headers=ADMIN)
    assert resp.status_code == 200
    body = resp.json()
    assert body["is_custom"] is True
    assert (body["annual"], body["sick"], body["casual"]) == (30, 10, 5)
    assert body["created_at"] is not None

    balance = (await async_client.get("/employees/emp-alice/balance", headers=MANAGER)).json()
    assert balance["annual"]["entitlement"] == 30.0
    assert balance["is_custom"] is True


async def test_override_update_merges_with_previous_override(async_client: AsyncClient) -> None:
    await async_client.put(_override_url(), json={"annual": 30}, headers=ADMIN)
    body = (await async_client.put(_override_url(), json={"sick": 2}, headers=ADMIN)).json()
    assert (body["annual"], body["sick"], body["casual"]) == (30, 2, 5)


async def test_override_survives_defaults_change(async_client: AsyncClient) -> None:
    await async_client.put(_override_url(), json={"annual": 30}, headers=ADMIN)
    await _set_defaults(async_client, annual=15, casual=3)
    body = (await async_client.get(_override_url(), headers=MANAGER)).json()
    assert (body["annual"], body["casual"]) == (30, 5)


async def test_clear_override_reverts_to_defaults(async_client: AsyncClient) -> None:
    await async_client.put(_override_url(), json={"annual": 30}, headers=ADMIN)
    resp = await async_client.delete(_override_url(), headers=ADMIN)
    assert resp.status_code == 200
    body = resp.json()
    assert body["is_custom"] is False
    assert body["annual"] == 20


async def test_clear_missing_override_is_noop(async_client: AsyncClient) -> None:
    resp = await async_client.delete(_override_url("emp-bob"), headers=ADMIN)
    assert resp.status_code == 200
    assert resp.json()["is_custom"] is False


async def test_manager_cannot_write_overrides(async_client: AsyncClient) -> None:
    assert (await async_client.put(_override_url(), json={"annual": 99}, headers=MANAGER)).status_code == 403
    assert (await async_client.delete(_override_url(), headers=MANAGER)).status_code == 403


async def test_policy_writes_are_audited(async_client: AsyncClient, db_session: AsyncSession) -> None:
    await _set_defaults(async_client, annual=22)
    await async_client.put(_override_url(), json={"annual": 30}, headers=ADMIN)
    await async_client.delete(_override_url(), headers=ADMIN)

    result = await db_session.execute(select(AuditLog).order_by(col(AuditLog.created_at)))
    entries = [(e.entity_type, e.entity_id, e.action, e.actor) for e in result.scalars().all()]
    assert entries == [
        ("POLICY_DEFAULTS", "1", "UPDATE", "root"),
        ("POLICY_OVERRIDE", "emp-alice", "UPDATE", "root"),
        ("POLICY_OVERRIDE", "emp-alice", "DELETE", "root"),
    ]
