# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, status

from leave_engine.api.deps import ActorDep, DirectoryDep, IdentityDep
from leave_engine.db import SessionDep
from leave_engine.schemas.request import (
    CreateLeaveRequestPayload,
    DecisionPayload,
    LeaveRequestListResponse,
    LeaveRequestResponse,
)
from leave_engine.services import request as request_service

requests_router = APIRouter(prefix="/leave-requests", tags=["requests"])


@requests_router.post("", response_model=LeaveRequestResponse, status_code=status.HTTP_201_CREATED)
async def create_leave_request(
    payload: CreateLeaveRequestPayload,
    session: SessionDep,
    directory: DirectoryDep,
    identity: IdentityDep,
) -> LeaveRequestResponse:
    """Submit a leave request; it is routed to an approver and stays pending."""
    return await request_service.create_leave_request(session, directory, identity, payload)


@requests_router.get("", response_model=LeaveRequestListResponse)
async def list_leave_requests(
    session: SessionDep,
    directory: DirectoryDep,
    actor: ActorDep,
) -> LeaveRequestListResponse:
    """Every request the caller may see, newest first."""
    return await request_service.list_visible_requests(session, directory, actor)


@requests_router.get("/pending", response_model=LeaveRequestListResponse)
async def list_pending(
    session: SessionDep,
    directory: DirectoryDep,
    actor: ActorDep,
) -> LeaveRequestListResponse:
    """Pending requests the caller may approve or reject."""
    return await request_service.list_pending_for(session, directory, actor)


@requests_router.get("/{request_id}", response_model=LeaveRequestResponse)
async def get_leave_request(
    request_id: uuid.UUID,
    session: SessionDep,
    directory: DirectoryDep,
    actor: ActorDep,
) -> LeaveRequestResponse:
    return await request_service.get_request(session, directory, actor, request_id)


@requests_router.post("/{request_id}/process", response_model=LeaveRequestResponse)
async def process_leave_request(
    request_id: uuid.UUID,
    payload: DecisionPayload,
    session: SessionDep,
    directory: DirectoryDep,
    actor: ActorDep,
) -> LeaveRequestResponse:
    """Approve or reject a pending request."""
    return await request_service.process_leave_request(session, directory, actor, request_id, payload)
