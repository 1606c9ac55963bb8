from __future__ import annotations

import enum
import logging
import uuid
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy.exc import SQLAlchemyError

from leave_engine.exceptions import PersistenceFailure
from leave_engine.models.audit import AuditLog

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlmodel import SQLModel

    from leave_engine.models.enums import AuditAction, AuditEntityType

logger = logging.getLogger(__name__)


def model_to_audit_dict(model: SQLModel) -> dict[str, Any]:
    """Serialize a SQLModel instance to a JSON-safe dict for audit logging."""
    data: dict[str, Any] = {}
    for key, value in model.model_dump().items():
        if isinstance(value, uuid.UUID):
            data[key] = str(value)
        elif isinstance(value, (datetime, date)):
            data[key] = value.isoformat()
        elif isinstance(value, enum.Enum):
            data[key] = value.value
        else:
            data[key] = value
    return data


async def write_audit_log(
    session: AsyncSession,
    *,
    actor: str,
    entity_type: AuditEntityType,
    entity_id: str,
    action: AuditAction,
    before_json: dict[str, Any] | None = None,
    after_json: dict[str, Any] | None = None,
) -> AuditLog:
    """Write an immutable audit log entry within the caller's transaction."""
    entry = AuditLog(
        actor=actor,
        entity_type=entity_type.value,
        entity_id=entity_id,
        action=action.value,
        before_json=before_json,
        after_json=after_json,
    )
    session.add(entry)
    return entry


async def commit_or_fail(session: AsyncSession) -> None:
    """Commit the caller's transaction, surfacing storage errors as PersistenceFailure.

    The session is rolled back before raising so it can be reused.
    """
    try:
        await session.commit()
    except SQLAlchemyError as exc:
        logger.exception("Ledger transaction failed; rolling back")
        await session.rollback()
        raise PersistenceFailure from exc


async def flush_or_fail(session: AsyncSession) -> None:
    """Flush pending writes, surfacing storage errors as PersistenceFailure."""
    try:
        await session.flush()
    except SQLAlchemyError as exc:
        logger.exception("Ledger write failed; rolling back")
        await session.rollback()
        raise PersistenceFailure from exc
