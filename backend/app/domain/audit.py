# backend/app/domain/audit.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel
from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from ..models import AuditLog
from ..schemas import ChangedDetails, CreatedDetails, DeletedDetails, FieldChange

log = logging.getLogger(__name__)

ENTITY_TYPES = (
    "portfolio",
    "program",
    "demand",
    "project",
    "product",
    "user",
    "project_product",
    "assignment",
)


def snapshot(row: Any, out_schema: type[BaseModel]) -> dict[str, Any]:
    """JSON-safe, camelCase view of a row, shaped exactly like the API returns it."""
    return out_schema.model_validate(row, from_attributes=True).model_dump(mode="json", by_alias=True)


def created_details(snap: dict[str, Any]) -> dict[str, Any]:
    return CreatedDetails(snapshot=snap).model_dump(mode="json", by_alias=True)


def changed_details(kind: str, before: dict[str, Any], after: dict[str, Any]) -> dict[str, Any]:
    """
    Field-level diff between two snapshots. Timestamps are excluded since every
    update refreshes them.
    """
    changes: dict[str, FieldChange] = {}
    for key, new in after.items():
        if key in ("updatedAt", "createdAt"):
            continue
        old = before.get(key)
        if old != new:
            changes[key] = FieldChange(before=old, after=new)
    return ChangedDetails(kind=kind, changes=changes).model_dump(mode="json", by_alias=True)


def deleted_details(entity_id: str) -> dict[str, Any]:
    return DeletedDetails(id=str(entity_id)).model_dump(mode="json", by_alias=True)


def audit_write(
    db: Session,
    *,
    entity_type: str,
    entity_id: str,
    change_type: str,
    actor_id: str,
    details: Optional[dict[str, Any]] = None,
) -> AuditLog:
    """
    Append one audit row to the current unit of work.

    - Never commits: the caller commits the entity write and this row together.
    - Flushes, so a failing insert surfaces inside the caller's transaction.
    """
    if entity_type not in ENTITY_TYPES:
        raise ValueError(f"unknown audit entity_type: {entity_type}")

    row = AuditLog(
        entity_type=entity_type,
        entity_id=str(entity_id),
        change_type=change_type,
        changed_by=str(actor_id),
        details=details,
        timestamp=datetime.utcnow(),
    )
    db.add(row)
    db.flush()

    log.info(
        "audit %s %s %s",
        change_type,
        entity_type,
        entity_id,
        extra={"user_id": str(actor_id), "entity_type": entity_type, "entity_id": str(entity_id)},
    )
    return row


def list_audit(
    db: Session,
    *,
    entity_id: Optional[str] = None,
    entity_type: Optional[str] = None,
    limit: Optional[int] = None,
) -> list[AuditLog]:
    q = select(AuditLog).order_by(desc(AuditLog.timestamp), desc(AuditLog.id))
    if entity_id:
        q = q.where(AuditLog.entity_id == entity_id)
    if entity_type:
        q = q.where(AuditLog.entity_type == entity_type)
    if limit:
        q = q.limit(limit)
    return list(db.scalars(q).all())
