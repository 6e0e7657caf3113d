# backend/app/routers/audit.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..auth import get_actor
from ..db import get_db
from ..domain.audit import list_audit
from ..schemas import AuditLogOut

router = APIRouter(prefix="/audit", tags=["audit"])


@router.get("", response_model=list[AuditLogOut])
def list_audit_log(
    entity_type: str | None = Query(default=None, alias="entityType"),
    entity_id: str | None = Query(default=None, alias="entityId"),
    limit: int | None = Query(default=None, ge=1),
    db: Session = Depends(get_db),
    actor=Depends(get_actor),
):
    return list_audit(db, entity_id=entity_id, entity_type=entity_type, limit=limit)
