# backend/app/services/mutations.py
from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Iterable, Iterator, Optional, TypeVar

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..db import Base, transaction
from ..domain.audit import audit_write, changed_details, created_details, deleted_details, snapshot
from ..domain.errors import StorageError

log = logging.getLogger(__name__)

M = TypeVar("M", bound=Base)


@contextmanager
def unit_of_work(db: Session, operation: str) -> Iterator[Session]:
    """
    Entity write + audit write commit together or not at all.
    Driver errors leave as StorageError; domain errors pass through untouched.
    """
    try:
        with transaction(db):
            yield db
    except SQLAlchemyError as e:
        raise StorageError(operation, e) from e


def record_created(
    db: Session,
    *,
    row: M,
    entity_type: str,
    actor_id: str,
    out_schema: type[BaseModel],
) -> M:
    with unit_of_work(db, f"create {entity_type}"):
        db.add(row)
        db.flush()
        audit_write(
            db,
            entity_type=entity_type,
            entity_id=str(row.id),
            change_type="created",
            actor_id=actor_id,
            details=created_details(snapshot(row, out_schema)),
        )
    log.info("%s created", entity_type, extra={"user_id": actor_id, "entity_type": entity_type, "entity_id": str(row.id)})
    return row


def record_updated(
    db: Session,
    *,
    row: M,
    entity_type: str,
    actor_id: str,
    out_schema: type[BaseModel],
    patch: dict[str, Any],
    status_field: Optional[str] = None,
) -> M:
    """
    Apply a partial patch. Only keys present in `patch` are touched; updated_at
    is always refreshed. A change of `status_field` is audited as status_changed.
    """
    before = snapshot(row, out_schema)
    old_status = getattr(row, status_field) if status_field else None

    with unit_of_work(db, f"update {entity_type}"):
        for key, value in patch.items():
            setattr(row, key, value)
        if hasattr(row, "updated_at"):
            row.updated_at = datetime.utcnow()
        db.flush()

        kind = "updated"
        if status_field and status_field in patch and getattr(row, status_field) != old_status:
            kind = "status_changed"

        audit_write(
            db,
            entity_type=entity_type,
            entity_id=str(row.id),
            change_type=kind,
            actor_id=actor_id,
            details=changed_details(kind, before, snapshot(row, out_schema)),
        )
    log.info("%s %s", entity_type, kind, extra={"user_id": actor_id, "entity_type": entity_type, "entity_id": str(row.id)})
    return row


def record_deleted(
    db: Session,
    *,
    row: Base,
    entity_type: str,
    actor_id: str,
    dependents: Iterable[Base] = (),
) -> None:
    """Hard delete (dependents first). The audit row is the only history left behind."""
    entity_id = str(row.id)
    with unit_of_work(db, f"delete {entity_type}"):
        for dep in dependents:
            db.delete(dep)
        db.flush()
        db.delete(row)
        db.flush()
        audit_write(
            db,
            entity_type=entity_type,
            entity_id=entity_id,
            change_type="deleted",
            actor_id=actor_id,
            details=deleted_details(entity_id),
        )
    log.info("%s deleted", entity_type, extra={"user_id": actor_id, "entity_type": entity_type, "entity_id": entity_id})
