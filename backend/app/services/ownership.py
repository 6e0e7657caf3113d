# backend/app/services/ownership.py
from __future__ import annotations

from typing import Optional, TypeVar

from sqlalchemy.orm import Session

from ..db import Base
from ..domain.errors import NotFoundError, ValidationError
from ..models import Phase, Status

M = TypeVar("M", bound=Base)


def must_get(db: Session, model: type[M], entity_type: str, entity_id: str) -> M:
    """Row by primary key, or NotFoundError (the caller asked for this exact id)."""
    row = db.get(model, entity_id)
    if row is None:
        raise NotFoundError(entity_type, entity_id)
    return row


def must_reference(db: Session, model: type[M], field: str, ref_id: str) -> M:
    """
    Row referenced from a payload field. A dangling reference is a payload
    problem, so it is reported as a validation error on that field.
    """
    row = db.get(model, ref_id)
    if row is None:
        raise ValidationError.single(field, f"{model.__name__} {ref_id} does not exist")
    return row


def must_reference_lookup(
    db: Session,
    model: type[Phase] | type[Status],
    field: str,
    ref_id: Optional[str],
    domain: str,
) -> None:
    """Phase/Status reference must exist and belong to the referencing entity's domain."""
    if ref_id is None:
        return
    row = must_reference(db, model, field, ref_id)
    if row.type != domain:
        raise ValidationError.single(
            field,
            f"{model.__name__} '{row.name}' is a {row.type} {model.__name__.lower()}, expected {domain}",
        )
