# backend/app/services/lookup_service.py
from __future__ import annotations

import logging
from typing import Any, Optional

from sqlalchemy import func, select, text
from sqlalchemy.orm import Session

from ..domain.errors import ValidationError
from ..models import Phase, Status
from ..schemas import PhaseCreate, PhaseUpdate, StatusCreate, StatusUpdate
from .mutations import unit_of_work
from .ownership import must_get

log = logging.getLogger(__name__)

LOOKUP_TYPES = ("demand", "project")

DEFAULT_PHASES: dict[str, list[str]] = {
    "demand": ["Idea", "Analysis", "Approved", "Rejected"],
    "project": ["Planning", "Development", "Testing", "Deployment", "Complete"],
}

DEFAULT_STATUSES: dict[str, list[tuple[str, str]]] = {
    "demand": [
        ("Pending", "yellow"),
        ("Under Review", "blue"),
        ("Approved", "green"),
        ("Rejected", "red"),
        ("On Hold", "orange"),
    ],
    "project": [
        ("Active", "green"),
        ("On Hold", "yellow"),
        ("At Risk", "red"),
        ("Completed", "blue"),
        ("Cancelled", "gray"),
    ],
}


def _check_type(type_: Optional[str]) -> None:
    if type_ is not None and type_ not in LOOKUP_TYPES:
        raise ValidationError.single("type", f"must be one of {', '.join(LOOKUP_TYPES)}")


# -------------------------
# Phases
# -------------------------
def list_phases(db: Session, *, type_: Optional[str] = None) -> list[Phase]:
    _check_type(type_)
    q = select(Phase).where(Phase.is_active.is_(True))
    if type_:
        q = q.where(Phase.type == type_)
    return list(db.scalars(q.order_by(Phase.order.asc(), Phase.name.asc())).all())


def get_phase(db: Session, phase_id: str) -> Phase:
    # Inactive phases stay resolvable by id
    return must_get(db, Phase, "phase", phase_id)


def next_phase_order(db: Session, type_: str) -> int:
    current = db.scalar(select(func.max(Phase.order)).where(Phase.type == type_))
    return int(current or 0) + 1


def create_phase(db: Session, payload: PhaseCreate) -> Phase:
    with unit_of_work(db, "create phase"):
        order = payload.order if payload.order is not None else next_phase_order(db, payload.type)
        row = Phase(name=payload.name, type=payload.type, order=order, is_active=payload.is_active)
        db.add(row)
        db.flush()
    log.info("phase created", extra={"entity_type": "phase", "entity_id": row.id})
    return row


def update_phase(db: Session, phase_id: str, payload: PhaseUpdate) -> Phase:
    row = get_phase(db, phase_id)
    with unit_of_work(db, "update phase"):
        for key, value in payload.model_dump(exclude_unset=True).items():
            setattr(row, key, value)
        db.flush()
    return row


# -------------------------
# Statuses
# -------------------------
def list_statuses(db: Session, *, type_: Optional[str] = None) -> list[Status]:
    _check_type(type_)
    q = select(Status).where(Status.is_active.is_(True))
    if type_:
        q = q.where(Status.type == type_)
    return list(db.scalars(q.order_by(Status.name.asc())).all())


def get_status(db: Session, status_id: str) -> Status:
    return must_get(db, Status, "status", status_id)


def create_status(db: Session, payload: StatusCreate) -> Status:
    with unit_of_work(db, "create status"):
        row = Status(name=payload.name, type=payload.type, color=payload.color, is_active=payload.is_active)
        db.add(row)
        db.flush()
    log.info("status created", extra={"entity_type": "status", "entity_id": row.id})
    return row


def update_status(db: Session, status_id: str, payload: StatusUpdate) -> Status:
    row = get_status(db, status_id)
    with unit_of_work(db, "update status"):
        for key, value in payload.model_dump(exclude_unset=True).items():
            setattr(row, key, value)
        db.flush()
    return row


# -------------------------
# Default data
# -------------------------
# pg_advisory_xact_lock key; held until the seed transaction ends
SEED_LOCK_KEY = 0x5EED_1007


def _lock_seed(db: Session) -> None:
    """
    Serialize seeding across processes sharing one Postgres database.
    SQLite is a single-process dev store and takes no lock.
    """
    if db.get_bind().dialect.name == "postgresql":
        db.execute(text("SELECT pg_advisory_xact_lock(:key)"), {"key": SEED_LOCK_KEY})


def seed_default_lookups(db: Session) -> dict[str, Any]:
    """
    Insert the default phases/statuses that are missing.

    Idempotent: a row is skipped when one with the same (name, type) already
    exists, active or not.
    """
    created = {"phases": 0, "statuses": 0}

    with unit_of_work(db, "seed lookups"):
        _lock_seed(db)
        for type_, names in DEFAULT_PHASES.items():
            for order, name in enumerate(names, start=1):
                exists = db.scalar(select(Phase.id).where(Phase.type == type_, Phase.name == name).limit(1))
                if exists is not None:
                    continue
                db.add(Phase(name=name, type=type_, order=order, is_active=True))
                created["phases"] += 1

        for type_, rows in DEFAULT_STATUSES.items():
            for name, color in rows:
                exists = db.scalar(select(Status.id).where(Status.type == type_, Status.name == name).limit(1))
                if exists is not None:
                    continue
                db.add(Status(name=name, type=type_, color=color, is_active=True))
                created["statuses"] += 1

    log.info("default lookups seeded: %s", created)
    return {"seeded": bool(created["phases"] or created["statuses"]), "created": created}
