# backend/app/services/user_service.py
from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from ..domain.errors import AuthorizationError
from ..models import AppUser
from ..schemas import UserOut, UserUpsert
from .mutations import record_updated, unit_of_work
from .ownership import must_get

log = logging.getLogger(__name__)

SEARCH_LIMIT = 20


def get_user(db: Session, user_id: str) -> AppUser:
    return must_get(db, AppUser, "user", user_id)


def upsert_user(db: Session, payload: UserUpsert) -> AppUser:
    """
    Insert-or-update keyed on id. Every supplied field except id overwrites the
    stored value; role is only touched when given.
    """
    data = payload.model_dump(exclude={"id"})
    if data.get("role") is None:
        data.pop("role", None)

    now = datetime.utcnow()
    with unit_of_work(db, "upsert user"):
        row = db.get(AppUser, payload.id)
        if row is None:
            row = AppUser(id=payload.id, created_at=now, **data)
            db.add(row)
        else:
            for key, value in data.items():
                setattr(row, key, value)
        row.updated_at = now
        db.flush()

    log.debug("user upserted", extra={"user_id": row.id})
    return row


def search_users(db: Session, query: str | None) -> list[AppUser]:
    if not query:
        return []

    # plain substring: % and _ in the query match themselves
    stmt = (
        select(AppUser)
        .where(
            or_(
                AppUser.first_name.icontains(query, autoescape=True),
                AppUser.last_name.icontains(query, autoescape=True),
                AppUser.email.icontains(query, autoescape=True),
            )
        )
        .order_by(AppUser.first_name, AppUser.last_name, AppUser.id)
        .limit(SEARCH_LIMIT)
    )
    return list(db.scalars(stmt).all())


def update_user_role(db: Session, *, actor: AppUser, user_id: str, role: str) -> AppUser:
    if actor.role != "admin":
        raise AuthorizationError("Only admins can change user roles")

    row = get_user(db, user_id)
    return record_updated(
        db,
        row=row,
        entity_type="user",
        actor_id=actor.id,
        out_schema=UserOut,
        patch={"role": role},
    )
