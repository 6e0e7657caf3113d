# backend/app/routers/users.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..auth import get_actor
from ..db import get_db
from ..schemas import UserOut, UserRoleUpdate
from ..services import user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/search", response_model=list[UserOut])
def search_users(
    q: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    actor=Depends(get_actor),
):
    return user_service.search_users(db, q)


@router.put("/{user_id}/role", response_model=UserOut)
def update_user_role(
    user_id: str,
    payload: UserRoleUpdate,
    db: Session = Depends(get_db),
    actor=Depends(get_actor),
):
    return user_service.update_user_role(db, actor=actor, user_id=user_id, role=payload.role)
