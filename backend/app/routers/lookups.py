# backend/app/routers/lookups.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..auth import get_actor
from ..db import get_db
from ..schemas import PhaseCreate, PhaseOut, PhaseUpdate, StatusCreate, StatusOut, StatusUpdate
from ..services import lookup_service

phases_router = APIRouter(prefix="/phases", tags=["lookups"])
statuses_router = APIRouter(prefix="/statuses", tags=["lookups"])


# -------------------------
# Phases
# -------------------------
@phases_router.get("", response_model=list[PhaseOut])
def list_phases(
    type_: Optional[str] = Query(default=None, alias="type", description="demand|project"),
    db: Session = Depends(get_db),
    actor=Depends(get_actor),
):
    return lookup_service.list_phases(db, type_=type_)


@phases_router.get("/{phase_id}", response_model=PhaseOut)
def get_phase(phase_id: str, db: Session = Depends(get_db), actor=Depends(get_actor)):
    return lookup_service.get_phase(db, phase_id)


@phases_router.post("", response_model=PhaseOut, status_code=201)
def create_phase(payload: PhaseCreate, db: Session = Depends(get_db), actor=Depends(get_actor)):
    return lookup_service.create_phase(db, payload)


@phases_router.put("/{phase_id}", response_model=PhaseOut)
def update_phase(phase_id: str, payload: PhaseUpdate, db: Session = Depends(get_db), actor=Depends(get_actor)):
    return lookup_service.update_phase(db, phase_id, payload)


# -------------------------
# Statuses
# -------------------------
@statuses_router.get("", response_model=list[StatusOut])
def list_statuses(
    type_: Optional[str] = Query(default=None, alias="type", description="demand|project"),
    db: Session = Depends(get_db),
    actor=Depends(get_actor),
):
    return lookup_service.list_statuses(db, type_=type_)


@statuses_router.get("/{status_id}", response_model=StatusOut)
def get_status(status_id: str, db: Session = Depends(get_db), actor=Depends(get_actor)):
    return lookup_service.get_status(db, status_id)


@statuses_router.post("", response_model=StatusOut, status_code=201)
def create_status(payload: StatusCreate, db: Session = Depends(get_db), actor=Depends(get_actor)):
    return lookup_service.create_status(db, payload)


@statuses_router.put("/{status_id}", response_model=StatusOut)
def update_status(status_id: str, payload: StatusUpdate, db: Session = Depends(get_db), actor=Depends(get_actor)):
    return lookup_service.update_status(db, status_id, payload)
