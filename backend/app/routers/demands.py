# backend/app/routers/demands.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ..auth import get_actor
from ..db import get_db
from ..schemas import DemandCreate, DemandOut, DemandUpdate
from ..services import demand_service

router = APIRouter(prefix="/demands", tags=["demands"])


@router.get("", response_model=list[DemandOut])
def list_demands(
    program_id: Optional[str] = Query(default=None, alias="programId"),
    db: Session = Depends(get_db),
    actor=Depends(get_actor),
):
    return demand_service.list_demands(db, program_id=program_id)


@router.get("/{demand_id}", response_model=DemandOut)
def get_demand(demand_id: str, db: Session = Depends(get_db), actor=Depends(get_actor)):
    return demand_service.get_demand(db, demand_id)


@router.post("", response_model=DemandOut, status_code=201)
def create_demand(payload: DemandCreate, db: Session = Depends(get_db), actor=Depends(get_actor)):
    return demand_service.create_demand(db, actor_id=actor.id, payload=payload)


@router.put("/{demand_id}", response_model=DemandOut)
def update_demand(
    demand_id: str,
    payload: DemandUpdate,
    db: Session = Depends(get_db),
    actor=Depends(get_actor),
):
    return demand_service.update_demand(db, actor_id=actor.id, demand_id=demand_id, payload=payload)


@router.delete("/{demand_id}", status_code=204, response_class=Response)
def delete_demand(demand_id: str, db: Session = Depends(get_db), actor=Depends(get_actor)):
    demand_service.delete_demand(db, actor_id=actor.id, demand_id=demand_id)
    return Response(status_code=204)
