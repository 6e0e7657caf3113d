# backend/app/routers/programs.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ..auth import get_actor
from ..db import get_db
from ..schemas import ProgramCreate, ProgramOut, ProgramUpdate
from ..services import program_service

router = APIRouter(prefix="/programs", tags=["programs"])


@router.get("", response_model=list[ProgramOut])
def list_programs(
    portfolio_id: Optional[str] = Query(default=None, alias="portfolioId"),
    db: Session = Depends(get_db),
    actor=Depends(get_actor),
):
    return program_service.list_programs(db, portfolio_id=portfolio_id)


@router.get("/{program_id}", response_model=ProgramOut)
def get_program(program_id: str, db: Session = Depends(get_db), actor=Depends(get_actor)):
    return program_service.get_program(db, program_id)


@router.post("", response_model=ProgramOut, status_code=201)
def create_program(payload: ProgramCreate, db: Session = Depends(get_db), actor=Depends(get_actor)):
    return program_service.create_program(db, actor_id=actor.id, payload=payload)


@router.put("/{program_id}", response_model=ProgramOut)
def update_program(
    program_id: str,
    payload: ProgramUpdate,
    db: Session = Depends(get_db),
    actor=Depends(get_actor),
):
    return program_service.update_program(db, actor_id=actor.id, program_id=program_id, payload=payload)


@router.delete("/{program_id}", status_code=204, response_class=Response)
def delete_program(program_id: str, db: Session = Depends(get_db), actor=Depends(get_actor)):
    program_service.delete_program(db, actor_id=actor.id, program_id=program_id)
    return Response(status_code=204)
