# backend/app/routers/assignments.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from ..auth import get_actor
from ..db import get_db
from ..schemas import AssignmentCreate, AssignmentOut
from ..services import link_service

router = APIRouter(prefix="/assignments", tags=["assignments"])


@router.post("", response_model=AssignmentOut, status_code=201)
def create_assignment(payload: AssignmentCreate, db: Session = Depends(get_db), actor=Depends(get_actor)):
    return link_service.create_assignment(db, actor_id=actor.id, payload=payload)


@router.delete("/{assignment_id}", status_code=204, response_class=Response)
def delete_assignment(assignment_id: str, db: Session = Depends(get_db), actor=Depends(get_actor)):
    link_service.delete_assignment(db, actor_id=actor.id, assignment_id=assignment_id)
    return Response(status_code=204)
