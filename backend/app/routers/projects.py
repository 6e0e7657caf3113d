# backend/app/routers/projects.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ..auth import get_actor
from ..db import get_db
from ..schemas import AssignmentOut, ProjectCreate, ProjectOut, ProjectUpdate
from ..services import link_service, project_service

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("", response_model=list[ProjectOut])
def list_projects(
    program_id: Optional[str] = Query(default=None, alias="programId"),
    db: Session = Depends(get_db),
    actor=Depends(get_actor),
):
    return project_service.list_projects(db, program_id=program_id)


@router.get("/{project_id}", response_model=ProjectOut)
def get_project(project_id: str, db: Session = Depends(get_db), actor=Depends(get_actor)):
    return project_service.get_project(db, project_id)


@router.get("/{project_id}/assignments", response_model=list[AssignmentOut])
def list_project_assignments(project_id: str, db: Session = Depends(get_db), actor=Depends(get_actor)):
    return link_service.list_assignments(db, project_id=project_id)


@router.post("", response_model=ProjectOut, status_code=201)
def create_project(payload: ProjectCreate, db: Session = Depends(get_db), actor=Depends(get_actor)):
    return project_service.create_project(db, actor_id=actor.id, payload=payload)


@router.put("/{project_id}", response_model=ProjectOut)
def update_project(
    project_id: str,
    payload: ProjectUpdate,
    db: Session = Depends(get_db),
    actor=Depends(get_actor),
):
    return project_service.update_project(db, actor_id=actor.id, project_id=project_id, payload=payload)


@router.delete("/{project_id}", status_code=204, response_class=Response)
def delete_project(project_id: str, db: Session = Depends(get_db), actor=Depends(get_actor)):
    project_service.delete_project(db, actor_id=actor.id, project_id=project_id)
    return Response(status_code=204)
