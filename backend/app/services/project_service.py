# backend/app/services/project_service.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from ..models import AppUser, Assignment, Demand, Phase, Program, Project, ProjectProduct, Status
from ..schemas import ProjectCreate, ProjectOut, ProjectUpdate
from .mutations import record_created, record_deleted, record_updated
from .ownership import must_get, must_reference, must_reference_lookup

ENTITY = "project"


def list_projects(db: Session, *, program_id: Optional[str] = None) -> list[Project]:
    q = select(Project)
    if program_id:
        q = q.where(Project.program_id == program_id)
    return list(db.scalars(q.order_by(desc(Project.created_at))).all())


def get_project(db: Session, project_id: str) -> Project:
    return must_get(db, Project, ENTITY, project_id)


def _check_refs(db: Session, data: dict) -> None:
    if data.get("program_id") is not None:
        must_reference(db, Program, "programId", data["program_id"])
    if data.get("demand_id") is not None:
        must_reference(db, Demand, "demandId", data["demand_id"])
    if data.get("project_manager_id") is not None:
        must_reference(db, AppUser, "projectManagerId", data["project_manager_id"])
    if "phase_id" in data:
        must_reference_lookup(db, Phase, "phaseId", data["phase_id"], ENTITY)
    if "status_id" in data:
        must_reference_lookup(db, Status, "statusId", data["status_id"], ENTITY)


def create_project(db: Session, *, actor_id: str, payload: ProjectCreate) -> Project:
    data = payload.model_dump()
    _check_refs(db, data)

    now = datetime.utcnow()
    row = Project(**data, owner_id=actor_id, created_at=now, updated_at=now)
    return record_created(db, row=row, entity_type=ENTITY, actor_id=actor_id, out_schema=ProjectOut)


def update_project(db: Session, *, actor_id: str, project_id: str, payload: ProjectUpdate) -> Project:
    row = get_project(db, project_id)
    patch = payload.model_dump(exclude_unset=True)
    _check_refs(db, patch)

    return record_updated(
        db,
        row=row,
        entity_type=ENTITY,
        actor_id=actor_id,
        out_schema=ProjectOut,
        patch=patch,
        status_field="status_id",
    )


def delete_project(db: Session, *, actor_id: str, project_id: str) -> None:
    """Hard delete; product links and assignments go with the project."""
    row = get_project(db, project_id)

    dependents = [
        *db.scalars(select(ProjectProduct).where(ProjectProduct.project_id == row.id)).all(),
        *db.scalars(select(Assignment).where(Assignment.project_id == row.id)).all(),
    ]
    record_deleted(db, row=row, entity_type=ENTITY, actor_id=actor_id, dependents=dependents)
