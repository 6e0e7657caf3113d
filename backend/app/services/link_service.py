# backend/app/services/link_service.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..domain.errors import ConflictError
from ..models import AppUser, Assignment, Product, Project, ProjectProduct
from ..schemas import AssignmentCreate, AssignmentOut, ProjectProductCreate, ProjectProductOut
from .mutations import record_created, record_deleted
from .ownership import must_get, must_reference


# -------------------------
# Project <-> Product
# -------------------------
def list_project_products(
    db: Session,
    *,
    project_id: Optional[str] = None,
    product_id: Optional[str] = None,
) -> list[ProjectProduct]:
    q = select(ProjectProduct)
    if project_id:
        q = q.where(ProjectProduct.project_id == project_id)
    if product_id:
        q = q.where(ProjectProduct.product_id == product_id)
    return list(db.scalars(q.order_by(ProjectProduct.project_id, ProjectProduct.product_id)).all())


def create_project_product(db: Session, *, actor_id: str, payload: ProjectProductCreate) -> ProjectProduct:
    must_reference(db, Project, "projectId", payload.project_id)
    must_reference(db, Product, "productId", payload.product_id)

    existing = db.scalar(
        select(ProjectProduct.id).where(
            ProjectProduct.project_id == payload.project_id,
            ProjectProduct.product_id == payload.product_id,
        )
    )
    if existing is not None:
        raise ConflictError("Product is already linked to this project")

    row = ProjectProduct(project_id=payload.project_id, product_id=payload.product_id)
    return record_created(db, row=row, entity_type="project_product", actor_id=actor_id, out_schema=ProjectProductOut)


def delete_project_product(db: Session, *, actor_id: str, link_id: str) -> None:
    row = must_get(db, ProjectProduct, "project_product", link_id)
    record_deleted(db, row=row, entity_type="project_product", actor_id=actor_id)


# -------------------------
# Assignments
# -------------------------
def list_assignments(db: Session, *, project_id: str) -> list[Assignment]:
    must_get(db, Project, "project", project_id)
    q = select(Assignment).where(Assignment.project_id == project_id).order_by(Assignment.assigned_at.asc())
    return list(db.scalars(q).all())


def create_assignment(db: Session, *, actor_id: str, payload: AssignmentCreate) -> Assignment:
    must_reference(db, Project, "projectId", payload.project_id)
    must_reference(db, AppUser, "userId", payload.user_id)

    row = Assignment(
        project_id=payload.project_id,
        user_id=payload.user_id,
        role=payload.role.strip(),
        assigned_at=datetime.utcnow(),
    )
    return record_created(db, row=row, entity_type="assignment", actor_id=actor_id, out_schema=AssignmentOut)


def delete_assignment(db: Session, *, actor_id: str, assignment_id: str) -> None:
    row = must_get(db, Assignment, "assignment", assignment_id)
    record_deleted(db, row=row, entity_type="assignment", actor_id=actor_id)
