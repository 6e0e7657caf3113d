# backend/app/routers/project_products.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ..auth import get_actor
from ..db import get_db
from ..schemas import ProjectProductCreate, ProjectProductOut
from ..services import link_service

router = APIRouter(prefix="/project-products", tags=["project-products"])


@router.get("", response_model=list[ProjectProductOut])
def list_project_products(
    project_id: Optional[str] = Query(default=None, alias="projectId"),
    product_id: Optional[str] = Query(default=None, alias="productId"),
    db: Session = Depends(get_db),
    actor=Depends(get_actor),
):
    return link_service.list_project_products(db, project_id=project_id, product_id=product_id)


@router.post("", response_model=ProjectProductOut, status_code=201)
def create_project_product(
    payload: ProjectProductCreate,
    db: Session = Depends(get_db),
    actor=Depends(get_actor),
):
    return link_service.create_project_product(db, actor_id=actor.id, payload=payload)


@router.delete("/{link_id}", status_code=204, response_class=Response)
def delete_project_product(link_id: str, db: Session = Depends(get_db), actor=Depends(get_actor)):
    link_service.delete_project_product(db, actor_id=actor.id, link_id=link_id)
    return Response(status_code=204)
