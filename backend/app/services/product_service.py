# backend/app/services/product_service.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from ..models import Product, Program, ProjectProduct
from ..schemas import ProductCreate, ProductOut, ProductUpdate
from .mutations import record_created, record_deleted, record_updated
from .ownership import must_get, must_reference

ENTITY = "product"


def list_products(db: Session, *, program_id: Optional[str] = None) -> list[Product]:
    q = select(Product)
    if program_id:
        q = q.where(Product.program_id == program_id)
    return list(db.scalars(q.order_by(desc(Product.created_at))).all())


def get_product(db: Session, product_id: str) -> Product:
    return must_get(db, Product, ENTITY, product_id)


def create_product(db: Session, *, actor_id: str, payload: ProductCreate) -> Product:
    must_reference(db, Program, "programId", payload.program_id)

    now = datetime.utcnow()
    row = Product(**payload.model_dump(), owner_id=actor_id, created_at=now, updated_at=now)
    return record_created(db, row=row, entity_type=ENTITY, actor_id=actor_id, out_schema=ProductOut)


def update_product(db: Session, *, actor_id: str, product_id: str, payload: ProductUpdate) -> Product:
    row = get_product(db, product_id)
    patch = payload.model_dump(exclude_unset=True)
    if "program_id" in patch:
        must_reference(db, Program, "programId", patch["program_id"])

    return record_updated(
        db,
        row=row,
        entity_type=ENTITY,
        actor_id=actor_id,
        out_schema=ProductOut,
        patch=patch,
        status_field="status",
    )


def delete_product(db: Session, *, actor_id: str, product_id: str) -> None:
    row = get_product(db, product_id)
    links = db.scalars(select(ProjectProduct).where(ProjectProduct.product_id == row.id)).all()
    record_deleted(db, row=row, entity_type=ENTITY, actor_id=actor_id, dependents=links)
