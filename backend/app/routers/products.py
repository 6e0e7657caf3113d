# backend/app/routers/products.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ..auth import get_actor
from ..db import get_db
from ..schemas import ProductCreate, ProductOut, ProductUpdate
from ..services import product_service

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=list[ProductOut])
def list_products(
    program_id: Optional[str] = Query(default=None, alias="programId"),
    db: Session = Depends(get_db),
    actor=Depends(get_actor),
):
    return product_service.list_products(db, program_id=program_id)


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: str, db: Session = Depends(get_db), actor=Depends(get_actor)):
    return product_service.get_product(db, product_id)


@router.post("", response_model=ProductOut, status_code=201)
def create_product(payload: ProductCreate, db: Session = Depends(get_db), actor=Depends(get_actor)):
    return product_service.create_product(db, actor_id=actor.id, payload=payload)


# PUT and PATCH are both partial updates
@router.api_route("/{product_id}", methods=["PUT", "PATCH"], response_model=ProductOut)
def update_product(
    product_id: str,
    payload: ProductUpdate,
    db: Session = Depends(get_db),
    actor=Depends(get_actor),
):
    return product_service.update_product(db, actor_id=actor.id, product_id=product_id, payload=payload)


@router.delete("/{product_id}", status_code=204, response_class=Response)
def delete_product(product_id: str, db: Session = Depends(get_db), actor=Depends(get_actor)):
    product_service.delete_product(db, actor_id=actor.id, product_id=product_id)
    return Response(status_code=204)
