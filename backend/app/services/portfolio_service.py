# backend/app/services/portfolio_service.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..domain.errors import ConflictError
from ..models import Portfolio, Program
from ..schemas import PortfolioCreate, PortfolioOut, PortfolioUpdate
from .mutations import record_created, record_deleted, record_updated
from .ownership import must_get

ENTITY = "portfolio"


def list_portfolios(db: Session) -> list[Portfolio]:
    return list(db.scalars(select(Portfolio).order_by(Portfolio.name.asc())).all())


def get_portfolio(db: Session, portfolio_id: str) -> Portfolio:
    return must_get(db, Portfolio, ENTITY, portfolio_id)


def create_portfolio(db: Session, *, actor_id: str, payload: PortfolioCreate) -> Portfolio:
    now = datetime.utcnow()
    row = Portfolio(
        **payload.model_dump(),
        owner_id=actor_id,
        created_at=now,
        updated_at=now,
    )
    return record_created(db, row=row, entity_type=ENTITY, actor_id=actor_id, out_schema=PortfolioOut)


def update_portfolio(db: Session, *, actor_id: str, portfolio_id: str, payload: PortfolioUpdate) -> Portfolio:
    row = get_portfolio(db, portfolio_id)
    return record_updated(
        db,
        row=row,
        entity_type=ENTITY,
        actor_id=actor_id,
        out_schema=PortfolioOut,
        patch=payload.model_dump(exclude_unset=True),
        status_field="status",
    )


def delete_portfolio(db: Session, *, actor_id: str, portfolio_id: str) -> None:
    row = get_portfolio(db, portfolio_id)

    children = db.scalar(select(func.count()).select_from(Program).where(Program.portfolio_id == row.id))
    if children:
        raise ConflictError(f"Portfolio still has {children} program(s); delete or move them first")

    record_deleted(db, row=row, entity_type=ENTITY, actor_id=actor_id)
