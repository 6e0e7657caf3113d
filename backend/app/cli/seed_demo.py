# backend/app/cli/seed_demo.py
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db import Base, SessionLocal, engine
from app.domain.money import to_cents
from app.models import Portfolio, Program
from app.schemas import PortfolioCreate, ProgramCreate, UserUpsert
from app.services.lookup_service import seed_default_lookups
from app.services.portfolio_service import create_portfolio
from app.services.program_service import create_program
from app.services.user_service import upsert_user


@dataclass(frozen=True)
class SeedResult:
    user_id: str
    portfolio_id: str
    program_id: str
    lookups_created: dict[str, int]


def seed_lookups() -> dict[str, Any]:
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        return seed_default_lookups(db)
    finally:
        db.close()


def _get_or_create_portfolio(db: Session, *, actor_id: str, name: str, budget: Decimal) -> Portfolio:
    row = db.scalar(select(Portfolio).where(Portfolio.name == name).limit(1))
    if row:
        return row
    return create_portfolio(
        db,
        actor_id=actor_id,
        payload=PortfolioCreate(name=name, status="active", budget=to_cents(budget)),
    )


def _get_or_create_program(db: Session, *, actor_id: str, portfolio_id: str, name: str) -> Program:
    row = db.scalar(
        select(Program).where(Program.portfolio_id == portfolio_id, Program.name == name).limit(1)
    )
    if row:
        return row
    return create_program(
        db,
        actor_id=actor_id,
        payload=ProgramCreate(name=name, portfolio_id=portfolio_id, status="active"),
    )


def seed_demo(
    *,
    user_id: str = "demo-admin",
    user_email: str = "admin@spm.local",
    portfolio_name: str = "Cloud Initiative",
    portfolio_budget: Decimal = Decimal("500000"),
    program_name: str = "Migration",
) -> SeedResult:
    """Re-runnable: existing rows (matched by name) are reused, not duplicated."""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        lookups = seed_default_lookups(db)
        user = upsert_user(
            db,
            UserUpsert(id=user_id, email=user_email, first_name="Demo", last_name="Admin", role="admin"),
        )
        portfolio = _get_or_create_portfolio(db, actor_id=user.id, name=portfolio_name, budget=portfolio_budget)
        program = _get_or_create_program(db, actor_id=user.id, portfolio_id=portfolio.id, name=program_name)

        return SeedResult(
            user_id=user.id,
            portfolio_id=portfolio.id,
            program_id=program.id,
            lookups_created=dict(lookups["created"]),
        )
    finally:
        db.close()
