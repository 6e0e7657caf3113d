# backend/app/services/program_service.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..domain.errors import ConflictError
from ..models import Demand, Portfolio, Product, Program, Project
from ..schemas import ProgramCreate, ProgramOut, ProgramUpdate
from .mutations import record_created, record_deleted, record_updated
from .ownership import must_get, must_reference

ENTITY = "program"


def list_programs(db: Session, *, portfolio_id: Optional[str] = None) -> list[Program]:
    q = select(Program)
    if portfolio_id:
        q = q.where(Program.portfolio_id == portfolio_id)
    return list(db.scalars(q.order_by(Program.name.asc())).all())


def get_program(db: Session, program_id: str) -> Program:
    return must_get(db, Program, ENTITY, program_id)


def create_program(db: Session, *, actor_id: str, payload: ProgramCreate) -> Program:
    must_reference(db, Portfolio, "portfolioId", payload.portfolio_id)

    now = datetime.utcnow()
    row = Program(
        **payload.model_dump(),
        owner_id=actor_id,
        created_at=now,
        updated_at=now,
    )
    return record_created(db, row=row, entity_type=ENTITY, actor_id=actor_id, out_schema=ProgramOut)


def update_program(db: Session, *, actor_id: str, program_id: str, payload: ProgramUpdate) -> Program:
    row = get_program(db, program_id)
    patch = payload.model_dump(exclude_unset=True)
    if "portfolio_id" in patch:
        must_reference(db, Portfolio, "portfolioId", patch["portfolio_id"])

    return record_updated(
        db,
        row=row,
        entity_type=ENTITY,
        actor_id=actor_id,
        out_schema=ProgramOut,
        patch=patch,
        status_field="status",
    )


def _child_counts(db: Session, program_id: str) -> dict[str, int]:
    out: dict[str, int] = {}
    for label, model in (("demand", Demand), ("project", Project), ("product", Product)):
        n = db.scalar(select(func.count()).select_from(model).where(model.program_id == program_id)) or 0
        if n:
            out[label] = int(n)
    return out


def delete_program(db: Session, *, actor_id: str, program_id: str) -> None:
    row = get_program(db, program_id)

    children = _child_counts(db, row.id)
    if children:
        summary = ", ".join(f"{n} {label}(s)" for label, n in children.items())
        raise ConflictError(f"Program still has {summary}; delete or move them first")

    record_deleted(db, row=row, entity_type=ENTITY, actor_id=actor_id)
