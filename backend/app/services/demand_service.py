# backend/app/services/demand_service.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from ..models import Demand, Phase, Program, Status
from ..schemas import DemandCreate, DemandOut, DemandUpdate
from .mutations import record_created, record_deleted, record_updated
from .ownership import must_get, must_reference, must_reference_lookup

ENTITY = "demand"


def list_demands(db: Session, *, program_id: Optional[str] = None) -> list[Demand]:
    q = select(Demand)
    if program_id:
        q = q.where(Demand.program_id == program_id)
    return list(db.scalars(q.order_by(desc(Demand.created_at))).all())


def get_demand(db: Session, demand_id: str) -> Demand:
    return must_get(db, Demand, ENTITY, demand_id)


def create_demand(db: Session, *, actor_id: str, payload: DemandCreate) -> Demand:
    must_reference(db, Program, "programId", payload.program_id)
    must_reference_lookup(db, Phase, "phaseId", payload.phase_id, ENTITY)
    must_reference_lookup(db, Status, "statusId", payload.status_id, ENTITY)

    now = datetime.utcnow()
    data = payload.model_dump()
    data["requested_date"] = data.get("requested_date") or now
    row = Demand(**data, owner_id=actor_id, created_at=now, updated_at=now)
    return record_created(db, row=row, entity_type=ENTITY, actor_id=actor_id, out_schema=DemandOut)


def update_demand(db: Session, *, actor_id: str, demand_id: str, payload: DemandUpdate) -> Demand:
    row = get_demand(db, demand_id)
    patch = payload.model_dump(exclude_unset=True)

    if "program_id" in patch:
        must_reference(db, Program, "programId", patch["program_id"])
    if "phase_id" in patch:
        must_reference_lookup(db, Phase, "phaseId", patch["phase_id"], ENTITY)
    if "status_id" in patch:
        must_reference_lookup(db, Status, "statusId", patch["status_id"], ENTITY)

    return record_updated(
        db,
        row=row,
        entity_type=ENTITY,
        actor_id=actor_id,
        out_schema=DemandOut,
        patch=patch,
        status_field="status_id",
    )


def delete_demand(db: Session, *, actor_id: str, demand_id: str) -> None:
    # Projects that originated from this demand keep their (now dangling) demand_id
    row = get_demand(db, demand_id)
    record_deleted(db, row=row, entity_type=ENTITY, actor_id=actor_id)
