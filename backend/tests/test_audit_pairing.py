# backend/tests/test_audit_pairing.py
from __future__ import annotations

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from app.domain.audit import audit_write, list_audit
from app.domain.errors import StorageError
from app.models import AuditLog, Portfolio
from app.schemas import (
    DemandCreate,
    DemandUpdate,
    PortfolioCreate,
    PortfolioUpdate,
    ProductCreate,
    ProductUpdate,
    ProgramCreate,
    ProjectCreate,
    ProjectUpdate,
)
from app.services import demand_service, portfolio_service, product_service, program_service, project_service


def _rows(db, entity_id: str, change_type: str) -> list[AuditLog]:
    return list(
        db.scalars(
            select(AuditLog).where(AuditLog.entity_id == entity_id, AuditLog.change_type == change_type)
        ).all()
    )


def test_every_core_mutation_writes_exactly_one_audit_row(db, admin, lookups):
    actor = admin.id

    pf = portfolio_service.create_portfolio(db, actor_id=actor, payload=PortfolioCreate(name="P"))
    pf = portfolio_service.update_portfolio(db, actor_id=actor, portfolio_id=pf.id, payload=PortfolioUpdate(name="P2"))

    pr = program_service.create_program(db, actor_id=actor, payload=ProgramCreate(name="Pr", portfolio_id=pf.id))

    dm = demand_service.create_demand(db, actor_id=actor, payload=DemandCreate(title="D", program_id=pr.id))
    demand_service.update_demand(db, actor_id=actor, demand_id=dm.id, payload=DemandUpdate(priority="high"))

    pj = project_service.create_project(db, actor_id=actor, payload=ProjectCreate(title="J", program_id=pr.id))
    project_service.update_project(db, actor_id=actor, project_id=pj.id, payload=ProjectUpdate(progress=10))

    pd = product_service.create_product(db, actor_id=actor, payload=ProductCreate(name="X", program_id=pr.id))
    product_service.update_product(db, actor_id=actor, product_id=pd.id, payload=ProductUpdate(version="2.0.0"))

    for entity_type, entity_id in (
        ("portfolio", pf.id),
        ("program", pr.id),
        ("demand", dm.id),
        ("project", pj.id),
        ("product", pd.id),
    ):
        created = _rows(db, entity_id, "created")
        assert len(created) == 1
        assert created[0].entity_type == entity_type
        assert created[0].changed_by == actor

    for entity_id in (pf.id, dm.id, pj.id, pd.id):
        assert len(_rows(db, entity_id, "updated")) == 1

    product_service.delete_product(db, actor_id=actor, product_id=pd.id)
    project_service.delete_project(db, actor_id=actor, project_id=pj.id)
    demand_service.delete_demand(db, actor_id=actor, demand_id=dm.id)
    program_service.delete_program(db, actor_id=actor, program_id=pr.id)
    portfolio_service.delete_portfolio(db, actor_id=actor, portfolio_id=pf.id)

    for entity_id in (pd.id, pj.id, dm.id, pr.id, pf.id):
        deleted = _rows(db, entity_id, "deleted")
        assert len(deleted) == 1
        assert deleted[0].changed_by == actor
        assert deleted[0].details == {"kind": "deleted", "id": entity_id}

    # history outlives the entity
    assert db.get(Portfolio, pf.id) is None
    assert len(list_audit(db, entity_id=pf.id)) == 3


def test_details_are_tagged_by_change_kind(db, admin):
    pf = portfolio_service.create_portfolio(db, actor_id=admin.id, payload=PortfolioCreate(name="Ops", budget=100))
    portfolio_service.update_portfolio(
        db, actor_id=admin.id, portfolio_id=pf.id, payload=PortfolioUpdate(budget=250, description="d")
    )

    created = _rows(db, pf.id, "created")[0].details
    assert created["kind"] == "created"
    assert created["snapshot"]["name"] == "Ops"
    assert created["snapshot"]["ownerId"] == admin.id
    assert created["snapshot"]["budget"] == 100

    updated = _rows(db, pf.id, "updated")[0].details
    assert updated["kind"] == "updated"
    assert updated["changes"] == {
        "budget": {"before": 100, "after": 250},
        "description": {"before": None, "after": "d"},
    }


def test_status_change_is_recorded_as_status_changed(db, admin, program, lookups):
    portfolio_service.update_portfolio(
        db, actor_id=admin.id, portfolio_id=program.portfolio_id, payload=PortfolioUpdate(status="on_hold")
    )
    rows = _rows(db, program.portfolio_id, "status_changed")
    assert len(rows) == 1
    assert rows[0].details["changes"]["status"] == {"before": "active", "after": "on_hold"}

    active = lookups[("project", "Active")]
    at_risk = lookups[("project", "At Risk")]
    pj = project_service.create_project(
        db, actor_id=admin.id, payload=ProjectCreate(title="J", program_id=program.id, status_id=active.id)
    )
    project_service.update_project(db, actor_id=admin.id, project_id=pj.id, payload=ProjectUpdate(status_id=at_risk.id))

    rows = _rows(db, pj.id, "status_changed")
    assert len(rows) == 1
    assert rows[0].details["changes"]["statusId"] == {"before": active.id, "after": at_risk.id}

    # same status again is a plain update
    project_service.update_project(db, actor_id=admin.id, project_id=pj.id, payload=ProjectUpdate(status_id=at_risk.id))
    assert len(_rows(db, pj.id, "status_changed")) == 1
    assert len(_rows(db, pj.id, "updated")) == 1


def test_list_audit_filters_combine_with_and(db, admin):
    a = portfolio_service.create_portfolio(db, actor_id=admin.id, payload=PortfolioCreate(name="A"))
    b = portfolio_service.create_portfolio(db, actor_id=admin.id, payload=PortfolioCreate(name="B"))
    pr = program_service.create_program(db, actor_id=admin.id, payload=ProgramCreate(name="Pr", portfolio_id=a.id))

    assert {r.entity_id for r in list_audit(db, entity_type="portfolio")} == {a.id, b.id}
    assert [r.entity_id for r in list_audit(db, entity_id=a.id)] == [a.id]
    assert list_audit(db, entity_id=a.id, entity_type="program") == []
    assert [r.entity_id for r in list_audit(db, entity_id=pr.id, entity_type="program")] == [pr.id]

    rows = list_audit(db)
    assert len(rows) == 3
    stamps = [r.timestamp for r in rows]
    assert stamps == sorted(stamps, reverse=True)


def test_audit_failure_rolls_back_the_entity_write(db, admin, monkeypatch):
    import app.services.mutations as mutations

    def boom(*args, **kwargs):
        raise SQLAlchemyError("audit insert failed")

    monkeypatch.setattr(mutations, "audit_write", boom)

    with pytest.raises(StorageError):
        portfolio_service.create_portfolio(db, actor_id=admin.id, payload=PortfolioCreate(name="Ghost"))

    assert db.scalar(select(func.count()).select_from(Portfolio)) == 0
    assert db.scalar(select(func.count()).select_from(AuditLog)) == 0


def test_audit_failure_on_update_keeps_the_old_values(db, admin, monkeypatch):
    pf = portfolio_service.create_portfolio(db, actor_id=admin.id, payload=PortfolioCreate(name="Before"))

    import app.services.mutations as mutations

    def boom(*args, **kwargs):
        raise SQLAlchemyError("audit insert failed")

    monkeypatch.setattr(mutations, "audit_write", boom)

    with pytest.raises(StorageError):
        portfolio_service.update_portfolio(db, actor_id=admin.id, portfolio_id=pf.id, payload=PortfolioUpdate(name="After"))

    db.expire_all()
    assert db.get(Portfolio, pf.id).name == "Before"
    assert len(list_audit(db, entity_id=pf.id)) == 1


def test_audit_write_rejects_unknown_entity_type(db, admin):
    with pytest.raises(ValueError):
        audit_write(db, entity_type="spaceship", entity_id="x", change_type="created", actor_id=admin.id)
    db.rollback()


def test_audit_endpoint_returns_tagged_details(client):
    pf = client.post("/api/portfolios", json={"name": "Audited"}).json()
    client.put(f"/api/portfolios/{pf['id']}", json={"status": "completed"})

    r = client.get("/api/audit", params={"entityId": pf["id"], "entityType": "portfolio"})
    assert r.status_code == 200
    rows = r.json()
    assert {row["changeType"] for row in rows} == {"created", "status_changed"}
    assert all(row["changedBy"] == "dev-user" for row in rows)

    by_type = {row["changeType"]: row for row in rows}
    assert by_type["created"]["details"]["kind"] == "created"
    assert by_type["created"]["details"]["snapshot"]["name"] == "Audited"
    assert by_type["status_changed"]["details"]["changes"]["status"]["after"] == "completed"


def test_audit_endpoint_returns_the_whole_history_unless_limited(client, db, admin):
    for i in range(205):
        portfolio_service.create_portfolio(db, actor_id=admin.id, payload=PortfolioCreate(name=f"P{i}"))

    r = client.get("/api/audit", params={"entityType": "portfolio"})
    assert r.status_code == 200
    assert len(r.json()) == 205

    assert len(client.get("/api/audit", params={"entityType": "portfolio", "limit": 10}).json()) == 10
    assert client.get("/api/audit", params={"limit": 0}).status_code == 400
