# backend/tests/test_delete_semantics.py
from __future__ import annotations

import pytest
from sqlalchemy import func, select

from app.domain.errors import ConflictError, NotFoundError, ValidationError
from app.models import Assignment, Demand, Product, ProjectProduct
from app.schemas import AssignmentCreate, DemandCreate, ProductCreate, ProjectCreate, ProjectProductCreate
from app.services import demand_service, link_service, portfolio_service, product_service, program_service, project_service


def test_project_outlives_the_demand_it_came_from(db, admin, program):
    dm = demand_service.create_demand(
        db, actor_id=admin.id, payload=DemandCreate(title="Need", program_id=program.id, priority="high")
    )
    assert dm.phase_id is None and dm.status_id is None
    assert dm.requested_date is not None

    pj = project_service.create_project(
        db, actor_id=admin.id, payload=ProjectCreate(title="Build", program_id=program.id, demand_id=dm.id)
    )

    demand_service.delete_demand(db, actor_id=admin.id, demand_id=dm.id)

    db.expire_all()
    assert db.get(Demand, dm.id) is None
    survivor = project_service.get_project(db, pj.id)
    assert survivor.demand_id == dm.id


def test_portfolio_with_programs_cannot_be_deleted(db, admin, program):
    with pytest.raises(ConflictError):
        portfolio_service.delete_portfolio(db, actor_id=admin.id, portfolio_id=program.portfolio_id)

    program_service.delete_program(db, actor_id=admin.id, program_id=program.id)
    portfolio_service.delete_portfolio(db, actor_id=admin.id, portfolio_id=program.portfolio_id)

    with pytest.raises(NotFoundError):
        portfolio_service.get_portfolio(db, program.portfolio_id)


def test_program_with_children_cannot_be_deleted(db, admin, program):
    pd = product_service.create_product(db, actor_id=admin.id, payload=ProductCreate(name="App", program_id=program.id))

    with pytest.raises(ConflictError) as ei:
        program_service.delete_program(db, actor_id=admin.id, program_id=program.id)
    assert "product" in ei.value.message

    product_service.delete_product(db, actor_id=admin.id, product_id=pd.id)
    program_service.delete_program(db, actor_id=admin.id, program_id=program.id)


def test_deleting_a_project_removes_its_links_and_assignments(db, admin, contributor, program):
    pj = project_service.create_project(db, actor_id=admin.id, payload=ProjectCreate(title="J", program_id=program.id))
    pd = product_service.create_product(db, actor_id=admin.id, payload=ProductCreate(name="App", program_id=program.id))

    link_service.create_project_product(db, actor_id=admin.id, payload=ProjectProductCreate(project_id=pj.id, product_id=pd.id))
    link_service.create_assignment(
        db, actor_id=admin.id, payload=AssignmentCreate(project_id=pj.id, user_id=contributor.id, role="reviewer")
    )

    project_service.delete_project(db, actor_id=admin.id, project_id=pj.id)

    assert db.scalar(select(func.count()).select_from(ProjectProduct)) == 0
    assert db.scalar(select(func.count()).select_from(Assignment)) == 0
    assert db.get(Product, pd.id) is not None


def test_deleting_a_product_removes_its_links(db, admin, program):
    pj = project_service.create_project(db, actor_id=admin.id, payload=ProjectCreate(title="J", program_id=program.id))
    pd = product_service.create_product(db, actor_id=admin.id, payload=ProductCreate(name="App", program_id=program.id))
    link_service.create_project_product(db, actor_id=admin.id, payload=ProjectProductCreate(project_id=pj.id, product_id=pd.id))

    product_service.delete_product(db, actor_id=admin.id, product_id=pd.id)

    assert link_service.list_project_products(db, project_id=pj.id) == []


def test_duplicate_link_is_a_conflict(db, admin, program):
    pj = project_service.create_project(db, actor_id=admin.id, payload=ProjectCreate(title="J", program_id=program.id))
    pd = product_service.create_product(db, actor_id=admin.id, payload=ProductCreate(name="App", program_id=program.id))
    payload = ProjectProductCreate(project_id=pj.id, product_id=pd.id)

    link = link_service.create_project_product(db, actor_id=admin.id, payload=payload)
    with pytest.raises(ConflictError):
        link_service.create_project_product(db, actor_id=admin.id, payload=payload)

    assert [l.id for l in link_service.list_project_products(db, product_id=pd.id)] == [link.id]

    link_service.delete_project_product(db, actor_id=admin.id, link_id=link.id)
    assert link_service.list_project_products(db) == []


def test_links_and_assignments_need_existing_targets(db, admin, program):
    pj = project_service.create_project(db, actor_id=admin.id, payload=ProjectCreate(title="J", program_id=program.id))

    with pytest.raises(ValidationError) as ei:
        link_service.create_project_product(
            db, actor_id=admin.id, payload=ProjectProductCreate(project_id=pj.id, product_id="nope")
        )
    assert ei.value.errors[0].field == "productId"

    with pytest.raises(ValidationError) as ei:
        link_service.create_assignment(
            db, actor_id=admin.id, payload=AssignmentCreate(project_id=pj.id, user_id="ghost", role="lead")
        )
    assert ei.value.errors[0].field == "userId"

    with pytest.raises(NotFoundError):
        link_service.list_assignments(db, project_id="nope")


def test_delete_endpoints(client):
    pf = client.post("/api/portfolios", json={"name": "P"}).json()
    prog = client.post("/api/programs", json={"name": "Pr", "portfolioId": pf["id"]}).json()
    dm = client.post("/api/demands", json={"title": "D", "programId": prog["id"]}).json()

    r = client.delete(f"/api/portfolios/{pf['id']}")
    assert r.status_code == 409
    assert "program" in r.json()["message"]

    r = client.delete(f"/api/demands/{dm['id']}")
    assert r.status_code == 204
    assert r.content == b""

    assert client.delete(f"/api/demands/{dm['id']}").status_code == 404
    assert client.delete(f"/api/programs/{prog['id']}").status_code == 204
    assert client.delete(f"/api/portfolios/{pf['id']}").status_code == 204
