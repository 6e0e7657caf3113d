# backend/tests/test_lookups.py
from __future__ import annotations

import pytest
from sqlalchemy import func, select

from app.domain.errors import ValidationError
from app.models import Phase, Status
from app.schemas import DemandCreate, PhaseCreate, PhaseUpdate, StatusCreate, StatusUpdate
from app.services.demand_service import create_demand, get_demand
import app.services.lookup_service as lookup_service
from app.services.lookup_service import (
    create_phase,
    create_status,
    get_phase,
    list_phases,
    list_statuses,
    seed_default_lookups,
    update_phase,
    update_status,
)


def test_deactivated_phase_drops_out_of_list_but_still_resolves(db, admin, program):
    idea = create_phase(db, PhaseCreate(name="Idea", type="demand"))
    dm = create_demand(db, actor_id=admin.id, payload=DemandCreate(title="D", program_id=program.id, phase_id=idea.id))

    update_phase(db, idea.id, PhaseUpdate(is_active=False))

    assert idea.id not in {p.id for p in list_phases(db, type_="demand")}

    db.expire_all()
    again = get_demand(db, dm.id)
    assert again.phase_id == idea.id
    ph = get_phase(db, again.phase_id)
    assert ph.name == "Idea"
    assert ph.is_active is False


def test_phases_are_listed_by_order(db):
    create_phase(db, PhaseCreate(name="Third", type="project", order=3))
    create_phase(db, PhaseCreate(name="First", type="project", order=1))
    create_phase(db, PhaseCreate(name="Second", type="project", order=2))
    create_phase(db, PhaseCreate(name="Other", type="demand", order=1))

    assert [p.name for p in list_phases(db, type_="project")] == ["First", "Second", "Third"]
    assert len(list_phases(db)) == 4


def test_phase_order_defaults_to_next_in_type(db):
    first = create_phase(db, PhaseCreate(name="A", type="demand"))
    assert first.order == 1

    create_phase(db, PhaseCreate(name="B", type="demand", order=7))
    nxt = create_phase(db, PhaseCreate(name="C", type="demand"))
    assert nxt.order == 8

    # sequences are per type
    assert create_phase(db, PhaseCreate(name="P", type="project")).order == 1


def test_statuses_are_listed_by_name_and_filtered_by_type(db, lookups):
    names = [s.name for s in list_statuses(db, type_="project")]
    assert names == sorted(names)
    assert set(names) == {"Active", "On Hold", "At Risk", "Completed", "Cancelled"}

    update_status(db, lookups[("project", "Cancelled")].id, StatusUpdate(is_active=False))
    assert "Cancelled" not in {s.name for s in list_statuses(db, type_="project")}


def test_status_color_defaults_to_gray(db):
    st = create_status(db, StatusCreate(name="Parked", type="demand"))
    assert st.color == "gray"


def test_unknown_lookup_type_is_rejected(db):
    with pytest.raises(ValidationError):
        list_phases(db, type_="portfolio")
    with pytest.raises(ValidationError):
        list_statuses(db, type_="")  # empty string is not "no filter"


def test_seed_is_idempotent(db):
    first = seed_default_lookups(db)
    assert first["seeded"] is True
    assert first["created"] == {"phases": 9, "statuses": 10}

    second = seed_default_lookups(db)
    assert second == {"seeded": False, "created": {"phases": 0, "statuses": 0}}

    assert db.scalar(select(func.count()).select_from(Phase)) == 9
    assert db.scalar(select(func.count()).select_from(Status)) == 10

    demand_phases = [p.name for p in list_phases(db, type_="demand")]
    assert demand_phases == ["Idea", "Analysis", "Approved", "Rejected"]


class _RecordingSession:
    def __init__(self, dialect_name: str):
        self.dialect = type("Dialect", (), {"name": dialect_name})()
        self.executed: list[tuple[str, dict]] = []

    def get_bind(self):
        return self

    def execute(self, stmt, params=None):
        self.executed.append((str(stmt), params))


def test_seed_takes_an_advisory_lock_on_postgres():
    pg = _RecordingSession("postgresql")
    lookup_service._lock_seed(pg)
    assert pg.executed == [
        ("SELECT pg_advisory_xact_lock(:key)", {"key": lookup_service.SEED_LOCK_KEY}),
    ]

    lite = _RecordingSession("sqlite")
    lookup_service._lock_seed(lite)
    assert lite.executed == []


def test_seed_skips_rows_that_exist_even_if_inactive(db):
    ph = create_phase(db, PhaseCreate(name="Idea", type="demand", is_active=False))
    out = seed_default_lookups(db)
    assert out["created"]["phases"] == 8
    assert db.scalar(select(func.count()).select_from(Phase).where(Phase.name == "Idea")) == 1
    assert get_phase(db, ph.id).is_active is False


def test_lookup_endpoints(client):
    r = client.post("/api/phases", json={"name": "Idea", "type": "demand"})
    assert r.status_code == 201
    phase = r.json()
    assert phase["order"] == 1
    assert phase["isActive"] is True

    r = client.post("/api/phases", json={"name": "Bad", "type": "portfolio"})
    assert r.status_code == 400

    r = client.put(f"/api/phases/{phase['id']}", json={"isActive": False})
    assert r.status_code == 200
    assert client.get("/api/phases", params={"type": "demand"}).json() == []
    assert client.get(f"/api/phases/{phase['id']}").json()["isActive"] is False

    r = client.post("/api/statuses", json={"name": "Pending", "type": "demand", "color": "yellow"})
    assert r.status_code == 201
    assert [s["name"] for s in client.get("/api/statuses", params={"type": "demand"}).json()] == ["Pending"]

    r = client.get("/api/statuses", params={"type": "nope"})
    assert r.status_code == 400
    assert r.json()["errors"] == [{"field": "type", "message": "must be one of demand, project"}]

    assert client.get("/api/statuses/missing").status_code == 404
