# backend/tests/conftest.py
from __future__ import annotations

import os
import tempfile

# Must be set before app.config is imported anywhere
_DB_DIR = tempfile.mkdtemp(prefix="spm-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'spm_test.db')}"
os.environ["APP_ENV"] = "local"
os.environ["AUTH_MODE"] = "dev"

import pytest
from fastapi.testclient import TestClient

from app.db import Base, SessionLocal, engine
from app.main import create_app
from app.models import AppUser, Status
from app.schemas import PortfolioCreate, ProgramCreate, UserUpsert
from app.services.lookup_service import seed_default_lookups
from app.services.portfolio_service import create_portfolio
from app.services.program_service import create_program
from app.services.user_service import upsert_user


@pytest.fixture(autouse=True)
def _fresh_schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    s = SessionLocal()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def admin(db) -> AppUser:
    return upsert_user(
        db,
        UserUpsert(id="admin-1", email="ada@spm.local", first_name="Ada", last_name="Admin", role="admin"),
    )


@pytest.fixture
def contributor(db) -> AppUser:
    return upsert_user(db, UserUpsert(id="contrib-1", email="carl@spm.local", first_name="Carl", last_name="Contrib"))


@pytest.fixture
def lookups(db) -> dict[tuple[str, str], Status]:
    """Default phases/statuses; returns statuses keyed by (type, name)."""
    seed_default_lookups(db)
    return {(s.type, s.name): s for s in db.query(Status).all()}


@pytest.fixture
def program(db, admin):
    pf = create_portfolio(db, actor_id=admin.id, payload=PortfolioCreate(name="Cloud Initiative", budget=50_000_000))
    return create_program(db, actor_id=admin.id, payload=ProgramCreate(name="Migration", portfolio_id=pf.id))


@pytest.fixture
def client():
    return TestClient(create_app())
