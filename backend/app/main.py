# backend/app/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from .config import settings
from .db import Base, SessionLocal, engine
from .domain.errors import FieldError, SpmError, StorageError, ValidationError
from .logging_config import configure_logging
from .middleware.request_id import RequestIDMiddleware
from .middleware.structured_logging import StructuredLoggingMiddleware
from .services.lookup_service import seed_default_lookups

from .routers.health import router as health_router
from .routers.auth import router as auth_router
from .routers.dashboard import router as dashboard_router
from .routers.audit import router as audit_router

from .routers.portfolios import router as portfolios_router
from .routers.programs import router as programs_router
from .routers.demands import router as demands_router
from .routers.projects import router as projects_router
from .routers.products import router as products_router

from .routers.project_products import router as project_products_router
from .routers.assignments import router as assignments_router
from .routers.lookups import phases_router, statuses_router
from .routers.users import router as users_router

API_PREFIX = "/api"

log = logging.getLogger(__name__)


def _cors_origins() -> list[str]:
    val = settings.cors_allow_origins
    if isinstance(val, str):
        v = val.strip()
        return ["*"] if v == "*" else [x.strip() for x in v.split(",") if x.strip()]
    if isinstance(val, list) and val:
        return val
    return ["*"]


def _field_from_loc(loc: tuple) -> str:
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "header")]
    return ".".join(parts) or "body"


async def _spm_error_handler(request: Request, exc: SpmError) -> JSONResponse:
    if isinstance(exc, StorageError):
        log.error("storage failure during %s", exc.operation, exc_info=exc.cause or exc)
    return JSONResponse(status_code=exc.status_code, content=exc.body())


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    err = ValidationError(
        FieldError(field=_field_from_loc(tuple(e.get("loc") or ())), message=str(e.get("msg")))
        for e in exc.errors()
    )
    return JSONResponse(status_code=err.status_code, content=err.body())


async def _sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    # Reads run outside unit_of_work; same generic body as StorageError
    err = StorageError(f"{request.method} {request.url.path}", exc)
    log.error("storage failure during %s", err.operation, exc_info=exc)
    return JSONResponse(status_code=err.status_code, content=err.body())


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    Base.metadata.create_all(bind=engine)

    if settings.seed_lookups_on_startup:
        db = SessionLocal()
        try:
            seed_default_lookups(db)
        finally:
            db.close()
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="SPM Platform",
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.add_exception_handler(SpmError, _spm_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, _sqlalchemy_error_handler)

    # Last added runs outermost: request id is set before the request log line
    app.add_middleware(StructuredLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Core
    app.include_router(health_router, prefix=API_PREFIX)
    app.include_router(auth_router, prefix=API_PREFIX)
    app.include_router(dashboard_router, prefix=API_PREFIX)
    app.include_router(audit_router, prefix=API_PREFIX)

    # Hierarchy
    app.include_router(portfolios_router, prefix=API_PREFIX)
    app.include_router(programs_router, prefix=API_PREFIX)
    app.include_router(demands_router, prefix=API_PREFIX)
    app.include_router(projects_router, prefix=API_PREFIX)
    app.include_router(products_router, prefix=API_PREFIX)

    # Links, lookups, users
    app.include_router(project_products_router, prefix=API_PREFIX)
    app.include_router(assignments_router, prefix=API_PREFIX)
    app.include_router(phases_router, prefix=API_PREFIX)
    app.include_router(statuses_router, prefix=API_PREFIX)
    app.include_router(users_router, prefix=API_PREFIX)

    return app


app = create_app()
