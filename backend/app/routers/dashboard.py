# backend/app/routers/dashboard.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import get_actor
from ..db import get_db
from ..schemas import DashboardMetricsOut
from ..services.dashboard_service import get_metrics

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/metrics", response_model=DashboardMetricsOut)
def dashboard_metrics(db: Session = Depends(get_db), actor=Depends(get_actor)):
    return DashboardMetricsOut(**get_metrics(db))
