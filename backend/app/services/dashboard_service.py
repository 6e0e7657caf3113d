# backend/app/services/dashboard_service.py
from __future__ import annotations

from typing import Iterable

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..config import settings
from ..models import Demand, Project, Status

ACTIVE_PROJECT_STATUSES = ("Active",)
PENDING_DEMAND_STATUSES = ("Pending", "Under Review")
AT_RISK_PROJECT_STATUSES = ("At Risk",)


def _count_by_status(db: Session, model, names: Iterable[str]) -> int:
    stmt = (
        select(func.count())
        .select_from(model)
        .join(Status, Status.id == model.status_id)
        .where(Status.name.in_(tuple(names)))
    )
    return int(db.scalar(stmt) or 0)


def get_metrics(db: Session) -> dict[str, int]:
    """
    Top-of-dashboard counters. Each one is a single COUNT joined to statuses,
    matched on status name.
    """
    return {
        "active_projects": _count_by_status(db, Project, ACTIVE_PROJECT_STATUSES),
        "pending_demands": _count_by_status(db, Demand, PENDING_DEMAND_STATUSES),
        # Fixed until spend tracking exists
        "budget_utilized": int(settings.budget_utilized_placeholder),
        "at_risk_projects": _count_by_status(db, Project, AT_RISK_PROJECT_STATUSES),
    }
